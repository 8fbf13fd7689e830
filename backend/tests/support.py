import unittest
from datetime import date, datetime

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coachtrack.database import Base
import coachtrack.models  # noqa: F401
from coachtrack.models.user import User, ROLE_CLIENT, ROLE_TRAINER

# One shared in-memory SQLite connection for the whole test run
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema per test, plus helpers for the usual fixtures."""

    def setUp(self):
        Base.metadata.create_all(bind=engine)
        self.db = TestingSessionLocal()

    def tearDown(self):
        self.db.close()
        Base.metadata.drop_all(bind=engine)

    def make_trainer(self, email="coach@example.com", name="Coach"):
        trainer = User(email=email, password="not-a-hash", name=name, role=ROLE_TRAINER)
        self.db.add(trainer)
        self.db.commit()
        return trainer

    def make_client(self, trainer=None, email="client@example.com", name="Client",
                    total_sessions=0, completed_sessions=0, validity_expires_at=None):
        client = User(
            email=email,
            password="not-a-hash",
            name=name,
            role=ROLE_CLIENT,
            trainer_id=trainer.id if trainer else None,
            total_sessions=total_sessions,
            completed_sessions=completed_sessions,
            validity_expires_at=validity_expires_at,
        )
        self.db.add(client)
        self.db.commit()
        return client

    def add_version(self, kind, client, followed_from: date, followed_till=None, items=(), title="Plan"):
        """Insert a version with explicit dates, bypassing create_version."""
        version = kind.version_model(
            client_id=client.id,
            title=title,
            followed_from=followed_from,
            followed_till=followed_till,
            created_at=datetime(followed_from.year, followed_from.month, followed_from.day),
            items=[kind.item_model(order_index=i, **fields) for i, fields in enumerate(items)],
        )
        self.db.add(version)
        self.db.commit()
        return version
