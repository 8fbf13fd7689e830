import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from coachtrack.config import SQLALCHEMY_DATABASE_URL
from coachtrack.exceptions import StorageError

logger = logging.getLogger(__name__)

DATABASE_URL = SQLALCHEMY_DATABASE_URL

# SQLAlchemy requires postgresql://, some hosts hand out postgres://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

IS_POSTGRES = DATABASE_URL.startswith("postgresql")

if IS_POSTGRES:
    engine = create_engine(
        DATABASE_URL,
        pool_size=20,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,
        pool_pre_ping=True,
    )
else:
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False}
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session, injected with Depends(get_db)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, failure_message: str = "Database error"):
    """
    Run a multi-step write as one unit of work.

    Commits when the block finishes. Domain errors raised inside the block
    roll back and propagate unchanged; SQLAlchemy errors roll back and are
    re-raised as StorageError carrying only `failure_message`.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"{failure_message}: {e}")
        raise StorageError(failure_message) from e
    except Exception:
        db.rollback()
        raise
