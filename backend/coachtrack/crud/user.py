import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from sqlalchemy import case, or_
from sqlalchemy.orm import Session

from coachtrack.config import DEFAULT_CLIENT_PASSWORD
from coachtrack.database import transaction
from coachtrack.exceptions import ValidationError
from coachtrack.models.user import User, ROLE_CLIENT
from coachtrack.schemas.user import UserCreate, ClientCreate
from coachtrack.utils.dates import local_now
from coachtrack.utils.utils import hash_password

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email.strip().lower()).first()

def create_user(db: Session, user: UserCreate):
    if get_user_by_email(db, user.email):
        raise ValidationError("Email already registered")

    db_user = User(
        name=user.name,
        email=user.email.strip().lower(),
        password=hash_password(user.password),
        role=user.role,
    )
    with transaction(db, "Failed to create user"):
        db.add(db_user)
    db.refresh(db_user)
    return db_user


# --- Trainer-managed clients ---

@dataclass
class ClientQuery:
    """
    Filters for a trainer's client list. Each predicate is optional and
    applied only when set.
    """
    search: Optional[str] = None    # substring of name or email
    status: str = "active"          # active | inactive | all
    sort: str = "recent"            # recent | active

    STATUSES = ("active", "inactive", "all")
    SORTS = ("recent", "active")

    def __post_init__(self):
        self.status = (self.status or "active").lower()
        self.sort = (self.sort or "recent").lower()
        if self.status not in self.STATUSES:
            raise ValidationError(f"Invalid filter: {self.status}")
        if self.sort not in self.SORTS:
            raise ValidationError(f"Invalid sort: {self.sort}")

    def apply(self, query):
        if self.search and self.search.strip():
            pattern = f"%{self.search.strip()}%"
            query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

        if self.status == "active":
            query = query.filter(User.is_active)
        elif self.status == "inactive":
            query = query.filter(~User.is_active)

        if self.sort == "active":
            # Active clients first, then alphabetical
            query = query.order_by(case((User.is_active, 0), else_=1), User.name.asc(), User.id.asc())
        else:
            query = query.order_by(User.created_at.desc(), User.id.desc())
        return query


def get_clients(db: Session, trainer_id: int, client_query: Optional[ClientQuery] = None):
    query = db.query(User).filter(User.trainer_id == trainer_id, User.role == ROLE_CLIENT)
    return (client_query or ClientQuery()).apply(query).all()

def get_client_for_trainer(db: Session, trainer_id: int, client_id: int):
    """None unless client_id is a client of trainer_id."""
    return (
        db.query(User)
        .filter(User.id == client_id, User.trainer_id == trainer_id, User.role == ROLE_CLIENT)
        .first()
    )

def create_client(db: Session, trainer_id: int, client: ClientCreate):
    if get_user_by_email(db, client.email):
        raise ValidationError("User with this email already exists")

    validity_expires_at = None
    if client.validity:
        validity_expires_at = local_now() + timedelta(days=client.validity)

    db_client = User(
        name=client.name,
        email=client.email.strip().lower(),
        password=hash_password(client.password or DEFAULT_CLIENT_PASSWORD),
        role=ROLE_CLIENT,
        trainer_id=trainer_id,
        phone=client.phone,
        age=client.age,
        gender=client.gender,
        goal=client.goal,
        profile_image_url=client.profile_image_url,
        total_sessions=client.sessions,
        completed_sessions=0,
        validity_expires_at=validity_expires_at,
    )
    with transaction(db, "Failed to create client"):
        db.add(db_client)
    db.refresh(db_client)
    logger.info(f"Trainer {trainer_id} added client {db_client.id} with {client.sessions} sessions")
    return db_client
