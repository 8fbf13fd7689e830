import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from coachtrack.crud.user import get_client_for_trainer
from coachtrack.database import transaction
from coachtrack.exceptions import ConflictError, NotFoundError, ValidationError
from coachtrack.models.user import User, ROLE_CLIENT
from coachtrack.schemas.user import SessionCountResponse
from coachtrack.utils.dates import local_now

logger = logging.getLogger(__name__)

"""
Session Counter
---------------
Session credits a client bought (total_sessions) against those used
(completed_sessions). Both writes are single UPDATE statements so
concurrent trainers never lose an increment.
"""


def mark_session_complete(db: Session, trainer_id: int, client_id: int) -> SessionCountResponse:
    if get_client_for_trainer(db, trainer_id, client_id) is None:
        raise NotFoundError("Client not found or not authorized")

    with transaction(db, "Failed to update sessions"):
        updated = (
            db.query(User)
            .filter(
                User.id == client_id,
                User.trainer_id == trainer_id,
                User.role == ROLE_CLIENT,
                User.completed_sessions < User.total_sessions,
            )
            .update(
                {User.completed_sessions: User.completed_sessions + 1},
                synchronize_session=False,
            )
        )
        if updated == 0:
            raise ConflictError("All sessions completed")

    client = db.query(User).filter(User.id == client_id).populate_existing().one()
    logger.info(f"Trainer {trainer_id} marked a session for client {client_id}: "
                f"{client.completed_sessions}/{client.total_sessions}")
    return SessionCountResponse(
        message="Session marked as complete",
        completed_sessions=client.completed_sessions,
        total_sessions=client.total_sessions,
    )


def add_sessions(db: Session, trainer_id: int, client_id: int, sessions: int,
                 validity_days: Optional[int] = None) -> SessionCountResponse:
    """Renew a package: add credits and optionally push the expiry out."""
    if sessions <= 0:
        raise ValidationError("Sessions must be a positive number")

    client = get_client_for_trainer(db, trainer_id, client_id)
    if client is None:
        raise NotFoundError("Client not found or not authorized")

    values = {User.total_sessions: User.total_sessions + sessions}
    if validity_days:
        # Extend from the later of now and the current expiry
        now = local_now()
        base = client.validity_expires_at if client.validity_expires_at and client.validity_expires_at > now else now
        values[User.validity_expires_at] = base + timedelta(days=validity_days)

    with transaction(db, "Failed to update sessions"):
        db.query(User).filter(User.id == client_id, User.trainer_id == trainer_id).update(
            values, synchronize_session=False
        )

    client = db.query(User).filter(User.id == client_id).populate_existing().one()
    logger.info(f"Trainer {trainer_id} added {sessions} session(s) for client {client_id}")
    return SessionCountResponse(
        message="Sessions added",
        completed_sessions=client.completed_sessions,
        total_sessions=client.total_sessions,
    )
