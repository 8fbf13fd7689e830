import logging
from datetime import date, datetime
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from coachtrack.crud.plan_kinds import PlanKind
from coachtrack.database import transaction
from coachtrack.exceptions import NotFoundError, StorageError, ValidationError
from coachtrack.models.plan_base import CARDIO
from coachtrack.schemas.session import CompletionResponse
from coachtrack.services import storage_service

logger = logging.getLogger(__name__)

"""
Completion Tracker
------------------
Marks a plan line item done (or not done) for one client on one day.
A (client, item, date) key holds at most one completion; marking it again
overwrites the evidence and refreshes completed_at.
"""

DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def get_client_item(db: Session, kind: PlanKind, client_id: int, item_id: int):
    """The line item if it belongs to one of client_id's plan versions."""
    Item, Version = kind.item_model, kind.version_model
    return (
        db.query(Item)
        .join(Version, Item.version_id == Version.id)
        .filter(Item.id == item_id, Version.client_id == client_id)
        .first()
    )


def _upsert_completion(db: Session, kind: PlanKind, client_id: int, item_id: int, day: date,
                       evidence_url: Optional[str]) -> int:
    Completion = kind.completion_model
    table = Completion.__table__
    client_col = table.c.user_id
    item_col = table.c[Completion.__item_fk_column__]

    dialect = db.get_bind().dialect.name
    insert = DIALECT_INSERTS.get(dialect)
    if insert is None:
        raise StorageError(f"Completion upsert is not supported on {dialect}")

    stmt = insert(table).values({
        client_col: client_id,
        item_col: item_id,
        table.c.date: day,
        table.c.evidence_url: evidence_url,
        table.c.completed_at: datetime.utcnow(),
    })
    stmt = stmt.on_conflict_do_update(
        index_elements=[client_col, item_col, table.c.date],
        set_={
            "evidence_url": stmt.excluded.evidence_url,
            "completed_at": stmt.excluded.completed_at,
        },
    )
    db.execute(stmt)

    return (
        db.query(Completion.id)
        .filter(Completion.client_id == client_id, Completion.item_id == item_id, Completion.date == day)
        .scalar()
    )


def mark_complete(
    db: Session,
    kind: PlanKind,
    client_id: int,
    item_id: int,
    day: Optional[date],
    evidence: Optional[UploadFile] = None,
    require_evidence: bool = True,
) -> CompletionResponse:
    """
    Upsert the completion for (client_id, item_id, day).

    CARDIO items need a photo when require_evidence is set (the client's own
    path); the trainer path passes require_evidence=False. Evidence is only
    kept for CARDIO items.
    """
    if day is None:
        raise ValidationError("Date is required")

    item = get_client_item(db, kind, client_id, item_id)
    if item is None:
        raise NotFoundError(f"{kind.item_label} not found")

    is_cardio = item.category == CARDIO
    has_evidence = evidence is not None and bool(evidence.filename)
    if is_cardio and require_evidence and not has_evidence:
        raise ValidationError("Photo proof required for cardio workouts")

    evidence_url = None
    if is_cardio and has_evidence:
        # Stored before the completion row that references it is committed
        evidence_url = storage_service.save_upload(evidence)

    try:
        with transaction(db, "Failed to mark complete"):
            completion_id = _upsert_completion(db, kind, client_id, item_id, day, evidence_url)
    except Exception:
        storage_service.delete_upload(evidence_url)
        raise

    logger.info(f"Client {client_id} completed {kind.name} item {item_id} on {day} (evidence={bool(evidence_url)})")
    return CompletionResponse(success=True, photoUrl=evidence_url, completion_id=completion_id)


def mark_incomplete(db: Session, kind: PlanKind, client_id: int, item_id: int, day: Optional[date]) -> CompletionResponse:
    """Delete the completion for the key; a missing row is not an error."""
    if day is None:
        raise ValidationError("Date is required")

    Completion = kind.completion_model
    with transaction(db, "Failed to mark incomplete"):
        deleted = (
            db.query(Completion)
            .filter(Completion.client_id == client_id, Completion.item_id == item_id, Completion.date == day)
            .delete(synchronize_session=False)
        )
    if deleted:
        logger.info(f"Client {client_id} un-completed {kind.name} item {item_id} on {day}")
    return CompletionResponse(success=True)
