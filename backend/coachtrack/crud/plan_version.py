import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel
from sqlalchemy import case, or_
from sqlalchemy.orm import Session, selectinload

from coachtrack.crud.plan_kinds import PlanKind, DIET, WORKOUT
from coachtrack.database import transaction
from coachtrack.exceptions import NotFoundError
from coachtrack.models.user import User
from coachtrack.utils.dates import local_today

logger = logging.getLogger(__name__)

"""
Versioned Plan Store
--------------------
Time-ranged plan versions per client, one instance per plan kind.
A client has at most one open version (followed_till IS NULL); opening a
new active version closes every open one in the same transaction.
"""


def item_columns(item) -> dict:
    """Column values for a line item given as a schema object or a plain dict."""
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json")
    return dict(item)


def coverage_order(version_model):
    """
    Tie-break when several versions cover the same day: the open version
    first, then the latest followed_from, then the newest row.
    """
    return (
        case((version_model.followed_till.is_(None), 0), else_=1),
        version_model.followed_from.desc(),
        version_model.id.desc(),
    )


def coverage_key(version):
    # Python twin of coverage_order(), ascending sort puts the winner first
    return (0 if version.followed_till is None else 1, -version.followed_from.toordinal(), -version.id)


class VersionedPlanStore:

    def __init__(self, kind: PlanKind):
        self.kind = kind
        self.model = kind.version_model

    def create_version(
        self,
        db: Session,
        client_id: int,
        trainer_id: Optional[int],
        title: str,
        description: Optional[str],
        items: Iterable,
        make_active: bool,
    ):
        """
        Open a new version for `client_id` with its line items.

        Active: every open version is closed as of today and the new one is
        left open. Inactive: the new version is created already closed
        (followed_from == followed_till == today).
        """
        Version = self.model
        today = local_today()

        with transaction(db, f"Failed to create {self.kind.plan_label}"):
            # Row lock on the client serializes concurrent creators
            locked = (
                db.query(User.id)
                .filter(User.id == client_id)
                .with_for_update()
                .first()
            )
            if locked is None:
                raise NotFoundError("Client not found")

            if make_active:
                closed = (
                    db.query(Version)
                    .filter(Version.client_id == client_id, Version.followed_till.is_(None))
                    .update(
                        {Version.followed_till: today, Version.updated_at: datetime.utcnow()},
                        synchronize_session="fetch",
                    )
                )
                if closed:
                    logger.info(f"Closed {closed} open {self.kind.plan_label}(s) for client {client_id}")

            version = Version(
                client_id=client_id,
                created_by_trainer_id=trainer_id,
                title=title,
                description=description,
                followed_from=today,
                followed_till=None if make_active else today,
                items=[
                    self.kind.item_model(order_index=index, **item_columns(item))
                    for index, item in enumerate(items)
                ],
            )
            db.add(version)

        db.refresh(version)
        logger.info(
            f"Created {self.kind.plan_label} version {version.id} for client {client_id} "
            f"(active={make_active}, items={len(version.items)})"
        )
        return version

    def get_current(self, db: Session, client_id: int):
        """The open version, or None when no plan is assigned."""
        return (
            db.query(self.model)
            .options(selectinload(self.model.items))
            .filter(self.model.client_id == client_id, self.model.followed_till.is_(None))
            .first()
        )

    def get_history(self, db: Session, client_id: int) -> List:
        return (
            db.query(self.model)
            .filter(self.model.client_id == client_id)
            .order_by(self.model.followed_from.desc(), self.model.id.desc())
            .all()
        )

    def get_version(self, db: Session, client_id: int, version_id: int):
        """Ownership-scoped lookup: None unless the version belongs to client_id."""
        return (
            db.query(self.model)
            .options(selectinload(self.model.items))
            .filter(self.model.id == version_id, self.model.client_id == client_id)
            .first()
        )

    def find_covering(self, db: Session, client_id: int, day: date):
        """The version in effect on `day`, or None."""
        Version = self.model
        return (
            db.query(Version)
            .options(selectinload(Version.items))
            .filter(
                Version.client_id == client_id,
                Version.followed_from <= day,
                or_(Version.followed_till.is_(None), Version.followed_till >= day),
            )
            .order_by(*coverage_order(Version))
            .first()
        )

    def find_overlapping(self, db: Session, client_id: int, from_date: date, to_date: date) -> List:
        """Versions whose range intersects [from_date, to_date], items preloaded."""
        Version = self.model
        return (
            db.query(Version)
            .options(selectinload(Version.items))
            .filter(
                Version.client_id == client_id,
                Version.followed_from <= to_date,
                or_(Version.followed_till.is_(None), Version.followed_till >= from_date),
            )
            .order_by(*coverage_order(Version))
            .all()
        )

    def to_response(self, version):
        return self.kind.response_schema.model_validate(version, from_attributes=True)


diet_plans = VersionedPlanStore(DIET)
workout_plans = VersionedPlanStore(WORKOUT)

PLAN_STORES = {"diet": diet_plans, "workout": workout_plans}


def get_store(kind_name: str) -> VersionedPlanStore:
    return PLAN_STORES[kind_name]
