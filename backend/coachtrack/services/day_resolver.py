import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from coachtrack.crud.plan_kinds import PlanKind
from coachtrack.crud.plan_version import get_store, coverage_key
from coachtrack.exceptions import ValidationError
from coachtrack.utils.dates import Weekday, iter_days

logger = logging.getLogger(__name__)

"""
Day Resolver
------------
Answers "what is scheduled for this client on this day?":
1. Pick the plan version whose [followed_from, followed_till] covers the day.
2. Keep the items scheduled on the day's weekday (meals without a day
   apply every day).
3. Left-join completion marks for (client, item, day).
4. Order by order_index.
Ranges repeat the same per-day resolution, newest day first.
"""

MAX_RANGE_DAYS = 366


@dataclass
class ResolvedItem:
    day: date
    version_id: int
    item: object
    is_completed: bool
    completion_id: Optional[int] = None
    evidence_url: Optional[str] = None

    def to_row(self, kind: PlanKind):
        return kind.session_row_schema.model_validate(
            {
                **_item_fields(self.item),
                "version_id": self.version_id,
                "date": self.day,
                "is_completed": self.is_completed,
                "completion_id": self.completion_id,
                "evidence_url": self.evidence_url,
            }
        )


def _item_fields(item) -> dict:
    return {column.key: getattr(item, column.key) for column in item.__mapper__.column_attrs}


def scheduled_on(item, day: date) -> bool:
    """True if a line item is scheduled on the weekday of `day`."""
    if item.day_name is None:
        # Meals without a day are eaten every day
        return True
    return item.weekday == Weekday.from_date(day)


def pick_version(candidates, day: date):
    covering = [version for version in candidates if version.covers(day)]
    if not covering:
        return None
    return min(covering, key=coverage_key)


def _completions_by_key(db: Session, kind: PlanKind, client_id: int, item_ids, from_date: date, to_date: date):
    if not item_ids:
        return {}
    Completion = kind.completion_model
    rows = (
        db.query(Completion)
        .filter(
            Completion.client_id == client_id,
            Completion.item_id.in_(item_ids),
            Completion.date >= from_date,
            Completion.date <= to_date,
        )
        .all()
    )
    return {(row.item_id, row.date): row for row in rows}


def _resolve(db: Session, kind: PlanKind, client_id: int, from_date: date, to_date: date,
             candidates) -> Dict[date, List[ResolvedItem]]:
    scheduled: List[Tuple[date, object, object]] = []
    for day in iter_days(from_date, to_date):
        version = pick_version(candidates, day)
        if version is None:
            continue
        for item in version.items:
            if scheduled_on(item, day):
                scheduled.append((day, version, item))

    completions = _completions_by_key(
        db, kind, client_id, {item.id for _, _, item in scheduled}, from_date, to_date
    )

    groups: Dict[date, List[ResolvedItem]] = {}
    for day, version, item in scheduled:
        completion = completions.get((item.id, day))
        groups.setdefault(day, []).append(
            ResolvedItem(
                day=day,
                version_id=version.id,
                item=item,
                is_completed=completion is not None,
                completion_id=completion.id if completion else None,
                evidence_url=completion.evidence_url if completion else None,
            )
        )
    for rows in groups.values():
        rows.sort(key=lambda row: row.item.order_index)
    return groups


def resolve_for_date(db: Session, kind: PlanKind, client_id: int, day: date) -> List[ResolvedItem]:
    """Items scheduled for `day`, empty when no version covers it."""
    version = get_store(kind.name).find_covering(db, client_id, day)
    if version is None:
        return []
    return _resolve(db, kind, client_id, day, day, [version]).get(day, [])


def resolve_for_range(db: Session, kind: PlanKind, client_id: int, from_date: date, to_date: date) -> List[Tuple[date, List[ResolvedItem]]]:
    """
    Per-day resolution for every day in [from_date, to_date], newest day
    first. Days without a covering version or without scheduled items are
    omitted.
    """
    if from_date > to_date:
        raise ValidationError("from_date must be on or before to_date")
    if (to_date - from_date).days + 1 > MAX_RANGE_DAYS:
        raise ValidationError(f"Date range cannot exceed {MAX_RANGE_DAYS} days")

    candidates = get_store(kind.name).find_overlapping(db, client_id, from_date, to_date)
    groups = _resolve(db, kind, client_id, from_date, to_date, candidates)
    logger.debug(f"Resolved {kind.name} range {from_date}..{to_date} for client {client_id}: {len(groups)} day(s)")
    return sorted(groups.items(), key=lambda group: group[0], reverse=True)


def to_session_rows(kind: PlanKind, resolved: List[ResolvedItem]):
    return [row.to_row(kind) for row in resolved]
