from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from coachtrack.database import transaction
from coachtrack.exceptions import ValidationError
from coachtrack.models.tracking import MealLog
from coachtrack.schemas.meal_log import MealLogCreate
from coachtrack.utils.dates import local_today

SORT_FIELDS = ("created_at", "date", "calories_est", "protein", "carbs", "fat", "time")


@dataclass
class MealLogQuery:
    """Optional filters and paging for a user's meal log."""
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    meal_type: Optional[str] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
    limit: Optional[int] = None
    offset: Optional[int] = None

    def __post_init__(self):
        # Unknown sort fields fall back to created_at, unknown orders to DESC
        if self.sort_by not in SORT_FIELDS:
            self.sort_by = "created_at"
        self.sort_order = "asc" if (self.sort_order or "").lower() == "asc" else "desc"
        if self.from_date and self.to_date and self.from_date > self.to_date:
            raise ValidationError("from_date must be on or before to_date")

    def apply(self, query):
        if self.from_date:
            query = query.filter(MealLog.date >= self.from_date)
        if self.to_date:
            query = query.filter(MealLog.date <= self.to_date)
        if self.meal_type:
            query = query.filter(MealLog.meal_type == self.meal_type)

        column = getattr(MealLog, self.sort_by)
        query = query.order_by(column.asc() if self.sort_order == "asc" else column.desc(), MealLog.id.desc())

        if self.offset:
            query = query.offset(self.offset)
        if self.limit:
            query = query.limit(self.limit)
        return query


def get_meals(db: Session, user_id: int, meal_query: Optional[MealLogQuery] = None):
    query = db.query(MealLog).filter(MealLog.user_id == user_id)
    return (meal_query or MealLogQuery()).apply(query).all()

def get_meal(db: Session, user_id: int, meal_id: int):
    return db.query(MealLog).filter(MealLog.id == meal_id, MealLog.user_id == user_id).first()

def create_meal(db: Session, user_id: int, meal: MealLogCreate):
    db_meal = MealLog(
        user_id=user_id,
        date=meal.date or local_today(),
        time=meal.time,
        meal_type=meal.meal_type,
        foods_detected=meal.foods_detected,
        calories_est=meal.calories_est,
        protein=meal.protein or 0,
        carbs=meal.carbs or 0,
        fat=meal.fat or 0,
        notes=meal.notes,
        image_url=meal.image_url,
    )
    with transaction(db, "Failed to log meal"):
        db.add(db_meal)
    db.refresh(db_meal)
    return db_meal
