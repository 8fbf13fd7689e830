"""
Shared columns for the diet and workout plan tables.

Both plan kinds have the same shape: a dated PlanVersion per client, its
ordered line items, per-day completion marks, and date-less templates.
Concrete classes set the __*__ hooks below to get their own table and
foreign key column names.
"""
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Text, Float, Date, DateTime, ForeignKey, Index, UniqueConstraint, text
)
from sqlalchemy.orm import declared_attr

from coachtrack.utils.dates import Weekday

EXERCISE_CATEGORIES = ("STRENGTH", "CARDIO", "STRETCHING", "OTHER")
CARDIO = "CARDIO"


class PlanVersionMixin:
    """A dated snapshot of a client's plan. followed_till NULL = current."""

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200))
    description = Column(Text)
    followed_from = Column(Date, nullable=False)
    followed_till = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @declared_attr
    def client_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    @declared_attr
    def created_by_trainer_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    @declared_attr
    def __table_args__(cls):
        # At most one open version per client, enforced by the database too
        return (
            Index(
                f"uq_{cls.__tablename__}_open_per_client",
                "client_id",
                unique=True,
                postgresql_where=text("followed_till IS NULL"),
                sqlite_where=text("followed_till IS NULL"),
            ),
        )

    @property
    def is_current(self) -> bool:
        return self.followed_till is None

    def covers(self, day) -> bool:
        return self.followed_from <= day and (self.followed_till is None or self.followed_till >= day)


class PlanItemMixin:
    """Line item of a PlanVersion; order_index is its position at creation."""

    __version_table__ = None
    __version_fk_column__ = None

    id = Column(Integer, primary_key=True, index=True)
    order_index = Column(Integer, nullable=False, default=0)

    @declared_attr
    def version_id(cls):
        return Column(
            cls.__version_fk_column__,
            Integer,
            ForeignKey(f"{cls.__version_table__}.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    @declared_attr
    def __table_args__(cls):
        return (UniqueConstraint(cls.__version_fk_column__, "order_index"),)

    @property
    def weekday(self):
        return Weekday.parse(self.day_name)


class TemplateMixin:
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @declared_attr
    def trainer_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


class TemplateItemMixin:
    __template_table__ = None
    __template_fk_column__ = None

    id = Column(Integer, primary_key=True, index=True)
    order_index = Column(Integer, nullable=False, default=0)

    @declared_attr
    def template_id(cls):
        return Column(
            cls.__template_fk_column__,
            Integer,
            ForeignKey(f"{cls.__template_table__}.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class CompletionMixin:
    """A client performed a line item on a given calendar day."""

    __item_table__ = None
    __item_fk_column__ = None

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False)
    evidence_url = Column(String(255), nullable=True)
    completed_at = Column(DateTime, default=datetime.utcnow)

    @declared_attr
    def client_id(cls):
        return Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    @declared_attr
    def item_id(cls):
        return Column(
            cls.__item_fk_column__,
            Integer,
            ForeignKey(f"{cls.__item_table__}.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    @declared_attr
    def __table_args__(cls):
        return (UniqueConstraint("user_id", cls.__item_fk_column__, "date", name=f"uq_{cls.__tablename__}_key"),)


class MealFieldsMixin:
    meal_type = Column(String(50))
    name = Column(String(200))
    description = Column(Text)
    protein_g = Column(Float, default=0)
    carbs_g = Column(Float, default=0)
    fat_g = Column(Float, default=0)
    calories_kcal = Column(Float, default=0)
    # NULL = the meal applies to every day of the week
    day_name = Column(String(20), nullable=True)
    category = None


class ExerciseFieldsMixin:
    day_name = Column(String(20), nullable=False, default=Weekday.MONDAY.value)
    name = Column(String(200))
    category = Column(String(20), nullable=False, default="STRENGTH")
    sets = Column(Integer, nullable=True)
    reps = Column(String(50), nullable=True)
    duration = Column(String(50), nullable=True)
    notes = Column(Text, default="")
