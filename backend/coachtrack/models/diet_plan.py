from sqlalchemy.orm import relationship

from coachtrack.database import Base
from coachtrack.models.plan_base import (
    PlanVersionMixin, PlanItemMixin, CompletionMixin, MealFieldsMixin
)


class DietPlanVersion(PlanVersionMixin, Base):
    __tablename__ = "diet_plan_versions"

    items = relationship(
        "DietPlanMeal",
        order_by="DietPlanMeal.order_index",
        cascade="all, delete-orphan",
        back_populates="version",
    )


class DietPlanMeal(MealFieldsMixin, PlanItemMixin, Base):
    __tablename__ = "diet_plan_meals"
    __version_table__ = "diet_plan_versions"
    __version_fk_column__ = "diet_plan_version_id"

    version = relationship("DietPlanVersion", back_populates="items")


class DietCompletion(CompletionMixin, Base):
    __tablename__ = "diet_completions"
    __item_table__ = "diet_plan_meals"
    __item_fk_column__ = "diet_plan_meal_id"
