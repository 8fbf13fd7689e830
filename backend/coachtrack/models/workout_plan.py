from sqlalchemy.orm import relationship

from coachtrack.database import Base
from coachtrack.models.plan_base import (
    PlanVersionMixin, PlanItemMixin, CompletionMixin, ExerciseFieldsMixin
)


class WorkoutPlanVersion(PlanVersionMixin, Base):
    __tablename__ = "workout_plan_versions"

    items = relationship(
        "WorkoutPlanExercise",
        order_by="WorkoutPlanExercise.order_index",
        cascade="all, delete-orphan",
        back_populates="version",
    )


class WorkoutPlanExercise(ExerciseFieldsMixin, PlanItemMixin, Base):
    __tablename__ = "workout_plan_exercises"
    __version_table__ = "workout_plan_versions"
    __version_fk_column__ = "workout_plan_version_id"

    version = relationship("WorkoutPlanVersion", back_populates="items")


class WorkoutCompletion(CompletionMixin, Base):
    """Stores the cardio machine photo as evidence_url."""
    __tablename__ = "workout_completions"
    __item_table__ = "workout_plan_exercises"
    __item_fk_column__ = "workout_plan_exercise_id"
