from sqlalchemy.orm import relationship

from coachtrack.database import Base
from coachtrack.models.plan_base import (
    TemplateMixin, TemplateItemMixin, MealFieldsMixin, ExerciseFieldsMixin
)


class DietTemplate(TemplateMixin, Base):
    __tablename__ = "diet_templates"

    items = relationship(
        "DietTemplateMeal",
        order_by="DietTemplateMeal.order_index",
        cascade="all, delete-orphan",
    )


class DietTemplateMeal(MealFieldsMixin, TemplateItemMixin, Base):
    __tablename__ = "diet_template_meals"
    __template_table__ = "diet_templates"
    __template_fk_column__ = "diet_template_id"


class WorkoutTemplate(TemplateMixin, Base):
    __tablename__ = "workout_templates"

    items = relationship(
        "WorkoutTemplateExercise",
        order_by="WorkoutTemplateExercise.order_index",
        cascade="all, delete-orphan",
    )


class WorkoutTemplateExercise(ExerciseFieldsMixin, TemplateItemMixin, Base):
    __tablename__ = "workout_template_exercises"
    __template_table__ = "workout_templates"
    __template_fk_column__ = "workout_template_id"
