from dataclasses import dataclass
from typing import Type

from pydantic import BaseModel

from coachtrack.models.diet_plan import DietPlanVersion, DietPlanMeal, DietCompletion
from coachtrack.models.workout_plan import WorkoutPlanVersion, WorkoutPlanExercise, WorkoutCompletion
from coachtrack.models.template import DietTemplate, DietTemplateMeal, WorkoutTemplate, WorkoutTemplateExercise
from coachtrack.schemas.plan import (
    DietPlanCreate, WorkoutPlanCreate, DietPlanResponse, WorkoutPlanResponse,
    MealItemCreate, ExerciseItemCreate,
)
from coachtrack.schemas.session import DietSessionRow, WorkoutSessionRow
from coachtrack.schemas.template import (
    DietTemplateCreate, WorkoutTemplateCreate, DietTemplateResponse, WorkoutTemplateResponse
)


@dataclass(frozen=True)
class PlanKind:
    """Everything that differs between diet and workout plans."""

    name: str
    items_field: str            # JSON key for line items: "meals" / "exercises"
    item_label: str             # used in error messages
    version_model: type
    item_model: type
    completion_model: type
    template_model: type
    template_item_model: type
    item_schema: Type[BaseModel]
    create_schema: Type[BaseModel]
    response_schema: Type[BaseModel]
    session_row_schema: Type[BaseModel]
    template_create_schema: Type[BaseModel]
    template_response_schema: Type[BaseModel]

    @property
    def plan_label(self) -> str:
        return f"{self.name} plan"


DIET = PlanKind(
    name="diet",
    items_field="meals",
    item_label="Meal",
    version_model=DietPlanVersion,
    item_model=DietPlanMeal,
    completion_model=DietCompletion,
    template_model=DietTemplate,
    template_item_model=DietTemplateMeal,
    item_schema=MealItemCreate,
    create_schema=DietPlanCreate,
    response_schema=DietPlanResponse,
    session_row_schema=DietSessionRow,
    template_create_schema=DietTemplateCreate,
    template_response_schema=DietTemplateResponse,
)

WORKOUT = PlanKind(
    name="workout",
    items_field="exercises",
    item_label="Exercise",
    version_model=WorkoutPlanVersion,
    item_model=WorkoutPlanExercise,
    completion_model=WorkoutCompletion,
    template_model=WorkoutTemplate,
    template_item_model=WorkoutTemplateExercise,
    item_schema=ExerciseItemCreate,
    create_schema=WorkoutPlanCreate,
    response_schema=WorkoutPlanResponse,
    session_row_schema=WorkoutSessionRow,
    template_create_schema=WorkoutTemplateCreate,
    template_response_schema=WorkoutTemplateResponse,
)

PLAN_KINDS = {kind.name: kind for kind in (DIET, WORKOUT)}


def get_kind(name: str) -> PlanKind:
    return PLAN_KINDS[name]
