from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from coachtrack.schemas.plan import (
    MealItemCreate, ExerciseItemCreate, MealItemResponse, ExerciseItemResponse
)


class DietTemplateCreate(BaseModel):
    name: str
    description: Optional[str] = None
    meals: List[MealItemCreate] = []

    @property
    def items(self):
        return self.meals


class WorkoutTemplateCreate(BaseModel):
    name: str
    description: Optional[str] = None
    exercises: List[ExerciseItemCreate] = []

    @property
    def items(self):
        return self.exercises


class TemplateResponse(BaseModel):
    id: int
    trainer_id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TemplateSummary(TemplateResponse):
    items_count: int = 0


class DietTemplateResponse(TemplateResponse):
    meals: List[MealItemResponse] = Field(default_factory=list, validation_alias=AliasChoices("meals", "items"))


class WorkoutTemplateResponse(TemplateResponse):
    exercises: List[ExerciseItemResponse] = Field(default_factory=list, validation_alias=AliasChoices("exercises", "items"))


class TemplateAssignRequest(BaseModel):
    """Instantiate a template as a new plan version for one client."""
    client_id: int = Field(..., alias="clientId")
    title: Optional[str] = None
    is_active: bool = Field(True, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)
