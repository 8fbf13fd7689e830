from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional, Union
from datetime import date, datetime

from coachtrack.utils.dates import Weekday

ExerciseCategory = Literal["STRENGTH", "CARDIO", "STRETCHING", "OTHER"]


def _parse_day(value) -> Weekday:
    day = Weekday.parse(value)
    if day is None:
        raise ValueError(f"Invalid day name: {value}")
    return day


# --- Line item input (shared by plan versions and templates) ---

class MealItemCreate(BaseModel):
    meal_type: Optional[str] = None
    name: str
    description: Optional[str] = None
    protein_g: Optional[float] = 0
    carbs_g: Optional[float] = 0
    fat_g: Optional[float] = 0
    calories_kcal: Optional[float] = 0
    day_name: Optional[Weekday] = None  # None = every day

    @field_validator("protein_g", "carbs_g", "fat_g", "calories_kcal", mode="before")
    @classmethod
    def default_zero(cls, v):
        return 0 if v in (None, "") else v

    @field_validator("day_name", mode="before")
    @classmethod
    def blank_day_is_every_day(cls, v):
        if v in (None, ""):
            return None
        return _parse_day(v)


class ExerciseItemCreate(BaseModel):
    day_name: Weekday = Weekday.MONDAY
    name: str
    category: ExerciseCategory = "STRENGTH"
    sets: Optional[int] = None
    reps: Optional[str] = None
    duration: Optional[str] = None
    notes: Optional[str] = ""

    @field_validator("day_name", mode="before")
    @classmethod
    def default_monday(cls, v):
        if v in (None, ""):
            return Weekday.MONDAY
        return _parse_day(v)

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        if v in (None, ""):
            return "STRENGTH"
        return str(v).strip().upper()

    @field_validator("reps", "duration", mode="before")
    @classmethod
    def numbers_as_text(cls, v: Union[str, int, float, None]):
        # "10-12", "to failure" and plain 10 are all valid reps
        if v in (None, ""):
            return None
        return str(v)

    @field_validator("sets", mode="before")
    @classmethod
    def blank_sets(cls, v):
        return None if v in ("", 0) else v

    @field_validator("notes", mode="before")
    @classmethod
    def default_notes(cls, v):
        return v or ""


# --- Line item output ---

class MealItemResponse(BaseModel):
    id: int
    order_index: int
    meal_type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    protein_g: Optional[float] = 0
    carbs_g: Optional[float] = 0
    fat_g: Optional[float] = 0
    calories_kcal: Optional[float] = 0
    day_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ExerciseItemResponse(BaseModel):
    id: int
    order_index: int
    day_name: str
    name: Optional[str] = None
    category: str
    sets: Optional[int] = None
    reps: Optional[str] = None
    duration: Optional[str] = None
    notes: Optional[str] = ""

    model_config = ConfigDict(from_attributes=True)


# --- Plan versions ---

class DietPlanCreate(BaseModel):
    title: str
    description: Optional[str] = None
    meals: List[MealItemCreate] = []
    is_active: bool = Field(False, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def items(self):
        return self.meals


class WorkoutPlanCreate(BaseModel):
    title: str
    description: Optional[str] = None
    exercises: List[ExerciseItemCreate] = []
    is_active: bool = Field(False, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def items(self):
        return self.exercises


class PlanVersionSummary(BaseModel):
    id: int
    title: Optional[str] = None
    followed_from: date
    followed_till: Optional[date] = None
    is_current: bool

    model_config = ConfigDict(from_attributes=True)


class PlanVersionResponse(PlanVersionSummary):
    client_id: int
    created_by_trainer_id: Optional[int] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DietPlanResponse(PlanVersionResponse):
    meals: List[MealItemResponse] = Field(default_factory=list, validation_alias=AliasChoices("meals", "items"))


class WorkoutPlanResponse(PlanVersionResponse):
    exercises: List[ExerciseItemResponse] = Field(default_factory=list, validation_alias=AliasChoices("exercises", "items"))
