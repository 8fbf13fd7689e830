from pydantic import BaseModel
from typing import Optional
from datetime import date as DateType

from coachtrack.schemas.plan import MealItemResponse, ExerciseItemResponse


class WorkoutSessionRow(ExerciseItemResponse):
    """A scheduled exercise on one calendar day, joined with its completion."""
    version_id: int
    date: DateType
    is_completed: bool
    completion_id: Optional[int] = None
    evidence_url: Optional[str] = None


class DietSessionRow(MealItemResponse):
    version_id: int
    date: DateType
    is_completed: bool
    completion_id: Optional[int] = None
    evidence_url: Optional[str] = None


class CompletionDateRequest(BaseModel):
    # Optional so a missing date reports "Date is required"
    date: Optional[DateType] = None


class CompletionResponse(BaseModel):
    success: bool = True
    photoUrl: Optional[str] = None
    completion_id: Optional[int] = None
