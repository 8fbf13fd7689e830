from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date as DateType, datetime
from typing import List, Optional


class MealLogCreate(BaseModel):
    date: Optional[DateType] = None
    time: Optional[str] = None
    meal_type: str = Field(..., min_length=1)
    foods_detected: List[str] = []
    calories_est: float = Field(..., gt=0)
    protein: Optional[float] = 0
    carbs: Optional[float] = 0
    fat: Optional[float] = 0
    notes: Optional[str] = None
    image_url: Optional[str] = None


class MealLogResponse(BaseModel):
    id: int
    user_id: int
    date: Optional[DateType] = None
    time: Optional[str] = None
    meal_type: str
    foods_detected: Optional[List[str]] = None
    calories_est: float
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MealAnalyzeRequest(BaseModel):
    image: str  # base64, optionally with a data:image/...;base64, prefix


class MacroEstimate(BaseModel):
    protein: float = 0
    carbs: float = 0
    fat: float = 0


class MealAnalysis(BaseModel):
    meal_type: Optional[str] = None
    foods_detected: List[str] = []
    calories_est: float = 0
    macros: MacroEstimate = MacroEstimate()


class PlanExtractRequest(BaseModel):
    image: str
    type: str

    @field_validator("type")
    @classmethod
    def diet_or_workout(cls, v):
        v = (v or "").strip().lower()
        if v not in ("diet", "workout"):
            raise ValueError("Type required (diet/workout)")
        return v
