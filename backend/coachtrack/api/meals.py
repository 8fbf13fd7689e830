from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from coachtrack.api.auth import get_current_user
from coachtrack.crud import meal_log as crud_meal
from coachtrack.database import get_db
from coachtrack.schemas.meal_log import MealLogCreate, MealLogResponse, MealAnalyzeRequest, MealAnalysis
from coachtrack.services.llm_service import LLMError
from coachtrack.services.plan_extraction import analyze_meal_image

router = APIRouter(
    prefix="/api/meals",
    tags=["Meals"],
)


@router.post("/analyze", response_model=MealAnalysis)
def analyze_meal(request: MealAnalyzeRequest, current_user=Depends(get_current_user)):
    """Estimate meal type, foods and macros from a photo. Nothing is saved."""
    try:
        return analyze_meal_image(request.image)
    except LLMError:
        raise HTTPException(status_code=500, detail="Failed to analyze meal")


@router.get("", response_model=List[MealLogResponse])
def get_meals(
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    meal_type: Optional[str] = Query(None),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    meal_query = crud_meal.MealLogQuery(
        from_date=from_date,
        to_date=to_date,
        meal_type=meal_type,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    return crud_meal.get_meals(db, current_user.id, meal_query)


@router.get("/{meal_id}", response_model=MealLogResponse)
def get_meal(meal_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    meal = crud_meal.get_meal(db, current_user.id, meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal


@router.post("", response_model=MealLogResponse, status_code=status.HTTP_201_CREATED)
def create_meal(meal: MealLogCreate, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return crud_meal.create_meal(db, current_user.id, meal)
