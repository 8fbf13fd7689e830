from fastapi import APIRouter, Depends, HTTPException

from coachtrack.api.auth import require_trainer
from coachtrack.schemas.meal_log import PlanExtractRequest
from coachtrack.services.llm_service import LLMError
from coachtrack.services.plan_extraction import extract_plan_from_image

router = APIRouter(
    prefix="/api/ai",
    tags=["AI"],
)


@router.post("/extract-plan")
def extract_plan(request: PlanExtractRequest, trainer=Depends(require_trainer)):
    """
    Read a diet chart or workout routine photo into a plan draft. The draft
    has the create-plan body shape; the trainer reviews it and posts it to
    /api/clients/{clientId}/{type}-plans.
    """
    try:
        plan = extract_plan_from_image(request.image, request.type)
    except LLMError:
        raise HTTPException(status_code=500, detail="Failed to extract data from image")
    return plan.model_dump(mode="json", by_alias=True)
