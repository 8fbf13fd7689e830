import logging

from pydantic import ValidationError as SchemaError

from coachtrack.exceptions import ValidationError
from coachtrack.schemas.meal_log import MealAnalysis
from coachtrack.schemas.plan import DietPlanCreate, WorkoutPlanCreate
from coachtrack.services import llm_service
from coachtrack.services.llm_service import LLMError
from coachtrack.utils.llm_prompts.extraction_prompts import (
    EXTRACTION_SYSTEM_PROMPT,
    DIET_PLAN_EXTRACTION_PROMPT,
    WORKOUT_PLAN_EXTRACTION_PROMPT,
    MEAL_ANALYSIS_PROMPT,
)

logger = logging.getLogger(__name__)

"""
AI Extraction
-------------
Turns photos into candidate data for a human to review:
- a diet chart or workout routine into a plan draft (same shape as the
  create-plan body, so it can be posted back unchanged),
- a plate of food into a meal-log estimate.
Nothing here writes to the database.
"""

EXTRACTORS = {
    "diet": (DIET_PLAN_EXTRACTION_PROMPT, DietPlanCreate),
    "workout": (WORKOUT_PLAN_EXTRACTION_PROMPT, WorkoutPlanCreate),
}


def _require_image(image: str) -> str:
    data = llm_service.strip_data_url(image)
    if not data:
        raise ValidationError("Image required")
    return data


def extract_plan_from_image(image: str, plan_type: str):
    if plan_type not in EXTRACTORS:
        raise ValidationError("Type required (diet/workout)")
    prompt, schema = EXTRACTORS[plan_type]
    data = _require_image(image)

    raw = llm_service.call_vision_json(EXTRACTION_SYSTEM_PROMPT, prompt, data)
    raw.setdefault("title", f"Extracted {plan_type.title()} Plan")
    raw.setdefault("description", "Auto-extracted from image")
    try:
        plan = schema.model_validate(raw)
    except SchemaError as e:
        logger.warning(f"Extracted {plan_type} plan failed validation: {e}")
        raise LLMError("Failed to extract data from image") from e

    logger.info(f"Extracted {plan_type} plan with {len(plan.items)} item(s)")
    return plan


def analyze_meal_image(image: str) -> MealAnalysis:
    data = _require_image(image)
    raw = llm_service.call_vision_json(EXTRACTION_SYSTEM_PROMPT, MEAL_ANALYSIS_PROMPT, data)
    try:
        return MealAnalysis.model_validate(raw)
    except SchemaError as e:
        logger.warning(f"Meal analysis failed validation: {e}")
        raise LLMError("Failed to analyze meal") from e
