
EXTRACTION_SYSTEM_PROMPT = """You read photos of fitness documents (diet charts, workout routines, plated meals)
and transcribe them into structured JSON. Return ONLY a JSON object, no commentary."""

DIET_PLAN_EXTRACTION_PROMPT = """Analyze this image of a diet plan / nutrition chart.
Extract all meals into a structured JSON list.
For each meal, identify:
1. meal_type (Breakfast, Lunch, Dinner, Snack, Pre Workout, Post Workout)
2. name (The name of the food/dish)
3. description (Preparation notes or quantity)
4. calories_kcal (estimated)
5. protein_g (estimated)
6. carbs_g (estimated)
7. fat_g (estimated)
8. day_name (Monday..Sunday, only if the chart assigns the meal to a specific day)

Return ONLY a JSON object:
{
  "title": "Extracted Diet Plan",
  "description": "Auto-extracted from image",
  "meals": [
    { "meal_type": "string", "name": "string", "description": "string", "calories_kcal": number, "protein_g": number, "carbs_g": number, "fat_g": number, "day_name": "string or null" }
  ]
}"""

WORKOUT_PLAN_EXTRACTION_PROMPT = """Analyze this image of a workout plan / exercise routine.
Extract all exercises into a structured JSON list.
For each exercise, identify:
1. day_name (Monday, Tuesday, etc.)
2. name (The name of the exercise)
3. category (STRENGTH, CARDIO, STRETCHING, OTHER)
4. sets (number)
5. reps (string, e.g., '10-12' or 'to failure')
6. duration (string, e.g., '30 mins' - mainly for cardio)
7. notes (Form cues or equipment info)

Return ONLY a JSON object:
{
  "title": "Extracted Workout Plan",
  "description": "Auto-extracted from image",
  "exercises": [
    { "day_name": "string", "name": "string", "category": "string", "sets": number, "reps": "string", "duration": "string", "notes": "string" }
  ]
}"""

MEAL_ANALYSIS_PROMPT = """Analyze this food image.
1. Identify the meal type (Breakfast, Lunch, Dinner, Snack).
2. Identify specific food items (e.g., 'Hariyali Chicken', 'Paneer Butter Masala').
3. Estimate the quantity for EACH item (e.g., '100g', '1 cup', '2 pieces').
4. Calculate total calories and macros (protein, carbs, fat) based on these quantities.

IMPORTANT: The 'foods_detected' array MUST contain strings in the format "Food Name (Quantity)".
Example: ["Steamed Rice (150g)", "Dal Tadka (1 bowl)", "Chicken Curry (200g)"]

Return ONLY a JSON object:
{
  "meal_type": "string",
  "foods_detected": ["string"],
  "calories_est": number,
  "macros": { "protein": number, "carbs": number, "fat": number }
}"""
