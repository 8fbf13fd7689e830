# Import all models here
from coachtrack.models.user import User
from coachtrack.models.diet_plan import DietPlanVersion, DietPlanMeal, DietCompletion
from coachtrack.models.workout_plan import WorkoutPlanVersion, WorkoutPlanExercise, WorkoutCompletion
from coachtrack.models.template import DietTemplate, DietTemplateMeal, WorkoutTemplate, WorkoutTemplateExercise
from coachtrack.models.tracking import MealLog
