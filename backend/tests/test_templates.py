import unittest
from datetime import date
from unittest.mock import patch

from coachtrack.crud.plan_kinds import DIET, WORKOUT
from coachtrack.crud.plan_version import workout_plans
from coachtrack.crud.template import diet_templates, workout_templates
from coachtrack.exceptions import NotFoundError
from coachtrack.schemas.plan import ExerciseItemCreate, MealItemCreate
from coachtrack.services.template_service import instantiate

from support import DatabaseTestCase

TODAY = date(2025, 6, 3)


class TestTemplateStore(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.trainer = self.make_trainer()
        self.rival = self.make_trainer(email="rival@example.com", name="Rival")

    def test_create_rounds_macros_and_orders_items(self):
        template = diet_templates.create(self.db, self.trainer.id, "Lean bulk", "High protein", [
            MealItemCreate(name="Chicken", protein_g=31.456, calories_kcal=165.004),
            MealItemCreate(name="Rice", carbs_g=None),
        ])

        chicken, rice = template.items
        self.assertEqual(chicken.protein_g, 31.46)
        self.assertEqual(chicken.calories_kcal, 165.0)
        self.assertEqual(rice.carbs_g, 0)
        self.assertEqual([chicken.order_index, rice.order_index], [0, 1])

    def test_update_replaces_all_items(self):
        template = workout_templates.create(self.db, self.trainer.id, "Push", None, [
            ExerciseItemCreate(name="Bench"), ExerciseItemCreate(name="Dips"), ExerciseItemCreate(name="Fly"),
        ])

        updated = workout_templates.update(self.db, self.trainer.id, template.id, "Push v2", "Heavier", [
            ExerciseItemCreate(name="Overhead press"), ExerciseItemCreate(name="Bench"),
        ])

        self.assertEqual(updated.name, "Push v2")
        self.assertEqual([e.name for e in updated.items], ["Overhead press", "Bench"])
        self.assertEqual([e.order_index for e in updated.items], [0, 1])
        Item = WORKOUT.template_item_model
        self.assertEqual(self.db.query(Item).count(), 2)

    def test_update_by_another_trainer_is_denied(self):
        template = workout_templates.create(self.db, self.trainer.id, "Pull", None, [ExerciseItemCreate(name="Row")])

        with self.assertRaises(NotFoundError) as ctx:
            workout_templates.update(self.db, self.rival.id, template.id, "Stolen", None, [])
        self.assertEqual(ctx.exception.message, "Template not found or access denied")

        self.db.refresh(template)
        self.assertEqual(template.name, "Pull")
        self.assertEqual(len(template.items), 1)

    def test_get_is_scoped_to_owner(self):
        template = diet_templates.create(self.db, self.trainer.id, "Cut", None, [])
        self.assertIsNotNone(diet_templates.get(self.db, self.trainer.id, template.id))
        self.assertIsNone(diet_templates.get(self.db, self.rival.id, template.id))

    def test_delete_cascades_to_items(self):
        template = diet_templates.create(self.db, self.trainer.id, "Cut", None, [MealItemCreate(name="Eggs")])

        self.assertEqual(diet_templates.delete(self.db, self.trainer.id, template.id), template.id)
        self.assertEqual(self.db.query(DIET.template_item_model).count(), 0)

        with self.assertRaises(NotFoundError):
            diet_templates.delete(self.db, self.trainer.id, template.id)

    def test_list_counts_items_per_template(self):
        diet_templates.create(self.db, self.trainer.id, "Empty", None, [])
        diet_templates.create(self.db, self.trainer.id, "Two", None, [MealItemCreate(name="A"), MealItemCreate(name="B")])
        diet_templates.create(self.db, self.rival.id, "Theirs", None, [MealItemCreate(name="C")])

        summaries = {t.name: t.items_count for t in diet_templates.list_for_trainer(self.db, self.trainer.id)}
        self.assertEqual(summaries, {"Empty": 0, "Two": 2})

    def test_response_lists_items_under_kind_key(self):
        template = workout_templates.create(self.db, self.trainer.id, "Legs", None, [ExerciseItemCreate(name="Squat")])
        response = workout_templates.to_response(template)
        self.assertEqual([e.name for e in response.exercises], ["Squat"])


@patch("coachtrack.crud.plan_version.local_today", return_value=TODAY)
class TestInstantiate(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.trainer = self.make_trainer()
        self.client = self.make_client(self.trainer)
        self.template = workout_templates.create(self.db, self.trainer.id, "Upper", "Twice a week", [
            ExerciseItemCreate(name="Bench", day_name="Tuesday", sets=4, reps="8"),
            ExerciseItemCreate(name="Bike", day_name="Friday", category="CARDIO", duration="15 mins"),
        ])

    def test_creates_active_version_with_copied_items(self, _today):
        old = self.add_version(WORKOUT, self.client, date(2025, 1, 1), items=[{"name": "Old"}])

        version = instantiate(self.db, WORKOUT, self.trainer.id, self.template.id, self.client.id)

        self.assertEqual(version.title, "Upper")
        self.assertEqual(version.description, "Twice a week")
        self.assertEqual(version.followed_from, TODAY)
        self.assertTrue(version.is_current)
        self.assertEqual(
            [(e.name, e.day_name, e.category, e.sets, e.reps, e.duration, e.order_index) for e in version.items],
            [("Bench", "Tuesday", "STRENGTH", 4, "8", None, 0), ("Bike", "Friday", "CARDIO", None, None, "15 mins", 1)],
        )
        self.db.refresh(old)
        self.assertEqual(old.followed_till, TODAY)

    def test_plan_is_independent_of_later_template_edits(self, _today):
        version = instantiate(self.db, WORKOUT, self.trainer.id, self.template.id, self.client.id)
        workout_templates.update(self.db, self.trainer.id, self.template.id, "Upper", None, [])

        current = workout_plans.get_current(self.db, self.client.id)
        self.assertEqual(current.id, version.id)
        self.assertEqual(len(current.items), 2)

    def test_inactive_with_custom_title(self, _today):
        version = instantiate(self.db, WORKOUT, self.trainer.id, self.template.id, self.client.id,
                              make_active=False, title="Deload")
        self.assertEqual(version.title, "Deload")
        self.assertEqual(version.followed_till, TODAY)

    def test_other_trainers_template_is_not_found(self, _today):
        rival = self.make_trainer(email="rival@example.com")
        rival_client = self.make_client(rival, email="rc@example.com")
        with self.assertRaises(NotFoundError):
            instantiate(self.db, WORKOUT, rival.id, self.template.id, rival_client.id)

    def test_client_of_another_trainer_is_not_found(self, _today):
        stranger = self.make_client(email="stranger@example.com")
        with self.assertRaises(NotFoundError) as ctx:
            instantiate(self.db, WORKOUT, self.trainer.id, self.template.id, stranger.id)
        self.assertEqual(ctx.exception.message, "Client not found or not authorized")


if __name__ == '__main__':
    unittest.main()
