import unittest
from datetime import date, datetime, timedelta

from coachtrack.crud.meal_log import MealLogQuery, create_meal, get_meal, get_meals
from coachtrack.crud.user import ClientQuery, get_clients
from coachtrack.exceptions import ValidationError
from coachtrack.models.tracking import MealLog
from coachtrack.schemas.meal_log import MealLogCreate

from support import DatabaseTestCase


class TestMealLogQuery(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.client = self.make_client()
        self.other = self.make_client(email="other@example.com")
        for day, meal_type, calories in [
            (date(2025, 6, 1), "Breakfast", 300),
            (date(2025, 6, 1), "Dinner", 700),
            (date(2025, 6, 2), "Breakfast", 450),
            (date(2025, 6, 3), "Lunch", 600),
        ]:
            self.db.add(MealLog(user_id=self.client.id, date=day, meal_type=meal_type, calories_est=calories))
        self.db.add(MealLog(user_id=self.other.id, date=date(2025, 6, 2), meal_type="Lunch", calories_est=999))
        self.db.commit()

    def calories(self, **filters):
        return [m.calories_est for m in get_meals(self.db, self.client.id, MealLogQuery(**filters))]

    def test_date_range_is_inclusive(self):
        self.assertEqual(
            sorted(self.calories(from_date=date(2025, 6, 1), to_date=date(2025, 6, 2))), [300, 450, 700]
        )

    def test_meal_type_filter(self):
        self.assertEqual(sorted(self.calories(meal_type="Breakfast")), [300, 450])

    def test_sort_and_paging(self):
        self.assertEqual(self.calories(sort_by="calories_est", sort_order="asc"), [300, 450, 600, 700])
        self.assertEqual(self.calories(sort_by="calories_est", sort_order="ASC", limit=2, offset=1), [450, 600])

    def test_unknown_sort_falls_back_to_created_at_desc(self):
        query = MealLogQuery(sort_by="calories_est; DROP TABLE meal_logs", sort_order="sideways")
        self.assertEqual((query.sort_by, query.sort_order), ("created_at", "desc"))
        self.assertEqual(len(get_meals(self.db, self.client.id, query)), 4)

    def test_inverted_range_is_rejected(self):
        with self.assertRaises(ValidationError):
            MealLogQuery(from_date=date(2025, 6, 3), to_date=date(2025, 6, 1))

    def test_get_meal_is_owner_scoped(self):
        meal = self.db.query(MealLog).filter(MealLog.user_id == self.other.id).one()
        self.assertIsNone(get_meal(self.db, self.client.id, meal.id))
        self.assertEqual(get_meal(self.db, self.other.id, meal.id).calories_est, 999)

    def test_create_meal_defaults_missing_macros(self):
        meal = create_meal(self.db, self.client.id, MealLogCreate(
            date=date(2025, 6, 4), meal_type="Snack", calories_est=120, protein=None,
            foods_detected=["Apple (1 medium)"],
        ))
        self.assertEqual(meal.protein, 0)
        self.assertEqual(meal.foods_detected, ["Apple (1 medium)"])


class TestClientQuery(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.trainer = self.make_trainer()
        future = datetime.now() + timedelta(days=30)
        past = datetime.now() - timedelta(days=1)
        self.make_client(self.trainer, email="zoe@example.com", name="Zoe", total_sessions=5)
        self.make_client(self.trainer, email="adam@example.com", name="Adam", total_sessions=5,
                         validity_expires_at=future)
        self.make_client(self.trainer, email="used@example.com", name="Bea", total_sessions=3,
                         completed_sessions=3)
        self.make_client(self.trainer, email="lapsed@example.com", name="Cal", total_sessions=8,
                         validity_expires_at=past)
        self.make_client(email="loner@example.com", name="Loner", total_sessions=5)

    def names(self, **filters):
        return [c.name for c in get_clients(self.db, self.trainer.id, ClientQuery(**filters))]

    def test_default_lists_active_clients_only(self):
        self.assertEqual(sorted(self.names()), ["Adam", "Zoe"])

    def test_inactive_means_no_credits_or_expired(self):
        self.assertEqual(sorted(self.names(status="inactive")), ["Bea", "Cal"])

    def test_sort_active_puts_active_first_then_name(self):
        self.assertEqual(self.names(status="all", sort="active"), ["Adam", "Zoe", "Bea", "Cal"])

    def test_search_matches_name_or_email(self):
        self.assertEqual(self.names(status="all", search="ADA"), ["Adam"])
        self.assertEqual(self.names(status="all", search="lapsed@"), ["Cal"])

    def test_status_property_matches_filter(self):
        clients = get_clients(self.db, self.trainer.id, ClientQuery(status="all"))
        self.assertEqual(
            {c.name: c.status for c in clients},
            {"Zoe": "Active", "Adam": "Active", "Bea": "Inactive", "Cal": "Inactive"},
        )

    def test_unknown_filter_is_rejected(self):
        with self.assertRaises(ValidationError):
            ClientQuery(status="sleeping")


if __name__ == '__main__':
    unittest.main()
