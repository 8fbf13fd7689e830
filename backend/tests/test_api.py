import unittest
from datetime import date

from fastapi.testclient import TestClient

from coachtrack.crud.plan_kinds import WORKOUT
from coachtrack.database import get_db
from coachtrack.main import app
from coachtrack.utils.utils import create_access_token

from support import DatabaseTestCase, TestingSessionLocal

MONDAY = "2025-06-02"


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class ApiTestCase(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        app.dependency_overrides[get_db] = override_get_db
        self.http = TestClient(app)
        self.trainer = self.make_trainer()
        self.client = self.make_client(self.trainer, total_sessions=2)

    def tearDown(self):
        app.dependency_overrides.clear()
        super().tearDown()

    def auth(self, user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


class TestAuth(ApiTestCase):

    def test_signup_then_login(self):
        response = self.http.post("/api/auth/signup", json={
            "email": "New@Example.com", "password": "secret123", "name": "New", "role": "client",
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["user"]["email"], "new@example.com")

        response = self.http.post("/api/auth/login", json={"email": "new@example.com", "password": "secret123"})
        self.assertEqual(response.status_code, 200)
        token = response.json()["token"]

        me = self.http.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(me.json()["name"], "New")

        wrong = self.http.post("/api/auth/login", json={"email": "new@example.com", "password": "nope"})
        self.assertEqual(wrong.status_code, 401)

    def test_missing_or_bad_token_is_401(self):
        self.assertEqual(self.http.get("/api/auth/me").status_code, 401)
        response = self.http.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Session expired. Please re-login.")


class TestPlanEndpoints(ApiTestCase):

    def test_no_plan_is_404(self):
        response = self.http.get("/api/clients/me/workout-plans/current", headers=self.auth(self.client))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "No active workout plan found")

    def test_trainer_creates_and_client_reads_current(self):
        response = self.http.post(
            f"/api/clients/{self.client.id}/workout-plans",
            json={"title": "Block 1", "isActive": True, "exercises": [
                {"name": "Squat", "day_name": "monday", "sets": 5, "reps": 5},
                {"name": "Bike", "category": "CARDIO", "duration": "20 mins"},
            ]},
            headers=self.auth(self.trainer),
        )
        self.assertEqual(response.status_code, 201)
        created = response.json()
        self.assertTrue(created["is_current"])

        current = self.http.get("/api/clients/me/workout-plans/current", headers=self.auth(self.client)).json()
        self.assertEqual(current["id"], created["id"])
        self.assertEqual([e["name"] for e in current["exercises"]], ["Squat", "Bike"])

        versions = self.http.get(f"/api/clients/{self.client.id}/workout-plans/versions",
                                 headers=self.auth(self.trainer)).json()
        self.assertEqual([v["id"] for v in versions], [created["id"]])

    def test_client_cannot_create_plans(self):
        response = self.http.post(
            f"/api/clients/{self.client.id}/diet-plans", json={"title": "DIY"}, headers=self.auth(self.client)
        )
        self.assertEqual(response.status_code, 403)

    def test_other_users_plans_are_hidden(self):
        stranger = self.make_client(email="stranger@example.com")
        self.add_version(WORKOUT, self.client, date(2025, 6, 1))

        response = self.http.get(f"/api/clients/{self.client.id}/workout-plans/current",
                                 headers=self.auth(stranger))
        self.assertEqual(response.status_code, 404)

        rival = self.make_trainer(email="rival@example.com")
        response = self.http.post(f"/api/clients/{self.client.id}/workout-plans",
                                  json={"title": "Poach"}, headers=self.auth(rival))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Client not found or not authorized")


class TestSessionEndpoints(ApiTestCase):

    def setUp(self):
        super().setUp()
        version = self.add_version(WORKOUT, self.client, date(2025, 6, 1), items=[
            {"name": "Squat", "day_name": "Monday"},
            {"name": "Treadmill", "day_name": "Monday", "category": "CARDIO"},
        ])
        self.squat_id, self.treadmill_id = [e.id for e in version.items]

    def rows(self, **params):
        response = self.http.get("/api/workout-sessions", params=params, headers=self.auth(self.client))
        self.assertEqual(response.status_code, 200)
        return {row["name"]: row["is_completed"] for row in response.json()}

    def test_complete_and_incomplete_flow(self):
        response = self.http.post(f"/api/workout-sessions/{self.squat_id}/complete",
                                  data={"date": MONDAY}, headers=self.auth(self.client))
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["success"])
        self.assertEqual(self.rows(date=MONDAY), {"Squat": True, "Treadmill": False})

        response = self.http.post(f"/api/workout-sessions/{self.squat_id}/incomplete",
                                  json={"date": MONDAY}, headers=self.auth(self.client))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.rows(date=MONDAY), {"Squat": False, "Treadmill": False})

    def test_cardio_needs_photo_from_client(self):
        response = self.http.post(f"/api/workout-sessions/{self.treadmill_id}/complete",
                                  data={"date": MONDAY}, headers=self.auth(self.client))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Photo proof required for cardio workouts")

        response = self.http.post(
            f"/api/workout-sessions/{self.treadmill_id}/complete",
            data={"date": MONDAY},
            files={"machinePhoto": ("screen.jpg", b"\xff\xd8photo", "image/jpeg")},
            headers=self.auth(self.client),
        )
        self.assertEqual(response.status_code, 200)
        photo_url = response.json()["photoUrl"]
        self.assertTrue(photo_url.startswith("/uploads/"))
        self.assertEqual(self.http.get(photo_url).content, b"\xff\xd8photo")

    def test_trainer_marks_cardio_without_photo(self):
        response = self.http.post(
            f"/api/trainer/clients/{self.client.id}/workouts/{self.treadmill_id}/complete",
            data={"date": MONDAY}, headers=self.auth(self.trainer),
        )
        self.assertEqual(response.status_code, 200)

        rows = self.http.get(f"/api/trainer/clients/{self.client.id}/workouts",
                             params={"date": MONDAY}, headers=self.auth(self.trainer)).json()
        self.assertEqual({r["name"]: r["is_completed"] for r in rows}, {"Squat": False, "Treadmill": True})

    def test_date_or_range_required(self):
        response = self.http.get("/api/workout-sessions", headers=self.auth(self.client))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Date or Date Range required")

    def test_range_rows_newest_day_first(self):
        response = self.http.get("/api/workout-sessions",
                                 params={"from_date": "2025-06-02", "to_date": "2025-06-09"},
                                 headers=self.auth(self.client))
        days = [row["date"] for row in response.json()]
        self.assertEqual(days, ["2025-06-09", "2025-06-09", "2025-06-02", "2025-06-02"])


class TestTrainerSessionCounter(ApiTestCase):

    def test_counts_up_then_refuses(self):
        url = f"/api/trainer/clients/{self.client.id}/sessions/complete"
        for expected in (1, 2):
            response = self.http.post(url, headers=self.auth(self.trainer))
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json()["completed_sessions"], expected)

        response = self.http.post(url, headers=self.auth(self.trainer))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "All sessions completed")

        response = self.http.post(f"/api/trainer/clients/{self.client.id}/sessions/renew",
                                  json={"sessions": 3}, headers=self.auth(self.trainer))
        self.assertEqual(response.json()["total_sessions"], 5)

    def test_client_list_reports_status(self):
        clients = self.http.get("/api/trainer/clients", params={"filter": "all"},
                                headers=self.auth(self.trainer)).json()
        self.assertEqual([(c["email"], c["status"]) for c in clients], [("client@example.com", "Active")])


class TestTemplateEndpoints(ApiTestCase):

    def test_create_assign_and_delete(self):
        headers = self.auth(self.trainer)
        created = self.http.post("/api/templates/diet", json={
            "name": "Cut", "meals": [{"name": "Eggs", "protein_g": 12.346}],
        }, headers=headers)
        self.assertEqual(created.status_code, 201)
        template = created.json()
        self.assertEqual(template["meals"][0]["protein_g"], 12.35)

        listed = self.http.get("/api/templates/diet", headers=headers).json()
        self.assertEqual([(t["name"], t["items_count"]) for t in listed], [("Cut", 1)])

        assigned = self.http.post(f"/api/templates/diet/{template['id']}/assign",
                                  json={"clientId": self.client.id}, headers=headers)
        self.assertEqual(assigned.status_code, 201)
        self.assertEqual([m["name"] for m in assigned.json()["meals"]], ["Eggs"])

        current = self.http.get(f"/api/clients/{self.client.id}/diet-plans/current", headers=headers).json()
        self.assertEqual(current["id"], assigned.json()["id"])

        deleted = self.http.delete(f"/api/templates/diet/{template['id']}", headers=headers)
        self.assertEqual(deleted.json(), {"message": "Template deleted successfully", "id": template["id"]})
        self.assertEqual(self.http.get(f"/api/templates/diet/{template['id']}", headers=headers).status_code, 404)


class TestHealth(unittest.TestCase):

    def test_health(self):
        response = TestClient(app).get("/health")
        self.assertEqual(response.json()["status"], "healthy")


if __name__ == '__main__':
    unittest.main()
