"""
Integration tests for workout plan and workout endpoints

/api/workout-plans, /api/generate-workout-plan, /api/workouts/{id}
"""
from unittest.mock import patch

from core.exceptions import AIServiceError
from models import Equipment, Workout, WorkoutLog, WorkoutPlan
from services.plan_generator import GeneratedPlan

GENERATED = GeneratedPlan.model_validate({
    "name": "Strong at Home",
    "description": "Minimal-equipment strength plan.",
    "workouts": [
        {
            "name": "Lower Body",
            "description": "Squats and hinges.",
            "exercises": [
                {"name": "Goblet Squat", "sets": 3, "reps": 12, "equipment": "dumbbell",
                 "instructions": "Drive knees out."},
            ],
            "estimated_duration": 30,
            "day_of_week": 1,
        },
        {
            "name": "Upper Body",
            "description": "Push and pull.",
            "exercises": [
                {"name": "Plank", "sets": 3, "duration": 45, "instructions": "Brace the core."},
            ],
            "estimated_duration": 25,
            "day_of_week": 3,
        },
    ],
    "nutritional_guidance": "Prioritise protein and hydration.",
})

METADATA = {
    "provider": "openrouter",
    "model": "openai/gpt-oss-120b:free",
    "request_id": "gen-123",
    "created_at": "2026-10-18T12:00:00+00:00",
    "usage": {"prompt_tokens": 600, "completion_tokens": 900, "total_tokens": 1500},
}

GENERATE_REQUEST = {
    "goals": ["strength", "mobility"],
    "restrictions": {"space": "limited", "noise": "low_noise", "outdoor": False},
    "weekly_minutes": 120,
    "daily_minutes": 30,
}


class TestWorkoutPlans:
    def test_create_get_list(self, client, demo_user_id):
        resp = client.post("/api/workout-plans", json={
            "name": "Manual Plan",
            "goals": ["endurance"],
            "weekly_minutes": 90,
            "daily_minutes": 30,
        })
        assert resp.status_code == 201
        plan = resp.json()
        assert plan["user_id"] == demo_user_id

        assert client.get(f"/api/workout-plans/{plan['id']}").json()["name"] == "Manual Plan"
        assert [p["id"] for p in client.get("/api/workout-plans").json()] == [plan["id"]]

    def test_update(self, client, demo_user_id, make_plan):
        plan, _ = make_plan(demo_user_id)
        resp = client.put(f"/api/workout-plans/{plan.id}", json={"daily_minutes": 45})
        assert resp.status_code == 200
        assert resp.json()["daily_minutes"] == 45
        assert resp.json()["name"] == "Test Plan"

    def test_other_users_plan_is_404(self, client, demo_user_id, other_user_id, make_plan):
        plan, _ = make_plan(other_user_id)
        assert client.get(f"/api/workout-plans/{plan.id}").status_code == 404
        assert client.get(f"/api/workout-plans/{plan.id}/workouts").status_code == 404
        assert client.delete(f"/api/workout-plans/{plan.id}").status_code == 404

    def test_list_plan_workouts_by_day(self, client, demo_user_id, make_plan):
        plan, workouts = make_plan(demo_user_id, durations=(30, 25, 40))
        data = client.get(f"/api/workout-plans/{plan.id}/workouts").json()
        assert [w["day_of_week"] for w in data] == [0, 1, 2]
        assert [w["id"] for w in data] == [w.id for w in workouts]

    def test_delete_removes_workouts_and_keeps_logs(self, client, db_session, demo_user_id, make_plan):
        plan, workouts = make_plan(demo_user_id)
        log = WorkoutLog(user_id=demo_user_id, workout_id=workouts[0].id, exercises=[{"name": "Squat"}])
        db_session.add(log)
        db_session.commit()

        assert client.delete(f"/api/workout-plans/{plan.id}").status_code == 204

        db_session.expire_all()
        assert db_session.query(WorkoutPlan).count() == 0
        assert db_session.query(Workout).count() == 0
        assert db_session.query(WorkoutLog).one().workout_id is None


class TestWorkouts:
    def test_get_and_update(self, client, demo_user_id, make_plan):
        _, workouts = make_plan(demo_user_id)
        workout_id = workouts[0].id

        assert client.get(f"/api/workouts/{workout_id}").json()["name"] == "Day 1"

        resp = client.put(f"/api/workouts/{workout_id}", json={"estimated_duration": 35, "day_of_week": 4})
        assert resp.status_code == 200
        assert resp.json()["estimated_duration"] == 35
        assert resp.json()["day_of_week"] == 4

    def test_invalid_day_is_rejected(self, client, demo_user_id, make_plan):
        _, workouts = make_plan(demo_user_id)
        assert client.put(f"/api/workouts/{workouts[0].id}", json={"day_of_week": 7}).status_code == 422

    def test_other_users_workout_is_404(self, client, demo_user_id, other_user_id, make_plan):
        _, workouts = make_plan(other_user_id)
        assert client.get(f"/api/workouts/{workouts[0].id}").status_code == 404

    def test_delete_detaches_logs(self, client, db_session, demo_user_id, make_plan):
        _, workouts = make_plan(demo_user_id)
        db_session.add(WorkoutLog(user_id=demo_user_id, workout_id=workouts[0].id, exercises=[{"name": "Squat"}]))
        db_session.commit()

        assert client.delete(f"/api/workouts/{workouts[0].id}").status_code == 204

        db_session.expire_all()
        assert db_session.query(Workout).count() == 0
        assert db_session.query(WorkoutLog).one().workout_id is None


class TestGenerateWorkoutPlan:
    def test_persists_generated_plan(self, client, db_session, demo_user_id):
        db_session.add(Equipment(user_id=demo_user_id, type="dumbbell", name="Dumbbell", weight=10, quantity=2))
        db_session.commit()

        with patch("services.plan_generator.generate_workout_plan") as mock_generate:
            mock_generate.return_value = (GENERATED, METADATA)
            resp = client.post("/api/generate-workout-plan", json=GENERATE_REQUEST)

            kwargs = mock_generate.call_args.kwargs
            assert [e.name for e in kwargs["equipment"]] == ["Dumbbell"]
            assert kwargs["goals"] == ["strength", "mobility"]
            assert kwargs["weekly_minutes"] == 120

        assert resp.status_code == 201
        data = resp.json()
        assert data["plan"]["name"] == "Strong at Home"
        assert data["plan"]["goals"] == ["strength", "mobility"]
        assert data["plan"]["restrictions"] == GENERATE_REQUEST["restrictions"]
        assert data["plan"]["ai_metadata"]["request_id"] == "gen-123"
        assert data["nutritional_guidance"] == "Prioritise protein and hydration."
        assert [w["day_of_week"] for w in data["workouts"]] == [1, 3]
        assert data["workouts"][1]["exercises"][0]["duration"] == 45

        assert db_session.query(WorkoutPlan).count() == 1
        assert db_session.query(Workout).count() == 2

    def test_generator_error_is_surfaced(self, client, db_session, demo_user_id):
        with patch("services.plan_generator.generate_workout_plan") as mock_generate:
            mock_generate.side_effect = AIServiceError("AI service rate limit reached.", status_code=429)
            resp = client.post("/api/generate-workout-plan", json=GENERATE_REQUEST)

        assert resp.status_code == 429
        assert resp.json()["detail"] == "AI service rate limit reached."
        assert db_session.query(WorkoutPlan).count() == 0

    def test_request_validation(self, client, demo_user_id):
        assert client.post("/api/generate-workout-plan", json=dict(GENERATE_REQUEST, goals=[])).status_code == 422
        assert client.post("/api/generate-workout-plan", json=dict(GENERATE_REQUEST, goals=["  "])).status_code == 422
        assert client.post("/api/generate-workout-plan", json=dict(GENERATE_REQUEST, daily_minutes=0)).status_code == 422
