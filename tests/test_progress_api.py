"""
Integration tests for the progress endpoint

GET /api/progress
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from models import WorkoutLog

FIXED_NOW = datetime(2026, 10, 18, 15, 0, tzinfo=timezone.utc)


def add_log(db, user_id, days_ago, **fields):
    fields.setdefault("exercises", [{"name": "Walk", "duration_minutes": 20}])
    log = WorkoutLog(
        user_id=user_id,
        completed_at=datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc) - timedelta(days=days_ago),
        **fields,
    )
    db.add(log)
    db.commit()
    return log


class TestProgressEndpoint:
    def test_empty_history(self, client, demo_user_id):
        with patch("services.progress_report.local_now", return_value=FIXED_NOW):
            resp = client.get("/api/progress")

        assert resp.status_code == 200
        data = resp.json()
        assert data["window_days"] == 7
        assert len(data["daily_stats"]) == 7
        assert data["daily_stats"][-1]["day"] == "2026-10-18"
        assert data["daily_stats"][-1]["label"] == "Sun"
        assert data["current_streak"] == 0
        assert data["total_workouts"] == 0
        assert data["average_rating"] == 0
        assert data["tag_breakdown"] == []
        assert len(data["weekly_summaries"]) == 1

    def test_report_over_stored_logs(self, client, db_session, demo_user_id, make_plan):
        _, workouts = make_plan(demo_user_id, durations=(45,))
        add_log(db_session, demo_user_id, 0, rating=4, rpe=7, duration_minutes=30,
                calories_burned=200, tags=["strength"])
        add_log(db_session, demo_user_id, 2, workout_id=workouts[0].id, rating=5, rpe=8,
                tags=["strength", "mobility"])
        add_log(db_session, demo_user_id, 3, calories_burned=100)
        add_log(db_session, demo_user_id, 5, exercises=[{"name": "Plank", "duration_seconds": 120}])
        # Outside the 7-day window: not fetched
        add_log(db_session, demo_user_id, 12, duration_minutes=60)

        with patch("services.progress_report.local_now", return_value=FIXED_NOW):
            resp = client.get("/api/progress?days=7")

        assert resp.status_code == 200
        data = resp.json()
        assert [d["workouts"] for d in data["daily_stats"]] == [0, 1, 0, 1, 1, 0, 1]
        assert [d["streak"] for d in data["daily_stats"]] == [0, 1, 0, 1, 2, 0, 1]
        assert data["current_streak"] == 1
        assert data["total_workouts"] == 4
        assert data["workouts_this_week"] == 4
        # 30 (own) + 45 (workout estimate) + 20 (exercise) + 2 (120 s)
        assert data["total_minutes"] == 97
        assert data["average_rating"] == 4.5
        assert data["average_rpe"] == 7.5
        assert data["total_calories"] == 300
        assert data["tag_breakdown"] == [
            {"tag": "strength", "count": 2},
            {"tag": "mobility", "count": 1},
        ]
        assert data["weekly_summaries"][0]["workouts"] == 4

    def test_other_users_logs_are_excluded(self, client, db_session, demo_user_id, other_user_id):
        add_log(db_session, other_user_id, 0)
        with patch("services.progress_report.local_now", return_value=FIXED_NOW):
            resp = client.get("/api/progress")
        assert resp.json()["total_workouts"] == 0

    def test_longer_window_splits_into_weeks(self, client, db_session, demo_user_id):
        add_log(db_session, demo_user_id, 1)
        add_log(db_session, demo_user_id, 9)
        add_log(db_session, demo_user_id, 20)

        with patch("services.progress_report.local_now", return_value=FIXED_NOW):
            resp = client.get("/api/progress?days=14")

        data = resp.json()
        assert len(data["daily_stats"]) == 14
        assert [w["workouts"] for w in data["weekly_summaries"]] == [1, 1]
        assert data["weekly_summaries"][0]["week_start"] == "2026-10-05"
        assert data["weekly_summaries"][1]["week_end"] == "2026-10-18"
        assert data["workouts_this_week"] == 1

    def test_days_out_of_range_is_rejected(self, client, demo_user_id):
        assert client.get("/api/progress?days=0").status_code == 422
        assert client.get("/api/progress?days=32").status_code == 422
        assert client.get("/api/progress?days=abc").status_code == 422

    def test_camel_case_exercise_durations_are_counted(self, client, demo_user_id):
        resp = client.post("/api/workout-logs", json={
            "completed_at": "2026-10-18T09:00:00Z",
            "exercises": [
                {"name": "Plank", "durationSeconds": 120},
                {"name": "Walk", "durationMinutes": 25, "weightKg": 5},
            ],
        })
        assert resp.status_code == 201
        exercises = resp.json()["exercises"]
        assert exercises[0]["duration_seconds"] == 120
        assert "durationSeconds" not in exercises[0]
        assert exercises[1]["duration_minutes"] == 25
        assert exercises[1]["weight_kg"] == 5

        with patch("services.progress_report.local_now", return_value=FIXED_NOW):
            resp = client.get("/api/progress?days=7")

        # 2 (120 s) + 25
        assert resp.json()["total_minutes"] == 27

    def test_legacy_camel_case_rows_are_counted(self, client, db_session, demo_user_id):
        add_log(db_session, demo_user_id, 1, exercises=[{"name": "Plank", "durationSeconds": 180}])
        with patch("services.progress_report.local_now", return_value=FIXED_NOW):
            resp = client.get("/api/progress")
        assert resp.json()["total_minutes"] == 3
