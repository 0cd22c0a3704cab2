"""
Tests for the demo data seed script.
"""
from datetime import datetime, timezone
from unittest.mock import patch

from models import Equipment, Workout, WorkoutLog, WorkoutPlan
from scripts.seed_demo_data import main
from services.progress_engine import compute_progress
from services.workout_log_store import load_workouts_for_logs


def run_seed(*args):
    with patch("sys.argv", ["seed_demo_data.py", *args]):
        return main()


def test_dry_run_writes_nothing(db_session):
    assert run_seed("--dry-run") == 0
    assert db_session.query(WorkoutLog).count() == 0


def test_seed_is_repeatable(db_session):
    assert run_seed() == 0
    assert run_seed() == 0

    assert db_session.query(Equipment).count() == 3
    assert db_session.query(WorkoutPlan).count() == 1
    assert db_session.query(Workout).count() == 3
    assert db_session.query(WorkoutLog).count() == 4


def test_seeded_logs_drive_progress(db_session):
    run_seed()

    logs = db_session.query(WorkoutLog).all()
    report = compute_progress(logs, load_workouts_for_logs(db_session, logs), datetime.now(timezone.utc), 7)

    # Logs one, two, three and five days back; nothing today
    assert report.current_streak == 3
    assert report.total_workouts == 4
    assert report.total_minutes == 38 + 34 + 31 + 25
    assert report.total_calories == 320 + 285 + 260 + 150
    assert report.tag_breakdown[0].tag == "strength"
    assert report.tag_breakdown[0].count == 2
