"""
Pytest configuration and fixtures

The app is pointed at a throwaway SQLite file before anything imports
core.config. Each test gets a fresh schema that is dropped afterwards, so
nothing leaks between tests.
"""
import os
import sys
import tempfile

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

_DB_DIR = tempfile.mkdtemp(prefix="fitplan-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["LOG_FORMAT"] = "text"
os.environ["PROGRESS_TIMEZONE"] = "UTC"
os.environ.setdefault("OPENROUTER_API_KEY", "test-key")

import pytest
from fastapi.testclient import TestClient

from core.database import Base, SessionLocal, engine, get_db
from main import app
import models  # noqa: F401  registers tables on Base.metadata
from models import Workout, WorkoutPlan
from services.demo_user import resolve_demo_user_id


@pytest.fixture(scope="function")
def db_session():
    """Session on a freshly created schema; tables are dropped after the test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """TestClient whose requests share the test's session."""
    def _get_db():
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def demo_user_id(db_session):
    return resolve_demo_user_id(db_session)


@pytest.fixture
def other_user_id(db_session):
    from models import User

    user = User(id="other-user", username="other-user", password="other-password")
    db_session.add(user)
    db_session.commit()
    return user.id


@pytest.fixture
def make_plan(db_session):
    """Factory: a plan with one workout per entry in `durations`."""

    def _make(user_id, durations=(30,), name="Test Plan"):
        plan = WorkoutPlan(
            user_id=user_id,
            name=name,
            weekly_minutes=120,
            daily_minutes=30,
            goals=["strength"],
            restrictions={"space": "limited", "noise": "low_noise", "outdoor": False},
        )
        db_session.add(plan)
        db_session.flush()
        workouts = []
        for day, duration in enumerate(durations):
            workout = Workout(
                plan_id=plan.id,
                name=f"Day {day + 1}",
                exercises=[{"name": "Goblet Squat", "sets": 3, "reps": 12, "instructions": "Controlled tempo."}],
                estimated_duration=duration,
                day_of_week=day,
            )
            db_session.add(workout)
            workouts.append(workout)
        db_session.commit()
        return plan, workouts

    return _make
