"""
Workout log retrieval and workout lookup.

Thin query helpers shared by the workout-log endpoints and the progress
report. Nothing here aggregates; see services/progress_engine.py.
"""
from datetime import datetime
from typing import Dict, Hashable, Iterable, List, Optional

from sqlalchemy.orm import Session

from models import Workout, WorkoutLog, WorkoutPlan
from services.progress_engine import workout_key


def get_logs_in_range(db: Session, user_id: str, start: datetime, end: datetime) -> List[WorkoutLog]:
    """Logs completed within [start, end], oldest first."""
    return db.query(WorkoutLog).filter(
        WorkoutLog.user_id == user_id,
        WorkoutLog.completed_at >= start,
        WorkoutLog.completed_at <= end,
    ).order_by(WorkoutLog.completed_at.asc()).all()


def get_user_workout_logs(db: Session, user_id: str, limit: int = 50) -> List[WorkoutLog]:
    """Most recent logs first."""
    return db.query(WorkoutLog).filter(
        WorkoutLog.user_id == user_id,
    ).order_by(WorkoutLog.completed_at.desc()).limit(limit).all()


def get_workouts_by_ids(db: Session, ids: Iterable[Hashable]) -> List[Workout]:
    ids = list(ids)
    if not ids:
        return []
    return db.query(Workout).filter(Workout.id.in_(ids)).all()


def referenced_workout_ids(logs: Iterable[WorkoutLog]) -> List[Hashable]:
    """Distinct non-empty workout ids in first-seen order."""
    seen: Dict[Hashable, None] = {}
    for log in logs:
        key = workout_key(log.workout_id)
        if key is not None:
            seen.setdefault(key, None)
    return list(seen)


def load_workouts_for_logs(db: Session, logs: Iterable[WorkoutLog]) -> Dict[Hashable, Workout]:
    logs = list(logs)
    workouts = get_workouts_by_ids(db, referenced_workout_ids(logs))
    return {workout.id: workout for workout in workouts}


def enrich_logs_with_workouts(db: Session, logs: Iterable[WorkoutLog]) -> List[dict]:
    """
    Pair each log with its workout definition (or None) for display.

    One batch query regardless of the number of logs.
    """
    logs = list(logs)
    workouts = load_workouts_for_logs(db, logs)
    return [
        {"log": log, "workout": workouts.get(workout_key(log.workout_id))}
        for log in logs
    ]


def get_workout_owner_id(db: Session, workout: Workout) -> Optional[str]:
    plan = db.query(WorkoutPlan).filter(WorkoutPlan.id == workout.plan_id).first()
    return plan.user_id if plan else None
