from __future__ import annotations

import argparse
from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

PLAN_ID = "demo-plan-strong-at-home"

EQUIPMENT = [
    {"type": "dumbbell", "name": "Adjustable Dumbbell", "weight": 10, "quantity": 2},
    {"type": "resistance_band", "name": "Resistance Band Set", "quantity": 5},
    {"type": "mat", "name": "Yoga Mat", "quantity": 1},
]

PLAN = {
    "name": "Strong at Home 4-Week Kickoff",
    "description": (
        "Four-day minimal-equipment plan balancing strength, conditioning, and recovery "
        "while fitting into small spaces."
    ),
    "goals": ["strength", "mobility", "endurance"],
    "restrictions": {"space": "limited", "noise": "low_noise", "outdoor": False},
    "weekly_minutes": 150,
    "daily_minutes": 30,
    "nutritional_guidance": (
        "Aim for 1.6g/kg protein anchored by whole foods, include colourful vegetables daily, "
        "hydrate with 2.5L water, and refuel within 60 minutes of training with 30g protein "
        "plus complex carbs."
    ),
}

# Template exercise durations are in seconds
WORKOUTS = [
    {
        "id": "demo-workout-strong-at-home-1",
        "name": "Lower Body & Core Foundations",
        "estimated_duration": 32,
        "day_of_week": 1,
        "exercises": [
            {"name": "Dynamic Warm-Up", "duration": 300,
             "instructions": "March in place, leg swings, and hip circles to prime the joints."},
            {"name": "Goblet Squat", "sets": 3, "reps": 12, "equipment": "10kg adjustable dumbbell",
             "instructions": "Hold the dumbbell at chest height, control a 3-1 tempo, and drive knees out."},
            {"name": "Split Squat", "sets": 3, "reps": 10, "equipment": "Bodyweight or light dumbbell assist",
             "instructions": "Keep torso tall and push through the front heel with active glute engagement."},
            {"name": "Resistance Band Deadlift", "sets": 3, "reps": 15, "equipment": "Heavy resistance band",
             "instructions": "Stand on the band, hinge from the hips, and squeeze glutes at the top."},
            {"name": "Plank with Shoulder Tap", "sets": 3, "duration": 45,
             "instructions": "Alternate taps while keeping hips level and core braced."},
        ],
    },
    {
        "id": "demo-workout-strong-at-home-2",
        "name": "Push & Pull Strength Circuit",
        "estimated_duration": 28,
        "day_of_week": 3,
        "exercises": [
            {"name": "Band Shoulder Series", "duration": 240,
             "instructions": "Perform pull-aparts, face pulls, and shoulder dislocates for activation."},
            {"name": "Single-Arm Dumbbell Row", "sets": 3, "reps": 12, "equipment": "10kg adjustable dumbbell",
             "instructions": "Brace on a bench or chair, drive elbow toward the hip, and pause at the top."},
            {"name": "Resistance Band Chest Press", "sets": 3, "reps": 15, "equipment": "Medium resistance band",
             "instructions": "Anchor the band at chest height and press forward with controlled tempo."},
            {"name": "Half-Kneeling Shoulder Press", "sets": 3, "reps": 10, "equipment": "10kg adjustable dumbbell",
             "instructions": "Squeeze the rear glute, keep ribs stacked, and press overhead smoothly."},
            {"name": "Hollow Body Hold", "sets": 3, "duration": 40,
             "instructions": "Maintain ribs down, low back pressed to the mat, and breathe steadily."},
        ],
    },
    {
        "id": "demo-workout-strong-at-home-3",
        "name": "Conditioning & Mobility Flow",
        "estimated_duration": 26,
        "day_of_week": 5,
        "exercises": [
            {"name": "Jump Rope or Band Skips", "duration": 240,
             "instructions": "Light bounce on the balls of the feet to elevate heart rate without noise."},
            {"name": "Resistance Band Good Morning", "sets": 3, "reps": 15, "equipment": "Light resistance band",
             "instructions": "Hinge from the hips with neutral spine and snap to standing."},
            {"name": "Reverse Lunge to Knee Drive", "sets": 3, "reps": 12, "equipment": "Bodyweight",
             "instructions": "Step back quietly, drive the knee tall, and use opposite arm swing."},
            {"name": "Bear Crawl Hold with Shoulder Tap", "sets": 3, "duration": 45,
             "instructions": "Hover knees two inches off the mat and tap opposite shoulders without swaying."},
            {"name": "Yoga Flow Cooldown", "duration": 300,
             "instructions": "Cycle through cat-cow, world's greatest stretch, and child's pose breathing."},
        ],
    },
]

# (id, workout index or None, days ago, local time, fields)
LOGS = [
    ("demo-log-strong-at-home-1", 0, 1, time(18, 30), {
        "exercises": [
            {"name": "Goblet Squat", "sets": 3, "reps": 12, "weight_kg": 10},
            {"name": "Split Squat", "sets": 3, "reps": 10},
            {"name": "Resistance Band Deadlift", "sets": 3, "reps": 15, "band": "heavy"},
        ],
        "notes": "Focused on slow eccentrics; lunges were challenging but form stayed tight.",
        "rating": 4, "rpe": 7, "duration_minutes": 38, "calories_burned": 320,
        "tags": ["strength", "lower-body"],
    }),
    ("demo-log-strong-at-home-2", 1, 3, time(7, 45), {
        "exercises": [
            {"name": "Single-Arm Dumbbell Row", "sets": 3, "reps": 12, "weight_kg": 10},
            {"name": "Band Chest Press", "sets": 3, "reps": 15, "band": "medium"},
            {"name": "Half-Kneeling Shoulder Press", "sets": 3, "reps": 10, "weight_kg": 10},
        ],
        "notes": "Strong lockout on presses; shoulder felt stable throughout.",
        "rating": 5, "rpe": 8, "duration_minutes": 34, "calories_burned": 285,
        "tags": ["strength", "upper-body"],
    }),
    ("demo-log-strong-at-home-3", 2, 5, time(19, 15), {
        "exercises": [
            {"name": "Band Good Morning", "sets": 3, "reps": 15},
            {"name": "Reverse Lunge to Knee Drive", "sets": 3, "reps": 12},
            {"name": "Bear Crawl Hold", "sets": 3, "duration_seconds": 45},
        ],
        "notes": "Conditioning flow elevated heart rate; added extra mobility between rounds.",
        "rating": 3, "rpe": 6, "duration_minutes": 31, "calories_burned": 260,
        "tags": ["conditioning", "mobility"],
    }),
    ("demo-log-strong-at-home-recovery", None, 2, time(12, 15), {
        "exercises": [
            {"name": "Outdoor Recovery Walk", "duration_minutes": 25, "intensity": "zone 2"},
        ],
        "notes": "Used as active recovery between strength days.",
        "rating": 4, "rpe": 3, "duration_minutes": 25, "calories_burned": 150,
        "tags": ["recovery", "cardio"],
    }),
]


def main() -> int:
    parser = argparse.ArgumentParser(description="Reset the demo user's data to a known sample (with dry-run).")
    parser.add_argument("--dry-run", action="store_true", help="Print what would be seeded, without writing")
    args = parser.parse_args()

    # NOTE: run as `python -m scripts.seed_demo_data` from the project root so
    # `core`, `models` and `services` are importable.
    from core.config import settings
    from core.database import get_db_sync
    from models import Equipment, Workout, WorkoutLog, WorkoutPlan
    from services.demo_user import resolve_demo_user_id

    tz = ZoneInfo(settings.PROGRESS_TIMEZONE)
    today = datetime.now(tz).date()

    print("Demo data seed")
    print(f"- user: {settings.DEMO_USER_USERNAME}")
    print(f"- plan: {PLAN['name']} ({len(WORKOUTS)} workouts)")
    print(f"- equipment: {len(EQUIPMENT)}")
    print(f"- logs: {len(LOGS)}")

    if args.dry_run:
        print("Dry run: no changes written.")
        return 0

    db = get_db_sync()
    try:
        user_id = resolve_demo_user_id(db)

        # Clear the demo user's rows, children first
        db.query(WorkoutLog).filter(WorkoutLog.user_id == user_id).delete(synchronize_session=False)
        plan_ids = [p.id for p in db.query(WorkoutPlan.id).filter(WorkoutPlan.user_id == user_id)]
        if plan_ids:
            db.query(Workout).filter(Workout.plan_id.in_(plan_ids)).delete(synchronize_session=False)
        db.query(WorkoutPlan).filter(WorkoutPlan.user_id == user_id).delete(synchronize_session=False)
        db.query(Equipment).filter(Equipment.user_id == user_id).delete(synchronize_session=False)

        for item in EQUIPMENT:
            db.add(Equipment(user_id=user_id, **item))

        db.add(WorkoutPlan(
            id=PLAN_ID,
            user_id=user_id,
            ai_metadata={
                "provider": "openrouter",
                "model": settings.OPENROUTER_MODEL,
                "request_id": "seeded-demo-plan",
                "created_at": datetime.now(timezone.utc).isoformat(),
                "usage": {"prompt_tokens": 640, "completion_tokens": 910, "total_tokens": 1550},
            },
            **PLAN,
        ))
        db.flush()

        for workout in WORKOUTS:
            db.add(Workout(plan_id=PLAN_ID, **workout))
        db.flush()

        for log_id, workout_index, days_ago, at, fields in LOGS:
            local = datetime.combine(today - timedelta(days=days_ago), at, tzinfo=tz)
            db.add(WorkoutLog(
                id=log_id,
                user_id=user_id,
                workout_id=WORKOUTS[workout_index]["id"] if workout_index is not None else None,
                completed_at=local.astimezone(timezone.utc),
                **fields,
            ))

        db.commit()
        print(
            f"Seeded demo data for {settings.DEMO_USER_USERNAME}: 1 plan, {len(WORKOUTS)} workouts, "
            f"{len(EQUIPMENT)} equipment items, {len(LOGS)} logs."
        )
        return 0
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
