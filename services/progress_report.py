"""
Progress report service.

Loads the window's logs and referenced workouts, then hands the snapshot to
the aggregation engine.
"""
import logging
import time as _time
from datetime import datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from core.config import settings
from services.progress_engine import ProgressReport, compute_progress
from services.workout_log_store import get_logs_in_range, load_workouts_for_logs

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    return datetime.now(ZoneInfo(settings.PROGRESS_TIMEZONE))


def window_bounds(now: datetime, window_days: int):
    """
    Start of the oldest day in the window through now, both in UTC.

    Stored timestamps are UTC, so the query bounds are converted before use.
    """
    first_day = now.date() - timedelta(days=window_days - 1)
    start = datetime.combine(first_day, time.min, tzinfo=now.tzinfo)
    end = now
    if now.tzinfo is not None:
        start = start.astimezone(timezone.utc)
        end = end.astimezone(timezone.utc)
    return start, end


def get_progress_report(
    db: Session,
    user_id: str,
    window_days: int,
    now: Optional[datetime] = None,
) -> ProgressReport:
    now = now or local_now()
    started = _time.time()

    start, end = window_bounds(now, window_days)
    logs = get_logs_in_range(db, user_id, start, end)
    workouts_by_id = load_workouts_for_logs(db, logs)

    report = compute_progress(logs, workouts_by_id, now, window_days)

    logger.info(
        f"Progress report built for {user_id}",
        extra={
            "extra_fields": {
                "user_id": user_id,
                "window_days": window_days,
                "log_count": len(logs),
                "elapsed_ms": round((_time.time() - started) * 1000, 2),
            }
        },
    )
    return report
