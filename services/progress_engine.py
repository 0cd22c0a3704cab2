"""
Progress Aggregation Engine

"Am I showing up?" in numbers.

Turns one user's workout logs for a date window into the figures behind the
Progress page: a daily activity series, the headline streak, weekly rollups,
tag focus areas and derived time/calorie totals.

Pure computation: no database access, no clock reads, no module state.
Callers pass the log snapshot, the workouts referenced by those logs, and
the reference "now". Every field read from a log is optional and checked
for type before use, so any list of logs produces a well-formed report.
"""
from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Backward scan bound for the headline streak
STREAK_LOOKBACK_DAYS = 30
WEEK_DAYS = 7


# --- Output types ---

@dataclass
class DailyStat:
    label: str  # short weekday, e.g. "Mon"
    day: date
    workouts: int
    streak: int  # forward running streak as of this day


@dataclass
class WeeklySummary:
    week_start: date
    week_end: date
    workouts: int
    total_minutes: int
    avg_rpe: float
    calories: int


@dataclass
class TagBreakdown:
    tag: str
    count: int


@dataclass
class ProgressReport:
    daily_stats: List[DailyStat]
    total_workouts: int
    current_streak: int
    workouts_this_week: int
    total_minutes: int
    average_rating: float
    average_rpe: float
    total_calories: int
    tag_breakdown: List[TagBreakdown]
    weekly_summaries: List[WeeklySummary]
    window_days: int


# --- Field readers ---

def _read(source: Any, name: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _first_present(raw: Mapping, *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def workout_key(value: Any) -> Optional[Hashable]:
    """Usable workout reference: any hashable id except None, bool and ""."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if not isinstance(value, Hashable):
        return None
    return value


def _number(value: Any) -> Optional[float]:
    # bool is an int subclass and never a measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _positive(value: Any) -> Optional[float]:
    number = _number(value)
    if number is None or number <= 0:
        return None
    return number


def _timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


# --- Normalized inputs ---

@dataclass(frozen=True)
class ExerciseEntry:
    """One performed exercise, reduced to the fields that carry time."""
    name: str
    duration_minutes: Optional[float] = None
    duration: Optional[float] = None
    duration_seconds: Optional[float] = None

    @classmethod
    def parse(cls, raw: Any) -> Optional["ExerciseEntry"]:
        if not isinstance(raw, Mapping):
            return None
        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            return None
        return cls(
            name=name.strip(),
            duration_minutes=_number(_first_present(raw, "duration_minutes", "durationMinutes")),
            duration=_number(raw.get("duration")),
            duration_seconds=_number(_first_present(raw, "duration_seconds", "durationSeconds")),
        )

    @property
    def minutes(self) -> float:
        if self.duration_minutes is not None:
            return self.duration_minutes
        if self.duration is not None:
            # Logged exercises store generic "duration" in minutes, unlike
            # plan templates where it is seconds. Kept for stored data.
            return self.duration
        if self.duration_seconds is not None:
            return round_half_up(self.duration_seconds / 60)
        return 0


@dataclass(frozen=True)
class LogRecord:
    workout_id: Optional[Hashable] = None
    completed_at: Optional[datetime] = None
    exercises: Tuple[ExerciseEntry, ...] = ()
    rating: Optional[float] = None
    rpe: Optional[float] = None
    duration_minutes: Optional[float] = None
    calories_burned: Optional[float] = None
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_source(cls, source: Any) -> "LogRecord":
        """Build from an ORM row or a mapping with snake_case keys."""
        workout_id = workout_key(_read(source, "workout_id"))

        exercises: List[ExerciseEntry] = []
        raw_exercises = _read(source, "exercises")
        if isinstance(raw_exercises, (list, tuple)):
            for raw in raw_exercises:
                entry = ExerciseEntry.parse(raw)
                if entry is not None:
                    exercises.append(entry)

        tags: List[str] = []
        raw_tags = _read(source, "tags")
        if isinstance(raw_tags, (list, tuple)):
            tags = [t.strip() for t in raw_tags if isinstance(t, str) and t.strip()]

        return cls(
            workout_id=workout_id,
            completed_at=_timestamp(_read(source, "completed_at")),
            exercises=tuple(exercises),
            rating=_positive(_read(source, "rating")),
            rpe=_positive(_read(source, "rpe")),
            duration_minutes=_positive(_read(source, "duration_minutes")),
            calories_burned=_positive(_read(source, "calories_burned")),
            tags=tuple(tags),
        )


def calendar_day(ts: Optional[datetime], tz: Optional[tzinfo]) -> Optional[date]:
    """
    Calendar date of a timestamp as seen in the caller's timezone.

    Naive timestamps are UTC when a zone is given (that is how they come back
    from SQLite); with no zone they are taken as-is.
    """
    if ts is None:
        return None
    if tz is None:
        return ts.date()
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(tz).date()


# --- Derived metrics ---

def log_minutes(record: LogRecord, workouts_by_id: Mapping[str, Any]) -> float:
    """
    Session length in minutes.

    Priority: the log's own duration, then the linked workout's estimate,
    then the sum of per-exercise durations.
    """
    if record.duration_minutes is not None:
        return record.duration_minutes

    if record.workout_id is not None:
        workout = workouts_by_id.get(record.workout_id)
        if workout is not None:
            estimated = _positive(_read(workout, "estimated_duration"))
            if estimated is not None:
                return estimated

    return sum(exercise.minutes for exercise in record.exercises)


def average_of_present(values: Iterable[Optional[float]]) -> float:
    present = [v for v in values if v is not None and v > 0]
    if not present:
        return 0
    return round_half_up(sum(present) / len(present), 1)


def _whole_minutes(total: float) -> int:
    return int(max(0, round_half_up(total)))


def current_streak(active_days: Iterable[date], today: date) -> int:
    """
    Consecutive training days counting back from today.

    An empty today does not break the streak (the day is still in progress);
    an empty day before today does.
    """
    active = set(active_days)
    streak = 0
    for i in range(STREAK_LOOKBACK_DAYS):
        day = today - timedelta(days=i)
        if day in active:
            streak += 1
        elif i > 0:
            break
    return streak


def window_dates(today: date, window_days: int) -> List[date]:
    """Calendar days in the window, oldest first, ending today."""
    return [today - timedelta(days=offset) for offset in range(window_days - 1, -1, -1)]


def build_daily_stats(day_counts: Mapping[date, int], days: Sequence[date]) -> List[DailyStat]:
    stats = []
    running = 0
    for day in days:
        workouts = day_counts.get(day, 0)
        running = running + 1 if workouts > 0 else 0
        stats.append(DailyStat(label=day.strftime("%a"), day=day, workouts=workouts, streak=running))
    return stats


def week_buckets(today: date, window_days: int) -> List[Tuple[date, date]]:
    """
    Trailing 7-day (start, end) ranges covering the window, oldest first.

    Buckets are cut back from today, so the oldest one is the short one when
    the window is not a whole number of weeks.
    """
    oldest = today - timedelta(days=window_days - 1)
    buckets = []
    end = today
    while end >= oldest:
        start = max(end - timedelta(days=WEEK_DAYS - 1), oldest)
        buckets.append((start, end))
        end = start - timedelta(days=1)
    buckets.reverse()
    return buckets


def build_weekly_summaries(
    dated: Sequence[Tuple[date, LogRecord, float]],
    today: date,
    window_days: int,
) -> List[WeeklySummary]:
    summaries = []
    for start, end in week_buckets(today, window_days):
        in_week = [(record, minutes) for day, record, minutes in dated if start <= day <= end]
        summaries.append(WeeklySummary(
            week_start=start,
            week_end=end,
            workouts=len(in_week),
            total_minutes=_whole_minutes(sum(minutes for _, minutes in in_week)),
            avg_rpe=average_of_present(record.rpe for record, _ in in_week),
            calories=int(sum(record.calories_burned or 0 for record, _ in in_week)),
        ))
    return summaries


def tag_breakdown(records: Iterable[LogRecord]) -> List[TagBreakdown]:
    counts: Counter = Counter()
    for record in records:
        counts.update(record.tags)
    # Counter keeps first-seen order and sorted() is stable, so ties stay in that order
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [TagBreakdown(tag=tag, count=count) for tag, count in ranked]


def compute_progress(
    logs: Optional[Sequence[Any]],
    workouts_by_id: Optional[Mapping[str, Any]],
    now: datetime,
    window_days: int,
) -> ProgressReport:
    """
    Aggregate a log snapshot into a ProgressReport.

    Args:
        logs: the user's logs for the window (ORM rows or mappings). Entries
            without a usable completed_at still count toward totals but are
            not placed on any day.
        workouts_by_id: workouts referenced by the logs, keyed by id; only
            estimated_duration is read.
        now: reference time. Its timezone defines calendar days.
        window_days: number of days in the series (1-31 in practice).
    """
    window_days = max(1, int(window_days))
    workouts_by_id = workouts_by_id or {}
    tz = now.tzinfo
    today = now.date()
    window_start = today - timedelta(days=window_days - 1)
    week_start = today - timedelta(days=WEEK_DAYS - 1)

    records = [LogRecord.from_source(log) for log in (logs or []) if log is not None]
    minutes = [log_minutes(record, workouts_by_id) for record in records]

    dated: List[Tuple[date, LogRecord, float]] = []
    day_counts: Dict[date, int] = {}
    active_days = set()
    workouts_this_week = 0
    for record, record_minutes in zip(records, minutes):
        day = calendar_day(record.completed_at, tz)
        if day is None:
            continue
        active_days.add(day)
        if week_start <= day <= today:
            workouts_this_week += 1
        if window_start <= day <= today:
            dated.append((day, record, record_minutes))
            day_counts[day] = day_counts.get(day, 0) + 1

    report = ProgressReport(
        daily_stats=build_daily_stats(day_counts, window_dates(today, window_days)),
        total_workouts=len(records),
        current_streak=current_streak(active_days, today),
        workouts_this_week=workouts_this_week,
        total_minutes=_whole_minutes(sum(minutes)),
        average_rating=average_of_present(record.rating for record in records),
        average_rpe=average_of_present(record.rpe for record in records),
        total_calories=int(sum(record.calories_burned or 0 for record in records)),
        tag_breakdown=tag_breakdown(records),
        weekly_summaries=build_weekly_summaries(dated, today, window_days),
        window_days=window_days,
    )

    undated = len(records) - sum(1 for r in records if r.completed_at is not None)
    if undated:
        logger.warning(f"Progress computed with {undated} log(s) missing completed_at")

    return report
