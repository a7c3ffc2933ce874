"""
LiftLog Analytics - Activity

Workout frequency against the weekly goal, period-over-period workout trends
and training habits (favorite exercises, most active weekday and time of
day). Works on one row per session; calendar weeks start on Sunday and every
boundary is taken in UTC.
"""
from datetime import datetime

import pandas as pd

from liftlog.config import (
    ACTIVITY_TREND_PERIODS,
    ACTIVITY_TREND_SPAN,
    ACTIVITY_TREND_THRESHOLD_PCT,
    AFTERNOON_END_HOUR,
    DEFAULT_ACTIVE_DAY,
    DEFAULT_TIME_OF_DAY,
    DEFAULT_WEEKLY_GOAL,
    MONTHLY_STATS_MONTHS,
    MORNING_END_HOUR,
    TOP_EXERCISES,
    WEEKLY_PROGRESS_WEEKS,
)
from liftlog.models import Trend, WorkoutSession
from liftlog.normalizer import resolve_as_of, round_half_up, to_timestamp

SESSION_COLUMNS = ["session_id", "timestamp", "duration", "exercises"]
TIME_OF_DAY_SLOTS = ["morning", "afternoon", "evening"]


def sessions_frame(sessions: list[WorkoutSession]) -> pd.DataFrame:
    """
    One row per session, newest first. Sessions with an unparseable date
    are dropped; same-instant sessions keep their history order.
    """
    rows = [
        {
            "session_id": s.id,
            "timestamp": to_timestamp(s.date),
            "duration": float(s.duration or 0),
            "exercises": [ex.exercise_name for ex in s.exercises],
        }
        for s in sessions
    ]
    df = pd.DataFrame(rows, columns=SESSION_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    df = df.dropna(subset=["timestamp"])
    return df.sort_values("timestamp", ascending=False, kind="mergesort").reset_index(drop=True)


def week_start(ts: pd.Timestamp) -> pd.Timestamp:
    """Sunday 00:00 of the week holding `ts`."""
    day = ts.normalize()
    return day - pd.Timedelta(days=(day.dayofweek + 1) % 7)


def month_start(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.normalize().replace(day=1)


def _tally(df: pd.DataFrame, start: pd.Timestamp, end: pd.Timestamp | None = None) -> tuple[int, float]:
    """Workout count and total minutes in [start, end)."""
    mask = df["timestamp"] >= start
    if end is not None:
        mask &= df["timestamp"] < end
    return int(mask.sum()), float(df.loc[mask, "duration"].sum())


def _most_common_first(values: pd.Series) -> pd.Series:
    """Counts per value, highest first; ties keep first-seen order."""
    values = values.reset_index(drop=True)
    counts = values.groupby(values, sort=False).size()
    return counts.sort_values(key=lambda s: -s, kind="mergesort")


# ═══════════════════════════════════════════════════════════════════════
# 1. HABITS
# ═══════════════════════════════════════════════════════════════════════

def exercise_counts(df: pd.DataFrame, top: int = TOP_EXERCISES) -> pd.DataFrame:
    """Most logged exercises, counting every entry in every session."""
    names = df["exercises"].explode().dropna()
    if names.empty:
        return pd.DataFrame(columns=["exercise", "count"])
    counts = _most_common_first(names).head(top)
    return counts.rename_axis("exercise").reset_index(name="count")


def favorite_exercises(df: pd.DataFrame, top: int = TOP_EXERCISES) -> list[str]:
    return exercise_counts(df, top)["exercise"].tolist()


def most_active_day(df: pd.DataFrame) -> str:
    """Weekday name with the most workouts; ties go to the most recently trained."""
    if df.empty:
        return DEFAULT_ACTIVE_DAY
    return _most_common_first(df["timestamp"].dt.day_name()).index[0]


def most_active_time_of_day(df: pd.DataFrame) -> str:
    """morning (< 12h), afternoon (< 18h) or evening; ties go to the later slot."""
    if df.empty:
        return DEFAULT_TIME_OF_DAY
    hours = df["timestamp"].dt.hour
    counts = {
        "morning": int((hours < MORNING_END_HOUR).sum()),
        "afternoon": int(((hours >= MORNING_END_HOUR) & (hours < AFTERNOON_END_HOUR)).sum()),
        "evening": int((hours >= AFTERNOON_END_HOUR).sum()),
    }
    best = TIME_OF_DAY_SLOTS[0]
    for slot in TIME_OF_DAY_SLOTS[1:]:
        if not counts[best] > counts[slot]:
            best = slot
    return best


# ═══════════════════════════════════════════════════════════════════════
# 2. SUMMARY & WEEKLY GOAL
# ═══════════════════════════════════════════════════════════════════════

def goal_progress(completed: int, target: int) -> dict:
    percentage = round_half_up(completed / target * 100) if target > 0 else 0
    return {"completed": completed, "target": target, "percentage": percentage}


def activity_summary(
    sessions: list[WorkoutSession],
    weekly_goal: int = DEFAULT_WEEKLY_GOAL,
    as_of: datetime | str | None = None,
) -> dict:
    """Lifetime totals, this week/month counts, goal progress and habits."""
    as_of = resolve_as_of(as_of)
    df = sessions_frame(sessions)
    total = len(df)
    total_duration = float(df["duration"].sum()) if total else 0.0
    this_week, _ = _tally(df, week_start(as_of))
    this_month, _ = _tally(df, month_start(as_of))
    return {
        "total_workouts": total,
        "total_duration": total_duration,
        "average_workout_duration": round_half_up(total_duration / total) if total else 0,
        "workouts_this_week": this_week,
        "workouts_this_month": this_month,
        "weekly_goal_progress": goal_progress(this_week, weekly_goal),
        "favorite_exercises": favorite_exercises(df),
        "most_active_day": most_active_day(df),
        "most_active_time_of_day": most_active_time_of_day(df),
    }


def weekly_progress(
    sessions: list[WorkoutSession],
    weekly_goal: int = DEFAULT_WEEKLY_GOAL,
    weeks: int = WEEKLY_PROGRESS_WEEKS,
    as_of: datetime | str | None = None,
) -> pd.DataFrame:
    """Workouts per calendar week for the last `weeks` weeks, oldest first."""
    df = sessions_frame(sessions)
    current = week_start(resolve_as_of(as_of))
    rows = []
    for i in range(weeks - 1, -1, -1):
        start = current - pd.Timedelta(days=7 * i)
        workouts, duration = _tally(df, start, start + pd.Timedelta(days=7))
        rows.append({
            "week": f"{start.year}-W{start.isocalendar()[1]}",
            "week_start": start.strftime("%Y-%m-%d"),
            "workouts": workouts,
            "duration": duration,
            "goal": weekly_goal,
            "achieved": workouts >= weekly_goal,
        })
    return pd.DataFrame(rows, columns=["week", "week_start", "workouts", "duration", "goal", "achieved"])


def monthly_stats(
    sessions: list[WorkoutSession],
    months: int = MONTHLY_STATS_MONTHS,
    as_of: datetime | str | None = None,
) -> pd.DataFrame:
    """Per calendar month: workouts, minutes, average minutes and top exercises."""
    df = sessions_frame(sessions)
    current = month_start(resolve_as_of(as_of))
    rows = []
    for i in range(months - 1, -1, -1):
        start = current - pd.DateOffset(months=i)
        end = start + pd.DateOffset(months=1)
        in_month = df[(df["timestamp"] >= start) & (df["timestamp"] < end)]
        workouts = len(in_month)
        duration = float(in_month["duration"].sum()) if workouts else 0.0
        rows.append({
            "month": start.strftime("%Y-%m"),
            "total_workouts": workouts,
            "total_duration": duration,
            "average_duration": round_half_up(duration / workouts) if workouts else 0,
            "top_exercises": exercise_counts(in_month).to_dict("records"),
        })
    return pd.DataFrame(
        rows, columns=["month", "total_workouts", "total_duration", "average_duration", "top_exercises"]
    )


# ═══════════════════════════════════════════════════════════════════════
# 3. PERIOD TREND
# ═══════════════════════════════════════════════════════════════════════

def _period_windows(period: str, count: int, as_of: pd.Timestamp) -> list[tuple[str, pd.Timestamp, pd.Timestamp]]:
    """(label, start, end) for the last `count` periods, oldest first."""
    windows = []
    for i in range(count - 1, -1, -1):
        if period == "week":
            start = week_start(as_of) - pd.Timedelta(days=7 * i)
            end = start + pd.Timedelta(days=7)
            label = f"W{start.isocalendar()[1]}"
        elif period == "month":
            start = month_start(as_of) - pd.DateOffset(months=i)
            end = start + pd.DateOffset(months=1)
            label = start.strftime("%b")
        else:
            start = month_start(as_of) - pd.DateOffset(months=3 * i)
            end = start + pd.DateOffset(months=3)
            label = f"Q{(start.month - 1) // 3 + 1}"
        windows.append((label, start, end))
    return windows


def classify_activity_change(
    older_avg: float,
    recent_avg: float,
    threshold_pct: float = ACTIVITY_TREND_THRESHOLD_PCT,
) -> tuple[Trend, float]:
    """
    Trend and percentage change between two average workout counts.

    With no older activity any recent workout counts as increasing.
    """
    if older_avg <= 0:
        return (Trend.INCREASING if recent_avg > 0 else Trend.STABLE), 0.0
    change = (recent_avg - older_avg) / older_avg * 100
    if change > threshold_pct:
        return Trend.INCREASING, change
    if change < -threshold_pct:
        return Trend.DECREASING, change
    return Trend.STABLE, change


def progress_trend(
    sessions: list[WorkoutSession],
    period: str = "week",
    as_of: datetime | str | None = None,
    span: int = ACTIVITY_TREND_SPAN,
    threshold_pct: float = ACTIVITY_TREND_THRESHOLD_PCT,
) -> dict:
    """
    Workout counts per week (8), month (6) or quarter (4), comparing the
    average of the newest `span` periods against the oldest `span`.
    """
    if period not in ACTIVITY_TREND_PERIODS:
        raise ValueError(f"Unknown period {period!r}, expected one of {list(ACTIVITY_TREND_PERIODS)}")

    df = sessions_frame(sessions)
    data = []
    for label, start, end in _period_windows(period, ACTIVITY_TREND_PERIODS[period], resolve_as_of(as_of)):
        workouts, duration = _tally(df, start, end)
        data.append({"date": label, "workouts": workouts, "duration": duration})

    counts = [d["workouts"] for d in data]
    older = sum(counts[:span]) / len(counts[:span])
    recent = sum(counts[-span:]) / len(counts[-span:])
    trend, change = classify_activity_change(older, recent, threshold_pct)
    return {
        "period": period,
        "data": data,
        "trend": trend,
        "change_percentage": round_half_up(change),
    }
