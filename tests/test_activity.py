"""
Tests for workout activity analytics: weekly goal, monthly stats, period
trends and training habits.
Run: pytest tests/ -v
"""
import pandas as pd
import pytest

from liftlog.models import EquipmentSignature, ExerciseSet, LoggedExercise, WorkoutSession

# Wednesday; the week started Sunday 2026-03-01.
AS_OF = "2026-03-04T12:00:00Z"
BARBELL = EquipmentSignature("free_weight", "barbell")


def _make_sessions(rows: list[dict]) -> list[WorkoutSession]:
    """Helper: rows of {date, exercises?, duration?}."""
    defaults = {"exercises": ["Bench Press"], "duration": 60}
    sessions = []
    for i, r in enumerate(rows):
        row = {**defaults, **r}
        sessions.append(WorkoutSession(
            id=f"s{i}",
            date=row["date"],
            exercises=[
                LoggedExercise(name, BARBELL, [ExerciseSet(reps=5, weight=100, completed=True)])
                for name in row["exercises"]
            ],
            duration=row["duration"],
        ))
    return sessions


def _dates(*dates: str) -> list[WorkoutSession]:
    return _make_sessions([{"date": d} for d in dates])


# ═══════════════════════════════════════════════════════════════════════
# SESSION FRAME
# ═══════════════════════════════════════════════════════════════════════

class TestSessionsFrame:

    def test_newest_first_and_bad_dates_dropped(self):
        from liftlog.activity import sessions_frame
        df = sessions_frame(_dates("2026-02-01T10:00:00Z", "not a date", "2026-02-05T10:00:00Z"))
        assert df["session_id"].tolist() == ["s2", "s0"]

    def test_empty(self):
        from liftlog.activity import sessions_frame
        assert sessions_frame([]).empty

    def test_week_starts_on_sunday(self):
        from liftlog.activity import month_start, week_start
        assert week_start(pd.Timestamp(AS_OF)) == pd.Timestamp("2026-03-01T00:00:00Z")
        assert week_start(pd.Timestamp("2026-03-01T23:00:00Z")) == pd.Timestamp("2026-03-01T00:00:00Z")
        assert week_start(pd.Timestamp("2026-02-28T23:00:00Z")) == pd.Timestamp("2026-02-22T00:00:00Z")
        assert month_start(pd.Timestamp("2026-02-28T23:00:00Z")) == pd.Timestamp("2026-02-01T00:00:00Z")

    def test_duration_from_row(self):
        session = WorkoutSession.from_dict({"id": "a", "date": "2026-02-01", "duration": 55})
        assert session.duration == 55.0
        assert WorkoutSession.from_dict({"id": "b", "date": "2026-02-01"}).duration == 0.0


# ═══════════════════════════════════════════════════════════════════════
# SUMMARY & HABITS
# ═══════════════════════════════════════════════════════════════════════

class TestActivitySummary:

    SESSIONS = [
        {"date": "2026-02-10T14:00:00Z", "exercises": ["Bench Press", "Squat"], "duration": 30},  # Tue afternoon
        {"date": "2026-02-24T19:30:00Z", "exercises": ["Deadlift"], "duration": 50},  # Tue evening
        {"date": "2026-03-01T08:00:00Z", "exercises": ["Squat", "Bench Press"], "duration": 60},  # Sun morning
        {"date": "2026-03-03T19:00:00Z", "exercises": ["Bench Press"], "duration": 45},  # Tue evening
    ]

    def test_summary(self):
        from liftlog.activity import activity_summary
        s = activity_summary(_make_sessions(self.SESSIONS), weekly_goal=4, as_of=AS_OF)
        assert s["total_workouts"] == 4
        assert s["total_duration"] == 185
        assert s["average_workout_duration"] == 46
        assert s["workouts_this_week"] == 2
        assert s["workouts_this_month"] == 2
        assert s["weekly_goal_progress"] == {"completed": 2, "target": 4, "percentage": 50}
        assert s["favorite_exercises"] == ["Bench Press", "Squat", "Deadlift"]
        assert s["most_active_day"] == "Tuesday"
        assert s["most_active_time_of_day"] == "evening"

    def test_empty_history_defaults(self):
        from liftlog.activity import activity_summary
        s = activity_summary([], weekly_goal=4, as_of=AS_OF)
        assert s["total_workouts"] == 0
        assert s["average_workout_duration"] == 0
        assert s["weekly_goal_progress"] == {"completed": 0, "target": 4, "percentage": 0}
        assert s["favorite_exercises"] == []
        assert s["most_active_day"] == "Monday"
        assert s["most_active_time_of_day"] == "morning"

    def test_goal_percentage(self):
        from liftlog.activity import goal_progress
        assert goal_progress(1, 8)["percentage"] == 13  # 12.5
        assert goal_progress(6, 4)["percentage"] == 150
        assert goal_progress(3, 0)["percentage"] == 0

    def test_favorites_capped_at_five(self):
        from liftlog.activity import favorite_exercises, sessions_frame
        sessions = _make_sessions([
            {"date": "2026-02-01T10:00:00Z", "exercises": list("ABCDEFG")},
            {"date": "2026-02-03T10:00:00Z", "exercises": ["G"]},
        ])
        assert favorite_exercises(sessions_frame(sessions)) == ["G", "A", "B", "C", "D"]

    def test_busiest_day_tie_goes_to_most_recent(self):
        from liftlog.activity import most_active_day, sessions_frame
        df = sessions_frame(_dates("2026-02-23T10:00:00Z", "2026-02-27T10:00:00Z"))  # Mon, Fri
        assert most_active_day(df) == "Friday"

    @pytest.mark.parametrize("hours,expected", [
        (["06", "07", "13"], "morning"),
        (["06", "13", "14"], "afternoon"),
        (["06", "13"], "afternoon"),
        (["06", "13", "20"], "evening"),
        (["11", "12", "18"], "evening"),
    ])
    def test_time_of_day(self, hours, expected):
        from liftlog.activity import most_active_time_of_day, sessions_frame
        df = sessions_frame(_dates(*[f"2026-02-1{i}T{h}:00:00Z" for i, h in enumerate(hours)]))
        assert most_active_time_of_day(df) == expected


# ═══════════════════════════════════════════════════════════════════════
# WEEKLY PROGRESS & MONTHLY STATS
# ═══════════════════════════════════════════════════════════════════════

class TestWeeklyProgress:

    def test_calendar_weeks_against_goal(self):
        from liftlog.activity import weekly_progress
        sessions = _dates(
            "2026-02-16T10:00:00Z",
            "2026-02-17T10:00:00Z",
            "2026-02-22T00:00:00Z",
            "2026-02-28T23:00:00Z",
            "2026-03-02T10:00:00Z",
        )
        df = weekly_progress(sessions, weekly_goal=2, weeks=3, as_of=AS_OF)
        assert df["week"].tolist() == ["2026-W7", "2026-W8", "2026-W9"]
        assert df["week_start"].tolist() == ["2026-02-15", "2026-02-22", "2026-03-01"]
        assert df["workouts"].tolist() == [2, 2, 1]
        assert df["duration"].tolist() == [120, 120, 60]
        assert df["achieved"].tolist() == [True, True, False]
        assert (df["goal"] == 2).all()

    def test_default_span(self):
        from liftlog.activity import weekly_progress
        df = weekly_progress([], as_of=AS_OF)
        assert len(df) == 12
        assert df["workouts"].sum() == 0
        assert not df["achieved"].any()


class TestMonthlyStats:

    def test_months(self):
        from liftlog.activity import monthly_stats
        sessions = _make_sessions([
            {"date": "2026-01-15T10:00:00Z", "duration": 60},
            {"date": "2026-02-10T10:00:00Z", "duration": 30, "exercises": ["Squat", "Bench Press"]},
            {"date": "2026-02-20T10:00:00Z", "duration": 45, "exercises": ["Squat"]},
            {"date": "2026-03-02T10:00:00Z", "duration": 50},
        ])
        df = monthly_stats(sessions, months=3, as_of=AS_OF)
        assert df["month"].tolist() == ["2026-01", "2026-02", "2026-03"]
        assert df["total_workouts"].tolist() == [1, 2, 1]
        assert df["average_duration"].tolist() == [60, 38, 50]  # 37.5 -> 38
        assert df.iloc[1]["top_exercises"] == [
            {"exercise": "Squat", "count": 2},
            {"exercise": "Bench Press", "count": 1},
        ]

    def test_empty_month(self):
        from liftlog.activity import monthly_stats
        df = monthly_stats([], months=2, as_of=AS_OF)
        assert df["total_workouts"].tolist() == [0, 0]
        assert df["average_duration"].tolist() == [0, 0]
        assert df.iloc[0]["top_exercises"] == []


# ═══════════════════════════════════════════════════════════════════════
# PERIOD TREND
# ═══════════════════════════════════════════════════════════════════════

# Mondays inside the oldest three and newest three of the last 8 weeks.
OLD_WEEKS = ["2026-01-12", "2026-01-19", "2026-01-26"]
NEW_WEEKS = ["2026-02-16", "2026-02-23", "2026-03-02"]


class TestProgressTrend:

    def test_increasing(self):
        from liftlog.activity import progress_trend
        from liftlog.models import Trend
        dates = [f"{d}T10:00:00Z" for d in OLD_WEEKS] + [f"{d}T{h}:00:00Z" for d in NEW_WEEKS for h in ("08", "18")]
        t = progress_trend(_dates(*dates), "week", AS_OF)
        assert t["period"] == "week"
        assert [d["date"] for d in t["data"]] == [f"W{n}" for n in range(2, 10)]
        assert [d["workouts"] for d in t["data"]] == [1, 1, 1, 0, 0, 2, 2, 2]
        assert t["trend"] == Trend.INCREASING
        assert t["change_percentage"] == 100

    def test_decreasing(self):
        from liftlog.activity import progress_trend
        from liftlog.models import Trend
        dates = [f"{d}T{h}:00:00Z" for d in OLD_WEEKS for h in ("08", "18")] + [f"{d}T10:00:00Z" for d in NEW_WEEKS]
        t = progress_trend(_dates(*dates), "week", AS_OF)
        assert t["trend"] == Trend.DECREASING
        assert t["change_percentage"] == -50

    def test_no_history_is_stable(self):
        from liftlog.activity import progress_trend
        from liftlog.models import Trend
        t = progress_trend([], "week", AS_OF)
        assert t["trend"] == Trend.STABLE
        assert t["change_percentage"] == 0
        assert len(t["data"]) == 8

    def test_new_activity_without_older_baseline(self):
        from liftlog.activity import progress_trend
        from liftlog.models import Trend
        t = progress_trend(_dates("2026-03-02T10:00:00Z"), "week", AS_OF)
        assert t["trend"] == Trend.INCREASING
        assert t["change_percentage"] == 0

    def test_month_and_quarter_labels(self):
        from liftlog.activity import progress_trend
        months = progress_trend(_dates("2026-02-10T10:00:00Z"), "month", AS_OF)
        assert [d["date"] for d in months["data"]] == ["Oct", "Nov", "Dec", "Jan", "Feb", "Mar"]
        assert [d["workouts"] for d in months["data"]] == [0, 0, 0, 0, 1, 0]
        quarters = progress_trend([], "quarter", AS_OF)
        assert [d["date"] for d in quarters["data"]] == ["Q2", "Q3", "Q4", "Q1"]

    def test_unknown_period(self):
        from liftlog.activity import progress_trend
        with pytest.raises(ValueError, match="period"):
            progress_trend([], "year", AS_OF)

    @pytest.mark.parametrize("older,recent,expected", [
        (2.0, 2.25, "increasing"),
        (2.0, 1.75, "decreasing"),
        (2.0, 2.1, "stable"),
        (0.0, 0.0, "stable"),
        (0.0, 1.0, "increasing"),
    ])
    def test_threshold(self, older, recent, expected):
        from liftlog.activity import classify_activity_change
        trend, _ = classify_activity_change(older, recent)
        assert trend.value == expected


# ═══════════════════════════════════════════════════════════════════════
# ENGINE FACADE
# ═══════════════════════════════════════════════════════════════════════

class TestEngineActivity:

    def _engine(self, sessions=None, weekly_goal=None):
        from liftlog.engine import AnalyticsEngine, InMemorySessionStore
        store = InMemorySessionStore(
            {"u1": sessions or []},
            weekly_goals={"u1": weekly_goal} if weekly_goal is not None else {},
        )
        return AnalyticsEngine(store, as_of=AS_OF)

    def test_goal_from_store(self):
        engine = self._engine(_dates("2026-03-02T10:00:00Z"), weekly_goal=2)
        progress = engine.activity_summary("u1")["weekly_goal_progress"]
        assert progress == {"completed": 1, "target": 2, "percentage": 50}

    def test_goal_override_and_default(self):
        engine = self._engine(_dates("2026-03-02T10:00:00Z"))
        assert engine.activity_summary("u1")["weekly_goal_progress"]["target"] == 4
        assert engine.activity_summary("u1", weekly_goal=1)["weekly_goal_progress"]["percentage"] == 100

    def test_weekly_and_monthly(self):
        engine = self._engine(_dates("2026-03-02T10:00:00Z"), weekly_goal=1)
        weeks = engine.weekly_progress("u1", weeks=2)
        assert weeks["achieved"].tolist() == [False, True]
        assert engine.monthly_stats("u1", months=1)["total_workouts"].tolist() == [1]
        assert len(engine.progress_trend("u1", "quarter")["data"]) == 4

    def test_empty_store(self):
        engine = self._engine()
        assert engine.activity_summary("nobody")["total_workouts"] == 0
        assert engine.weekly_progress("nobody")["workouts"].sum() == 0
