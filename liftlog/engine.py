"""
LiftLog Analytics - Engine facade

Identity-keyed entry points for the presentation layer. Each call fetches the
full history from the store once and runs the pure analysis functions over
it; nothing is cached between calls, so a newly logged session is picked up
by the next call.
"""
from datetime import datetime
from typing import Protocol, runtime_checkable

import pandas as pd

from liftlog import activity
from liftlog.config import (
    DEFAULT_BODYWEIGHT,
    DEFAULT_WEEKLY_GOAL,
    LOAD_WINDOW_DAYS,
    MONTHLY_STATS_MONTHS,
    WEEKLY_PROGRESS_WEEKS,
)
from liftlog.insights import generate_insights
from liftlog.models import (
    EquipmentSignature,
    ExerciseProgression,
    PerformanceInsight,
    StrengthStandards,
    TrainingLoadSample,
    WorkoutSession,
)
from liftlog.normalizer import resolve_as_of
from liftlog.progression import compute_all_progressions, compute_progression
from liftlog.standards import strength_standards
from liftlog.training_load import training_load


@runtime_checkable
class SessionStore(Protocol):
    """Source of session history, bodyweight and weekly goal for an identity."""

    def get_sessions(self, identity: str) -> list[WorkoutSession]:
        """Completed sessions, ascending by date."""
        ...

    def get_bodyweight(self, identity: str) -> float:
        ...

    def get_weekly_goal(self, identity: str) -> int:
        ...


class InMemorySessionStore:
    """Session store over plain dicts, for tests and offline analysis."""

    def __init__(
        self,
        sessions: dict[str, list[WorkoutSession]] | None = None,
        bodyweights: dict[str, float] | None = None,
        weekly_goals: dict[str, int] | None = None,
    ):
        self.sessions = sessions or {}
        self.bodyweights = bodyweights or {}
        self.weekly_goals = weekly_goals or {}

    def get_sessions(self, identity: str) -> list[WorkoutSession]:
        return list(self.sessions.get(identity, []))

    def get_bodyweight(self, identity: str) -> float:
        return self.bodyweights.get(identity, DEFAULT_BODYWEIGHT)

    def get_weekly_goal(self, identity: str) -> int:
        return self.weekly_goals.get(identity, DEFAULT_WEEKLY_GOAL)


class AnalyticsEngine:
    """Progression, standards, load and insight analytics for one store.

    Args:
        store: Where session history and bodyweight come from
        as_of: Reference instant for every time window; None means "now"
            at the moment of each call
    """

    def __init__(self, store: SessionStore, as_of: datetime | str | None = None):
        self.store = store
        self.as_of = as_of

    def _as_of(self):
        return resolve_as_of(self.as_of)

    def compute_progression(
        self,
        identity: str,
        exercise_name: str,
        signature: EquipmentSignature | None = None,
    ) -> ExerciseProgression | None:
        sessions = self.store.get_sessions(identity)
        return compute_progression(sessions, exercise_name, signature, self._as_of())

    def compute_all_progressions(self, identity: str) -> list[ExerciseProgression]:
        return compute_all_progressions(self.store.get_sessions(identity), self._as_of())

    def compute_strength_standards(
        self,
        identity: str,
        exercise_name: str,
        bodyweight: float | None = None,
    ) -> StrengthStandards | None:
        """Standards against the all-time max over every setup of the exercise.

        Returns None when the exercise has no standards table or was never
        logged. Bodyweight falls back to the store's value.
        """
        progression = self.compute_progression(identity, exercise_name)
        if progression is None:
            return None
        if bodyweight is None:
            bodyweight = self.store.get_bodyweight(identity)
        return strength_standards(exercise_name, bodyweight, progression.progression.max_weight)

    def compute_training_load(
        self,
        identity: str,
        window_days: int | None = LOAD_WINDOW_DAYS,
    ) -> list[TrainingLoadSample]:
        return training_load(self.store.get_sessions(identity), window_days, self._as_of())

    def generate_insights(self, identity: str) -> list[PerformanceInsight]:
        as_of = self._as_of()
        progressions = compute_all_progressions(self.store.get_sessions(identity), as_of)
        return generate_insights(progressions, created_at=as_of)

    # ── Activity ─────────────────────────────────────────────────────

    def _sessions_and_goal(self, identity: str, weekly_goal: int | None):
        sessions = self.store.get_sessions(identity)
        if weekly_goal is None:
            weekly_goal = self.store.get_weekly_goal(identity)
        return sessions, weekly_goal

    def activity_summary(self, identity: str, weekly_goal: int | None = None) -> dict:
        """Totals, this week's goal progress and habits. The goal falls back to the store's value."""
        sessions, weekly_goal = self._sessions_and_goal(identity, weekly_goal)
        return activity.activity_summary(sessions, weekly_goal, self._as_of())

    def weekly_progress(
        self,
        identity: str,
        weeks: int = WEEKLY_PROGRESS_WEEKS,
        weekly_goal: int | None = None,
    ) -> pd.DataFrame:
        sessions, weekly_goal = self._sessions_and_goal(identity, weekly_goal)
        return activity.weekly_progress(sessions, weekly_goal, weeks, self._as_of())

    def monthly_stats(self, identity: str, months: int = MONTHLY_STATS_MONTHS) -> pd.DataFrame:
        return activity.monthly_stats(self.store.get_sessions(identity), months, self._as_of())

    def progress_trend(self, identity: str, period: str = "week") -> dict:
        return activity.progress_trend(self.store.get_sessions(identity), period, self._as_of())
