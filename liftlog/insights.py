"""
LiftLog Analytics - Performance Insights

Independent rules over every exercise progression. All rules that match
fire; none short-circuits another.
"""
from datetime import datetime

from liftlog.config import CONSISTENCY_FLOOR, PLATEAU_MIN_SESSIONS, STRENGTH_GAIN_MIN_PCT
from liftlog.models import ExerciseProgression, InsightType, PerformanceInsight, Severity, Trend
from liftlog.normalizer import resolve_as_of

PLATEAU_TIPS = [
    "Try a different rep range",
    "Increase training volume gradually",
    "Focus on form and technique",
    "Consider a deload week",
]
REGRESSION_TIPS = [
    "Review exercise form and technique",
    "Ensure adequate rest between sessions",
    "Check nutrition and hydration",
    "Consider reducing training load temporarily",
]
CONSISTENCY_TIPS = [
    "Schedule regular workout times",
    "Set smaller, achievable goals",
    "Track your consistency",
    "Find accountability partners",
]


def _plateau(p: ExerciseProgression, created_at: str) -> PerformanceInsight | None:
    if not (p.trends.last_4_weeks == Trend.STABLE and p.progression.total_sessions > PLATEAU_MIN_SESSIONS):
        return None
    return PerformanceInsight(
        type=InsightType.PLATEAU,
        exercise_name=p.exercise_name,
        title=f"Plateau Detected: {p.exercise_name}",
        description=(
            "No progress in the last 4 weeks. Consider changing rep ranges, "
            "adding volume, or taking a deload."
        ),
        severity=Severity.WARNING,
        actionable=True,
        recommendations=list(PLATEAU_TIPS),
        data={"total_sessions": p.progression.total_sessions},
        created_at=created_at,
    )


def _strength_gain(p: ExerciseProgression, created_at: str) -> PerformanceInsight | None:
    pct = p.progression.weight_progression
    if not (pct > STRENGTH_GAIN_MIN_PCT and p.trends.overall == Trend.INCREASING):
        return None
    return PerformanceInsight(
        type=InsightType.STRENGTH_GAIN,
        exercise_name=p.exercise_name,
        title=f"Great Progress: {p.exercise_name}",
        description=f"You've increased your strength by {pct:.1f}%! Keep up the excellent work.",
        severity=Severity.SUCCESS,
        actionable=False,
        data={"progression_percentage": pct},
        created_at=created_at,
    )


def _regression(p: ExerciseProgression, created_at: str) -> PerformanceInsight | None:
    if p.trends.last_4_weeks != Trend.DECREASING:
        return None
    return PerformanceInsight(
        type=InsightType.REGRESSION,
        exercise_name=p.exercise_name,
        title=f"Performance Decline: {p.exercise_name}",
        description=(
            "Performance has decreased recently. Consider reviewing technique, "
            "rest, or nutrition."
        ),
        severity=Severity.CRITICAL,
        actionable=True,
        recommendations=list(REGRESSION_TIPS),
        data={"current_weight": p.progression.current_weight},
        created_at=created_at,
    )


def _consistency(p: ExerciseProgression, created_at: str) -> PerformanceInsight | None:
    score = p.trends.consistency_score
    if score >= CONSISTENCY_FLOOR:
        return None
    return PerformanceInsight(
        type=InsightType.CONSISTENCY,
        exercise_name=p.exercise_name,
        title=f"Inconsistent Training: {p.exercise_name}",
        description=(
            "More consistent training could improve your progress. "
            "Try to maintain regular sessions."
        ),
        severity=Severity.INFO,
        actionable=True,
        recommendations=list(CONSISTENCY_TIPS),
        data={"consistency_score": score},
        created_at=created_at,
    )


INSIGHT_RULES = [_plateau, _strength_gain, _regression, _consistency]


def generate_insights(
    progressions: list[ExerciseProgression],
    created_at: datetime | str | None = None,
    rules: list = INSIGHT_RULES,
) -> list[PerformanceInsight]:
    """
    Run every rule against every progression, newest insight first.

    All insights of one run share `created_at`, so the sort keeps their
    generation order.
    """
    stamp = resolve_as_of(created_at).isoformat()
    insights = []
    for progression in progressions:
        for rule in rules:
            insight = rule(progression, stamp)
            if insight is not None:
                insights.append(insight)
    return sorted(insights, key=lambda i: i.created_at, reverse=True)
