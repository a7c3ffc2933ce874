"""
LiftLog Analytics - Progression, Trends & Predictions

Turns the snapshot history of one tracked exercise into lifetime progression
metrics, windowed trend classifications, a consistency score and next-session
predictions. Every function is pure: same sessions + same `as_of` in, equal
output out.
"""
from datetime import datetime

import numpy as np
import pandas as pd

from liftlog.config import (
    DEFAULT_REPS,
    DELOAD_BAND,
    DELOAD_LOOKBACK,
    DELOAD_MIN_SESSIONS,
    EXPECTED_SESSIONS_CAP,
    LONG_WINDOW_DAYS,
    ONE_RM_CEILING_FACTOR,
    OVERLOAD_STEP,
    RECOMMENDED_REPS,
    SHORT_WINDOW_DAYS,
    TREND_THRESHOLD_PCT,
)
from liftlog.models import (
    EquipmentSignature,
    ExerciseProgression,
    Predictions,
    ProgressionMetrics,
    SessionSnapshot,
    Trend,
    TrendMetrics,
    WorkoutSession,
)
from liftlog.normalizer import (
    exercise_keys,
    exercise_snapshots,
    first_signature,
    resolve_as_of,
    round_half_up,
    sessions_to_dataframe,
    to_timestamp,
)


def _pct_change(start: float, end: float) -> float:
    return (end - start) / start * 100 if start > 0 else 0.0


# ═══════════════════════════════════════════════════════════════════════
# 1. LIFETIME PROGRESSION
# ═══════════════════════════════════════════════════════════════════════

def aggregate_progression(snapshots: list[SessionSnapshot]) -> ProgressionMetrics:
    """Starting vs current numbers over the whole history. Empty history -> zeros."""
    if not snapshots:
        return ProgressionMetrics()
    first, last = snapshots[0], snapshots[-1]
    return ProgressionMetrics(
        total_sessions=len(snapshots),
        first_recorded=first.date,
        last_recorded=last.date,
        starting_weight=first.max_weight,
        current_weight=last.max_weight,
        max_weight=max(s.max_weight for s in snapshots),
        weight_progression=_pct_change(first.max_weight, last.max_weight),
        volume_progression=_pct_change(first.total_volume, last.total_volume),
        strength_gain=last.max_weight - first.max_weight,
    )


# ═══════════════════════════════════════════════════════════════════════
# 2. TRENDS & CONSISTENCY
# ═══════════════════════════════════════════════════════════════════════

def classify_trend(
    snapshots: list[SessionSnapshot],
    threshold_pct: float = TREND_THRESHOLD_PCT,
) -> Trend:
    """
    Compare the mean max weight of the later half against the earlier half.

    The earlier half is the first n // 2 snapshots. A change beyond
    +/- threshold_pct is a trend; anything else (including < 2 snapshots or
    an all-zero earlier half) is stable.
    """
    if len(snapshots) < 2:
        return Trend.STABLE
    weights = np.array([s.max_weight for s in snapshots], dtype=float)
    mid = len(weights) // 2
    change = _pct_change(weights[:mid].mean(), weights[mid:].mean())
    if change > threshold_pct:
        return Trend.INCREASING
    if change < -threshold_pct:
        return Trend.DECREASING
    return Trend.STABLE


def within_window(
    snapshots: list[SessionSnapshot],
    days: int | None,
    as_of: datetime | str | None = None,
) -> list[SessionSnapshot]:
    """Snapshots dated on or after `as_of - days`. `days=None` keeps everything."""
    if days is None:
        return list(snapshots)
    cutoff = resolve_as_of(as_of) - pd.Timedelta(days=days)
    return [s for s in snapshots if to_timestamp(s.date) >= cutoff]


def consistency_score(
    recent_sessions: int,
    total_sessions: int,
    cap: int = EXPECTED_SESSIONS_CAP,
) -> int:
    """Recent session count against an expected cadence, 0-100."""
    expected = min(total_sessions, cap)
    if expected <= 0:
        return 0
    return round_half_up(min(100.0, recent_sessions / expected * 100))


def trend_metrics(
    snapshots: list[SessionSnapshot],
    as_of: datetime | str | None = None,
    short_days: int = SHORT_WINDOW_DAYS,
    long_days: int = LONG_WINDOW_DAYS,
    threshold_pct: float = TREND_THRESHOLD_PCT,
    expected_cap: int = EXPECTED_SESSIONS_CAP,
) -> TrendMetrics:
    as_of = resolve_as_of(as_of)
    short = within_window(snapshots, short_days, as_of)
    long = within_window(snapshots, long_days, as_of)
    return TrendMetrics(
        last_4_weeks=classify_trend(short, threshold_pct),
        last_8_weeks=classify_trend(long, threshold_pct),
        overall=classify_trend(snapshots, threshold_pct),
        consistency_score=consistency_score(len(short), len(snapshots), expected_cap),
    )


# ═══════════════════════════════════════════════════════════════════════
# 3. PREDICTIONS
# ═══════════════════════════════════════════════════════════════════════

def predict_next(
    snapshots: list[SessionSnapshot],
    overload_step: float = OVERLOAD_STEP,
    ceiling_factor: float = ONE_RM_CEILING_FACTOR,
    recommended_reps: str = RECOMMENDED_REPS,
    default_reps: str = DEFAULT_REPS,
    deload_min_sessions: int = DELOAD_MIN_SESSIONS,
    deload_lookback: int = DELOAD_LOOKBACK,
    deload_band: float = DELOAD_BAND,
) -> Predictions:
    """
    Next-session targets from the latest max weight.

    A deload is flagged when the history is longer than deload_min_sessions
    and each of the last deload_lookback max weights sits within deload_band
    (relative) of the latest one.
    """
    if not snapshots:
        return Predictions(recommended_reps=default_reps)

    current = snapshots[-1].max_weight
    recent = snapshots[-deload_lookback:]
    plateaued = current > 0 and all(
        abs(s.max_weight - current) / current < deload_band for s in recent
    )
    return Predictions(
        recommended_weight=round_half_up(current * (1 + overload_step)),
        recommended_reps=recommended_reps,
        deload_recommended=plateaued and len(snapshots) > deload_min_sessions,
        next_1rm=round_half_up(current * ceiling_factor),
    )


# ═══════════════════════════════════════════════════════════════════════
# 4. EXERCISE PROGRESSIONS
# ═══════════════════════════════════════════════════════════════════════

def build_progression(
    exercise_name: str,
    equipment: EquipmentSignature,
    snapshots: list[SessionSnapshot],
    as_of: datetime | str | None = None,
) -> ExerciseProgression:
    return ExerciseProgression(
        exercise_name=exercise_name,
        equipment=equipment,
        sessions=list(snapshots),
        progression=aggregate_progression(snapshots),
        trends=trend_metrics(snapshots, as_of),
        predictions=predict_next(snapshots),
    )


def compute_progression(
    sessions: list[WorkoutSession],
    exercise_name: str,
    signature: EquipmentSignature | None = None,
    as_of: datetime | str | None = None,
    df: pd.DataFrame | None = None,
) -> ExerciseProgression | None:
    """
    Full progression for one exercise, or None if it was never logged.

    Without a signature all setups of the exercise are merged and the
    progression reports the setup of the first logged entry.
    """
    snapshots = exercise_snapshots(sessions, exercise_name, signature, df=df)
    if not snapshots:
        return None
    equipment = signature if signature is not None else first_signature(sessions, exercise_name)
    return build_progression(exercise_name, equipment, snapshots, resolve_as_of(as_of))


def _recorded_key(progression: ExerciseProgression) -> pd.Timestamp:
    ts = to_timestamp(progression.progression.last_recorded)
    return pd.Timestamp.min.tz_localize("UTC") if pd.isna(ts) else ts


def compute_all_progressions(
    sessions: list[WorkoutSession],
    as_of: datetime | str | None = None,
) -> list[ExerciseProgression]:
    """One progression per distinct (exercise, signature), most recently trained first."""
    if not sessions:
        return []
    as_of = resolve_as_of(as_of)
    df = sessions_to_dataframe(sessions)
    progressions = []
    for name, signature in exercise_keys(sessions):
        prog = compute_progression(sessions, name, signature, as_of, df=df)
        if prog is not None:
            progressions.append(prog)
    return sorted(progressions, key=_recorded_key, reverse=True)


PROGRESSION_COLUMNS = [
    "exercise", "equipment", "total_sessions", "first_recorded", "last_recorded",
    "starting_weight", "current_weight", "max_weight", "weight_progression",
    "volume_progression", "strength_gain", "trend_4w", "trend_8w", "trend_overall",
    "consistency_score", "recommended_weight", "recommended_reps", "next_1rm",
    "deload_recommended",
]


def progression_table(progressions: list[ExerciseProgression]) -> pd.DataFrame:
    """Flat summary, one row per tracked exercise, for dashboards and CSV export."""
    rows = []
    for p in progressions:
        m, t, pr = p.progression, p.trends, p.predictions
        rows.append({
            "exercise": p.exercise_name,
            "equipment": p.equipment.label() if p.equipment else "",
            "total_sessions": m.total_sessions,
            "first_recorded": m.first_recorded,
            "last_recorded": m.last_recorded,
            "starting_weight": m.starting_weight,
            "current_weight": m.current_weight,
            "max_weight": m.max_weight,
            "weight_progression": round(m.weight_progression, 1),
            "volume_progression": round(m.volume_progression, 1),
            "strength_gain": m.strength_gain,
            "trend_4w": t.last_4_weeks.value,
            "trend_8w": t.last_8_weeks.value,
            "trend_overall": t.overall.value,
            "consistency_score": t.consistency_score,
            "recommended_weight": pr.recommended_weight,
            "recommended_reps": pr.recommended_reps,
            "next_1rm": pr.next_1rm,
            "deload_recommended": pr.deload_recommended,
        })
    return pd.DataFrame(rows, columns=PROGRESSION_COLUMNS)
