"""
LiftLog Analytics - Training Load

Per-session volume, relative intensity (each set's weight against its own
Epley e1RM, averaged), a fatigue heuristic, readiness and a load
recommendation.
"""
from datetime import datetime

import pandas as pd

from liftlog.config import (
    DECREASE_FATIGUE_ABOVE,
    DECREASE_READINESS_BELOW,
    DELOAD_FATIGUE_ABOVE,
    DELOAD_READINESS_BELOW,
    EPLEY_DIVISOR,
    FATIGUE_INTENSITY_WEIGHT,
    FATIGUE_VOLUME_UNIT,
    FATIGUE_VOLUME_WEIGHT,
    INCREASE_FATIGUE_BELOW,
    INCREASE_READINESS_ABOVE,
    LOAD_WINDOW_DAYS,
)
from liftlog.models import LoadRecommendation, TrainingLoadSample, WorkoutSession
from liftlog.normalizer import resolve_as_of, sessions_to_dataframe, to_timestamp


def estimated_1rm(weight: float, reps: int, divisor: float = EPLEY_DIVISOR) -> float:
    """Epley: weight x (1 + reps / 30)."""
    return weight * (1 + reps / divisor)


def fatigue_score(
    total_volume: float,
    intensity: float,
    volume_unit: float = FATIGUE_VOLUME_UNIT,
    volume_weight: float = FATIGUE_VOLUME_WEIGHT,
    intensity_weight: float = FATIGUE_INTENSITY_WEIGHT,
) -> float:
    return min(100.0, (total_volume / volume_unit) * volume_weight + intensity * intensity_weight)


def readiness_score(fatigue: float) -> float:
    return max(0.0, 100 - fatigue)


# Ordered guards, first match wins. Deload must stay first: a session can
# satisfy several guards at once.
RECOMMENDATION_RULES = [
    (
        LoadRecommendation.DELOAD,
        lambda fatigue, readiness: fatigue > DELOAD_FATIGUE_ABOVE or readiness < DELOAD_READINESS_BELOW,
    ),
    (
        LoadRecommendation.DECREASE,
        lambda fatigue, readiness: fatigue > DECREASE_FATIGUE_ABOVE or readiness < DECREASE_READINESS_BELOW,
    ),
    (
        LoadRecommendation.INCREASE,
        lambda fatigue, readiness: fatigue < INCREASE_FATIGUE_BELOW and readiness > INCREASE_READINESS_ABOVE,
    ),
]


def recommend_load(
    fatigue: float,
    readiness: float,
    rules: list = RECOMMENDATION_RULES,
) -> LoadRecommendation:
    for outcome, guard in rules:
        if guard(fatigue, readiness):
            return outcome
    return LoadRecommendation.MAINTAIN


def session_load_frame(sessions: list[WorkoutSession]) -> pd.DataFrame:
    """
    Volume and mean relative intensity per session index.

    Only qualifying sets are counted; sessions without any are absent from
    the result and treated as zero load by the caller.
    """
    df = sessions_to_dataframe(sessions)
    working = df[df["qualifies"]].copy()
    if working.empty:
        return pd.DataFrame(columns=["total_volume", "intensity_score"])
    working["e1rm"] = estimated_1rm(working["weight"], working["reps"])
    working["intensity"] = working["weight"] / working["e1rm"] * 100
    return working.groupby("session_idx").agg(
        total_volume=("volume", "sum"),
        intensity_score=("intensity", "mean"),
    )


def training_load(
    sessions: list[WorkoutSession],
    window_days: int | None = LOAD_WINDOW_DAYS,
    as_of: datetime | str | None = None,
    rules: list = RECOMMENDATION_RULES,
) -> list[TrainingLoadSample]:
    """
    One load sample per session dated within the last `window_days`
    (None = whole history), in history order. `rules` replaces the
    recommendation guard table.
    """
    if not sessions:
        return []
    cutoff = None
    if window_days is not None:
        cutoff = resolve_as_of(as_of) - pd.Timedelta(days=window_days)

    per_session = session_load_frame(sessions)
    samples = []
    for s_idx, session in enumerate(sessions):
        if cutoff is not None and not to_timestamp(session.date) >= cutoff:
            continue
        if s_idx in per_session.index:
            volume = float(per_session.at[s_idx, "total_volume"])
            intensity = float(per_session.at[s_idx, "intensity_score"])
        else:
            volume, intensity = 0.0, 0.0
        fatigue = fatigue_score(volume, intensity)
        readiness = readiness_score(fatigue)
        samples.append(TrainingLoadSample(
            date=session.date,
            total_volume=volume,
            intensity_score=intensity,
            fatigue=fatigue,
            readiness=readiness,
            recommendation=recommend_load(fatigue, readiness, rules),
        ))
    return samples


LOAD_COLUMNS = ["date", "total_volume", "intensity_score", "fatigue", "readiness", "recommendation"]


def training_load_table(samples: list[TrainingLoadSample]) -> pd.DataFrame:
    """Load samples as a DataFrame with scores rounded for display."""
    df = pd.DataFrame([s.to_dict() for s in samples], columns=LOAD_COLUMNS)
    if not df.empty:
        df[["intensity_score", "fatigue", "readiness"]] = df[["intensity_score", "fatigue", "readiness"]].round(1)
    return df
