"""
LiftLog Analytics - Session Normalizer

Flattens workout sessions into a set-level DataFrame (one row per logged set)
and summarizes each tracked exercise per session. Exercises are tracked by
(exercise name, EquipmentSignature); names alone are only used for display
and for signature-less lookups.
"""
import math
from datetime import datetime

import numpy as np
import pandas as pd

from liftlog.models import EquipmentSignature, SessionSnapshot, SetRecord, WorkoutSession

SET_COLUMNS = [
    "session_idx",
    "session_id",
    "date",
    "exercise",
    "signature",
    "entry_idx",
    "set_number",
    "reps",
    "weight",
    "completed",
]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def to_timestamp(value) -> pd.Timestamp:
    """Parse an ISO date/datetime into a UTC Timestamp. Unparseable input gives NaT."""
    if isinstance(value, str):
        return pd.to_datetime(value, utc=True, errors="coerce", format="ISO8601")
    return pd.to_datetime(value, utc=True, errors="coerce")


def resolve_as_of(as_of: datetime | str | None = None) -> pd.Timestamp:
    """Reference instant for time windows; defaults to now."""
    if as_of is None:
        return pd.Timestamp.now(tz="UTC")
    return to_timestamp(as_of)


def sessions_to_dataframe(sessions: list[WorkoutSession]) -> pd.DataFrame:
    """
    Convert sessions to a flat DataFrame, one row per logged set.

    An exercise logged without any sets still gets one placeholder row so
    the session shows up in its history; that row never qualifies.
    Derived columns: timestamp (UTC), qualifies (completed with a positive
    weight) and volume (weight x reps for qualifying sets, else 0).
    """
    rows = []
    for s_idx, session in enumerate(sessions):
        for e_idx, ex in enumerate(session.exercises):
            base = {
                "session_idx": s_idx,
                "session_id": session.id,
                "date": session.date,
                "exercise": ex.exercise_name,
                "signature": ex.equipment,
                "entry_idx": e_idx,
            }
            if not ex.sets:
                rows.append({**base, "set_number": None, "reps": 0, "weight": None, "completed": False})
                continue
            for st in ex.sets:
                rows.append({
                    **base,
                    "set_number": st.set_number,
                    "reps": st.reps,
                    "weight": st.weight,
                    "completed": st.completed,
                })

    df = pd.DataFrame(rows, columns=SET_COLUMNS)
    df["reps"] = pd.to_numeric(df["reps"], errors="coerce").fillna(0).astype(int)
    df["weight"] = pd.to_numeric(df["weight"], errors="coerce").astype(float)
    df["completed"] = df["completed"].fillna(False).astype(bool)
    df["timestamp"] = pd.to_datetime(df["date"], utc=True, errors="coerce", format="ISO8601")
    df["qualifies"] = df["completed"] & df["weight"].notna() & (df["weight"] > 0)
    df["volume"] = np.where(df["qualifies"], df["weight"].fillna(0) * df["reps"], 0.0)
    return df


def exercise_keys(sessions: list[WorkoutSession]) -> list[tuple[str, EquipmentSignature]]:
    """Distinct (exercise name, signature) pairs in the order they were first logged."""
    seen = {}
    for session in sessions:
        for ex in session.exercises:
            seen.setdefault((ex.exercise_name, ex.equipment), None)
    return list(seen)


def first_signature(sessions: list[WorkoutSession], exercise_name: str) -> EquipmentSignature | None:
    """Signature of the earliest logged entry for an exercise name."""
    for session in sessions:
        for ex in session.exercises:
            if ex.exercise_name == exercise_name:
                return ex.equipment
    return None


def _snapshot(date: str, rows: pd.DataFrame) -> SessionSnapshot:
    working = rows[rows["qualifies"]]
    if working.empty:
        return SessionSnapshot(date=date, sets=[], max_weight=0.0, total_volume=0.0, average_reps=0)
    sets = [
        SetRecord(reps=int(r), weight=float(w), volume=float(w * r))
        for r, w in zip(working["reps"], working["weight"])
    ]
    return SessionSnapshot(
        date=date,
        sets=sets,
        max_weight=float(working["weight"].max()),
        total_volume=float(working["volume"].sum()),
        average_reps=round_half_up(float(working["reps"].mean())),
    )


def exercise_snapshots(
    sessions: list[WorkoutSession],
    exercise_name: str,
    signature: EquipmentSignature | None = None,
    df: pd.DataFrame | None = None,
) -> list[SessionSnapshot]:
    """
    Per-session snapshots of one tracked exercise, ascending by date.

    Without a signature every entry with the exercise name matches. When a
    session logs the exercise more than once only its first entry is used.
    Pass a pre-built `df` from sessions_to_dataframe to avoid rebuilding it.
    """
    if df is None:
        df = sessions_to_dataframe(sessions)
    if df.empty:
        return []

    mask = df["exercise"] == exercise_name
    if signature is not None:
        mask &= df["signature"].map(lambda s: s == signature).astype(bool)
    matched = df[mask]
    if matched.empty:
        return []

    first_entry = matched.groupby("session_idx")["entry_idx"].transform("min")
    matched = matched[matched["entry_idx"] == first_entry]

    # Stable sort keeps history order for same-day sessions.
    order = (
        matched.groupby("session_idx")["timestamp"].first()
        .sort_values(kind="mergesort", na_position="last")
    )
    groups = dict(tuple(matched.groupby("session_idx")))
    return [
        _snapshot(groups[s_idx]["date"].iloc[0], groups[s_idx])
        for s_idx in order.index
    ]
