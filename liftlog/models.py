"""Workout history records and the value objects the analytics engine derives from them."""

from dataclasses import dataclass, field
from enum import Enum


def _pick(data: dict, *keys, default=None):
    """Return the first present key; rows arrive in camelCase or snake_case."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


# ═════════════════════════════════════════════════════════════════════
# ENUMERATED OUTCOMES
# ═════════════════════════════════════════════════════════════════════


class Trend(str, Enum):
    """Direction of a max-weight series."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class StrengthLevel(str, Enum):
    """Bodyweight-scaled proficiency levels, weakest first."""

    BEGINNER = "beginner"
    NOVICE = "novice"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    ELITE = "elite"


class LoadRecommendation(str, Enum):
    """What to do with training load in the next session."""

    INCREASE = "increase"
    MAINTAIN = "maintain"
    DECREASE = "decrease"
    DELOAD = "deload"


class InsightType(str, Enum):
    """Category of a performance insight."""

    STRENGTH_GAIN = "strength_gain"
    PLATEAU = "plateau"
    REGRESSION = "regression"
    CONSISTENCY = "consistency"
    VOLUME_INCREASE = "volume_increase"
    TECHNIQUE_FOCUS = "technique_focus"


class Severity(str, Enum):
    """How loudly an insight should be surfaced."""

    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    CRITICAL = "critical"


# ═════════════════════════════════════════════════════════════════════
# RAW HISTORY
# ═════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class EquipmentSignature:
    """The setup that makes two logged exercises "the same" across sessions.

    Equality is structural over all four fields, so an unset grip only
    matches another unset grip.
    """

    category: str
    sub_type: str | None = None
    machine_type: str | None = None
    grip: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "category": self.category,
            "sub_type": self.sub_type,
            "machine_type": self.machine_type,
            "grip": self.grip,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "EquipmentSignature":
        """Create from a raw equipment record. Free-text notes are dropped."""
        data = data or {}
        return cls(
            category=_pick(data, "category", default=""),
            sub_type=_pick(data, "subType", "sub_type"),
            machine_type=_pick(data, "machineType", "machine_type"),
            grip=_pick(data, "grip"),
        )

    def label(self) -> str:
        """Short human-readable description, e.g. 'free_weight/barbell (wide)'."""
        parts = [self.category]
        if self.sub_type:
            parts.append(self.sub_type)
        if self.machine_type:
            parts.append(self.machine_type)
        text = "/".join(p for p in parts if p)
        return f"{text} ({self.grip})" if self.grip else text


@dataclass(frozen=True)
class ExerciseSet:
    """One logged set. Only completed sets with a positive weight count."""

    reps: int
    weight: float | None = None
    completed: bool = False
    set_number: int | None = None

    @property
    def qualifies(self) -> bool:
        return self.completed and self.weight is not None and self.weight > 0

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseSet":
        """Create from dictionary."""
        weight = data.get("weight")
        return cls(
            reps=int(data.get("reps") or 0),
            weight=float(weight) if weight is not None else None,
            completed=bool(data.get("completed", False)),
            set_number=_pick(data, "setNumber", "set_number"),
        )


@dataclass(frozen=True)
class LoggedExercise:
    """An exercise as logged inside one session."""

    exercise_name: str
    equipment: EquipmentSignature
    sets: list[ExerciseSet] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "LoggedExercise":
        """Create from dictionary."""
        return cls(
            exercise_name=_pick(data, "exerciseName", "exercise_name", default=""),
            equipment=EquipmentSignature.from_dict(data.get("equipment")),
            sets=[ExerciseSet.from_dict(s) for s in data.get("sets") or []],
        )


@dataclass(frozen=True)
class WorkoutSession:
    """A completed session. Never mutated by the engine."""

    id: str
    date: str
    exercises: list[LoggedExercise] = field(default_factory=list)
    split_type: str = "oneADay"
    day: int = 1
    session_type: str | None = None
    duration: float = 0.0  # minutes

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutSession":
        """Create from a backend row (snake_case columns, camelCase exercise JSON)."""
        return cls(
            id=str(data.get("id", "")),
            date=str(data.get("date", "")),
            exercises=[LoggedExercise.from_dict(e) for e in data.get("exercises") or []],
            split_type=_pick(data, "split_type", "splitType", default="oneADay"),
            day=int(_pick(data, "day", default=1)),
            session_type=_pick(data, "session_type", "sessionType"),
            duration=float(_pick(data, "duration", default=0) or 0),
        )


# ═════════════════════════════════════════════════════════════════════
# DERIVED VALUES
# ═════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SetRecord:
    reps: int
    weight: float
    volume: float

    def to_dict(self) -> dict:
        return {"reps": self.reps, "weight": self.weight, "volume": self.volume}


@dataclass(frozen=True)
class SessionSnapshot:
    """Per-session summary of one tracked exercise."""

    date: str
    sets: list[SetRecord]
    max_weight: float
    total_volume: float
    average_reps: int

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "sets": [s.to_dict() for s in self.sets],
            "max_weight": self.max_weight,
            "total_volume": self.total_volume,
            "average_reps": self.average_reps,
        }


@dataclass(frozen=True)
class ProgressionMetrics:
    """Lifetime progression of one tracked exercise."""

    total_sessions: int = 0
    first_recorded: str = ""
    last_recorded: str = ""
    starting_weight: float = 0
    current_weight: float = 0
    max_weight: float = 0
    weight_progression: float = 0
    volume_progression: float = 0
    strength_gain: float = 0

    def to_dict(self) -> dict:
        return {
            "total_sessions": self.total_sessions,
            "first_recorded": self.first_recorded,
            "last_recorded": self.last_recorded,
            "starting_weight": self.starting_weight,
            "current_weight": self.current_weight,
            "max_weight": self.max_weight,
            "weight_progression": self.weight_progression,
            "volume_progression": self.volume_progression,
            "strength_gain": self.strength_gain,
        }


@dataclass(frozen=True)
class TrendMetrics:
    last_4_weeks: Trend = Trend.STABLE
    last_8_weeks: Trend = Trend.STABLE
    overall: Trend = Trend.STABLE
    consistency_score: int = 0

    def to_dict(self) -> dict:
        return {
            "last_4_weeks": self.last_4_weeks.value,
            "last_8_weeks": self.last_8_weeks.value,
            "overall": self.overall.value,
            "consistency_score": self.consistency_score,
        }


@dataclass(frozen=True)
class Predictions:
    recommended_weight: int = 0
    recommended_reps: str = "8-10"
    deload_recommended: bool = False
    next_1rm: int | None = None

    def to_dict(self) -> dict:
        return {
            "next_1rm": self.next_1rm,
            "recommended_weight": self.recommended_weight,
            "recommended_reps": self.recommended_reps,
            "deload_recommended": self.deload_recommended,
        }


@dataclass(frozen=True)
class ExerciseProgression:
    """Everything the engine knows about one exercise + equipment setup."""

    exercise_name: str
    equipment: EquipmentSignature
    sessions: list[SessionSnapshot]
    progression: ProgressionMetrics
    trends: TrendMetrics
    predictions: Predictions

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary."""
        return {
            "exercise_name": self.exercise_name,
            "equipment": self.equipment.to_dict(),
            "sessions": [s.to_dict() for s in self.sessions],
            "progression": self.progression.to_dict(),
            "trends": self.trends.to_dict(),
            "predictions": self.predictions.to_dict(),
        }


@dataclass(frozen=True)
class StrengthStandards:
    """Where a lifter's current max sits against bodyweight-scaled standards."""

    exercise_name: str
    bodyweight: float
    thresholds: dict[StrengthLevel, float]
    current_level: StrengthLevel
    percentile_rank: int

    def to_dict(self) -> dict:
        return {
            "exercise_name": self.exercise_name,
            "bodyweight": self.bodyweight,
            "standards": {lvl.value: v for lvl, v in self.thresholds.items()},
            "current_level": self.current_level.value,
            "percentile_rank": self.percentile_rank,
        }


@dataclass(frozen=True)
class TrainingLoadSample:
    date: str
    total_volume: float
    intensity_score: float
    fatigue: float
    readiness: float
    recommendation: LoadRecommendation

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "total_volume": self.total_volume,
            "intensity_score": self.intensity_score,
            "fatigue": self.fatigue,
            "readiness": self.readiness,
            "recommendation": self.recommendation.value,
        }


@dataclass(frozen=True)
class PerformanceInsight:
    """A rule-based observation about one exercise."""

    type: InsightType
    title: str
    description: str
    severity: Severity
    actionable: bool
    created_at: str
    exercise_name: str | None = None
    recommendations: list[str] = field(default_factory=list)
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary."""
        return {
            "type": self.type.value,
            "exercise_name": self.exercise_name,
            "title": self.title,
            "description": self.description,
            "severity": self.severity.value,
            "actionable": self.actionable,
            "recommendations": list(self.recommendations),
            "data": dict(self.data),
            "created_at": self.created_at,
        }
