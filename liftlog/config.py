"""
LiftLog Analytics - Configuration

Backend credentials come from the environment. Every heuristic constant the
engine uses lives here so product tuning never touches the analysis modules.
The step functions (classify_trend, trend_metrics, predict_next,
percentile_rank, fatigue_score, recommend_load) take their constants as
keyword overrides, and training_load takes its recommendation rules. The other
composed entry points run with the values set here.
"""
import os

# ── Hosted backend ───────────────────────────────────────────────────
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")
SESSIONS_TABLE = os.environ.get("LIFTLOG_SESSIONS_TABLE", "workout_sessions")
PROFILES_TABLE = os.environ.get("LIFTLOG_PROFILES_TABLE", "profiles")

# ── Profile defaults ─────────────────────────────────────────────────
DEFAULT_BODYWEIGHT = 80.0  # kg, used when the profile has no bodyweight
DEFAULT_WEEKLY_GOAL = 4


# ═════════════════════════════════════════════════════════════════════
# TREND CLASSIFIER
# ═════════════════════════════════════════════════════════════════════

TREND_THRESHOLD_PCT = 5.0
SHORT_WINDOW_DAYS = 28
LONG_WINDOW_DAYS = 56
EXPECTED_SESSIONS_CAP = 12  # ~3 sessions/week over the short window


# ═════════════════════════════════════════════════════════════════════
# PREDICTION ENGINE
# ═════════════════════════════════════════════════════════════════════

OVERLOAD_STEP = 0.025
ONE_RM_CEILING_FACTOR = 1.3
RECOMMENDED_REPS = "6-8"
DEFAULT_REPS = "8-10"  # returned when there is no history yet
DELOAD_MIN_SESSIONS = 6  # strictly more than this many snapshots
DELOAD_LOOKBACK = 3
DELOAD_BAND = 0.05


# ═════════════════════════════════════════════════════════════════════
# TRAINING LOAD
# ═════════════════════════════════════════════════════════════════════

LOAD_WINDOW_DAYS = 30
EPLEY_DIVISOR = 30
FATIGUE_VOLUME_UNIT = 1000
FATIGUE_VOLUME_WEIGHT = 0.3
FATIGUE_INTENSITY_WEIGHT = 0.7

# Checked top to bottom, first match wins.
DELOAD_FATIGUE_ABOVE = 80
DELOAD_READINESS_BELOW = 20
DECREASE_FATIGUE_ABOVE = 60
DECREASE_READINESS_BELOW = 40
INCREASE_FATIGUE_BELOW = 40
INCREASE_READINESS_ABOVE = 70


# ═════════════════════════════════════════════════════════════════════
# INSIGHTS
# ═════════════════════════════════════════════════════════════════════

PLATEAU_MIN_SESSIONS = 4  # strictly more than this many sessions
STRENGTH_GAIN_MIN_PCT = 10.0
CONSISTENCY_FLOOR = 60


# ═════════════════════════════════════════════════════════════════════
# ACTIVITY: workout frequency, weekly goal, habits
# ═════════════════════════════════════════════════════════════════════

WEEKLY_PROGRESS_WEEKS = 12
MONTHLY_STATS_MONTHS = 6
TOP_EXERCISES = 5
ACTIVITY_TREND_THRESHOLD_PCT = 10.0
ACTIVITY_TREND_SPAN = 3  # periods averaged at each end of the series
ACTIVITY_TREND_PERIODS = {"week": 8, "month": 6, "quarter": 4}
MORNING_END_HOUR = 12
AFTERNOON_END_HOUR = 18
DEFAULT_ACTIVE_DAY = "Monday"
DEFAULT_TIME_OF_DAY = "morning"


# ═════════════════════════════════════════════════════════════════════
# STRENGTH STANDARDS: bodyweight multipliers keyed by exercise name
# ═════════════════════════════════════════════════════════════════════

STRENGTH_LEVELS = ["beginner", "novice", "intermediate", "advanced", "elite"]
PERCENTILE_PER_LEVEL = 20

STRENGTH_STANDARDS = {
    "Bench Press": {
        "beginner": 0.5,
        "novice": 0.75,
        "intermediate": 1.0,
        "advanced": 1.25,
        "elite": 1.5,
    },
    "Squat": {
        "beginner": 0.75,
        "novice": 1.0,
        "intermediate": 1.25,
        "advanced": 1.75,
        "elite": 2.0,
    },
    "Deadlift": {
        "beginner": 1.0,
        "novice": 1.25,
        "intermediate": 1.5,
        "advanced": 2.0,
        "elite": 2.5,
    },
}


def get_standard_multipliers(exercise_name: str) -> dict | None:
    """Get {level: multiplier} for an exercise, or None if it has no standards."""
    return STRENGTH_STANDARDS.get(exercise_name)
