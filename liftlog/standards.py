"""
LiftLog Analytics - Strength Standards

Maps a lifter's current max onto bodyweight-scaled proficiency levels and a
0-100 percentile rank (20 points per level, interpolated inside a level).
"""
from liftlog.config import PERCENTILE_PER_LEVEL, STRENGTH_LEVELS, get_standard_multipliers
from liftlog.models import StrengthLevel, StrengthStandards
from liftlog.normalizer import round_half_up


def standard_thresholds(exercise_name: str, bodyweight: float) -> dict[StrengthLevel, float] | None:
    """Absolute thresholds = bodyweight x multiplier, weakest level first."""
    multipliers = get_standard_multipliers(exercise_name)
    if multipliers is None:
        return None
    return {StrengthLevel(lvl): multipliers[lvl] * bodyweight for lvl in STRENGTH_LEVELS}


def determine_level(current_max: float, thresholds: dict[StrengthLevel, float]) -> StrengthLevel:
    """Highest level whose threshold is met, scanning from elite down."""
    for level in reversed(list(thresholds)):
        if current_max >= thresholds[level]:
            return level
    return StrengthLevel.BEGINNER


def percentile_rank(
    current_max: float,
    thresholds: dict[StrengthLevel, float],
    per_level: int = PERCENTILE_PER_LEVEL,
) -> int:
    """
    Interpolate inside the bracket [level i, level i+1) that holds current_max.

    At or above the top threshold -> 100; below the bottom one -> 0.
    """
    values = list(thresholds.values())
    for i in range(len(values) - 1):
        lo, hi = values[i], values[i + 1]
        if lo <= current_max < hi and hi > lo:
            return round_half_up((i + (current_max - lo) / (hi - lo)) * per_level)
    return 100 if values and current_max >= values[-1] else 0


def strength_standards(
    exercise_name: str,
    bodyweight: float,
    current_max: float,
) -> StrengthStandards | None:
    """Standards for one exercise, or None when the exercise has no standards table."""
    thresholds = standard_thresholds(exercise_name, bodyweight)
    if thresholds is None:
        return None
    return StrengthStandards(
        exercise_name=exercise_name,
        bodyweight=bodyweight,
        thresholds=thresholds,
        current_level=determine_level(current_max, thresholds),
        percentile_rank=percentile_rank(current_max, thresholds),
    )
