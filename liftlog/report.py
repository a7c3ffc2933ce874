"""
LiftLog Analytics - Report runner
Run manually: python -m liftlog.report <user_id> [--days 30] [--bodyweight 82.5] [--csv out/]
"""
import os
import sys
from datetime import datetime

from liftlog.config import STRENGTH_STANDARDS
from liftlog.engine import AnalyticsEngine
from liftlog.progression import progression_table
from liftlog.supabase_client import SupabaseSessionStore
from liftlog.training_load import training_load_table

SEVERITY_ICONS = {"success": "🟢", "info": "🔵", "warning": "🟡", "critical": "🔴"}
TREND_ICONS = {"increasing": "📈", "decreasing": "📉", "stable": "➖"}


def _arg_value(argv: list[str], flag: str, default=None):
    if flag in argv:
        idx = argv.index(flag)
        if idx + 1 < len(argv):
            return argv[idx + 1]
    return default


def print_progressions(engine: AnalyticsEngine, user_id: str) -> list:
    print("\n📊 Exercise progressions")
    progressions = engine.compute_all_progressions(user_id)
    if not progressions:
        print("   No logged exercises yet.")
        return []
    for p in progressions:
        m, t, pr = p.progression, p.trends, p.predictions
        deload = " ⚠️ deload" if pr.deload_recommended else ""
        print(
            f"   {TREND_ICONS[t.overall.value]} {p.exercise_name} [{p.equipment.label()}]: "
            f"{m.starting_weight:g} → {m.current_weight:g} ({m.weight_progression:+.1f}%), "
            f"{m.total_sessions} sessions, consistency {t.consistency_score}%, "
            f"next {pr.recommended_weight} x {pr.recommended_reps}{deload}"
        )
    return progressions


def print_standards(engine: AnalyticsEngine, user_id: str, bodyweight: float | None):
    print("\n🏋️ Strength standards")
    found = False
    for name in STRENGTH_STANDARDS:
        std = engine.compute_strength_standards(user_id, name, bodyweight)
        if std is None:
            continue
        found = True
        print(f"   {name}: {std.current_level.value} (percentile {std.percentile_rank}, bw {std.bodyweight:g})")
    if not found:
        print("   No standard lifts logged.")


def print_training_load(engine: AnalyticsEngine, user_id: str, days: int) -> list:
    print(f"\n🔋 Training load (last {days} days)")
    samples = engine.compute_training_load(user_id, days)
    if not samples:
        print("   No sessions in window.")
    for s in samples:
        print(
            f"   📅 {s.date[:10]} | vol {s.total_volume:,.0f} | intensity {s.intensity_score:.0f} | "
            f"fatigue {s.fatigue:.0f} | readiness {s.readiness:.0f} → {s.recommendation.value}"
        )
    return samples


def print_activity(engine: AnalyticsEngine, user_id: str):
    print("\n📅 Activity")
    summary = engine.activity_summary(user_id)
    goal = summary["weekly_goal_progress"]
    print(
        f"   {summary['total_workouts']} workouts, avg {summary['average_workout_duration']} min | "
        f"this week {goal['completed']}/{goal['target']} ({goal['percentage']}%)"
    )
    if summary["favorite_exercises"]:
        print(f"   Favorites: {', '.join(summary['favorite_exercises'])}")
    print(f"   Most active: {summary['most_active_day']} {summary['most_active_time_of_day']}")
    trend = engine.progress_trend(user_id, "week")
    print(f"   {TREND_ICONS[trend['trend'].value]} Workouts per week: {trend['trend'].value} ({trend['change_percentage']:+d}%)")
    return summary


def print_insights(engine: AnalyticsEngine, user_id: str):
    print("\n💡 Insights")
    insights = engine.generate_insights(user_id)
    if not insights:
        print("   Nothing to report.")
    for i in insights:
        print(f"   {SEVERITY_ICONS[i.severity.value]} {i.title}")
        for tip in i.recommendations:
            print(f"      - {tip}")


def run_report(
    user_id: str,
    days: int = 30,
    bodyweight: float | None = None,
    csv_dir: str | None = None,
    store=None,
) -> dict:
    """
    Full report pipeline:
    1. Progressions per exercise
    2. Strength standards for the lifts that have them
    3. Training load series
    4. Insights
    5. Activity and weekly goal
    Each step is isolated; a failing step is recorded and the rest still run.
    """
    print(f"🔄 LiftLog report for {user_id}")
    print(f"   {datetime.now().isoformat()}")

    engine = AnalyticsEngine(store or SupabaseSessionStore())
    errors = {}
    progressions, samples = [], []

    try:
        progressions = print_progressions(engine, user_id)
    except Exception as e:
        errors["progressions"] = str(e)
        print(f"\n❌ Progressions FAILED: {e}")

    try:
        print_standards(engine, user_id, bodyweight)
    except Exception as e:
        errors["standards"] = str(e)
        print(f"\n❌ Strength standards FAILED: {e}")

    try:
        samples = print_training_load(engine, user_id, days)
    except Exception as e:
        errors["training_load"] = str(e)
        print(f"\n❌ Training load FAILED: {e}")

    try:
        print_insights(engine, user_id)
    except Exception as e:
        errors["insights"] = str(e)
        print(f"\n❌ Insights FAILED: {e}")

    try:
        print_activity(engine, user_id)
    except Exception as e:
        errors["activity"] = str(e)
        print(f"\n❌ Activity FAILED: {e}")

    if csv_dir:
        try:
            os.makedirs(csv_dir, exist_ok=True)
            today = datetime.now().strftime("%Y-%m-%d")
            progression_table(progressions).to_csv(f"{csv_dir}/progressions_{today}.csv", index=False)
            training_load_table(samples).to_csv(f"{csv_dir}/training_load_{today}.csv", index=False)
            print(f"\n💾 CSV export → {csv_dir}/")
        except OSError as e:
            errors["csv"] = str(e)
            print(f"\n❌ CSV export FAILED: {e}")

    return {"exercises": len(progressions), "sessions_in_window": len(samples), "errors": errors}


if __name__ == "__main__":
    args = sys.argv[1:]
    if not args or args[0].startswith("--"):
        print("Usage: python -m liftlog.report <user_id> [--days N] [--bodyweight KG] [--csv DIR]")
        sys.exit(2)

    bw = _arg_value(args, "--bodyweight")
    result = run_report(
        args[0],
        days=int(_arg_value(args, "--days", 30)),
        bodyweight=float(bw) if bw else None,
        csv_dir=_arg_value(args, "--csv"),
    )

    print(f"\nDone. {result['exercises']} exercises, {result['sessions_in_window']} sessions in window.")
    if result["errors"]:
        print("⚠️  Errors occurred:")
        for step, msg in result["errors"].items():
            print(f"  {step}: {msg}")
        sys.exit(1)
