# src/familysync/main.py

import copy
import logging
import os
from datetime import date
from typing import List, Optional

from .charts import create_pie_chart, create_weekday_bar_chart
from .config import load_config
from .data import Database
from .export_utils import export_schedule_pdf, format_finding, format_occurrence
from .models import Child, DailyRoutine, NapTime
from .recurrence import describe_recurrence, next_occurrences
from .rules import get_age_group
from .schedule import generate_weekly_schedule
from .statistics import count_by_weekday, minutes_by_category, summarize_activities
from .templates import get_routine_template
from .validation import validate_routine


def _ask(prompt: str, default: Optional[str] = None) -> str:
    suffix = f" [{default}]" if default else ""
    value = input(f"  {prompt}{suffix}: ").strip()
    return value or (default or "")


def _ask_times(prompt: str, defaults: List[str]) -> List[str]:
    raw = _ask(f"{prompt} (comma separated)", ", ".join(defaults))
    return [t.strip() for t in raw.split(",") if t.strip()]


def choose_child(db: Database) -> Optional[Child]:
    children = db.load_children()
    if not children:
        print("No children stored yet.")
        return None
    for i, child in enumerate(children, start=1):
        print(f"  [{i}] {child.name}")
    choice = input("  Child number: ").strip()
    if not choice.isdigit() or not 1 <= int(choice) <= len(children):
        print("Invalid choice.")
        return None
    return children[int(choice) - 1]


def show_upcoming(db: Database, count: int):
    activities = db.load_activities(active_only=True)
    if not activities:
        print("No activities stored yet.")
        return
    for activity in activities:
        print(f"\n📅 {activity.name} ({describe_recurrence(activity.recurrence)})")
        occurrences = next_occurrences(activity, count)
        if not occurrences:
            print("   no upcoming dates")
        for occ in occurrences:
            print("  ", format_occurrence(occ))


def input_routine(base: DailyRoutine) -> DailyRoutine:
    print("\n✏️  Daily routine (press Enter to keep the suggestion):")
    base = copy.deepcopy(base)
    meals = base.meal_times
    routine = DailyRoutine(
        wake_up_time=_ask("Wake up time (HH:MM)", base.wake_up_time),
        bedtime=_ask("Bedtime (HH:MM)", base.bedtime),
        meal_times=meals,
        nap_times=base.nap_times,
        free_play_periods=base.free_play_periods,
    )
    meals.breakfast = _ask("Breakfast", meals.breakfast) or None
    meals.lunch = _ask_times("Lunch", meals.lunch)
    meals.dinner = _ask("Dinner", meals.dinner) or None
    meals.snacks = _ask_times("Snacks", meals.snacks)
    naps = _ask_times("Naps as HH:MM/minutes",
                      [f"{n.start_time}/{n.duration}" for n in base.nap_times])
    routine.nap_times = []
    for entry in naps:
        start, _, minutes = entry.partition("/")
        routine.nap_times.append(NapTime(start.strip(), int(minutes) if minutes.strip().isdigit() else 60))
    return routine


def edit_routine(db: Database, default_age_group: str):
    child = choose_child(db)
    if child is None:
        return
    age_group = get_age_group(child.date_of_birth) or default_age_group
    base = child.routine or get_routine_template(age_group) or DailyRoutine()
    routine = input_routine(base)

    result = validate_routine(routine, age_group)
    summary = result['summary']
    print(f"\nSleep: {summary['sleep_hours']} h, naps: {summary['total_naps']}, "
          f"free play: {summary['total_free_play']} min")
    for finding in result['errors']:
        print("  ❌", format_finding(finding))
    for finding in result['warnings']:
        print("  ⚠️ ", format_finding(finding))

    if not result['is_valid']:
        print("Routine has errors and was not saved.")
        return
    if input("Save routine? (y/n) ").lower() == "y":
        db.save_routine(child.id, routine)
        print("Routine saved.")


def export_week(db: Database, export_dir: str):
    child = choose_child(db)
    if child is None:
        return
    result = generate_weekly_schedule(child, date.today(), db.load_activities(active_only=True))
    fn = os.path.join(export_dir, f"weekly_plan_{child.id}.pdf")
    export_schedule_pdf(result, fn, title=f"Weekly plan for {child.name}")
    print(f"Exported {fn} ({result['metadata']['conflict_count']} conflicts)")


def show_statistics(db: Database, export_dir: str, default_age_group: str):
    child = choose_child(db)
    if child is None:
        return
    age_group = get_age_group(child.date_of_birth) or default_age_group
    activities = child.weekly_activities
    summary = summarize_activities(activities, age_group)
    print(f"\n📊 {child.name}: {summary['total_activities']} activities, "
          f"{summary['total_minutes']} min per week, {summary['average_per_day']} per day")
    if summary['busiest_day']:
        print(f"   Busiest day: {summary['busiest_day']}")
    if summary['days_over_limit']:
        print(f"   Over the daily limit: {', '.join(summary['days_over_limit'])}")

    by_category = minutes_by_category(activities)
    create_pie_chart(list(by_category.values()), list(by_category),
                     os.path.join(export_dir, f"categories_{child.id}.png"),
                     subtitle=f"Minutes per week for {child.name}")
    create_weekday_bar_chart(count_by_weekday(activities),
                             os.path.join(export_dir, f"weekdays_{child.id}.png"),
                             title=f"Activities per day for {child.name}")
    print(f"Charts written to {export_dir}")


def run_wizard():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    cfg = load_config()
    print("🎯 Welcome to FamilySync 🎯")
    db = Database(cfg.get('db_path'))
    try:
        while True:
            print("\n[1] Upcoming activities  [2] Edit routine  [3] Export weekly plan  "
                  "[4] Migrate legacy routines  [5] Statistics  [q] Quit")
            choice = input("Choice: ").strip().lower()
            if choice == "1":
                show_upcoming(db, int(cfg.get('occurrence_count') or 5))
            elif choice == "2":
                edit_routine(db, cfg.get('default_age_group') or 'preschool')
            elif choice == "3":
                try:
                    export_week(db, cfg.get('export_dir') or os.getcwd())
                except OSError as e:
                    logging.error(f"Export error: {e}")
            elif choice == "4":
                report = db.migrate_legacy_routines()
                print(f"Migrated {report['count']} routines.")
            elif choice == "5":
                try:
                    show_statistics(db, cfg.get('export_dir') or os.getcwd(),
                                    cfg.get('default_age_group') or 'preschool')
                except OSError as e:
                    logging.error(f"Chart error: {e}")
            elif choice == "q":
                break
    finally:
        db.close()


if __name__ == "__main__":
    run_wizard()
