from collections import defaultdict
from typing import Dict, List, Optional

from familysync.models import WeeklyActivity, WEEKDAYS
from familysync.rules import rule_for


def minutes_by_category(activities: List[WeeklyActivity]) -> Dict[str, int]:
    """Wöchentliche Minuten je Kategorie (Dauer x Anzahl Tage)."""
    totals = defaultdict(int)
    for a in activities:
        days = set(a.schedule.days) & set(WEEKDAYS)
        totals[a.category or 'other'] += (a.schedule.duration or 0) * len(days)
    return dict(sorted(totals.items()))


def count_by_weekday(activities: List[WeeklyActivity]) -> Dict[str, int]:
    counts = {day: 0 for day in WEEKDAYS}
    for a in activities:
        for day in set(a.schedule.days):
            if day in counts:
                counts[day] += 1
    return counts


def summarize_activities(activities: List[WeeklyActivity], age_group: Optional[str] = None) -> dict:
    """
    Wochen-Zusammenfassung:
      total_activities : Termine pro Woche
      total_minutes    : Minuten pro Woche
      average_per_day  : Termine pro Tag (gerundet)
      busiest_day      : Tag mit den meisten Terminen (None, wenn leer)
      days_over_limit  : Tage über dem Tageslimit der Altersgruppe
    """
    counts = count_by_weekday(activities)
    total = sum(counts.values())
    total_minutes = sum(minutes_by_category(activities).values())
    busiest = max(WEEKDAYS, key=lambda d: counts[d]) if total else None
    limit = rule_for('max_activities_per_day', age_group)
    over = [d for d in WEEKDAYS if limit is not None and counts[d] > limit]
    return {
        'total_activities': total,
        'total_minutes': total_minutes,
        'average_per_day': round(total / 7, 1),
        'busiest_day': busiest,
        'days_over_limit': over,
    }
