# src/familysync/recurrence.py
from datetime import date, timedelta
from typing import List, Optional

from .models import Activity, Occurrence, RecurrenceDescriptor, WEEKDAYS
from .rules import parse_time, to_date

MAX_LOOKAHEAD_DAYS = 365
MAX_ITERATIONS = 400

DAY_NAMES = {
    'monday': {'short': 'Mon', 'full': 'Monday'},
    'tuesday': {'short': 'Tue', 'full': 'Tuesday'},
    'wednesday': {'short': 'Wed', 'full': 'Wednesday'},
    'thursday': {'short': 'Thu', 'full': 'Thursday'},
    'friday': {'short': 'Fri', 'full': 'Friday'},
    'saturday': {'short': 'Sat', 'full': 'Saturday'},
    'sunday': {'short': 'Sun', 'full': 'Sunday'},
}

RECURRENCE_TYPES = {
    'weekly': {
        'label': 'Weekly',
        'description': 'Repeats every week on selected days',
    },
    'biweekly': {
        'label': 'Every 2 Weeks',
        'description': 'Repeats every two weeks',
    },
    'monthly': {
        'label': 'Monthly',
        'description': 'Repeats every month on the same day',
        'month_types': ['same_date', 'same_weekday'],
    },
    'custom': {
        'label': 'Custom',
        'description': 'Custom interval (e.g., every 3 months)',
        'units': ['days', 'weeks', 'months'],
    },
}


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def _has_day(recurrence: RecurrenceDescriptor, day: date) -> bool:
    days = recurrence.days
    return isinstance(days, (list, tuple, set)) and weekday_name(day) in days


def _start_date(recurrence: RecurrenceDescriptor) -> Optional[date]:
    return to_date(recurrence.start_date)


def _end_date(recurrence: RecurrenceDescriptor) -> Optional[date]:
    return to_date(recurrence.end_date)


def occurs_on(activity: Activity, day: date) -> bool:
    """Findet die Aktivität an diesem Tag statt?"""
    recurrence = getattr(activity, 'recurrence', None)
    day = to_date(day)
    if recurrence is None or day is None:
        return False

    if recurrence.type == 'weekly':
        return _has_day(recurrence, day)

    if recurrence.type == 'biweekly':
        start = _start_date(recurrence)
        if start is None:
            return False
        weeks = (day - start).days // 7
        return weeks % 2 == 0 and _has_day(recurrence, day)

    if recurrence.type == 'monthly':
        # same_weekday (z. B. 2. Dienstag) ist nicht umgesetzt
        start = _start_date(recurrence)
        if recurrence.month_type != 'same_date' or start is None:
            return False
        return day.day == start.day

    # custom: Intervall-Semantik ist nicht umgesetzt
    return False


def _make_occurrence(activity: Activity, day: date) -> Occurrence:
    return Occurrence(
        date=day,
        time=activity.time,
        location=activity.location,
        duration=activity.duration or 60,
        name=activity.name,
    )


def _is_schedulable(activity) -> bool:
    if activity is None:
        return False
    if parse_time(getattr(activity, 'time', None)) is None:
        return False
    return isinstance(getattr(activity, 'recurrence', None), RecurrenceDescriptor)


def next_occurrences(activity: Activity, count: int = 10, today: Optional[date] = None) -> List[Occurrence]:
    """
    Die nächsten `count` Termine ab heute (einschließlich), aufsteigend.
    Der Scan läuft Tag für Tag und endet spätestens nach MAX_LOOKAHEAD_DAYS
    bzw. MAX_ITERATIONS, auch wenn `count` nie erreicht wird.
    """
    occurrences: List[Occurrence] = []
    if not _is_schedulable(activity) or not isinstance(count, int) or count <= 0:
        return occurrences

    today = to_date(today) or date.today()
    max_date = today + timedelta(days=MAX_LOOKAHEAD_DAYS)
    end_date = _end_date(activity.recurrence)
    current = today
    iterations = 0

    while len(occurrences) < count and current < max_date and iterations < MAX_ITERATIONS:
        iterations += 1
        if end_date is not None and current >= end_date:
            break
        if occurs_on(activity, current):
            occurrences.append(_make_occurrence(activity, current))
        current += timedelta(days=1)

    return occurrences


def occurrences_between(activity: Activity, start: date, end: date) -> List[Occurrence]:
    """Alle Termine im Zeitraum [start, end]; höchstens MAX_ITERATIONS Tage."""
    occurrences: List[Occurrence] = []
    start, end = to_date(start), to_date(end)
    if not _is_schedulable(activity) or start is None or end is None:
        return occurrences

    end_date = _end_date(activity.recurrence)
    current = start
    iterations = 0
    while current <= end and iterations < MAX_ITERATIONS:
        iterations += 1
        if end_date is not None and current >= end_date:
            break
        if occurs_on(activity, current):
            occurrences.append(_make_occurrence(activity, current))
        current += timedelta(days=1)
    return occurrences


def _short_days(days) -> str:
    ordered = [d for d in WEEKDAYS if d in (days or [])]
    return ', '.join(DAY_NAMES[d]['short'] for d in ordered)


def describe_recurrence(recurrence: Optional[RecurrenceDescriptor]) -> str:
    """Menschenlesbare Kurzbeschreibung einer Wiederholungsregel."""
    if recurrence is None:
        return 'No schedule'

    if recurrence.type == 'weekly':
        return f"Weekly on {_short_days(recurrence.days)}"

    if recurrence.type == 'biweekly':
        return f"Every 2 weeks on {_short_days(recurrence.days)}"

    if recurrence.type == 'monthly':
        if recurrence.month_type == 'same_date':
            return 'Monthly on the same date'
        return 'Monthly on the same weekday'

    if recurrence.type == 'custom':
        unit = recurrence.unit or 'days'
        if recurrence.interval == 1:
            return f"Every {unit.rstrip('s')}"
        return f"Every {recurrence.interval} {unit}"

    return 'Custom schedule'


def validate_activity_data(activity: Activity) -> dict:
    """Pflichtfelder einer wiederkehrenden Aktivität vor dem Speichern prüfen."""
    errors = []

    if not (activity.name or '').strip():
        errors.append('Activity name is required')

    if not activity.time:
        errors.append('Start time is required')
    elif parse_time(activity.time) is None:
        errors.append('Start time must be in HH:MM format')

    if not activity.duration or activity.duration < 15:
        errors.append('Duration must be at least 15 minutes')

    if not (activity.location.address or '').strip():
        errors.append('Location address is required')

    recurrence = activity.recurrence
    if recurrence is None or not recurrence.type:
        errors.append('Recurrence pattern is required')
    elif recurrence.type in ('weekly', 'biweekly') and not recurrence.days:
        errors.append(f"At least one day must be selected for {recurrence.type} recurrence")

    return {
        'is_valid': not errors,
        'errors': errors,
    }
