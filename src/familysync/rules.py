# src/familysync/rules.py
import logging
from datetime import date, datetime
from typing import Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

AGE_GROUPS = ('infant', 'toddler', 'preschool', 'schoolAge', 'teen')

# Schwellenwerte je Altersgruppe; 'teen' hat bewusst keine Einträge
ROUTINE_VALIDATION_RULES = {
    'min_sleep_hours': {
        'infant': 14,
        'toddler': 12,
        'preschool': 11,
        'schoolAge': 9,
    },
    'max_activities_per_day': {
        'infant': 1,
        'toddler': 2,
        'preschool': 3,
        'schoolAge': 4,
    },
    'min_free_play_minutes': {
        'infant': 120,
        'toddler': 180,
        'preschool': 120,
        'schoolAge': 60,
    },
    'meal_spacing': {
        'min_hours': 2,
        'max_hours': 4,
    },
}

# Regeln für den Wochenplan-Generator
SCHEDULING_RULES = {
    'infant': {
        'max_activities_per_day': 1,
        'nap_time_protection': 45,
        'max_activity_duration': 30,
        'min_buffer_between_activities': 60,
        'latest_activity_start': '17:00',
    },
    'toddler': {
        'max_activities_per_day': 2,
        'nap_time_protection': 30,
        'max_activity_duration': 60,
        'min_buffer_between_activities': 45,
        'latest_activity_start': '17:30',
    },
    'preschool': {
        'max_activities_per_day': 3,
        'nap_time_protection': 15,
        'max_activity_duration': 90,
        'min_buffer_between_activities': 30,
        'latest_activity_start': '18:00',
    },
    'schoolAge': {
        'max_activities_per_day': 4,
        'nap_time_protection': 0,
        'max_activity_duration': 120,
        'min_buffer_between_activities': 15,
        'latest_activity_start': '19:00',
    },
}


def parse_time(value) -> Optional[int]:
    """'HH:MM' -> Minuten seit Mitternacht, None bei ungültigem Wert."""
    if not value or not isinstance(value, str):
        return None
    parts = value.strip().split(':')
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        return None
    hours, minutes = int(parts[0]), int(parts[1])
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def time_to_minutes(value) -> int:
    """Wie parse_time, aber 0 statt None."""
    minutes = parse_time(value)
    return minutes if minutes is not None else 0


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes_to_time(value: str, minutes: int) -> str:
    return minutes_to_time(time_to_minutes(value) + minutes)


def to_date(value) -> Optional[date]:
    """date, datetime oder ISO-String -> date. Alles andere -> None."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date_parser.isoparse(value).date()
        except ValueError:
            logging.warning(f"Unreadable date value: {value!r}")
            return None
    return None


def get_age_group(date_of_birth, today: Optional[date] = None) -> Optional[str]:
    """
    Altersgruppe aus dem Geburtsdatum (volle Jahre):
      <1 infant, <3 toddler, <6 preschool, <13 schoolAge, sonst teen.
    """
    dob = to_date(date_of_birth)
    if dob is None:
        return None
    today = today or date.today()
    years = relativedelta(today, dob).years
    if years < 1:
        return 'infant'
    if years < 3:
        return 'toddler'
    if years < 6:
        return 'preschool'
    if years < 13:
        return 'schoolAge'
    return 'teen'


def resolve_age_group(value: Union[str, date, None], today: Optional[date] = None) -> Optional[str]:
    """Nimmt entweder einen Gruppennamen oder ein Geburtsdatum entgegen."""
    if isinstance(value, str) and value in AGE_GROUPS:
        return value
    return get_age_group(value, today)


def rule_for(rule: str, age_group: Optional[str]):
    return ROUTINE_VALIDATION_RULES[rule].get(age_group)
