# src/familysync/validation.py
from datetime import date
from typing import List, Optional

from .models import DailyRoutine, Finding, WeeklyActivity, WEEKDAYS
from .rules import ROUTINE_VALIDATION_RULES, parse_time, resolve_age_group, rule_for

MEAL_BLOCK_MINUTES = 30
SNACK_BLOCK_MINUTES = 15
MIN_NAP_MINUTES = 30
MAX_NAP_MINUTES = 180
NAP_BEDTIME_GAP_HOURS = 3
BREAKFAST_AFTER_WAKE_HOURS = 2
LONG_ACTIVITY_MINUTES = 240
DEFAULT_AGE_GROUP = 'preschool'


def _empty_summary() -> dict:
    return {'sleep_hours': 0.0, 'total_naps': 0, 'total_free_play': 0}


class RoutineValidator:
    """
    Prüft einen Tagesablauf in fester Reihenfolge:
      Schlaf, Mahlzeiten, Nickerchen, Freispiel, Überschneidungen.
    Eingaben werden nie verändert; gleiche Eingabe -> gleiche Ausgabe.
    """

    def __init__(self, routine: Optional[DailyRoutine], age_group_or_date_of_birth=None,
                 today: Optional[date] = None):
        self.routine = routine
        self.age_group = resolve_age_group(age_group_or_date_of_birth, today)
        self.errors: List[Finding] = []
        self.warnings: List[Finding] = []

    # Hilfen
    def _sorted_naps(self):
        # unlesbare Startzeiten ans Ende
        def key(nap):
            start = parse_time(nap.start_time)
            return (start is None, start or 0)
        return sorted(self.routine.nap_times or [], key=key)

    def _timed_naps(self):
        """(Nummer, Start, Nickerchen) für Nickerchen mit lesbarer Startzeit."""
        return [
            (number, parse_time(nap.start_time), nap)
            for number, nap in enumerate(self._sorted_naps(), start=1)
            if parse_time(nap.start_time) is not None
        ]

    def calculate_sleep_duration(self) -> int:
        """Nachtschlaf in Minuten, auch über Mitternacht hinweg."""
        bedtime = parse_time(self.routine.bedtime)
        wake = parse_time(self.routine.wake_up_time)
        if bedtime is None or wake is None:
            return 0
        if bedtime > wake:
            return (24 * 60 - bedtime) + wake
        return wake - bedtime

    def total_free_play(self) -> int:
        return sum(p.duration or 0 for p in self.routine.free_play_periods or [])

    def _meals(self) -> List[dict]:
        meal_times = self.routine.meal_times
        if meal_times is None:
            return []
        meals = []
        for name in ('breakfast', 'dinner'):
            minutes = parse_time(getattr(meal_times, name))
            if minutes is not None:
                meals.append({'name': name, 'minutes': minutes})
        for index, value in enumerate(meal_times.lunch or []):
            minutes = parse_time(value)
            if minutes is not None:
                label = 'lunch' if index == 0 else f"lunch {index + 1}"
                meals.append({'name': label, 'minutes': minutes})
        # stabil: gleiche Uhrzeit behält die Einfügereihenfolge
        return sorted(meals, key=lambda m: m['minutes'])

    # Regeln
    def validate_sleep(self):
        if parse_time(self.routine.bedtime) is None or parse_time(self.routine.wake_up_time) is None:
            return
        sleep_hours = self.calculate_sleep_duration() / 60
        min_hours = rule_for('min_sleep_hours', self.age_group)
        if min_hours is not None and sleep_hours < min_hours:
            self.warnings.append(Finding(
                'sleep_duration',
                f"Sleep duration ({sleep_hours:.1f} hours) is less than recommended "
                f"{min_hours} hours for {self.age_group}",
                'medium',
                f"Consider adjusting bedtime or wake time to ensure at least {min_hours} hours of sleep",
            ))

        bedtime_hour = parse_time(self.routine.bedtime) // 60
        if self.age_group == 'toddler' and bedtime_hour > 21:
            self.warnings.append(Finding(
                'late_bedtime',
                'Bedtime seems late for a toddler',
                'low',
                'Consider an earlier bedtime for better sleep quality',
            ))

    def validate_meals(self):
        spacing = ROUTINE_VALIDATION_RULES['meal_spacing']
        meals = self._meals()

        for prev, cur in zip(meals, meals[1:]):
            gap_hours = (cur['minutes'] - prev['minutes']) / 60
            if gap_hours < spacing['min_hours']:
                self.errors.append(Finding(
                    'meal_spacing',
                    f"{prev['name']} and {cur['name']} are too close together ({gap_hours:.1f} hours)",
                    'high',
                    f"Meals should be at least {spacing['min_hours']} hours apart",
                ))
            if gap_hours > spacing['max_hours']:
                self.warnings.append(Finding(
                    'meal_spacing',
                    f"Long gap between {prev['name']} and {cur['name']} ({gap_hours:.1f} hours)",
                    'low',
                    'Consider adding a snack between meals',
                ))

        meal_times = self.routine.meal_times
        wake = parse_time(self.routine.wake_up_time)
        breakfast = parse_time(meal_times.breakfast) if meal_times else None
        if wake is not None and breakfast is not None:
            gap_hours = (breakfast - wake) / 60
            if gap_hours > BREAKFAST_AFTER_WAKE_HOURS:
                self.warnings.append(Finding(
                    'breakfast_timing',
                    f"Long gap between wake up and breakfast ({gap_hours:.1f} hours)",
                    'low',
                    'Consider an earlier breakfast time',
                ))

    def validate_naps(self):
        naps = self._sorted_naps()
        if not naps:
            if self.age_group in ('infant', 'toddler'):
                self.warnings.append(Finding(
                    'missing_naps',
                    f"{self.age_group}s typically need regular naps",
                    'medium',
                    'Consider adding nap times to the routine',
                ))
            return

        bedtime = parse_time(self.routine.bedtime)
        for number, nap in enumerate(naps, start=1):
            duration = nap.duration or 0
            if duration < MIN_NAP_MINUTES:
                self.warnings.append(Finding(
                    'short_nap',
                    f"Nap {number} is very short ({duration} minutes) and unlikely to be restorative",
                    'low',
                    'Most children need at least 30-45 minutes for a restorative nap',
                ))
            if duration > MAX_NAP_MINUTES:
                self.warnings.append(Finding(
                    'long_nap',
                    f"Nap {number} is very long ({duration} minutes)",
                    'medium',
                    'Very long naps may interfere with nighttime sleep',
                ))
            start = parse_time(nap.start_time)
            if bedtime is not None and start is not None:
                nap_end = start + duration
                if (bedtime - nap_end) / 60 < NAP_BEDTIME_GAP_HOURS:
                    self.warnings.append(Finding(
                        'nap_bedtime_proximity',
                        f"Nap {number} ends too close to bedtime",
                        'medium',
                        f"Naps should end at least {NAP_BEDTIME_GAP_HOURS} hours before bedtime",
                    ))

        timed = self._timed_naps()
        for (number, start, cur), (next_number, next_start, _) in zip(timed, timed[1:]):
            if start + (cur.duration or 0) > next_start:
                self.errors.append(Finding(
                    'overlapping_naps',
                    f"Nap {number} overlaps with nap {next_number}",
                    'high',
                    'Adjust nap times to prevent overlaps',
                ))

    def validate_free_play(self):
        if not self.routine.free_play_periods:
            self.warnings.append(Finding(
                'missing_free_play',
                'No free play periods scheduled',
                'medium',
                'Children need unstructured play time for development',
            ))
            return

        total = self.total_free_play()
        minimum = rule_for('min_free_play_minutes', self.age_group)
        if minimum is not None and total < minimum:
            self.warnings.append(Finding(
                'insufficient_free_play',
                f"Only {total} minutes of free play scheduled",
                'medium',
                f"Recommend at least {minimum} minutes of free play for {self.age_group}",
            ))

    def validate_conflicts(self):
        events = []
        for meal in self._meals():
            events.append({'name': meal['name'], 'start': meal['minutes'],
                           'end': meal['minutes'] + MEAL_BLOCK_MINUTES})

        meal_times = self.routine.meal_times
        for index, value in enumerate(meal_times.snacks if meal_times else []):
            start = parse_time(value)
            if start is not None:
                events.append({'name': f"snack {index + 1}", 'start': start,
                               'end': start + SNACK_BLOCK_MINUTES})

        for number, start, nap in self._timed_naps():
            events.append({'name': f"nap {number}", 'start': start, 'end': start + (nap.duration or 0)})

        for index, period in enumerate(self.routine.free_play_periods or []):
            start = parse_time(period.start_time)
            if start is None:
                continue
            events.append({'name': f"free play {index + 1}", 'start': start,
                           'end': start + (period.duration or 0)})

        events.sort(key=lambda e: e['start'])
        for cur, nxt in zip(events, events[1:]):
            if nxt['start'] < cur['end']:
                self.errors.append(Finding(
                    'schedule_conflict',
                    f"{cur['name']} conflicts with {nxt['name']}",
                    'high',
                    'Adjust timing to prevent overlapping activities',
                ))

    def summary(self) -> dict:
        return {
            'sleep_hours': round(self.calculate_sleep_duration() / 60, 1),
            'total_naps': len(self.routine.nap_times or []),
            'total_free_play': self.total_free_play(),
        }

    def validate(self) -> dict:
        self.errors = []
        self.warnings = []

        if self.routine is None:
            return {
                'is_valid': False,
                'errors': [Finding('missing_routine', 'No routine data provided', 'high')],
                'warnings': [],
                'summary': _empty_summary(),
            }

        self.validate_sleep()
        self.validate_meals()
        self.validate_naps()
        self.validate_free_play()
        self.validate_conflicts()

        return {
            'is_valid': not self.errors,
            'errors': list(self.errors),
            'warnings': list(self.warnings),
            'summary': self.summary(),
        }


def validate_routine(routine: Optional[DailyRoutine], age_group_or_date_of_birth=None,
                     today: Optional[date] = None) -> dict:
    return RoutineValidator(routine, age_group_or_date_of_birth, today).validate()


def validate_activity(activity: WeeklyActivity) -> dict:
    """Einzelne Wochenaktivität vor dem Speichern prüfen."""
    errors = []
    warnings = []
    schedule = activity.schedule

    if not (activity.name or '').strip():
        errors.append(Finding('missing_name', 'Activity name is required', 'high'))

    if not schedule.days:
        errors.append(Finding('missing_days', 'At least one day must be selected', 'high'))

    if not schedule.start_time:
        errors.append(Finding('missing_time', 'Start time is required', 'high'))

    if not schedule.duration or schedule.duration <= 0:
        errors.append(Finding('invalid_duration', 'Activity duration must be greater than 0', 'high'))
    elif schedule.duration > LONG_ACTIVITY_MINUTES:
        warnings.append(Finding(
            'long_activity',
            'Activity duration is very long (over 4 hours)',
            'medium',
            'Consider breaking long activities into smaller segments',
        ))

    return {'is_valid': not errors, 'errors': errors, 'warnings': warnings}


def validate_weekly_schedule(activities: List[WeeklyActivity], routine: Optional[DailyRoutine] = None,
                             age_group_or_date_of_birth=None, today: Optional[date] = None) -> dict:
    """
    Wochenplan je Wochentag prüfen: Überschneidungen, Fahrzeit zwischen
    verschiedenen Orten und maximale Anzahl Aktivitäten pro Tag.
    `routine` ist reserviert und wird derzeit nicht ausgewertet. Die
    Altersgruppe kommt aus `age_group_or_date_of_birth` (Standard: preschool).
    """
    errors: List[Finding] = []
    warnings: List[Finding] = []

    age_group = resolve_age_group(age_group_or_date_of_birth, today) or DEFAULT_AGE_GROUP
    max_per_day = rule_for('max_activities_per_day', age_group)

    day_groups = {day: [] for day in WEEKDAYS}
    for activity in activities or []:
        schedule = getattr(activity, 'schedule', None)
        if schedule is None or parse_time(schedule.start_time) is None:
            continue
        for day in dict.fromkeys(schedule.days or []):
            if day in day_groups:
                day_groups[day].append(activity)

    for day in WEEKDAYS:
        day_activities = sorted(day_groups[day], key=lambda a: parse_time(a.schedule.start_time))
        if not day_activities:
            continue

        for cur, nxt in zip(day_activities, day_activities[1:]):
            cur_end = parse_time(cur.schedule.start_time) + (cur.schedule.duration or 0)
            next_start = parse_time(nxt.schedule.start_time)

            if cur_end > next_start:
                errors.append(Finding(
                    'activity_conflict',
                    f"{cur.name} conflicts with {nxt.name} on {day}",
                    'high',
                    'Adjust activity times to prevent overlaps',
                ))

            if cur.location.name != nxt.location.name:
                travel_time = max(cur.location.travel_time or 0, nxt.location.travel_time or 0)
                gap = next_start - cur_end
                if gap < travel_time:
                    warnings.append(Finding(
                        'insufficient_travel_time',
                        f"Not enough time to travel between {cur.name} and {nxt.name} on {day}",
                        'medium',
                        f"Consider adding {travel_time - gap} more minutes between activities",
                    ))

        if max_per_day is not None and len(day_activities) > max_per_day:
            warnings.append(Finding(
                'too_many_activities',
                f"{len(day_activities)} activities on {day} might be too many for a {age_group}",
                'medium',
                f"Consider limiting to {max_per_day} activities per day",
            ))

    return {'is_valid': not errors, 'errors': errors, 'warnings': warnings}
