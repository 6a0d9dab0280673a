# src/familysync/schedule.py
"""
Wochenplan-Generator: legt Schulzeiten, Tagesablauf, Wochenaktivitäten und
wiederkehrende Aktivitäten auf eine Woche (Montag bis Sonntag) und meldet
Konflikte, Vorschläge und eine Balance-Kennzahl.
"""
import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Optional

from .models import Activity, Child, WEEKDAYS
from .recurrence import occurs_on
from .rules import SCHEDULING_RULES, add_minutes_to_time, get_age_group, minutes_to_time, time_to_minutes

# Prioritäten: kleiner = wichtiger
PRIORITY_ESSENTIAL = 1
PRIORITY_HIGH = 2
PRIORITY_MEDIUM = 3

DAY_START = 7 * 60
DAY_END = 20 * 60
MIN_FREE_SLOT = 15
FREE_PLAY_SLOT = 60
MAX_WEEKLY_ACTIVITIES = 20
MIN_WEEKLY_FREE_MINUTES = 300


@dataclass
class ScheduleEvent:
    id: str
    title: str
    type: str           # school | routine | meal | activity
    start_time: str
    end_time: str
    priority: int = PRIORITY_MEDIUM
    is_fixed: bool = True
    category: str = ''
    location: str = ''
    travel_time: int = 0
    is_routine: bool = False

    @property
    def start(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end(self) -> int:
        return time_to_minutes(self.end_time)

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass
class DaySchedule:
    date: date
    events: List[ScheduleEvent] = field(default_factory=list)
    free_time_slots: List[dict] = field(default_factory=list)
    total_activity_time: int = 0
    activity_count: int = 0

    def add(self, event: ScheduleEvent, counts: bool = False):
        self.events.append(event)
        if counts:
            self.activity_count += 1
            self.total_activity_time += event.duration


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _rules_for(age_group: Optional[str]) -> dict:
    if age_group == 'teen':
        return SCHEDULING_RULES['schoolAge']
    return SCHEDULING_RULES.get(age_group, SCHEDULING_RULES['preschool'])


class ScheduleGenerator:
    def __init__(self, child: Child, start_date: Optional[date] = None,
                 recurring_activities: Optional[List[Activity]] = None, today: Optional[date] = None):
        self.child = child
        self.week_start = week_start(start_date or date.today())
        self.recurring_activities = recurring_activities or []
        self.age_group = get_age_group(child.date_of_birth, today) or 'preschool'
        self.rules = _rules_for(self.age_group)
        self.conflicts: List[dict] = []
        self.suggestions: List[dict] = []

    def _empty_week(self) -> Dict[str, DaySchedule]:
        return {day: DaySchedule(self.week_start + timedelta(days=i)) for i, day in enumerate(WEEKDAYS)}

    # Schritt 1: Schule
    def place_fixed_activities(self, schedule: Dict[str, DaySchedule]):
        for day, blocks in self.child.school_schedule.items():
            if day not in schedule:
                continue
            for block in blocks:
                schedule[day].add(ScheduleEvent(
                    id=f"school-{day}-{block.start_time}",
                    title=block.type,
                    type='school',
                    start_time=block.start_time,
                    end_time=block.end_time,
                    priority=PRIORITY_ESSENTIAL,
                    category='school',
                    travel_time=15,
                ), counts=True)

    # Schritt 2: Tagesablauf
    def add_routine_activities(self, schedule: Dict[str, DaySchedule]):
        routine = self.child.routine
        if routine is None:
            return

        def routine_event(day, key, title, etype, start, minutes, category, priority=PRIORITY_ESSENTIAL):
            return ScheduleEvent(
                id=f"{key}-{day}", title=title, type=etype, start_time=start,
                end_time=add_minutes_to_time(start, minutes), priority=priority,
                category=category, is_routine=True,
            )

        meals = routine.meal_times
        for day, day_schedule in schedule.items():
            if routine.wake_up_time:
                day_schedule.add(routine_event(day, 'wakeup', 'Wake Up', 'routine', routine.wake_up_time, 30, 'sleep'))
            if routine.bedtime:
                day_schedule.add(routine_event(day, 'bedtime', 'Bedtime', 'routine', routine.bedtime, 60, 'sleep'))
            if meals.breakfast:
                day_schedule.add(routine_event(day, 'breakfast', 'Breakfast', 'meal', meals.breakfast, 30, 'meal'))
            for i, lunch in enumerate(meals.lunch):
                day_schedule.add(routine_event(day, f"lunch-{i}", 'Lunch', 'meal', lunch, 45, 'meal'))
            if meals.dinner:
                day_schedule.add(routine_event(day, 'dinner', 'Dinner', 'meal', meals.dinner, 45, 'meal'))
            for i, snack in enumerate(meals.snacks):
                day_schedule.add(routine_event(day, f"snack-{i}", 'Snack', 'meal', snack, 15, 'snack',
                                               PRIORITY_HIGH))
            for i, nap in enumerate(routine.nap_times):
                day_schedule.add(routine_event(day, f"nap-{i}", 'Nap Time', 'routine', nap.start_time,
                                               nap.duration, 'sleep'))

    # Schritt 3: Wochenaktivitäten und wiederkehrende Aktivitäten
    def add_recurring_activities(self, schedule: Dict[str, DaySchedule]):
        for activity in self.child.weekly_activities:
            sched = activity.schedule
            if not sched.start_time:
                continue
            for day in sched.days:
                if day not in schedule:
                    continue
                schedule[day].add(ScheduleEvent(
                    id=f"activity-{activity.id or activity.name}-{day}",
                    title=activity.name,
                    type='activity',
                    start_time=sched.start_time,
                    end_time=add_minutes_to_time(sched.start_time, sched.duration),
                    is_fixed=False,
                    category=activity.category or 'activity',
                    location=activity.location.name,
                    travel_time=activity.location.travel_time or 15,
                ), counts=True)

        for activity in self.recurring_activities:
            if not activity.is_active or not activity.time:
                continue
            if activity.assigned_children and self.child.id not in activity.assigned_children:
                continue
            for day, day_schedule in schedule.items():
                if not occurs_on(activity, day_schedule.date):
                    continue
                day_schedule.add(ScheduleEvent(
                    id=f"recurring-{activity.id or activity.name}-{day}",
                    title=activity.name,
                    type='activity',
                    start_time=activity.time,
                    end_time=add_minutes_to_time(activity.time, activity.duration or 60),
                    is_fixed=False,
                    category=activity.category,
                    location=activity.location.name,
                    travel_time=activity.location.travel_time or 15,
                ), counts=True)

    # Schritt 4: Konflikte
    def validate_schedule(self, schedule: Dict[str, DaySchedule]):
        self.conflicts = []
        for day, day_schedule in schedule.items():
            day_schedule.events.sort(key=lambda e: e.start)
            events = day_schedule.events

            for cur, nxt in zip(events, events[1:]):
                if cur.end > nxt.start:
                    self.conflicts.append({
                        'type': 'overlap',
                        'severity': 'high',
                        'day': day,
                        'events': [cur.id, nxt.id],
                        'message': f"{cur.title} overlaps with {nxt.title}",
                        'suggestion': 'Adjust timing or move one activity to another day',
                    })

            if day_schedule.activity_count > self.rules['max_activities_per_day']:
                self.conflicts.append({
                    'type': 'overload',
                    'severity': 'medium',
                    'day': day,
                    'message': f"Too many activities ({day_schedule.activity_count}/"
                               f"{self.rules['max_activities_per_day']})",
                    'suggestion': 'Consider moving some activities to other days',
                })

            if self.rules['nap_time_protection'] > 0:
                self.check_nap_time_protection(day_schedule, day)

            for event in events:
                if event.type == 'activity' and event.duration > self.rules['max_activity_duration']:
                    self.conflicts.append({
                        'type': 'duration',
                        'severity': 'low',
                        'day': day,
                        'events': [event.id],
                        'message': f"{event.title} is too long ({event.duration}/"
                                   f"{self.rules['max_activity_duration']} minutes)",
                        'suggestion': 'Consider breaking into shorter sessions',
                    })

    def check_nap_time_protection(self, day_schedule: DaySchedule, day: str):
        buffer = self.rules['nap_time_protection']
        naps = [e for e in day_schedule.events if e.category == 'sleep' and 'Nap' in e.title]
        for nap in naps:
            before = [e for e in day_schedule.events
                      if e is not nap and nap.start - buffer < e.end <= nap.start]
            after = [e for e in day_schedule.events
                     if e is not nap and nap.end <= e.start < nap.end + buffer]
            if before or after:
                self.conflicts.append({
                    'type': 'nap_protection',
                    'severity': 'medium',
                    'day': day,
                    'events': [nap.id],
                    'message': f"Activities too close to nap time ({buffer} min buffer needed)",
                    'suggestion': 'Move activities to protect nap time',
                })

    # Schritt 5: Vorschläge
    def identify_free_time_slots(self, day_schedule: DaySchedule) -> List[dict]:
        events = sorted(
            (e for e in day_schedule.events if not e.is_routine or e.category == 'sleep'),
            key=lambda e: e.start,
        )
        if not events:
            return [{'start_time': minutes_to_time(DAY_START), 'end_time': minutes_to_time(DAY_END),
                     'duration': DAY_END - DAY_START}]

        slots = []
        if events[0].start > DAY_START:
            slots.append({'start_time': minutes_to_time(DAY_START), 'end_time': events[0].start_time,
                          'duration': events[0].start - DAY_START})
        for cur, nxt in zip(events, events[1:]):
            if nxt.start > cur.end:
                slots.append({'start_time': cur.end_time, 'end_time': nxt.start_time,
                              'duration': nxt.start - cur.end})
        last = events[-1]
        if last.end < DAY_END:
            slots.append({'start_time': last.end_time, 'end_time': minutes_to_time(DAY_END),
                          'duration': DAY_END - last.end})
        return [s for s in slots if s['duration'] >= MIN_FREE_SLOT]

    def generate_suggestions(self, schedule: Dict[str, DaySchedule]):
        self.suggestions = []
        for day, day_schedule in schedule.items():
            slots = self.identify_free_time_slots(day_schedule)
            day_schedule.free_time_slots = slots

            for slot in slots:
                if slot['duration'] >= FREE_PLAY_SLOT:
                    self.suggestions.append({
                        'type': 'free_play',
                        'priority': 'medium',
                        'day': day,
                        'time_slot': slot,
                        'message': f"{slot['duration']} minutes available for free play",
                        'suggestion': 'Add unstructured play time for child development',
                    })

            has_outdoor = any(e.category == 'outdoor' for e in day_schedule.events)
            if not has_outdoor and any(s['duration'] >= 30 for s in slots):
                self.suggestions.append({
                    'type': 'outdoor_time',
                    'priority': 'medium',
                    'day': day,
                    'message': 'No outdoor activities scheduled',
                    'suggestion': 'Consider adding outdoor play or nature time',
                })

        self.analyze_weekly_balance(schedule)

    def analyze_weekly_balance(self, schedule: Dict[str, DaySchedule]):
        total_activities = sum(d.activity_count for d in schedule.values())
        free_total = sum(s['duration'] for d in schedule.values() for s in d.free_time_slots)

        if total_activities > MAX_WEEKLY_ACTIVITIES:
            self.suggestions.append({
                'type': 'balance',
                'priority': 'high',
                'message': 'Weekly schedule may be too packed',
                'suggestion': 'Consider reducing activities to prevent overstimulation',
            })
        if free_total < MIN_WEEKLY_FREE_MINUTES:
            self.suggestions.append({
                'type': 'balance',
                'priority': 'medium',
                'message': 'Limited free play time scheduled',
                'suggestion': 'Add more unstructured play time for creativity and independence',
            })

    # Kennzahlen
    def free_time_variation(self, schedule: Dict[str, DaySchedule]) -> float:
        totals = [sum(s['duration'] for s in d.free_time_slots) for d in schedule.values()]
        average = sum(totals) / len(totals)
        variance = sum((t - average) ** 2 for t in totals) / len(totals)
        return math.sqrt(variance)

    def balance_score(self, schedule: Dict[str, DaySchedule]) -> int:
        score = 100 - len(self.conflicts) * 10
        for day_schedule in schedule.values():
            if day_schedule.activity_count > self.rules['max_activities_per_day']:
                score -= 15
        if self.free_time_variation(schedule) < 60:
            score += 10
        return max(0, min(100, score))

    def metadata(self, schedule: Dict[str, DaySchedule]) -> dict:
        total_activities = sum(d.activity_count for d in schedule.values())
        free_total = sum(s['duration'] for d in schedule.values() for s in d.free_time_slots)
        busy_days = sum(1 for d in schedule.values()
                        if d.activity_count >= self.rules['max_activities_per_day'])
        return {
            'age_group': self.age_group,
            'week_start': self.week_start,
            'total_activities': total_activities,
            'average_activities_per_day': round(total_activities / 7, 1),
            'total_free_time_hours': round(free_total / 60, 1),
            'busy_days': busy_days,
            'conflict_count': len(self.conflicts),
            'suggestion_count': len(self.suggestions),
            'balance_score': self.balance_score(schedule),
        }

    def generate(self) -> dict:
        schedule = self._empty_week()
        self.place_fixed_activities(schedule)
        self.add_routine_activities(schedule)
        self.add_recurring_activities(schedule)
        self.validate_schedule(schedule)
        self.generate_suggestions(schedule)
        return {
            'schedule': schedule,
            'conflicts': self.conflicts,
            'suggestions': self.suggestions,
            'metadata': self.metadata(schedule),
        }


def generate_weekly_schedule(child: Child, start_date: Optional[date] = None,
                             recurring_activities: Optional[List[Activity]] = None,
                             today: Optional[date] = None) -> dict:
    return ScheduleGenerator(child, start_date, recurring_activities, today).generate()
