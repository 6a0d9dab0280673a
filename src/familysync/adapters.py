# src/familysync/adapters.py
"""
Umwandlung gespeicherter/importierter Dokumente in die kanonischen Modelle.

Ältere Datensätze verwenden camelCase-Schlüssel und speichern `lunch` als
einzelnen String; hier wird alles auf die Listenform gebracht, bevor die
Kernfunktionen die Daten sehen.
"""
import json
from datetime import date
from typing import Any, Dict, List, Optional

from .models import (
    Activity, ActivitySchedule, Child, Contact, DailyRoutine, FreePlayPeriod, Location,
    MealTimes, NapTime, RecurrenceDescriptor, Requirements, SchoolBlock, WeeklyActivity,
)
from .rules import to_date


def _ensure_doc(raw: Any) -> Optional[Dict]:
    if not raw:
        return None
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str):
        try:
            doc = json.loads(raw)
        except ValueError:
            return None
        return doc if isinstance(doc, dict) else None
    return None


def _get(doc: Dict, *keys, default=None):
    """Erster vorhandener Schlüssel gewinnt (snake_case vor camelCase)."""
    for key in keys:
        if key in doc and doc[key] is not None:
            return doc[key]
    return default


def _time_list(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [v for v in value if isinstance(v, str) and v]


def _int(value, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


# Tagesablauf
def is_legacy_routine(raw) -> bool:
    """True, wenn `lunch` noch als einzelner String gespeichert ist."""
    doc = _ensure_doc(raw)
    if doc is None:
        return False
    meals = _get(doc, 'meal_times', 'mealTimes', default={}) or {}
    return isinstance(meals.get('lunch'), str)


def routine_from_dict(raw) -> Optional[DailyRoutine]:
    doc = _ensure_doc(raw)
    if doc is None:
        return None
    meals = _get(doc, 'meal_times', 'mealTimes', default={}) or {}
    meal_times = MealTimes(
        breakfast=meals.get('breakfast') or None,
        lunch=_time_list(meals.get('lunch')),
        dinner=meals.get('dinner') or None,
        snacks=_time_list(meals.get('snacks')),
    )
    naps = [
        NapTime(
            start_time=_get(n, 'start_time', 'startTime', default=''),
            duration=_int(n.get('duration')),
            is_flexible=bool(_get(n, 'is_flexible', 'isFlexible', default=True)),
        )
        for n in _get(doc, 'nap_times', 'napTimes', default=[]) or []
        if isinstance(n, dict)
    ]
    free_play = [
        FreePlayPeriod(
            start_time=_get(p, 'start_time', 'startTime', default=''),
            duration=_int(p.get('duration')),
            activities=list(p.get('activities') or []),
        )
        for p in _get(doc, 'free_play_periods', 'freePlayPeriods', default=[]) or []
        if isinstance(p, dict)
    ]
    return DailyRoutine(
        wake_up_time=_get(doc, 'wake_up_time', 'wakeUpTime'),
        bedtime=_get(doc, 'bedtime'),
        meal_times=meal_times,
        nap_times=naps,
        free_play_periods=free_play,
    )


def routine_to_dict(routine: DailyRoutine) -> Dict:
    return {
        'wake_up_time': routine.wake_up_time,
        'bedtime': routine.bedtime,
        'meal_times': {
            'breakfast': routine.meal_times.breakfast,
            'lunch': list(routine.meal_times.lunch),
            'dinner': routine.meal_times.dinner,
            'snacks': list(routine.meal_times.snacks),
        },
        'nap_times': [
            {'start_time': n.start_time, 'duration': n.duration, 'is_flexible': n.is_flexible}
            for n in routine.nap_times
        ],
        'free_play_periods': [
            {'start_time': p.start_time, 'duration': p.duration, 'activities': list(p.activities)}
            for p in routine.free_play_periods
        ],
    }


# Wiederkehrende Aktivitäten
def recurrence_from_dict(raw) -> Optional[RecurrenceDescriptor]:
    doc = _ensure_doc(raw)
    if doc is None:
        return None
    interval = _get(doc, 'interval')
    return RecurrenceDescriptor(
        type=_get(doc, 'type', default='weekly'),
        days=list(dict.fromkeys(d.lower() for d in doc.get('days') or [] if isinstance(d, str))),
        month_type=_get(doc, 'month_type', 'monthType'),
        interval=_int(interval) if interval is not None else None,
        unit=_get(doc, 'unit'),
        start_date=to_date(_get(doc, 'start_date', 'startDate')),
        end_date=to_date(_get(doc, 'end_date', 'endDate')),
    )


def recurrence_to_dict(rec: RecurrenceDescriptor) -> Dict:
    return {
        'type': rec.type,
        'days': list(rec.days),
        'month_type': rec.month_type,
        'interval': rec.interval,
        'unit': rec.unit,
        'start_date': _iso(rec.start_date),
        'end_date': _iso(rec.end_date),
    }


def location_from_dict(raw) -> Location:
    doc = _ensure_doc(raw) or {}
    return Location(
        name=doc.get('name') or '',
        address=doc.get('address') or '',
        notes=doc.get('notes') or '',
        travel_time=_int(_get(doc, 'travel_time', 'travelTime', default=0)),
    )


def location_to_dict(loc: Location) -> Dict:
    return {'name': loc.name, 'address': loc.address, 'notes': loc.notes, 'travel_time': loc.travel_time}


def activity_from_dict(raw) -> Optional[Activity]:
    doc = _ensure_doc(raw)
    if doc is None:
        return None
    contact = _ensure_doc(doc.get('contact')) or {}
    req = _ensure_doc(doc.get('requirements')) or {}
    activity = Activity(
        name=doc.get('name') or '',
        time=_get(doc, 'time'),
        duration=_int(doc.get('duration'), 60),
        recurrence=recurrence_from_dict(doc.get('recurrence')),
        category=doc.get('category') or 'other',
        icon=doc.get('icon') or '',
        location=location_from_dict(doc.get('location')),
        contact=Contact(
            name=contact.get('name') or '',
            phone=contact.get('phone') or '',
            email=contact.get('email') or '',
            role=contact.get('role') or '',
        ),
        requirements=Requirements(
            items=list(req.get('items') or []),
            preparation=list(req.get('preparation') or []),
            notes=req.get('notes') or '',
        ),
        assigned_children=list(_get(doc, 'assigned_children', 'assignedChildren', default=[])),
        family_id=_get(doc, 'family_id', 'familyId'),
        is_active=bool(_get(doc, 'is_active', 'isActive', default=True)),
        arrival_buffer=_int(_get(doc, 'arrival_buffer', 'arrivalBuffer', default=0)),
    )
    return activity


def activity_to_dict(activity: Activity) -> Dict:
    return {
        'name': activity.name,
        'time': activity.time,
        'duration': activity.duration,
        'recurrence': recurrence_to_dict(activity.recurrence) if activity.recurrence else None,
        'category': activity.category,
        'icon': activity.icon,
        'location': location_to_dict(activity.location),
        'contact': {
            'name': activity.contact.name,
            'phone': activity.contact.phone,
            'email': activity.contact.email,
            'role': activity.contact.role,
        },
        'requirements': {
            'items': list(activity.requirements.items),
            'preparation': list(activity.requirements.preparation),
            'notes': activity.requirements.notes,
        },
        'assigned_children': list(activity.assigned_children),
        'family_id': activity.family_id,
        'is_active': activity.is_active,
        'arrival_buffer': activity.arrival_buffer,
    }


# Einfache Wochenaktivitäten
def weekly_activity_from_dict(raw) -> Optional[WeeklyActivity]:
    doc = _ensure_doc(raw)
    if doc is None:
        return None
    sched = _ensure_doc(doc.get('schedule')) or {}
    return WeeklyActivity(
        name=doc.get('name') or '',
        category=doc.get('category') or 'other',
        schedule=ActivitySchedule(
            days=[d.lower() for d in sched.get('days') or [] if isinstance(d, str)],
            start_time=_get(sched, 'start_time', 'startTime'),
            duration=_int(sched.get('duration')),
        ),
        location=location_from_dict(doc.get('location')),
    )


def weekly_activity_to_dict(activity: WeeklyActivity) -> Dict:
    return {
        'name': activity.name,
        'category': activity.category,
        'schedule': {
            'days': list(activity.schedule.days),
            'start_time': activity.schedule.start_time,
            'duration': activity.schedule.duration,
        },
        'location': location_to_dict(activity.location),
    }


# Kinder
def school_schedule_from_dict(raw) -> Dict[str, List[SchoolBlock]]:
    doc = _ensure_doc(raw) or {}
    out = {}
    for day, blocks in doc.items():
        parsed = [
            SchoolBlock(
                start_time=_get(b, 'start_time', 'startTime', default=''),
                end_time=_get(b, 'end_time', 'endTime', default=''),
                type=b.get('type') or 'School',
            )
            for b in blocks or []
            if isinstance(b, dict)
        ]
        if parsed:
            out[day.lower()] = parsed
    return out


def school_schedule_to_dict(schedule: Dict[str, List[SchoolBlock]]) -> Dict:
    return {
        day: [{'start_time': b.start_time, 'end_time': b.end_time, 'type': b.type} for b in blocks]
        for day, blocks in schedule.items()
    }


def child_from_dict(raw) -> Optional[Child]:
    doc = _ensure_doc(raw)
    if doc is None:
        return None
    routine_raw = _get(doc, 'routine')
    if routine_raw is None:
        care = _get(doc, 'care_preferences', 'carePreferences', default={}) or {}
        routine_raw = _get(care, 'daily_routine', 'dailyRoutine')
    return Child(
        id=str(doc.get('id') or ''),
        name=doc.get('name') or '',
        date_of_birth=to_date(_get(doc, 'date_of_birth', 'dateOfBirth')),
        routine=routine_from_dict(routine_raw),
        weekly_activities=[
            a for a in (weekly_activity_from_dict(w)
                        for w in _get(doc, 'weekly_activities', 'weeklyActivities', default=[]) or [])
            if a is not None
        ],
        school_schedule=school_schedule_from_dict(_get(doc, 'school_schedule', 'schoolSchedule')),
    )
