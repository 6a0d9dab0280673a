# src/familysync/templates.py
from datetime import date
from typing import Optional

from .adapters import routine_from_dict
from .models import Activity, DailyRoutine, RecurrenceDescriptor, Requirements
from .rules import get_age_group

# Standard-Tagesabläufe je Altersgruppe (Dokumentform, wie gespeichert)
ROUTINE_TEMPLATES = {
    'infant': {
        'name': 'Infant (0-12 months)',
        'description': 'Typical routine for babies with frequent feeding and naps',
        'daily_routine': {
            'wake_up_time': '06:00',
            'bedtime': '19:00',
            'meal_times': {
                'breakfast': '06:30',
                'lunch': ['11:30'],
                'dinner': '17:00',
                'snacks': ['09:00', '14:00', '16:00'],
            },
            'nap_times': [
                {'start_time': '08:30', 'duration': 45},
                {'start_time': '12:30', 'duration': 90},
                {'start_time': '15:30', 'duration': 45},
            ],
            'free_play_periods': [
                {'start_time': '07:30', 'duration': 60, 'activities': ['tummy_time', 'sensory']},
                {'start_time': '10:00', 'duration': 30, 'activities': ['interactive', 'music']},
                {'start_time': '14:00', 'duration': 30, 'activities': ['outdoor', 'exploration']},
            ],
        },
    },
    'toddler': {
        'name': 'Toddler (1-3 years)',
        'description': 'Active routine with one nap and structured activities',
        'daily_routine': {
            'wake_up_time': '07:00',
            'bedtime': '19:30',
            'meal_times': {
                'breakfast': '07:30',
                'lunch': ['12:00'],
                'dinner': '17:30',
                'snacks': ['10:00', '15:00'],
            },
            'nap_times': [
                {'start_time': '13:00', 'duration': 90, 'is_flexible': False},
            ],
            'free_play_periods': [
                {'start_time': '09:00', 'duration': 90, 'activities': ['creative', 'educational']},
                {'start_time': '15:00', 'duration': 60, 'activities': ['outdoor', 'physical']},
                {'start_time': '16:30', 'duration': 30, 'activities': ['quiet', 'reading']},
            ],
        },
    },
    'preschool': {
        'name': 'Preschool (3-5 years)',
        'description': 'School-ready routine with optional quiet time',
        'daily_routine': {
            'wake_up_time': '07:00',
            'bedtime': '20:00',
            'meal_times': {
                'breakfast': '07:30',
                'lunch': ['12:00'],
                'dinner': '18:00',
                'snacks': ['10:00', '15:30'],
            },
            'nap_times': [
                {'start_time': '13:00', 'duration': 60},
            ],
            'free_play_periods': [
                {'start_time': '08:30', 'duration': 90, 'activities': ['educational', 'creative']},
                {'start_time': '14:30', 'duration': 90, 'activities': ['outdoor', 'social']},
                {'start_time': '16:30', 'duration': 60, 'activities': ['free_choice']},
            ],
        },
    },
    'schoolAge': {
        'name': 'School Age (6-12 years)',
        'description': 'After-school routine with homework time',
        'daily_routine': {
            'wake_up_time': '06:30',
            'bedtime': '21:00',
            'meal_times': {
                'breakfast': '07:00',
                'lunch': [],   # meist in der Schule
                'dinner': '18:30',
                'snacks': ['15:30'],
            },
            'nap_times': [],
            'free_play_periods': [
                {'start_time': '15:00', 'duration': 30, 'activities': ['snack', 'decompress']},
                {'start_time': '16:00', 'duration': 60, 'activities': ['homework', 'study']},
                {'start_time': '17:00', 'duration': 60, 'activities': ['outdoor', 'sports']},
                {'start_time': '19:30', 'duration': 60, 'activities': ['free_time', 'hobbies']},
            ],
        },
    },
}

ACTIVITY_CATEGORIES = {
    'sports': 'Sports & Physical',
    'education': 'Education & Learning',
    'creative': 'Creative Arts',
    'social': 'Social Activities',
    'medical': 'Medical & Health',
    'other': 'Other',
}

ACTIVITY_TEMPLATES = {
    'soccer_practice': {
        'name': 'Soccer Practice',
        'category': 'sports',
        'icon': '⚽',
        'duration': 90,
        'items': ['Soccer cleats', 'Shin guards', 'Water bottle', 'Soccer ball'],
        'recurrence': {'type': 'weekly', 'days': ['tuesday', 'thursday']},
        'arrival_buffer': 15,
        'notes': 'Bring weather-appropriate clothing',
    },
    'piano_lessons': {
        'name': 'Piano Lessons',
        'category': 'creative',
        'icon': '🎹',
        'duration': 45,
        'items': ['Sheet music', 'Music books', 'Pencil'],
        'recurrence': {'type': 'weekly', 'days': ['wednesday']},
        'arrival_buffer': 10,
        'notes': 'Practice pieces beforehand',
    },
    'swimming_lessons': {
        'name': 'Swimming Lessons',
        'category': 'sports',
        'icon': '🏊',
        'duration': 60,
        'items': ['Swimsuit', 'Towel', 'Goggles', 'Swim cap'],
        'recurrence': {'type': 'weekly', 'days': ['monday', 'friday']},
        'arrival_buffer': 20,
        'notes': 'Arrive early for changing time',
    },
    'tutoring': {
        'name': 'Tutoring Session',
        'category': 'education',
        'icon': '📖',
        'duration': 60,
        'items': ['Textbooks', 'Notebooks', 'Homework', 'Calculator'],
        'recurrence': {'type': 'weekly', 'days': ['tuesday']},
        'arrival_buffer': 5,
        'notes': 'Bring current homework and questions',
    },
    'art_class': {
        'name': 'Art Class',
        'category': 'creative',
        'icon': '🎨',
        'duration': 90,
        'items': ['Art supplies', 'Apron', 'Water bottle'],
        'recurrence': {'type': 'weekly', 'days': ['saturday']},
        'arrival_buffer': 10,
        'notes': 'Wear clothes that can get messy',
    },
    'dentist_checkup': {
        'name': 'Dental Checkup',
        'category': 'medical',
        'icon': '🦷',
        'duration': 45,
        'items': ['Insurance card', 'Previous X-rays', 'List of medications'],
        'recurrence': {'type': 'custom', 'interval': 6, 'unit': 'months'},
        'arrival_buffer': 15,
        'notes': 'Brush teeth before appointment',
    },
}


def get_routine_template(age_group: str) -> Optional[DailyRoutine]:
    """Frische Kopie des Standard-Ablaufs; None für unbekannte Gruppen (z. B. teen)."""
    template = ROUTINE_TEMPLATES.get(age_group)
    if template is None:
        return None
    return routine_from_dict(template['daily_routine'])


def get_template_by_age(date_of_birth, today: Optional[date] = None) -> Optional[DailyRoutine]:
    return get_routine_template(get_age_group(date_of_birth, today))


def create_default_activity(template_key: Optional[str] = None, start_date: Optional[date] = None) -> Activity:
    """Neue Aktivität, optional mit Vorgaben aus ACTIVITY_TEMPLATES."""
    start = start_date or date.today()
    activity = Activity(
        name='',
        time='15:00',
        duration=60,
        recurrence=RecurrenceDescriptor(type='weekly', days=[], start_date=start),
        icon='📌',
    )
    template = ACTIVITY_TEMPLATES.get(template_key) if template_key else None
    if template is None:
        return activity

    rec = template['recurrence']
    activity.name = template['name']
    activity.category = template['category']
    activity.icon = template['icon']
    activity.duration = template['duration']
    activity.arrival_buffer = template['arrival_buffer']
    activity.requirements = Requirements(items=list(template['items']), notes=template['notes'])
    activity.recurrence = RecurrenceDescriptor(
        type=rec['type'],
        days=list(rec.get('days', [])),
        interval=rec.get('interval'),
        unit=rec.get('unit'),
        start_date=start,
    )
    return activity
