# src/familysync/models.py
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

WEEKDAYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']


@dataclass
class RecurrenceDescriptor:
    """Wiederholungsregel einer Aktivität (weekly, biweekly, monthly, custom)."""
    type: str = 'weekly'
    days: List[str] = field(default_factory=list)   # 'monday' … 'sunday'
    month_type: Optional[str] = None                # same_date | same_weekday
    interval: Optional[int] = None                  # nur custom
    unit: Optional[str] = None                      # days | weeks | months
    start_date: Optional[date] = None
    end_date: Optional[date] = None                 # exklusiv


@dataclass
class Location:
    name: str = ''
    address: str = ''
    notes: str = ''
    travel_time: int = 0   # Minuten


@dataclass
class Contact:
    name: str = ''
    phone: str = ''
    email: str = ''
    role: str = ''   # coach, teacher, instructor …


@dataclass
class Requirements:
    items: List[str] = field(default_factory=list)
    preparation: List[str] = field(default_factory=list)
    notes: str = ''


@dataclass
class Activity:
    """Eine wiederkehrende Aktivität einer Familie (z. B. Fußballtraining)."""
    id: Optional[int] = field(default=None, init=False)    # db-Primärschlüssel
    name: str
    time: Optional[str] = None          # HH:MM
    duration: int = 60                  # Minuten
    recurrence: Optional[RecurrenceDescriptor] = None
    category: str = 'other'
    icon: str = ''
    location: Location = field(default_factory=Location)
    contact: Contact = field(default_factory=Contact)
    requirements: Requirements = field(default_factory=Requirements)
    assigned_children: List[str] = field(default_factory=list)
    family_id: Optional[str] = None
    is_active: bool = True
    arrival_buffer: int = 0             # Minuten vor Beginn


@dataclass
class Occurrence:
    """Ein konkreter Termin, immer aus Aktivität + Regel abgeleitet."""
    date: date
    time: str
    location: Location
    duration: int
    name: str = ''


@dataclass
class NapTime:
    start_time: str
    duration: int
    is_flexible: bool = True


@dataclass
class FreePlayPeriod:
    start_time: str
    duration: int
    activities: List[str] = field(default_factory=list)


@dataclass
class MealTimes:
    breakfast: Optional[str] = None
    lunch: List[str] = field(default_factory=list)
    dinner: Optional[str] = None
    snacks: List[str] = field(default_factory=list)


@dataclass
class DailyRoutine:
    """Tagesablauf eines Kindes. Wird beim Bearbeiten komplett ersetzt."""
    wake_up_time: Optional[str] = None
    bedtime: Optional[str] = None
    meal_times: MealTimes = field(default_factory=MealTimes)
    nap_times: List[NapTime] = field(default_factory=list)
    free_play_periods: List[FreePlayPeriod] = field(default_factory=list)


@dataclass
class ActivitySchedule:
    days: List[str] = field(default_factory=list)
    start_time: Optional[str] = None
    duration: int = 0


@dataclass
class WeeklyActivity:
    """Einfache Wochenaktivität: feste Tage, eine Uhrzeit, ohne Wiederholungsregel."""
    id: Optional[int] = field(default=None, init=False)    # db-Primärschlüssel
    name: str
    category: str = 'other'
    schedule: ActivitySchedule = field(default_factory=ActivitySchedule)
    location: Location = field(default_factory=Location)


@dataclass
class SchoolBlock:
    start_time: str
    end_time: str
    type: str = 'School'


@dataclass
class Child:
    id: str
    name: str
    date_of_birth: Optional[date] = None
    routine: Optional[DailyRoutine] = None
    weekly_activities: List[WeeklyActivity] = field(default_factory=list)
    school_schedule: Dict[str, List[SchoolBlock]] = field(default_factory=dict)


@dataclass
class Finding:
    """Ein Fehler oder Hinweis aus der Validierung."""
    type: str
    message: str
    severity: str = 'medium'   # high | medium | low
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        out = {'type': self.type, 'message': self.message, 'severity': self.severity}
        if self.suggestion:
            out['suggestion'] = self.suggestion
        return out
