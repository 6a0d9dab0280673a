import json
from datetime import date

from familysync.adapters import (
    activity_from_dict, activity_to_dict, child_from_dict, is_legacy_routine, routine_from_dict,
    routine_to_dict, weekly_activity_from_dict,
)


LEGACY_ROUTINE = {
    'wakeUpTime': '07:00',
    'bedtime': '19:30',
    'mealTimes': {'breakfast': '07:30', 'lunch': '12:00', 'dinner': '17:30', 'snacks': ['10:00']},
    'napTimes': [{'startTime': '13:00', 'duration': 90, 'isFlexible': False}],
    'freePlayPeriods': [{'startTime': '09:00', 'duration': 90, 'activities': ['creative']}],
}


def test_legacy_lunch_string_becomes_list():
    routine = routine_from_dict(LEGACY_ROUTINE)
    assert routine.meal_times.lunch == ['12:00']
    assert routine.meal_times.snacks == ['10:00']
    assert routine.nap_times[0].start_time == '13:00'
    assert routine.nap_times[0].is_flexible is False
    assert routine.free_play_periods[0].activities == ['creative']


def test_is_legacy_routine():
    assert is_legacy_routine(LEGACY_ROUTINE)
    assert is_legacy_routine(json.dumps(LEGACY_ROUTINE))
    assert not is_legacy_routine(routine_to_dict(routine_from_dict(LEGACY_ROUTINE)))
    assert not is_legacy_routine(None)


def test_empty_lunch_values_are_dropped():
    routine = routine_from_dict({'mealTimes': {'lunch': ''}})
    assert routine.meal_times.lunch == []
    routine = routine_from_dict({'meal_times': {'lunch': ['12:00', '', None]}})
    assert routine.meal_times.lunch == ['12:00']


def test_unreadable_documents():
    assert routine_from_dict(None) is None
    assert routine_from_dict('not json') is None
    assert activity_from_dict('[1, 2]') is None


def test_activity_from_firestore_shape():
    doc = {
        'name': 'Soccer Practice',
        'time': '16:00',
        'duration': 90,
        'location': {'name': 'Field', 'address': 'Main St 1', 'travelTime': 15},
        'recurrence': {'type': 'biweekly', 'days': ['Monday', 'monday'],
                       'startDate': '2025-01-06T00:00:00.000Z', 'endDate': None},
        'assignedChildren': ['c1'],
        'familyId': 'fam',
        'isActive': False,
    }
    act = activity_from_dict(doc)
    assert act.recurrence.days == ['monday']
    assert act.recurrence.start_date == date(2025, 1, 6)
    assert act.recurrence.end_date is None
    assert act.location.travel_time == 15
    assert act.assigned_children == ['c1']
    assert act.family_id == 'fam'
    assert act.is_active is False


def test_activity_document_round_trip():
    act = activity_from_dict({
        'name': 'Dentist', 'time': '09:00', 'duration': 45,
        'recurrence': {'type': 'custom', 'interval': 6, 'unit': 'months', 'start_date': '2025-02-01'},
    })
    again = activity_from_dict(activity_to_dict(act))
    assert again == act


def test_weekly_activity_and_child():
    child = child_from_dict({
        'id': 'c1',
        'name': 'Mia',
        'dateOfBirth': '2020-04-02',
        'carePreferences': {'dailyRoutine': LEGACY_ROUTINE},
        'weeklyActivities': [{'name': 'Ballet', 'schedule': {'days': ['Friday'], 'startTime': '16:00',
                                                             'duration': 60}}],
        'schoolSchedule': {'Monday': [{'startTime': '08:00', 'endTime': '12:00', 'type': 'Kindergarten'}],
                           'tuesday': []},
    })
    assert child.date_of_birth == date(2020, 4, 2)
    assert child.routine.meal_times.lunch == ['12:00']
    assert child.weekly_activities[0].schedule.days == ['friday']
    assert list(child.school_schedule) == ['monday']
    assert child.school_schedule['monday'][0].type == 'Kindergarten'

    wa = weekly_activity_from_dict({'name': 'X', 'schedule': {'days': ['monday'], 'start_time': '10:00'}})
    assert wa.schedule.duration == 0
