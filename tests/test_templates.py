from datetime import date
import pytest

from familysync.templates import (
    ACTIVITY_CATEGORIES, ACTIVITY_TEMPLATES, create_default_activity, get_routine_template, get_template_by_age,
)


@pytest.mark.parametrize("group", ['infant', 'toddler', 'preschool', 'schoolAge'])
def test_every_age_group_has_a_routine(group):
    routine = get_routine_template(group)
    assert routine.wake_up_time and routine.bedtime
    assert isinstance(routine.meal_times.lunch, list)


def test_teen_has_no_template():
    assert get_routine_template('teen') is None
    assert get_routine_template(None) is None


def test_template_is_fresh_copy():
    first = get_routine_template('toddler')
    first.meal_times.lunch.append('13:00')
    first.nap_times.clear()
    second = get_routine_template('toddler')
    assert second.meal_times.lunch == ['12:00']
    assert second.nap_times[0].is_flexible is False


def test_template_by_age():
    routine = get_template_by_age(date(2021, 3, 1), today=date(2025, 6, 1))
    assert routine.bedtime == '20:00'   # preschool
    assert get_template_by_age(None) is None


def test_default_activity():
    act = create_default_activity(start_date=date(2025, 1, 6))
    assert act.name == ''
    assert act.time == '15:00'
    assert act.recurrence.type == 'weekly'
    assert act.recurrence.days == []
    assert act.recurrence.start_date == date(2025, 1, 6)
    assert create_default_activity('no_such_template', date(2025, 1, 6)).name == ''


def test_activity_from_template():
    act = create_default_activity('dentist_checkup', date(2025, 1, 6))
    assert act.name == 'Dental Checkup'
    assert act.category == 'medical'
    assert act.recurrence.type == 'custom'
    assert (act.recurrence.interval, act.recurrence.unit) == (6, 'months')
    assert 'Insurance card' in act.requirements.items

    # Listen werden kopiert, nicht geteilt
    act.requirements.items.append('Toothbrush')
    assert 'Toothbrush' not in ACTIVITY_TEMPLATES['dentist_checkup']['items']


def test_template_categories_are_known():
    assert all(t['category'] in ACTIVITY_CATEGORIES for t in ACTIVITY_TEMPLATES.values())
