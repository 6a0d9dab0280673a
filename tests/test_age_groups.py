from datetime import date, datetime
import pytest

from familysync.rules import get_age_group, minutes_to_time, parse_time, resolve_age_group, time_to_minutes

TODAY = date(2025, 6, 15)


@pytest.mark.parametrize("dob,group", [
    (date(2025, 1, 1), 'infant'),
    (date(2024, 6, 16), 'infant'),
    (date(2024, 6, 15), 'toddler'),
    (date(2022, 6, 16), 'toddler'),
    (date(2022, 6, 15), 'preschool'),
    (date(2019, 6, 16), 'preschool'),
    (date(2019, 6, 15), 'schoolAge'),   # genau 6 Jahre
    (date(2012, 6, 16), 'schoolAge'),
    (date(2012, 6, 15), 'teen'),
])
def test_age_group_boundaries(dob, group):
    assert get_age_group(dob, TODAY) == group


def test_age_group_accepts_strings_and_datetimes():
    assert get_age_group('2019-06-15', TODAY) == 'schoolAge'
    assert get_age_group('2019-06-15T08:30:00Z', TODAY) == 'schoolAge'
    assert get_age_group(datetime(2023, 1, 1, 12, 0), TODAY) == 'toddler'


@pytest.mark.parametrize("value", [None, '', 'not a date', 42])
def test_unknown_date_of_birth(value):
    assert get_age_group(value, TODAY) is None


def test_resolve_age_group():
    assert resolve_age_group('toddler') == 'toddler'
    assert resolve_age_group(date(2019, 6, 15), TODAY) == 'schoolAge'
    assert resolve_age_group(None) is None


@pytest.mark.parametrize("text,minutes", [
    ('00:00', 0), ('07:30', 450), ('23:59', 1439), ('7:05', 425),
])
def test_parse_time(text, minutes):
    assert parse_time(text) == minutes
    assert minutes_to_time(minutes) == (text if len(text) == 5 else '0' + text)


@pytest.mark.parametrize("text", [None, '', '24:00', '12:60', '7pm', '12:30:00', 730])
def test_parse_time_rejects_malformed(text):
    assert parse_time(text) is None
    assert time_to_minutes(text) == 0
