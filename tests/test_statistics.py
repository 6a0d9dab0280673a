from familysync.models import ActivitySchedule, WeeklyActivity
from familysync.statistics import count_by_weekday, minutes_by_category, summarize_activities


def make_activities():
    return [
        WeeklyActivity(name='Soccer', category='sports', schedule=ActivitySchedule(['monday', 'wednesday'], '16:00', 90)),
        WeeklyActivity(name='Piano', category='creative', schedule=ActivitySchedule(['monday'], '17:00', 45)),
        # unbekannter Tag zählt nicht
        WeeklyActivity(name='Art', category='creative', schedule=ActivitySchedule(['saturday', 'funday'], '10:00', 60)),
    ]


def test_minutes_by_category():
    assert minutes_by_category(make_activities()) == {'creative': 105, 'sports': 180}


def test_count_by_weekday():
    counts = count_by_weekday(make_activities())
    assert counts['monday'] == 2
    assert counts['wednesday'] == 1
    assert counts['saturday'] == 1
    assert sum(counts.values()) == 4
    assert list(counts)[0] == 'monday'


def test_summary_against_daily_limit():
    summary = summarize_activities(make_activities(), 'toddler')
    assert summary == {
        'total_activities': 4,
        'total_minutes': 285,
        'average_per_day': 0.6,
        'busiest_day': 'monday',
        'days_over_limit': [],
    }
    assert summarize_activities(make_activities(), 'infant')['days_over_limit'] == ['monday']
    # teen hat kein Tageslimit
    assert summarize_activities(make_activities(), 'teen')['days_over_limit'] == []


def test_summary_empty():
    summary = summarize_activities([])
    assert summary['total_activities'] == 0
    assert summary['busiest_day'] is None
