import json
import os
import tempfile
from datetime import date
import pytest

from familysync.data import Database
from familysync.models import (
    Activity, ActivitySchedule, Child, DailyRoutine, Location, MealTimes, NapTime,
    RecurrenceDescriptor, SchoolBlock, WeeklyActivity,
)


@pytest.fixture
def temp_db():
    fd, path = tempfile.mkstemp()
    os.close(fd)
    db = Database(db_path=path)
    try:
        yield db
    finally:
        # Erst die DB-Verbindung schließen, dann die Datei löschen
        db.close()
        os.remove(path)


def make_child():
    return Child(
        id='c1', name='Mia', date_of_birth=date(2021, 3, 1),
        routine=DailyRoutine(wake_up_time='07:00', bedtime='19:30',
                             meal_times=MealTimes(breakfast='07:30', lunch=['12:00']),
                             nap_times=[NapTime('13:00', 60)]),
        school_schedule={'monday': [SchoolBlock('08:00', '12:00', 'Kindergarten')]},
    )


def test_save_and_load_child(temp_db):
    temp_db.save_child(make_child())
    loaded = temp_db.load_child('c1')
    assert loaded == make_child()
    assert temp_db.load_child('nope') is None


def test_save_child_twice_updates(temp_db):
    child = make_child()
    temp_db.save_child(child)
    child.name = 'Mia Sophie'
    temp_db.save_child(child)
    children = temp_db.load_children()
    assert [c.name for c in children] == ['Mia Sophie']


def test_routine_is_replaced_wholesale(temp_db):
    temp_db.save_child(make_child())
    temp_db.save_routine('c1', DailyRoutine(wake_up_time='06:30'))
    routine = temp_db.load_routine('c1')
    assert routine.wake_up_time == '06:30'
    assert routine.nap_times == []
    with pytest.raises(KeyError):
        temp_db.save_routine('unknown', DailyRoutine())


def test_activity_crud(temp_db):
    act = Activity(name='Soccer', time='16:00', duration=90, family_id='fam',
                   recurrence=RecurrenceDescriptor(type='weekly', days=['tuesday'], start_date=date(2025, 1, 6)),
                   location=Location(name='Field', address='Main St 1'))
    temp_db.save_activity(act)
    assert act.id is not None
    other = Activity(name='Old', time='10:00', family_id='fam', is_active=False)
    temp_db.save_activity(other)

    assert [a.name for a in temp_db.load_activities('fam')] == ['Soccer', 'Old']
    assert [a.name for a in temp_db.load_activities(active_only=True)] == ['Soccer']
    assert temp_db.load_activities('other') == []

    act.duration = 60
    temp_db.save_activity(act)
    loaded = temp_db.load_activities(active_only=True)[0]
    assert loaded.duration == 60
    assert loaded.recurrence.start_date == date(2025, 1, 6)

    temp_db.delete_activity(act.id)
    assert [a.name for a in temp_db.load_activities()] == ['Old']


def test_weekly_activities_follow_child(temp_db):
    temp_db.save_child(make_child())
    wa = WeeklyActivity(name='Ballet', schedule=ActivitySchedule(['friday'], '16:00', 60))
    temp_db.save_weekly_activity('c1', wa)
    assert wa.id is not None
    assert [a.name for a in temp_db.load_child('c1').weekly_activities] == ['Ballet']

    temp_db.delete_child('c1')
    assert temp_db.load_weekly_activities('c1') == []


def test_legacy_routine_migration(temp_db):
    legacy = {'wakeUpTime': '07:00', 'mealTimes': {'breakfast': '07:30', 'lunch': '12:00'}}
    temp_db.conn.execute(
        "INSERT INTO children (id, name, routine) VALUES (?,?,?)", ('c2', 'Ben', json.dumps(legacy))
    )
    temp_db.conn.commit()
    assert temp_db.find_legacy_routines() == ['c2']
    # Laden normalisiert bereits
    assert temp_db.load_routine('c2').meal_times.lunch == ['12:00']

    report = temp_db.migrate_legacy_routines()
    assert report == {'count': 1, 'ids': ['c2']}
    assert temp_db.find_legacy_routines() == []
    stored = json.loads(temp_db.conn.execute("SELECT routine FROM children WHERE id='c2'").fetchone()[0])
    assert stored['meal_times']['lunch'] == ['12:00']


def test_sql_backup_restore(tmp_path):
    db1 = Database(str(tmp_path / 'original.db'))
    db1.save_child(make_child())
    db1.save_activity(Activity(name='Soccer', time='16:00'))
    dump = tmp_path / 'dump.sql'
    db1.export_to_sql(str(dump))
    db1.close()

    db2 = Database(str(tmp_path / 'target.db'))
    db2.save_activity(Activity(name='Will be replaced', time='10:00'))
    db2.import_from_sql(str(dump))
    assert [a.name for a in db2.load_activities()] == ['Soccer']
    assert db2.load_child('c1') == make_child()
    db2.close()
