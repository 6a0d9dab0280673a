import os
from datetime import date

import familysync.main as main
from familysync.data import Database
from familysync.models import Child, DailyRoutine, FreePlayPeriod, MealTimes, NapTime


def setup_wizard(monkeypatch, tmp_path, answers):
    cfg = {'occurrence_count': 3, 'default_age_group': 'preschool',
           'db_path': str(tmp_path / 'wizard.db'), 'export_dir': str(tmp_path)}
    monkeypatch.setattr(main, 'load_config', lambda: cfg)
    it = iter(answers)
    monkeypatch.setattr('builtins.input', lambda *a: next(it))
    return cfg


def store_child(path):
    db = Database(path)
    db.save_child(Child(
        id='c1', name='Mia',
        routine=DailyRoutine(
            wake_up_time='07:00', bedtime='19:30',
            meal_times=MealTimes(breakfast='07:30', lunch=['11:30'], dinner='15:30', snacks=['09:45']),
            nap_times=[NapTime('12:15', 60)],
            free_play_periods=[FreePlayPeriod('08:15', 90), FreePlayPeriod('14:00', 60)],
        ),
    ))
    db.close()


def test_quit_on_empty_database(monkeypatch, tmp_path, capsys):
    setup_wizard(monkeypatch, tmp_path, ['1', '2', 'q'])
    main.run_wizard()
    out = capsys.readouterr().out
    assert 'No activities stored yet.' in out
    assert 'No children stored yet.' in out


def test_edit_routine_saves_valid_changes(monkeypatch, tmp_path, capsys):
    # Uhrzeit ändern, Rest mit Enter übernehmen, speichern
    cfg = setup_wizard(monkeypatch, tmp_path, ['2', '1', '06:45', '', '', '', '', '', '', 'y', 'q'])
    store_child(cfg['db_path'])
    main.run_wizard()
    assert 'Routine saved.' in capsys.readouterr().out

    db = Database(cfg['db_path'])
    routine = db.load_routine('c1')
    db.close()
    assert routine.wake_up_time == '06:45'
    assert routine.meal_times.lunch == ['11:30']
    assert routine.nap_times == [NapTime('12:15', 60)]


def test_invalid_routine_is_not_saved(monkeypatch, tmp_path, capsys):
    # Mittagessen direkt nach dem Frühstück -> Fehler
    cfg = setup_wizard(monkeypatch, tmp_path, ['2', '1', '', '', '', '07:45', '', '', '', 'q'])
    store_child(cfg['db_path'])
    main.run_wizard()
    out = capsys.readouterr().out
    assert 'not saved' in out

    db = Database(cfg['db_path'])
    assert db.load_routine('c1').meal_times.lunch == ['11:30']
    db.close()


def test_export_weekly_plan(monkeypatch, tmp_path):
    cfg = setup_wizard(monkeypatch, tmp_path, ['3', '1', 'q'])
    store_child(cfg['db_path'])
    main.run_wizard()
    assert os.path.exists(os.path.join(cfg['export_dir'], 'weekly_plan_c1.pdf'))


def test_choose_child_rejects_bad_number(monkeypatch, tmp_path):
    store_child(str(tmp_path / 'w.db'))
    db = Database(str(tmp_path / 'w.db'))
    monkeypatch.setattr('builtins.input', lambda *a: '7')
    assert main.choose_child(db) is None
    monkeypatch.setattr('builtins.input', lambda *a: '1')
    assert main.choose_child(db).name == 'Mia'
    db.close()


def test_show_upcoming_lists_dates(monkeypatch, tmp_path, capsys):
    from familysync.models import Activity, RecurrenceDescriptor
    db = Database(str(tmp_path / 'w.db'))
    db.save_activity(Activity(name='Soccer', time='16:00',
                              recurrence=RecurrenceDescriptor(days=['tuesday'], start_date=date(2025, 1, 6))))
    main.show_upcoming(db, 2)
    db.close()
    out = capsys.readouterr().out
    assert 'Soccer' in out
    assert out.count(' 16:00 Soccer') == 2


def test_statistics_print_summary_and_write_charts(monkeypatch, tmp_path, capsys):
    from familysync.models import ActivitySchedule, WeeklyActivity
    cfg = setup_wizard(monkeypatch, tmp_path, ['5', '1', 'q'])
    store_child(cfg['db_path'])
    db = Database(cfg['db_path'])
    db.save_weekly_activity('c1', WeeklyActivity(name='Soccer', category='sports',
                                                 schedule=ActivitySchedule(['monday', 'wednesday'], '16:00', 90)))
    db.save_weekly_activity('c1', WeeklyActivity(name='Piano', category='creative',
                                                 schedule=ActivitySchedule(['monday'], '17:30', 45)))
    db.close()

    main.run_wizard()
    out = capsys.readouterr().out
    assert 'Mia: 3 activities, 225 min per week' in out
    assert 'Busiest day: monday' in out
    assert (tmp_path / 'categories_c1.png').exists()
    assert (tmp_path / 'weekdays_c1.png').exists()
