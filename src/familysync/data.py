import json
import os
import sqlite3
from typing import List, Optional
from familysync.adapters import (
    activity_from_dict, activity_to_dict, child_from_dict, is_legacy_routine, routine_from_dict,
    routine_to_dict, school_schedule_to_dict, weekly_activity_from_dict, weekly_activity_to_dict,
)
from familysync.models import Activity, Child, DailyRoutine, WeeklyActivity
import logging


def default_db_path() -> str:
    return os.path.join(os.path.expanduser("~"), ".familysync", "familysync.db")


class Database:
    def __init__(self, db_path: str = None):
        try:
            self.db_path = db_path or default_db_path()
            if self.db_path != ':memory:':
                os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row
            self.conn.execute("PRAGMA foreign_keys = ON;")
            self._ensure_tables()
        except sqlite3.Error as e:
            logging.error(f"Database connection error: {e}")
            raise

    def _ensure_tables(self):
        cur = self.conn.cursor()
        # Kinder; Tagesablauf als JSON-Dokument
        cur.execute("""
        CREATE TABLE IF NOT EXISTS children (
          id TEXT PRIMARY KEY,
          name TEXT NOT NULL,
          date_of_birth TEXT,
          school_schedule TEXT,
          routine TEXT
        )""")

        # Wiederkehrende Aktivitäten einer Familie
        cur.execute("""
        CREATE TABLE IF NOT EXISTS activities (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          family_id TEXT,
          is_active INTEGER NOT NULL DEFAULT 1,
          data TEXT NOT NULL
        )""")

        # Einfache Wochenaktivitäten je Kind
        cur.execute("""
        CREATE TABLE IF NOT EXISTS weekly_activities (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          child_id TEXT NOT NULL,
          data TEXT NOT NULL,
          FOREIGN KEY(child_id) REFERENCES children(id) ON DELETE CASCADE
        )""")

        self.conn.commit()

    # Export/Import
    def export_to_sql(self, filename: str):
        """Dump aller Tabellen als SQL-Statements"""
        with open(filename, 'w', encoding='utf-8') as f:
            for line in self.conn.iterdump():
                f.write(f"{line}\n")

    def import_from_sql(self, filename: str):
        """Vorhandene Tabellen löschen, Dump einlesen und ausführen"""
        with open(filename, 'r', encoding='utf-8') as f:
            script = f.read()
        cur = self.conn.cursor()
        for tbl in ('weekly_activities', 'activities', 'children'):
            cur.execute(f"DROP TABLE IF EXISTS {tbl}")
        self.conn.commit()
        self.conn.executescript(script)
        self.conn.commit()
        logging.info(f"Imported database dump from {filename}")

    # Kinder
    def _child_from_row(self, row) -> Child:
        child = child_from_dict({
            'id': row['id'],
            'name': row['name'],
            'date_of_birth': row['date_of_birth'],
            'school_schedule': row['school_schedule'],
            'routine': row['routine'],
        })
        child.weekly_activities = self.load_weekly_activities(child.id)
        return child

    def save_child(self, child: Child):
        dob = child.date_of_birth.isoformat() if child.date_of_birth else None
        school = json.dumps(school_schedule_to_dict(child.school_schedule))
        routine = json.dumps(routine_to_dict(child.routine)) if child.routine else None
        self.conn.execute(
            "INSERT INTO children (id, name, date_of_birth, school_schedule, routine) VALUES (?,?,?,?,?) "
            "ON CONFLICT(id) DO UPDATE SET name=excluded.name, date_of_birth=excluded.date_of_birth, "
            "school_schedule=excluded.school_schedule, routine=excluded.routine",
            (child.id, child.name, dob, school, routine)
        )
        self.conn.commit()
        logging.info(f"Saved child id={child.id}")

    def load_child(self, child_id: str) -> Optional[Child]:
        row = self.conn.execute("SELECT * FROM children WHERE id=?", (child_id,)).fetchone()
        return self._child_from_row(row) if row else None

    def load_children(self) -> List[Child]:
        rows = self.conn.execute("SELECT * FROM children ORDER BY name, id").fetchall()
        return [self._child_from_row(row) for row in rows]

    def delete_child(self, child_id: str):
        self.conn.execute("DELETE FROM children WHERE id=?", (child_id,))
        self.conn.commit()

    # Tagesablauf
    def save_routine(self, child_id: str, routine: DailyRoutine):
        """Ersetzt den kompletten Tagesablauf des Kindes."""
        cur = self.conn.execute(
            "UPDATE children SET routine=? WHERE id=?",
            (json.dumps(routine_to_dict(routine)), child_id)
        )
        if cur.rowcount == 0:
            raise KeyError(f"Unknown child id: {child_id}")
        self.conn.commit()

    def load_routine(self, child_id: str) -> Optional[DailyRoutine]:
        row = self.conn.execute("SELECT routine FROM children WHERE id=?", (child_id,)).fetchone()
        if not row or not row['routine']:
            return None
        return routine_from_dict(row['routine'])

    def find_legacy_routines(self) -> List[str]:
        """IDs der Kinder, deren Ablauf noch `lunch` als einzelnen String speichert."""
        rows = self.conn.execute("SELECT id, routine FROM children WHERE routine IS NOT NULL").fetchall()
        return [row['id'] for row in rows if is_legacy_routine(row['routine'])]

    def migrate_legacy_routines(self) -> dict:
        """Schreibt Alt-Datensätze in kanonischer Form zurück."""
        ids = self.find_legacy_routines()
        for child_id in ids:
            self.save_routine(child_id, self.load_routine(child_id))
        if ids:
            logging.info(f"Migrated {len(ids)} legacy routines")
        return {'count': len(ids), 'ids': ids}

    # Wiederkehrende Aktivitäten
    def save_activity(self, activity: Activity):
        data = json.dumps(activity_to_dict(activity))
        if activity.id is not None:
            self.conn.execute(
                "UPDATE activities SET family_id=?, is_active=?, data=? WHERE id=?",
                (activity.family_id, int(activity.is_active), data, activity.id)
            )
        else:
            cur = self.conn.execute(
                "INSERT INTO activities (family_id, is_active, data) VALUES (?,?,?)",
                (activity.family_id, int(activity.is_active), data)
            )
            activity.id = cur.lastrowid
        self.conn.commit()

    def load_activities(self, family_id: Optional[str] = None, active_only: bool = False) -> List[Activity]:
        query = "SELECT id, data FROM activities WHERE 1=1"
        params = []
        if family_id is not None:
            query += " AND family_id=?"
            params.append(family_id)
        if active_only:
            query += " AND is_active=1"
        out = []
        for row in self.conn.execute(query + " ORDER BY id", params):
            activity = activity_from_dict(row['data'])
            if activity is None:
                logging.error(f"Skipping unreadable activity row id={row['id']}")
                continue
            activity.id = row['id']
            out.append(activity)
        return out

    def delete_activity(self, activity_id: int):
        self.conn.execute("DELETE FROM activities WHERE id=?", (activity_id,))
        self.conn.commit()

    # Wochenaktivitäten
    def save_weekly_activity(self, child_id: str, activity: WeeklyActivity):
        data = json.dumps(weekly_activity_to_dict(activity))
        if activity.id is not None:
            self.conn.execute(
                "UPDATE weekly_activities SET child_id=?, data=? WHERE id=?",
                (child_id, data, activity.id)
            )
        else:
            cur = self.conn.execute(
                "INSERT INTO weekly_activities (child_id, data) VALUES (?,?)",
                (child_id, data)
            )
            activity.id = cur.lastrowid
        self.conn.commit()

    def load_weekly_activities(self, child_id: str) -> List[WeeklyActivity]:
        out = []
        rows = self.conn.execute(
            "SELECT id, data FROM weekly_activities WHERE child_id=? ORDER BY id", (child_id,)
        )
        for row in rows:
            activity = weekly_activity_from_dict(row['data'])
            if activity is None:
                continue
            activity.id = row['id']
            out.append(activity)
        return out

    def delete_weekly_activity(self, activity_id: int):
        self.conn.execute("DELETE FROM weekly_activities WHERE id=?", (activity_id,))
        self.conn.commit()

    def close(self):
        """Schließe die Datenbankverbindung sauber"""
        if self.conn:
            self.conn.close()
            self.conn = None
