import csv
import logging
from typing import Dict, List

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from familysync.models import Finding, Occurrence
from familysync.recurrence import DAY_NAMES, weekday_name


def format_occurrence(occ: Occurrence) -> str:
    """z. B. 'Tue 2025-01-07 16:00 Soccer Practice (90 min) @ Field'"""
    short = DAY_NAMES[weekday_name(occ.date)]['short']
    text = f"{short} {occ.date.isoformat()} {occ.time}"
    if occ.name:
        text += f" {occ.name}"
    text += f" ({occ.duration} min)"
    where = getattr(occ.location, 'name', '') if occ.location else ''
    if where:
        text += f" @ {where}"
    return text


def format_finding(finding: Finding) -> str:
    text = f"[{finding.severity}] {finding.message}"
    if finding.suggestion:
        text += f" ({finding.suggestion})"
    return text


def export_occurrences_csv(occurrences: List[Occurrence], filename: str):
    with open(filename, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(["date", "weekday", "time", "name", "duration", "location"])
        for occ in occurrences:
            writer.writerow([
                occ.date.isoformat(),
                DAY_NAMES[weekday_name(occ.date)]['full'],
                occ.time,
                occ.name,
                occ.duration,
                getattr(occ.location, 'name', '') if occ.location else '',
            ])


def _schedule_lines(result: Dict) -> List[tuple]:
    """(Schriftart, Text)-Zeilen für den PDF-Export eines Wochenplans."""
    lines = []
    meta = result.get('metadata', {})
    lines.append(('Helvetica', f"Age group: {meta.get('age_group', '-')}   "
                               f"Activities: {meta.get('total_activities', 0)}   "
                               f"Balance score: {meta.get('balance_score', '-')}"))
    for day, day_schedule in result.get('schedule', {}).items():
        lines.append(('Helvetica-Bold', f"{DAY_NAMES[day]['full']} {day_schedule.date.isoformat()}"))
        for ev in day_schedule.events:
            label = f"  {ev.start_time}-{ev.end_time}  {ev.title}"
            if ev.location:
                label += f" @ {ev.location}"
            lines.append(('Helvetica', label))
    if result.get('conflicts'):
        lines.append(('Helvetica-Bold', 'Conflicts'))
        for c in result['conflicts']:
            day = c.get('day')
            prefix = f"{DAY_NAMES[day]['short']}: " if day in DAY_NAMES else ''
            lines.append(('Helvetica', f"  [{c['severity']}] {prefix}{c['message']}"))
    return lines


def export_schedule_pdf(result: Dict, filename: str, title: str = 'FamilySync weekly plan'):
    """Wochenplan (Ergebnis von generate_weekly_schedule) als PDF."""
    c = canvas.Canvas(filename, pagesize=letter)
    w, h = letter
    y = h - 40
    c.setFont('Helvetica-Bold', 14)
    c.drawString(50, y, title)
    y -= 30
    for font, text in _schedule_lines(result):
        if y < 60:
            c.showPage()
            y = h - 40
        c.setFont(font, 11 if font.endswith('Bold') else 10)
        c.drawString(50, y, text)
        y -= 18 if font.endswith('Bold') else 14
    c.save()
    logging.info(f"Exported weekly plan to {filename}")
