# apps/tracker/stats.py
"""إحصائيات الشهر للفوج أو لطالب واحد."""
import calendar
from datetime import date

from .models import DailySession, SessionRecord
from .recorder import WEEK_START
from .scoring import session_records

R = SessionRecord

ATTENDANCE_KEYS = (R.ATTENDANCE_PRESENT, R.ATTENDANCE_ABSENT, R.ATTENDANCE_LATE, R.ATTENDANCE_MAKEUP)
BEHAVIOR_KEYS = (R.BEHAVIOR_CALM, R.BEHAVIOR_MEDIUM, R.BEHAVIOR_UNDISCIPLINED)
EVALUATION_KEYS = (R.MEMO_EXCELLENT, R.MEMO_GOOD, R.MEMO_AVERAGE, R.MEMO_POOR)
EVALUATION_NONE = "none"

TEACHING_TYPES = tuple(
    value for value, _ in DailySession.TYPE_CHOICES if value != DailySession.TYPE_HOLIDAY
)


def monthly_statistics(sessions, student_id=None, active_ids=None):
    """
    عدّادات الحضور والسلوك والتقييم لحصص الشهر.

    ``sessions`` هي حصص الشهر مسبقًا. إذا مُرِّر student_id تُحسب
    سجلات هذا الطالب فقط، ولا تُحسب أنواع الحصص. إذا مُرِّرت active_ids
    تُستبعد سجلات من ليسوا في الفوج النشط.
    """
    sessions = list(sessions)

    stats = {
        "total_records": 0,
        "attendance": dict.fromkeys(ATTENDANCE_KEYS, 0),
        "behavior": dict.fromkeys(BEHAVIOR_KEYS, 0),
        "evaluation": dict.fromkeys(EVALUATION_KEYS + (EVALUATION_NONE,), 0),
        "sessions": len(sessions),
        "holidays": sum(1 for s in sessions if s.is_holiday),
        "session_types": dict.fromkeys(TEACHING_TYPES, 0),
    }

    for session in sessions:
        if student_id is None and not session.is_holiday:
            stats["session_types"][session.session_type] += 1
        for record in session_records(session):
            if student_id is not None and record.student_id != student_id:
                continue
            if active_ids is not None and record.student_id not in active_ids:
                continue
            stats["total_records"] += 1
            if record.attendance in stats["attendance"]:
                stats["attendance"][record.attendance] += 1
            if record.behavior in stats["behavior"]:
                stats["behavior"][record.behavior] += 1
            if record.memorization in stats["evaluation"]:
                stats["evaluation"][record.memorization] += 1
            else:
                stats["evaluation"][EVALUATION_NONE] += 1

    return stats


def student_days(sessions, student_id):
    """تاريخ → (الحصة، السجل). يوم العطلة يظهر حتى بدون سجل."""
    days = {}
    for session in sessions:
        record = next(
            (r for r in session_records(session) if r.student_id == student_id), None
        )
        if record is not None or session.is_holiday:
            days[session.date] = (session, record)
    return days


def student_calendar(sessions, student_id, year, month):
    """أسابيع الشهر لطالب واحد؛ كل خانة: التاريخ والحصة والسجل."""
    days = student_days(sessions, student_id)
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]

    cells = [None] * ((first.weekday() - WEEK_START) % 7)
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        session, record = days.get(day, (None, None))
        if session is not None and session.is_holiday:
            state = DailySession.TYPE_HOLIDAY
        elif record is not None:
            state = record.attendance
        else:
            state = None
        cells.append({"date": day, "session": session, "record": record, "state": state})

    while len(cells) % 7:
        cells.append(None)
    return [cells[i:i + 7] for i in range(0, len(cells), 7)]
