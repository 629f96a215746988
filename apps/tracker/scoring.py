# apps/tracker/scoring.py
"""
نقاط الطلبة الشهرية والترتيب.

دوال بحتة: تأخذ الطلبة والحصص وتعيد قواميس جاهزة للقالب، وتُحسب من
جديد في كل طلب.
"""
from datetime import date

from .models import SessionRecord, is_active

R = SessionRecord

POINTS = {
    "attendance": {
        R.ATTENDANCE_PRESENT: 3,
        R.ATTENDANCE_LATE: 1,
        R.ATTENDANCE_MAKEUP: 1.5,
        R.ATTENDANCE_ABSENT: -2,
        R.ATTENDANCE_NOT_REQUIRED: 0,
    },
    "memorization": {
        R.MEMO_EXCELLENT: 3,
        R.MEMO_GOOD: 2,
        R.MEMO_AVERAGE: 1,
        R.MEMO_POOR: 0,
    },
    "behavior": {
        R.BEHAVIOR_CALM: 2,
        R.BEHAVIOR_MEDIUM: 1,
        R.BEHAVIOR_UNDISCIPLINED: -1,
    },
    "review": {"completed": 1, "not_completed": 0},
}

# القيمة → اسم العداد
COUNTERS = {
    "attendance": {
        R.ATTENDANCE_PRESENT: "present",
        R.ATTENDANCE_ABSENT: "absent",
        R.ATTENDANCE_LATE: "late",
        R.ATTENDANCE_MAKEUP: "makeup",
    },
    "memorization": {
        R.MEMO_EXCELLENT: "excellent",
        R.MEMO_GOOD: "good",
        R.MEMO_AVERAGE: "average",
    },
    "behavior": {
        R.BEHAVIOR_CALM: "calm",
        R.BEHAVIOR_MEDIUM: "medium",
        R.BEHAVIOR_UNDISCIPLINED: "undisciplined",
    },
}

STAT_NAMES = (
    "present", "absent", "late", "makeup",
    "excellent", "good", "average",
    "calm", "medium", "undisciplined",
    "reviewed",
)


def month_window(year, month):
    """نافذة الشهر نصف المفتوحة [أول الشهر، أول الشهر التالي)."""
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def session_records(session):
    records = session.records
    return records.all() if hasattr(records, "all") else records


def empty_stats():
    return dict.fromkeys(STAT_NAMES, 0)


def score_record(record, stats=None):
    """نقاط سجل واحد؛ يزيد العدادات في stats إن مُرِّرت."""
    points = 0
    for axis in ("attendance", "memorization", "behavior"):
        value = getattr(record, axis, None)
        if not value:
            continue
        points += POINTS[axis].get(value, 0)
        counter = COUNTERS[axis].get(value)
        if stats is not None and counter:
            stats[counter] += 1
    if getattr(record, "review", None):
        points += POINTS["review"]["completed"]
        if stats is not None:
            stats["reviewed"] += 1
    return points


def rank_students(students, sessions, start=None, end=None):
    """
    ترتيب الطلبة النشطين حسب النقاط تنازليًا.

    ``sessions`` تُقصَر على النافذة [start, end) إن حُددت. عند التعادل
    يبقى ترتيب القائمة الأصلي. ``has_sessions`` يميّز الشهر الفارغ عن
    الفوج الفارغ.
    """
    in_window = [
        s for s in sessions
        if (start is None or s.date >= start) and (end is None or s.date < end)
    ]

    scores = {}
    for student in students:
        if not is_active(student.status):
            continue
        scores[student.pk] = {
            "id": student.pk,
            "name": student.full_name,
            "student": student,
            "points": 0,
            "stats": empty_stats(),
        }

    for session in in_window:
        for record in session_records(session):
            entry = scores.get(record.student_id)
            if entry is None:
                continue
            entry["points"] += score_record(record, entry["stats"])

    entries = sorted(scores.values(), key=lambda e: e["points"], reverse=True)
    for position, entry in enumerate(entries, start=1):
        entry["rank"] = position

    return {
        "entries": entries,
        "has_sessions": bool(in_window),
        "session_count": len(in_window),
    }


def special_badges(entries):
    """الأكثر تميزًا في الحفظ، والأهدأ سلوكًا، والأكثر مراجعة. عند التعادل يفوز الأخير في الترتيب."""
    if not entries:
        return {}

    def leader(stat):
        best = entries[0]
        for entry in entries[1:]:
            if entry["stats"][stat] >= best["stats"][stat]:
                best = entry
        return best

    return {
        "most_excellent": leader("excellent"),
        "most_calm": leader("calm"),
        "most_reviewed": leader("reviewed"),
    }


def student_points(student, sessions):
    """نقاط طالب واحد وإحصائياته في مجموعة حصص (للتقرير الفردي)."""
    stats = empty_stats()
    points = 0
    for session in sessions:
        for record in session_records(session):
            if record.student_id == student.pk:
                points += score_record(record, stats)
    return {"points": points, "stats": stats}
