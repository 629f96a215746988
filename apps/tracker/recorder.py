# apps/tracker/recorder.py
"""تسجيل الحصص اليومية وسجلات الطلبة داخلها."""
import calendar
import logging
from datetime import date, timedelta

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from .models import DailySession, SessionRecord, Student, normalize_record_fields

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("attendance", "memorization", "review", "behavior", "notes")

# السبت أول أيام الأسبوع في التقويم
WEEK_START = calendar.SATURDAY

DAY_RECORDED = "recorded"
DAY_HOLIDAY = "holiday"
DAY_MISSED = "missed"
DAY_UPCOMING = "upcoming"


def default_record(student_id):
    return {
        "student_id": student_id,
        "attendance": SessionRecord.ATTENDANCE_PRESENT,
        "memorization": None,
        "review": False,
        "behavior": SessionRecord.BEHAVIOR_CALM,
        "notes": "",
    }


def get_session(owner, day):
    return (DailySession.objects
            .filter(owner=owner, date=day)
            .prefetch_related("records")
            .first())


def initial_records(students, session=None):
    """
    صفوف نموذج الحصة: السجل المحفوظ إن وُجد، وإلا القيم الافتراضية.
    يوم العطلة لا يحمل أي صفوف.
    """
    if session is not None and session.is_holiday:
        return []
    existing = {}
    if session is not None:
        existing = {r.student_id: r for r in session.records.all()}

    rows = []
    for student in students:
        rec = existing.get(student.pk)
        if rec is None:
            row = default_record(student.pk)
        else:
            row = {"student_id": student.pk}
            row.update({f: getattr(rec, f) for f in RECORD_FIELDS})
        row["student"] = student
        rows.append(row)
    return rows


@transaction.atomic
def record_session(owner, day, session_type, records=()):
    """
    يحفظ حصة اليوم كاملة (إنشاء أو استبدال).
    records: قائمة قواميس فيها student_id و attendance و memorization و review و behavior و notes.
    """
    valid_types = dict(DailySession.TYPE_CHOICES)
    if session_type not in valid_types:
        raise ValidationError(f"نوع الحصة غير صالح: {session_type}")

    session, created = DailySession.objects.update_or_create(
        owner=owner, date=day, defaults={"session_type": session_type}
    )
    if session.is_holiday:
        session.records.all().delete()
        logger.info("holiday recorded for %s (owner=%s)", day, owner.pk)
        return session

    student_ids = [r["student_id"] for r in records]
    # سجلات الطلبة غير النشطين تبقى ما لم تُرسَل من جديد
    session.records.filter(
        Q(student__status=Student.STATUS_ACTIVE) | Q(student_id__in=student_ids)
    ).delete()
    students = Student.objects.for_owner(owner).in_bulk(student_ids)

    for row in records:
        student = students.get(row["student_id"])
        if student is None:
            raise ValidationError(f"الطالب رقم {row['student_id']} غير موجود في هذا الفوج.")
        attendance = row.get("attendance") or SessionRecord.ATTENDANCE_PRESENT
        fields = normalize_record_fields(
            attendance,
            row.get("memorization") or None,
            row.get("review"),
            row.get("behavior") or None,
            session_type,
        )
        SessionRecord(
            session=session,
            student=student,
            attendance=attendance,
            notes=row.get("notes") or "",
            **fields,
        ).save()

    logger.info(
        "session %s %s with %d records (owner=%s)",
        "created" if created else "updated", day, len(records), owner.pk,
    )
    return session


def delete_session(owner, day):
    deleted, _ = DailySession.objects.filter(owner=owner, date=day).delete()
    return deleted > 0


def sessions_in_range(owner, start, end):
    """الحصص في النافذة [start, end)."""
    return (DailySession.objects
            .filter(owner=owner, date__gte=start, date__lt=end)
            .prefetch_related("records")
            .order_by("date"))


def month_calendar(owner, year, month, today):
    """
    أسابيع الشهر للعرض، كل خانة فيها اليوم وحالته:
    مسجل، عطلة، فائت (بدون تسجيل)، أو قادم.
    """
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    sessions = {
        s.date: s
        for s in DailySession.objects.filter(
            owner=owner, date__gte=first, date__lt=first + timedelta(days=days_in_month)
        )
    }

    cells = [None] * ((first.weekday() - WEEK_START) % 7)
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        session = sessions.get(day)
        if session is not None and session.is_holiday:
            state = DAY_HOLIDAY
        elif session is not None:
            state = DAY_RECORDED
        elif day < today:
            state = DAY_MISSED
        else:
            state = DAY_UPCOMING
        cells.append({"date": day, "session": session, "state": state})

    while len(cells) % 7:
        cells.append(None)
    return [cells[i:i + 7] for i in range(0, len(cells), 7)]
