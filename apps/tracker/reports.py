# apps/tracker/reports.py
"""سياق التقرير الشهري للطالب، مشترك بين صفحة العرض والتصدير."""
from datetime import date

from django.conf import settings
from django.utils import timezone
from hijri_converter import Gregorian

from .models import MemorizedSurah, SessionRecord, Student, Surah, SurahProgress
from .recorder import sessions_in_range
from .scoring import month_window, rank_students, student_points
from .stats import monthly_statistics

AR_MONTHS = [
    "جانفي", "فيفري", "مارس", "أفريل", "ماي", "جوان",
    "جويلية", "أوت", "سبتمبر", "أكتوبر", "نوفمبر", "ديسمبر",
]

STUDENT_REPORT = "student-report"


def month_label(year, month):
    return f"{AR_MONTHS[month - 1]} {year}"


def hijri_label(day):
    hijri = Gregorian(day.year, day.month, day.day).to_hijri()
    return f"{hijri.day_name('ar')}، {hijri.day} {hijri.month_name('ar')} {hijri.year}"


def teacher_info(user):
    profile = getattr(user, "profile", None)
    return {
        "name": getattr(profile, "display_name", "") or user.get_full_name() or user.get_username(),
        "group": getattr(profile, "group", "") or "غير محدد",
    }


def student_report_context(owner, student, year, month, today=None):
    """
    بيانات الطالب، عدادات الحضور، النقاط والترتيب، السورة الحالية
    وقائمة السور مع علامة المحفوظ منها.
    """
    today = today or timezone.localdate()
    start, end = month_window(year, month)
    sessions = list(sessions_in_range(owner, start, end))

    stats = monthly_statistics(sessions, student_id=student.pk)
    attendance = stats["attendance"]

    roster = Student.objects.for_owner(owner).active().order_by("id")
    ranking = rank_students(roster, sessions)
    rank = next((e["rank"] for e in ranking["entries"] if e["id"] == student.pk), None)

    progress = SurahProgress.objects.filter(student=student).select_related("surah", "pending_surah").first()
    memorized_ids = set(
        MemorizedSurah.objects.filter(student=student).values_list("surah_id", flat=True)
    )
    surahs = [
        {"number": s.number, "name": s.name, "memorized": s.number in memorized_ids}
        for s in Surah.objects.all()
    ]

    return {
        "school_name": getattr(settings, "SCHOOL_NAME", ""),
        "teacher": teacher_info(owner),
        "student": student,
        "year": year,
        "month": month,
        "month_label": month_label(year, month),
        "generated_on": today,
        "hijri_date": hijri_label(today),
        "attendance": {
            "present": attendance[SessionRecord.ATTENDANCE_PRESENT],
            "absent": attendance[SessionRecord.ATTENDANCE_ABSENT],
            "late": attendance[SessionRecord.ATTENDANCE_LATE],
            "makeup": attendance[SessionRecord.ATTENDANCE_MAKEUP],
            "holidays": stats["holidays"],
        },
        "stats": stats,
        "points": student_points(student, sessions)["points"],
        "rank": rank,
        "ranked_count": len(ranking["entries"]),
        "progress": progress,
        "surahs": surahs,
        "memorized_count": len(memorized_ids),
    }


def parse_month(value, today):
    """'YYYY-MM' → (year, month)؛ القيمة غير الصالحة تعيد الشهر الحالي."""
    try:
        year, month = (int(p) for p in (value or "").split("-"))
        date(year, month, 1)
    except ValueError:
        return today.year, today.month
    return year, month
