# apps/tracker/evaluation.py
"""تقييم آلي لأداء الفوج من مؤشرات الشهر."""
from .models import DailyReport, SessionRecord, Student, is_active
from .scoring import session_records

RATING_EXCELLENT = "excellent"
RATING_VERY_GOOD = "very_good"
RATING_GOOD = "good"
RATING_WEAK = "weak"
RATING_NO_DATA = "no_data"

RATING_LABELS = {
    RATING_EXCELLENT: "ممتاز",
    RATING_VERY_GOOD: "جيد جدًا",
    RATING_GOOD: "جيد",
    RATING_WEAK: "ضعيف",
    RATING_NO_DATA: "لا توجد بيانات",
}

# نصيحة لكل مستوى؛ نصيحة الممتاز تظهر فقط مع مؤشر ضعيف
BAND_SUGGESTIONS = {
    RATING_EXCELLENT: "🌟 أداء الفوج ممتاز، عالجوا الملاحظات التالية للمحافظة على المستوى.",
    RATING_VERY_GOOD: "👍 أداء الفوج جيد جدًا، حافظوا على نفس الوتيرة وارفعوا سقف الأهداف.",
    RATING_GOOD: "📈 الأداء مقبول، حدد هدفًا شهريًا واضحًا لكل طالب.",
    RATING_WEAK: "🚨 أداء الفوج ضعيف هذا الشهر، راجع خطة الحلقة مع الإدارة.",
}

POSITIVE_MESSAGE = "🎉 أداء الفوج ممتاز هذا الشهر، استمروا في العطاء!"

INACTIVE_STATUSES = (Student.STATUS_LONG_ABSENT, Student.STATUS_EXPELLED)
ATTENDED = (SessionRecord.ATTENDANCE_PRESENT, SessionRecord.ATTENDANCE_LATE)


def _factor_rules(attendance_rate, average_progress, complaints, inactive_students, reports_this_month):
    return (
        (attendance_rate < 70, "📌 ضع خطة تحفيزية لتحسين حضور الطلبة"),
        (average_progress < 2, "📖 خصص وقتًا إضافيًا للمراجعة اليومية"),
        (complaints >= 3, "⚠️ راجع أسباب الشكاوى وحدد الطلاب المعنيين"),
        (inactive_students >= 2, "📋 تواصل مع أولياء أمور الطلبة الغائبين لإعادة دمجهم"),
        (reports_this_month < 5, "📝 حاول كتابة تقرير يومي أو أسبوعي لتوثيق الأداء"),
    )


def group_score(attendance_rate, average_progress, reports_this_month, complaints, inactive_students):
    score = 0

    if attendance_rate >= 90:
        score += 25
    elif attendance_rate >= 75:
        score += 20
    elif attendance_rate >= 50:
        score += 10

    if average_progress >= 5:
        score += 25
    elif average_progress >= 3:
        score += 15
    else:
        score += 5

    if reports_this_month >= 10:
        score += 20
    elif reports_this_month >= 5:
        score += 10

    if complaints == 0:
        score += 15
    elif complaints <= 2:
        score += 5

    if inactive_students == 0:
        score += 15
    elif inactive_students <= 2:
        score += 5

    return min(score, 100)


def rating_for(score):
    if score is None:
        return RATING_NO_DATA
    if score >= 90:
        return RATING_EXCELLENT
    if score >= 75:
        return RATING_VERY_GOOD
    if score >= 60:
        return RATING_GOOD
    return RATING_WEAK


def evaluate_group(attendance_rate=0, average_progress=0, reports_this_month=0,
                   complaints=0, inactive_students=0, session_count=0):
    """
    النتيجة من 100، والتقدير، وقائمة الاقتراحات.

    إذا كانت نسبة الحضور ومتوسط الحفظ وعدد التقارير وعدد الحصص كلها صفرًا
    فالنتيجة None ("لا توجد بيانات") وليست صفرًا.
    """
    if not any((attendance_rate, average_progress, reports_this_month, session_count)):
        return {
            "score": None,
            "rating": RATING_NO_DATA,
            "rating_label": RATING_LABELS[RATING_NO_DATA],
            "suggestions": [],
        }

    score = group_score(attendance_rate, average_progress, reports_this_month,
                        complaints, inactive_students)
    rating = rating_for(score)

    factors = [
        message
        for fired, message in _factor_rules(attendance_rate, average_progress, complaints,
                                            inactive_students, reports_this_month)
        if fired
    ]
    suggestions = []
    if rating != RATING_EXCELLENT or factors:
        suggestions.append(BAND_SUGGESTIONS[rating])
    suggestions += factors
    if not suggestions:
        suggestions.append(POSITIVE_MESSAGE)

    return {
        "score": score,
        "rating": rating,
        "rating_label": RATING_LABELS[rating],
        "suggestions": suggestions,
    }


def collect_group_metrics(students, sessions, reports):
    """مؤشرات الفوج لفترة معينة من الطلبة والحصص والتقارير."""
    students = list(students)
    sessions = list(sessions)
    reports = list(reports)

    active_ids = {s.pk for s in students if is_active(s.status)}
    teaching_sessions = [s for s in sessions if not s.is_holiday]
    possible = len(teaching_sessions) * len(active_ids)
    # سجلات المطرودين والمحذوفين تبقى محفوظة لكنها لا تُحسب
    attended = sum(
        1
        for s in teaching_sessions
        for r in session_records(s)
        if r.student_id in active_ids and r.attendance in ATTENDED
    )
    attendance_rate = (attended / possible) * 100 if possible else 0

    counted = [s for s in students if s.status != Student.STATUS_DELETED]
    average_progress = (
        sum(s.memorized_surahs_count or 0 for s in counted) / len(counted) if counted else 0
    )

    return {
        "attendance_rate": round(attendance_rate, 1),
        "average_progress": round(average_progress, 2),
        "reports_this_month": len(reports),
        "complaints": sum(1 for r in reports if r.category == DailyReport.CATEGORY_COMPLAINT),
        "inactive_students": sum(1 for s in students if s.status in INACTIVE_STATUSES),
        "session_count": len(sessions),
    }
