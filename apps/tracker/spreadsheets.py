# apps/tracker/spreadsheets.py
"""
تبادل البيانات مع Excel: قائمة الطلبة وسجل حصة يوم واحد.

الاستيراد كله أو لا شيء: أي خطأ يلغي العملية ولا يُحفظ أي صف.
أرقام الصفوف في رسائل الخطأ تطابق ما يراه المستخدم في Excel (الصف 1 للعناوين).
"""
import io
import logging
import zipfile
from datetime import date, datetime

import pandas as pd
from django.core.exceptions import ValidationError
from django.db import transaction

from .models import DailySession, SessionRecord, Student
from .recorder import record_session
from .registry import add_student

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

COL_FULL_NAME = "الاسم الكامل"
COL_GUARDIAN = "اسم الولي"
COL_PHONE1 = "رقم الهاتف"
COL_PHONE2 = "رقم الهاتف 2"
COL_BIRTH_DATE = "تاريخ الميلاد"
COL_REGISTRATION = "تاريخ التسجيل"
COL_STATUS = "حالة الطالب"
COL_AMOUNT = "مقدار الحفظ اليومي"
COL_MEMORIZED = "السور المحفوظة"
COL_NOTES = "ملاحظات"

STUDENT_COLUMNS = [
    COL_FULL_NAME, COL_GUARDIAN, COL_PHONE1, COL_PHONE2, COL_BIRTH_DATE,
    COL_REGISTRATION, COL_STATUS, COL_AMOUNT, COL_MEMORIZED, COL_NOTES,
]
REQUIRED_STUDENT_COLUMNS = [COL_FULL_NAME, COL_BIRTH_DATE, COL_REGISTRATION]

COL_DATE = "التاريخ"
COL_SESSION_TYPE = "نوع الحصة"
COL_STUDENT = "اسم الطالب"
COL_ATTENDANCE = "الحضور"
COL_EVALUATION = "التقييم"
COL_BEHAVIOR = "السلوك"
COL_REVIEW = "مراجعة"

SESSION_COLUMNS = [
    COL_DATE, COL_SESSION_TYPE, COL_STUDENT, COL_ATTENDANCE,
    COL_EVALUATION, COL_BEHAVIOR, COL_REVIEW, COL_NOTES,
]

YES, NO = "نعم", "لا"

# حالات مقبولة في ملف الاستيراد (المحذوف لا يُستورد)
IMPORT_STATUSES = {
    label: value for value, label in Student.STATUS_CHOICES if value != Student.STATUS_DELETED
}
AMOUNTS = {label: value for value, label in Student.AMOUNT_CHOICES}
SESSION_TYPES = {label: value for value, label in DailySession.TYPE_CHOICES}
ATTENDANCE = {label: value for value, label in SessionRecord.ATTENDANCE_CHOICES}
EVALUATION = {label: value for value, label in SessionRecord.MEMORIZATION_CHOICES}
BEHAVIOR = {label: value for value, label in SessionRecord.BEHAVIOR_CHOICES}


def _cell(value):
    """قيمة الخلية بعد التنظيف؛ الخلايا الفارغة → None."""
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _text(value):
    value = _cell(value)
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def parse_sheet_date(value):
    """dd/mm/yyyy أو yyyy-mm-dd أو تاريخ Excel. القيمة غير المفهومة → None."""
    value = _cell(value)
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    for fmt in ("%d/%m/%Y", "%d/%m/%y", "%Y-%m-%d", "%Y-%m-%d %H:%M:%S"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def format_sheet_date(value):
    return value.strftime("%d/%m/%Y") if value else ""


def _read_frame(upload):
    content = upload.read() if hasattr(upload, "read") else upload
    try:
        return pd.read_excel(io.BytesIO(content), dtype=object, engine="openpyxl")
    except (ValueError, KeyError, OSError, zipfile.BadZipFile) as exc:
        raise ValidationError(f"تعذرت قراءة الملف: {exc}") from exc


def _to_xlsx(rows, columns, sheet_name):
    buffer = io.BytesIO()
    df = pd.DataFrame(rows, columns=columns)
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()


# ------------------------------------------------------------------------------
# الطلبة
# ------------------------------------------------------------------------------

def export_students(students):
    rows = [
        {
            COL_FULL_NAME: s.full_name,
            COL_GUARDIAN: s.guardian_name,
            COL_PHONE1: s.phone1,
            COL_PHONE2: s.phone2,
            COL_BIRTH_DATE: format_sheet_date(s.birth_date),
            COL_REGISTRATION: format_sheet_date(s.registration_date),
            COL_STATUS: s.get_status_display(),
            COL_AMOUNT: s.get_daily_memorization_amount_display(),
            COL_MEMORIZED: s.memorized_surahs_count,
            COL_NOTES: s.notes,
        }
        for s in students
    ]
    return _to_xlsx(rows, STUDENT_COLUMNS, "الطلبة")


def import_students(owner, upload):
    """
    يضيف الطلبة الجدد من الملف. الأسماء الموجودة مسبقًا (بدون مراعاة حالة
    الأحرف) تُتخطى. يعيد {"created": عدد، "skipped": عدد}.
    """
    df = _read_frame(upload)
    missing = [c for c in REQUIRED_STUDENT_COLUMNS if c not in df.columns]
    if missing:
        raise ValidationError(
            f"ملف غير متوافق. الأعمدة المطلوبة مفقودة: {'، '.join(missing)}."
        )

    existing = {
        name.strip().lower()
        for name in Student.objects.for_owner(owner).values_list("full_name", flat=True)
    }

    to_create = []
    skipped = 0
    for index, row in enumerate(df.to_dict("records")):
        row_number = index + 2
        full_name = _text(row.get(COL_FULL_NAME))
        if not full_name:
            continue
        if full_name.lower() in existing:
            skipped += 1
            continue

        birth_date = parse_sheet_date(row.get(COL_BIRTH_DATE))
        registration_date = parse_sheet_date(row.get(COL_REGISTRATION))
        if birth_date is None or registration_date is None:
            raise ValidationError(
                f"التواريخ غير صالحة في الصف رقم {row_number} للطالب {full_name}. "
                "تأكد من أنها بصيغة DD/MM/YYYY."
            )

        status_label = _text(row.get(COL_STATUS)) or Student.STATUS_CHOICES[0][1]
        if status_label not in IMPORT_STATUSES:
            raise ValidationError(
                f'حالة الطالب "{status_label}" في الصف {row_number} غير صالحة. '
                f"يجب أن تكون واحدة من: {'، '.join(IMPORT_STATUSES)}."
            )

        amount_label = _text(row.get(COL_AMOUNT))
        to_create.append({
            "full_name": full_name,
            "guardian_name": _text(row.get(COL_GUARDIAN)) or "N/A",
            "phone1": _text(row.get(COL_PHONE1)) or "N/A",
            "phone2": _text(row.get(COL_PHONE2)),
            "birth_date": birth_date,
            "registration_date": registration_date,
            "status": IMPORT_STATUSES[status_label],
            "daily_memorization_amount": AMOUNTS.get(amount_label, Student.AMOUNT_PAGE),
            "notes": _text(row.get(COL_NOTES)),
        })
        existing.add(full_name.lower())

    with transaction.atomic():
        for fields in to_create:
            add_student(owner, **fields)

    logger.info("imported %d students, skipped %d (owner=%s)", len(to_create), skipped, owner.pk)
    return {"created": len(to_create), "skipped": skipped}


# ------------------------------------------------------------------------------
# سجل الحصة
# ------------------------------------------------------------------------------

def export_session(session):
    day = format_sheet_date(session.date)
    type_label = session.get_session_type_display()
    if session.is_holiday:
        rows = [{COL_DATE: day, COL_SESSION_TYPE: type_label}]
    else:
        rows = []
        for record in session.records.select_related("student"):
            if record.review is None:
                review = ""
            else:
                review = YES if record.review else NO
            rows.append({
                COL_DATE: day,
                COL_SESSION_TYPE: type_label,
                COL_STUDENT: record.student.full_name,
                COL_ATTENDANCE: record.get_attendance_display(),
                COL_EVALUATION: record.get_memorization_display() if record.memorization else "",
                COL_BEHAVIOR: record.get_behavior_display() if record.behavior else "",
                COL_REVIEW: review,
                COL_NOTES: record.notes,
            })
    return _to_xlsx(rows, SESSION_COLUMNS, session.date.isoformat())


def import_session(owner, upload):
    """
    يستورد حصة يوم واحد. كل الأخطاء تُجمع وتُعرض معًا، ولا يُحفظ شيء
    إن وُجد خطأ واحد. التاريخ ونوع الحصة يؤخذان من أول صف صالح، ويجب أن
    تتفق معهما بقية الصفوف.
    """
    df = _read_frame(upload)
    missing = [c for c in (COL_DATE, COL_SESSION_TYPE) if c not in df.columns]
    if missing:
        raise ValidationError(f"الأعمدة المطلوبة مفقودة: {'، '.join(missing)}.")

    # عند تكرار الاسم يُفضَّل الطالب النشط
    students = {s.full_name: s for s in Student.objects.for_owner(owner)}
    students.update({s.full_name: s for s in Student.objects.for_owner(owner).active()})

    errors = []
    day = None
    session_type = None
    records = []
    seen = set()

    for index, row in enumerate(df.to_dict("records")):
        row_number = index + 2
        row_date = parse_sheet_date(row.get(COL_DATE))
        if row_date is None:
            errors.append(f"❌ الصف رقم {row_number}: عمود التاريخ فارغ أو غير صالح.")
            continue
        if day is None:
            day = row_date
        elif row_date != day:
            errors.append(f"❌ الصف رقم {row_number}: كل الصفوف يجب أن تكون لنفس اليوم ({format_sheet_date(day)}).")
            continue

        type_label = _text(row.get(COL_SESSION_TYPE))
        if type_label not in SESSION_TYPES:
            errors.append(f'❌ الصف رقم {row_number}: نوع الحصة "{type_label}" غير صالح.')
            continue
        if session_type is None:
            session_type = SESSION_TYPES[type_label]
        elif SESSION_TYPES[type_label] != session_type:
            errors.append(f"❌ الصف رقم {row_number}: كل الصفوف يجب أن تكون لنفس نوع الحصة.")
            continue
        if SESSION_TYPES[type_label] == DailySession.TYPE_HOLIDAY:
            continue

        name = _text(row.get(COL_STUDENT))
        if not name:
            errors.append(f"❌ الصف رقم {row_number}: اسم الطالب فارغ.")
            continue
        student = students.get(name)
        if student is None:
            errors.append(f'⚠️ الصف رقم {row_number}: لم يتم العثور على الطالب "{name}".')
            continue
        if student.pk in seen:
            errors.append(f'❌ الصف رقم {row_number}: الطالب "{name}" مكرر.')
            continue

        attendance_label = _text(row.get(COL_ATTENDANCE))
        evaluation_label = _text(row.get(COL_EVALUATION))
        behavior_label = _text(row.get(COL_BEHAVIOR))
        if attendance_label and attendance_label not in ATTENDANCE:
            errors.append(f'❌ الصف رقم {row_number}: قيمة الحضور "{attendance_label}" غير صالحة.')
            continue
        if evaluation_label and evaluation_label not in EVALUATION:
            errors.append(f'❌ الصف رقم {row_number}: قيمة التقييم "{evaluation_label}" غير صالحة.')
            continue
        if behavior_label and behavior_label not in BEHAVIOR:
            errors.append(f'❌ الصف رقم {row_number}: قيمة السلوك "{behavior_label}" غير صالحة.')
            continue

        seen.add(student.pk)
        records.append({
            "student_id": student.pk,
            "attendance": ATTENDANCE.get(attendance_label, SessionRecord.ATTENDANCE_PRESENT),
            "memorization": EVALUATION.get(evaluation_label),
            "behavior": BEHAVIOR.get(behavior_label),
            "review": _text(row.get(COL_REVIEW)) == YES,
            "notes": _text(row.get(COL_NOTES)),
        })

    if errors:
        raise ValidationError(errors)
    if day is None or session_type is None:
        raise ValidationError("لم يتم العثور على بيانات صالحة للحفظ.")

    session = record_session(owner, day, session_type, records)
    logger.info("imported session %s with %d records (owner=%s)", day, len(records), owner.pk)
    return session
