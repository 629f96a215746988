# apps/tracker/registry.py
"""
سجل الطلبة: إضافة، تعديل، وتغيير الحالة.

لا يوجد حذف نهائي؛ "الحذف" و"الطرد" مجرد قيم لحالة الطالب، والسجلات
القديمة تبقى محفوظة وتُستبعد من العروض النشطة.
"""
import logging

from django.db.models import Case, IntegerField, Value, When

from .models import Student

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "full_name", "guardian_name", "phone1", "phone2", "birth_date",
    "registration_date", "status", "daily_memorization_amount", "notes",
    "memorized_surahs_count", "action_reason",
)

STATUSES_WITH_REASON = (Student.STATUS_EXPELLED, Student.STATUS_DELETED)


def add_student(owner, student_id=None, **fields):
    """يضيف طالبًا جديدًا. المعرّف اختياري، ولا يوجد فحص للتكرار."""
    fields.pop("memorized_surahs_count", None)
    if student_id is not None:
        fields["id"] = student_id
    student = Student.objects.create(owner=owner, memorized_surahs_count=0, **fields)
    logger.info("student added: %s (owner=%s)", student.pk, owner.pk)
    return student


def update_student(owner, student_id, **fields):
    """يدمج الحقول المعدّلة. لا يفعل شيئًا إن لم يوجد الطالب."""
    student = Student.objects.for_owner(owner).filter(pk=student_id).first()
    if student is None:
        logger.debug("update skipped, unknown student %s", student_id)
        return None

    changed = []
    for name, value in fields.items():
        if name not in EDITABLE_FIELDS:
            continue
        setattr(student, name, value)
        changed.append(name)

    student.full_clean()
    student.save(update_fields=changed + ["updated_at"])
    return student


def change_status(owner, student_id, status, reason=None):
    """تغيير الحالة (طرد، حذف، غياب طويل، تنشيط) مع حفظ السبب."""
    fields = {"status": status}
    if reason is not None or status in STATUSES_WITH_REASON:
        fields["action_reason"] = (reason or "").strip()
    student = update_student(owner, student_id, **fields)
    if student is not None:
        logger.info("student %s status -> %s", student.pk, status)
    return student


def active_roster(owner):
    return Student.objects.for_owner(owner).active().order_by("id")


def search_students(owner, term=""):
    """قائمة الطلبة مرتبة حسب الحالة (النشط أولًا) ثم حسب ترتيب الإضافة."""
    status_rank = Case(
        *[When(status=status, then=Value(rank)) for status, rank in Student.STATUS_ORDER.items()],
        default=Value(len(Student.STATUS_ORDER) + 1),
        output_field=IntegerField(),
    )
    qs = Student.objects.for_owner(owner)
    term = (term or "").strip()
    if term:
        qs = qs.filter(full_name__icontains=term)
    return qs.annotate(status_rank=status_rank).order_by("status_rank", "id")
