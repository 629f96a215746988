from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

SURAH_COUNT = 114

# ==============================================================================
# الطلبة
# ==============================================================================

class StudentQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status=Student.STATUS_ACTIVE)

    def for_owner(self, owner):
        return self.filter(owner=owner)


class Student(models.Model):
    """طالب في الفوج. الحذف يتم بتغيير الحالة فقط، والسجلات تبقى محفوظة."""
    STATUS_ACTIVE = "active"
    STATUS_EXPELLED = "expelled"
    STATUS_LONG_ABSENT = "long_absent"
    STATUS_DELETED = "deleted"
    STATUS_CHOICES = (
        (STATUS_ACTIVE, "نشط"),
        (STATUS_EXPELLED, "مطرود"),
        (STATUS_LONG_ABSENT, "غائب طويل"),
        (STATUS_DELETED, "محذوف"),
    )
    # ترتيب العرض في قائمة الطلبة
    STATUS_ORDER = {
        STATUS_ACTIVE: 1,
        STATUS_LONG_ABSENT: 2,
        STATUS_EXPELLED: 3,
        STATUS_DELETED: 4,
    }

    AMOUNT_EIGHTH = "eighth"
    AMOUNT_QUARTER = "quarter"
    AMOUNT_HALF = "half"
    AMOUNT_PAGE = "page"
    AMOUNT_MORE = "more"
    AMOUNT_CHOICES = (
        (AMOUNT_EIGHTH, "ثمن"),
        (AMOUNT_QUARTER, "ربع"),
        (AMOUNT_HALF, "نصف"),
        (AMOUNT_PAGE, "صفحة"),
        (AMOUNT_MORE, "أكثر"),
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="students"
    )
    full_name = models.CharField("الاسم الكامل", max_length=150)
    guardian_name = models.CharField("اسم الولي", max_length=150)
    phone1 = models.CharField("رقم الهاتف 1", max_length=30)
    phone2 = models.CharField("رقم الهاتف 2", max_length=30, blank=True, default="")
    birth_date = models.DateField("تاريخ الميلاد")
    registration_date = models.DateField("تاريخ التسجيل", default=timezone.localdate)
    status = models.CharField(
        "الحالة", max_length=12, choices=STATUS_CHOICES, default=STATUS_ACTIVE
    )
    memorized_surahs_count = models.PositiveSmallIntegerField(
        "السور المحفوظة", default=0, validators=[MaxValueValidator(SURAH_COUNT)]
    )
    daily_memorization_amount = models.CharField(
        "مقدار الحفظ اليومي", max_length=10, choices=AMOUNT_CHOICES, default=AMOUNT_PAGE
    )
    notes = models.TextField("ملاحظات", blank=True, default="")
    action_reason = models.TextField("سبب الإجراء", blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StudentQuerySet.as_manager()

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.full_name

    @property
    def is_active(self):
        return is_active(self.status)

    @property
    def age(self):
        if not self.birth_date:
            return None
        today = timezone.localdate()
        years = today.year - self.birth_date.year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return years


def is_active(status):
    """الطلبة النشطون فقط يدخلون في الترتيب والإحصائيات وتتبع الحفظ."""
    return status == Student.STATUS_ACTIVE


# ==============================================================================
# الحصص اليومية
# ==============================================================================

class DailySession(models.Model):
    """حصة يوم واحد لفوج الشيخ، مع سجل لكل طالب."""
    TYPE_BASIC = "basic"
    TYPE_EXTRA_1 = "extra_1"
    TYPE_EXTRA_2 = "extra_2"
    TYPE_ACTIVITY = "activity"
    TYPE_HOLIDAY = "holiday"
    TYPE_CHOICES = (
        (TYPE_BASIC, "حصة أساسية"),
        (TYPE_EXTRA_1, "حصة إضافية 1"),
        (TYPE_EXTRA_2, "حصة إضافية 2"),
        (TYPE_ACTIVITY, "حصة أنشطة"),
        (TYPE_HOLIDAY, "يوم عطلة"),
    )
    TYPE_DESCRIPTIONS = {
        TYPE_BASIC: "الحصة العادية لحفظ ومراجعة القرآن.",
        TYPE_EXTRA_1: "حصة إضافية لتعويض الطلبة أو تدعيم الحفظ.",
        TYPE_EXTRA_2: "حصة إضافية ثانية في نفس الأسبوع.",
        TYPE_ACTIVITY: "حصة مخصصة للأنشطة والترفيه، لا تتضمن حفظاً أو مراجعة.",
        TYPE_HOLIDAY: "يوم لا توجد فيه حصص دراسية لجميع الطلبة.",
    }

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="daily_sessions"
    )
    date = models.DateField("التاريخ")
    session_type = models.CharField(
        "نوع الحصة", max_length=10, choices=TYPE_CHOICES, default=TYPE_BASIC
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("owner", "date")
        ordering = ["date"]

    def __str__(self):
        return f"{self.date} ({self.get_session_type_display()})"

    @property
    def is_holiday(self):
        return self.session_type == self.TYPE_HOLIDAY

    @property
    def is_activity(self):
        return self.session_type == self.TYPE_ACTIVITY


class SessionRecord(models.Model):
    """سجل طالب واحد داخل حصة: الحضور، التقييم، المراجعة، السلوك."""
    ATTENDANCE_PRESENT = "present"
    ATTENDANCE_ABSENT = "absent"
    ATTENDANCE_LATE = "late"
    ATTENDANCE_MAKEUP = "makeup"
    ATTENDANCE_NOT_REQUIRED = "not_required"
    ATTENDANCE_CHOICES = (
        (ATTENDANCE_PRESENT, "حاضر"),
        (ATTENDANCE_ABSENT, "غائب"),
        (ATTENDANCE_LATE, "متأخر"),
        (ATTENDANCE_MAKEUP, "تعويض"),
        (ATTENDANCE_NOT_REQUIRED, "غير مطالب"),
    )

    MEMO_EXCELLENT = "excellent"
    MEMO_GOOD = "good"
    MEMO_AVERAGE = "average"
    MEMO_POOR = "poor"
    MEMORIZATION_CHOICES = (
        (MEMO_EXCELLENT, "ممتاز"),
        (MEMO_GOOD, "جيد"),
        (MEMO_AVERAGE, "متوسط"),
        (MEMO_POOR, "ضعيف"),
    )

    BEHAVIOR_CALM = "calm"
    BEHAVIOR_MEDIUM = "medium"
    BEHAVIOR_UNDISCIPLINED = "undisciplined"
    BEHAVIOR_CHOICES = (
        (BEHAVIOR_CALM, "هادئ"),
        (BEHAVIOR_MEDIUM, "متوسط"),
        (BEHAVIOR_UNDISCIPLINED, "غير منضبط"),
    )

    session = models.ForeignKey(DailySession, on_delete=models.CASCADE, related_name="records")
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="session_records")
    attendance = models.CharField(
        "الحضور", max_length=12, choices=ATTENDANCE_CHOICES, default=ATTENDANCE_PRESENT
    )
    memorization = models.CharField(
        "التقييم", max_length=10, choices=MEMORIZATION_CHOICES, null=True, blank=True
    )
    review = models.BooleanField("مراجعة", null=True, blank=True)
    behavior = models.CharField(
        "السلوك", max_length=15, choices=BEHAVIOR_CHOICES, null=True, blank=True
    )
    notes = models.TextField("ملاحظات", blank=True, default="")

    class Meta:
        unique_together = ("session", "student")
        ordering = ["id"]

    def __str__(self):
        return f"{self.student} – {self.session.date} ({self.get_attendance_display()})"

    def clean(self):
        super().clean()
        if self.session_id and self.session.is_holiday:
            raise ValidationError("لا يمكن تسجيل بيانات الطلبة في يوم عطلة.")
        session_type = self.session.session_type if self.session_id else None
        for field, value in normalize_record_fields(
            self.attendance, self.memorization, self.review, self.behavior, session_type
        ).items():
            setattr(self, field, value)

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


def normalize_record_fields(attendance, memorization, review, behavior, session_type=None):
    """يفرض قيود السجل: غير المطالب بالحضور ليس له تقييم، والغائب لا يُقيَّم حفظه."""
    if attendance == SessionRecord.ATTENDANCE_NOT_REQUIRED:
        return {"memorization": None, "review": None, "behavior": None}
    if attendance == SessionRecord.ATTENDANCE_ABSENT:
        memorization, review, behavior = None, False, None
    if session_type == DailySession.TYPE_ACTIVITY:
        memorization, review = None, None
    return {"memorization": memorization, "review": review, "behavior": behavior}


# ==============================================================================
# السور وتتبع الحفظ
# ==============================================================================

class Surah(models.Model):
    """سور القرآن الـ 114 مع عدد الآيات."""
    number = models.PositiveSmallIntegerField(
        primary_key=True, validators=[MinValueValidator(1), MaxValueValidator(SURAH_COUNT)]
    )
    name = models.CharField(max_length=64, unique=True)
    verses = models.PositiveSmallIntegerField()

    class Meta:
        ordering = ["number"]

    def __str__(self):
        return self.name


class SurahProgress(models.Model):
    """السورة الحالية للطالب ونطاق الآيات وحالة الحفظ."""
    STATUS_IN_PROGRESS = "in_progress"
    STATUS_MEMORIZED = "memorized"
    STATUS_RECITED = "recited"
    STATUS_REVIEWED = "reviewed"
    STATUS_GROUP_REVIEW = "group_review"
    STATUS_POSTPONED = "postponed"
    STATUS_RE_MEMORIZE = "re_memorize"
    STATUS_CHOICES = (
        (STATUS_IN_PROGRESS, "قيد الحفظ"),
        (STATUS_MEMORIZED, "تم الحفظ"),
        (STATUS_RECITED, "تمت التلقين"),
        (STATUS_REVIEWED, "تمت المراجعة"),
        (STATUS_GROUP_REVIEW, "مراجعة جماعية"),
        (STATUS_POSTPONED, "مؤجلة مؤقتًا"),
        (STATUS_RE_MEMORIZE, "إعادة حفظ"),
    )

    student = models.OneToOneField(Student, on_delete=models.CASCADE, related_name="surah_progress")
    surah = models.ForeignKey(Surah, on_delete=models.PROTECT, related_name="+", verbose_name="السورة")
    pending_surah = models.ForeignKey(
        Surah, on_delete=models.SET_NULL, null=True, blank=True, related_name="+",
        verbose_name="سورة بانتظار التأكيد",
    )
    status = models.CharField(
        "الحالة", max_length=15, choices=STATUS_CHOICES, default=STATUS_IN_PROGRESS
    )
    from_verse = models.PositiveSmallIntegerField("من آية", default=1)
    to_verse = models.PositiveSmallIntegerField("إلى آية", default=1)
    total_verses = models.PositiveSmallIntegerField("عدد الآيات", default=1)
    start_date = models.DateField("تاريخ البدء", default=timezone.localdate)
    completion_date = models.DateField("تاريخ الإتمام", null=True, blank=True)
    retake_count = models.PositiveSmallIntegerField("مرات الإعادة", default=0)
    notes = models.TextField("ملاحظات", blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "surah progress"

    def __str__(self):
        return f"{self.student} – {self.surah} ({self.get_status_display()})"

    @property
    def percentage(self):
        if not self.total_verses:
            return 0
        return round((self.to_verse / self.total_verses) * 100, 1)

    def clean(self):
        super().clean()
        if self.surah_id:
            self.total_verses = self.surah.verses
        if self.from_verse < 1:
            raise ValidationError({"from_verse": "رقم آية البداية يجب أن يكون 1 على الأقل."})
        if self.from_verse > self.to_verse:
            raise ValidationError("رقم آية البداية يجب أن يكون أقل من أو يساوي رقم آية النهاية.")
        if self.to_verse > self.total_verses:
            raise ValidationError(
                {"to_verse": f"عدد آيات السورة {self.total_verses} فقط."}
            )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class MemorizedSurah(models.Model):
    """سورة أتمّ الطالب حفظها بعد تأكيد الشيخ."""
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="memorized_surahs")
    surah = models.ForeignKey(Surah, on_delete=models.PROTECT, related_name="+")
    memorized_on = models.DateField(default=timezone.localdate)

    class Meta:
        unique_together = ("student", "surah")
        ordering = ["memorized_on", "id"]

    def __str__(self):
        return f"{self.student} → {self.surah}"


# ==============================================================================
# التقارير اليومية
# ==============================================================================

class DailyReport(models.Model):
    """ملاحظة يومية يكتبها الشيخ، مستقلة عن الحصص."""
    CATEGORY_SUGGESTION = "suggestion"
    CATEGORY_COMPLAINT = "complaint"
    CATEGORY_GENERAL = "general"
    CATEGORY_THANKS = "thanks"
    CATEGORY_REQUEST = "request"
    CATEGORY_CHOICES = (
        (CATEGORY_SUGGESTION, "اقتراح"),
        (CATEGORY_COMPLAINT, "شكوى"),
        (CATEGORY_GENERAL, "ملاحظة عامة"),
        (CATEGORY_THANKS, "شكر"),
        (CATEGORY_REQUEST, "طلب"),
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="daily_reports"
    )
    date = models.DateField("التاريخ", default=timezone.localdate)
    note = models.TextField("التقرير")
    category = models.CharField(
        "التصنيف", max_length=12, choices=CATEGORY_CHOICES, default=CATEGORY_SUGGESTION
    )
    author_name = models.CharField("اسم الكاتب", max_length=150, blank=True, default="")
    image = models.ImageField("صورة", upload_to="reports/", null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at", "-id"]

    def __str__(self):
        return f"{self.get_category_display()} – {self.date}"

    @property
    def image_url(self):
        if self.image:
            try:
                return self.image.url
            except ValueError:
                return None
        return None

    def clean(self):
        super().clean()
        if not (self.note or "").strip():
            raise ValidationError({"note": "لا يمكن حفظ تقرير فارغ."})
