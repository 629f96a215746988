# apps/tracker/progress.py
"""
تتبع حفظ السور لكل طالب.

أي تغيير يدوي للسورة الحالية لا يُطبَّق مباشرة: يُحفظ كسورة معلّقة
وينتظر قرار الشيخ (تأكيد الإتقان أو رفضه).
"""
import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from .models import SURAH_COUNT, MemorizedSurah, Surah, SurahProgress

logger = logging.getLogger(__name__)

DIRECTION_ASCENDING = "ascending"
DIRECTION_DESCENDING = "descending"

# الحالات التي يمكن تعيينها مباشرة دون المرور بالتأكيد/الرفض
MANUAL_STATUSES = (
    SurahProgress.STATUS_IN_PROGRESS,
    SurahProgress.STATUS_RECITED,
    SurahProgress.STATUS_REVIEWED,
    SurahProgress.STATUS_GROUP_REVIEW,
    SurahProgress.STATUS_POSTPONED,
)


def _direction():
    direction = getattr(settings, "HIFZ_DIRECTION", DIRECTION_DESCENDING)
    if direction not in (DIRECTION_ASCENDING, DIRECTION_DESCENDING):
        raise ValueError(f"Unknown HIFZ_DIRECTION: {direction!r}")
    return direction


def first_surah():
    number = SURAH_COUNT if _direction() == DIRECTION_DESCENDING else 1
    return Surah.objects.get(number=number)


def next_surah(surah):
    """السورة التالية حسب اتجاه الحفظ، أو None بعد آخر سورة."""
    step = -1 if _direction() == DIRECTION_DESCENDING else 1
    return Surah.objects.filter(number=surah.number + step).first()


def get_or_start_progress(student):
    try:
        return student.surah_progress
    except SurahProgress.DoesNotExist:
        surah = first_surah()
        progress = SurahProgress(
            student=student, surah=surah, total_verses=surah.verses,
            from_verse=1, to_verse=1,
        )
        progress.save()
        logger.info("progress started for student %s at surah %s", student.pk, surah.number)
        return progress


def request_surah_change(progress, surah):
    """اختيار سورة من القائمة: تُعلَّق حتى يؤكد الشيخ الإتقان أو يرفضه."""
    if surah.pk == progress.surah_id:
        progress.pending_surah = None
    else:
        progress.pending_surah = surah
    progress.save(update_fields=["pending_surah", "updated_at"])
    return progress


def _move_to(progress, surah):
    progress.surah = surah
    progress.total_verses = surah.verses
    progress.from_verse = 1
    progress.to_verse = 1
    progress.retake_count = 0
    progress.status = SurahProgress.STATUS_IN_PROGRESS
    progress.start_date = timezone.localdate()
    progress.completion_date = None


@transaction.atomic
def confirm_mastery(progress):
    """
    تأكيد إتقان السورة الحالية: تُسجَّل محفوظة، وينتقل الطالب إلى السورة
    المعلّقة أو التالية، مع إعادة نطاق الآيات إلى 1 وعداد الإعادة إلى 0.
    """
    student = progress.student
    today = timezone.localdate()
    _, created = MemorizedSurah.objects.get_or_create(
        student=student, surah=progress.surah, defaults={"memorized_on": today}
    )
    if created:
        student.memorized_surahs_count = min(student.memorized_surahs_count + 1, SURAH_COUNT)
        student.save(update_fields=["memorized_surahs_count", "updated_at"])

    target = progress.pending_surah or next_surah(progress.surah)
    progress.pending_surah = None
    if target is None:
        # آخر سورة في الاتجاه: تبقى محفوظة
        progress.status = SurahProgress.STATUS_MEMORIZED
        progress.completion_date = today
        progress.from_verse = 1
        progress.to_verse = 1
        progress.retake_count = 0
    else:
        _move_to(progress, target)
    progress.save()
    logger.info("mastery confirmed for student %s, now at surah %s", student.pk, progress.surah_id)
    return progress


def reject_mastery(progress):
    """رفض الإتقان: إعادة حفظ نفس السورة وزيادة عداد الإعادة بواحد."""
    progress.pending_surah = None
    progress.status = SurahProgress.STATUS_RE_MEMORIZE
    progress.retake_count += 1
    progress.save()
    logger.info(
        "mastery rejected for student %s on surah %s (retake %d)",
        progress.student_id, progress.surah_id, progress.retake_count,
    )
    return progress


def update_verses(progress, from_verse, to_verse):
    """تحديث نطاق الآيات؛ لا يتجاوز عدد آيات السورة."""
    from_verse, to_verse = int(from_verse), int(to_verse)
    if from_verse < 1 or from_verse > to_verse:
        raise ValidationError("رقم آية البداية يجب أن يكون أقل من أو يساوي رقم آية النهاية.")
    if to_verse > progress.total_verses:
        raise ValidationError(f"عدد آيات السورة {progress.total_verses} فقط.")
    progress.from_verse = from_verse
    progress.to_verse = to_verse
    progress.save()
    return progress


def set_status(progress, status, notes=None):
    if status not in MANUAL_STATUSES:
        raise ValidationError("هذه الحالة تتطلب تأكيد أو رفض الإتقان.")
    progress.status = status
    if notes is not None:
        progress.notes = notes
    progress.save()
    return progress
