import datetime

from django import template
from django.utils import timezone

register = template.Library()

# date.weekday(): الإثنين = 0
ARABIC_DAYS = ["الإثنين", "الثلاثاء", "الأربعاء", "الخميس", "الجمعة", "السبت", "الأحد"]

# (مفرد، مثنى، جمع 3-10، ما فوق 10)
UNITS = {
    "minute": ("دقيقة", "دقيقتين", "دقائق", "دقيقة"),
    "hour": ("ساعة", "ساعتين", "ساعات", "ساعة"),
    "day": ("يوم", "يومين", "أيام", "يوم"),
    "month": ("شهر", "شهرين", "أشهر", "شهر"),
    "year": ("سنة", "سنتين", "سنوات", "سنة"),
}


def _count_label(count, unit):
    one, two, few, many = UNITS[unit]
    if count == 1:
        return one
    if count == 2:
        return two
    if 3 <= count <= 10:
        return f"{count} {few}"
    return f"{count} {many}"


@register.filter
def arabic_day(value):
    if not isinstance(value, datetime.date):
        return value
    return ARABIC_DAYS[value.weekday()]


@register.filter(name="arabic_timesince")
def arabic_timesince(value):
    """الفارق الزمني بالعربية: "منذ ساعتين"، "أمس"، "منذ 5 أيام"."""
    if not isinstance(value, (datetime.datetime, datetime.date)):
        return "غير محدد"
    if not isinstance(value, datetime.datetime):
        value = timezone.make_aware(datetime.datetime.combine(value, datetime.time.min))

    seconds = (timezone.now() - value).total_seconds()
    if seconds < 60:
        return "الآن"
    minutes = int(seconds // 60)
    hours = minutes // 60
    days = hours // 24
    if minutes < 60:
        return f"منذ {_count_label(minutes, 'minute')}"
    if hours < 24:
        return f"منذ {_count_label(hours, 'hour')}"
    if days == 1:
        return "أمس"
    if days < 30:
        return f"منذ {_count_label(days, 'day')}"
    if days < 365:
        return f"منذ {_count_label(days // 30, 'month')}"
    return f"منذ {_count_label(days // 365, 'year')}"


@register.filter
def get_item(mapping, key):
    """قراءة مفتاح من قاموس داخل القالب."""
    if mapping is None:
        return None
    return mapping.get(key)


@register.filter
def sub(value, arg):
    try:
        return int(value) - int(arg)
    except (ValueError, TypeError):
        return value
