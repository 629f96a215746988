from django.db import migrations

from apps.tracker.surah_data import SURAH_DATA


def load_surahs(apps, schema_editor):
    """
    تحميل السور الـ 114 مع عدد آيات كل سورة.
    """
    Surah = apps.get_model("tracker", "Surah")

    Surah.objects.bulk_create(
        [Surah(number=number, name=name, verses=verses) for number, name, verses in SURAH_DATA],
        ignore_conflicts=True,
    )


def unload_surahs(apps, schema_editor):
    apps.get_model("tracker", "Surah").objects.all().delete()


class Migration(migrations.Migration):

    dependencies = [
        ('tracker', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(load_surahs, unload_surahs),
    ]
