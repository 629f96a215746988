from django.core.management.base import BaseCommand

from apps.tracker.models import Surah
from apps.tracker.surah_data import SURAH_DATA


class Command(BaseCommand):
    help = "Load or update the 114 Surahs (number, name, verse count)."

    def handle(self, *args, **kwargs):
        created_count = 0
        for number, name, verses in SURAH_DATA:
            _, created = Surah.objects.update_or_create(
                number=number,
                defaults={"name": name, "verses": verses},
            )
            created_count += int(created)
        self.stdout.write(self.style.SUCCESS(
            f"Surah data loaded/updated ({len(SURAH_DATA)} surahs, {created_count} new)."
        ))
