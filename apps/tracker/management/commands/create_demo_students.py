import random
from datetime import date

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from apps.tracker.models import Student
from apps.tracker.registry import add_student

User = get_user_model()


class Command(BaseCommand):
    help = "Creates demo students for a teacher account (by email)."

    def add_arguments(self, parser):
        parser.add_argument("email", help="بريد الشيخ صاحب الفوج")
        parser.add_argument("--count", type=int, default=20)
        parser.add_argument("--seed", type=int, default=None)

    def handle(self, *args, **options):
        owner = User.objects.filter(email__iexact=options["email"]).first()
        if owner is None:
            raise CommandError(f'⚠️ لم يتم العثور على حساب بالبريد {options["email"]}.')

        rng = random.Random(options["seed"])
        count = options["count"]
        self.stdout.write(self.style.SUCCESS(f"بدء إنشاء {count} طالب تجريبي لـ {owner.email}..."))

        first_names = ["أحمد", "محمد", "علي", "خالد", "يوسف", "عبدالله", "عمر", "إلياس", "أنس", "بلال"]
        family_names = ["بن علي", "بوزيد", "حمدي", "سعيدي", "بلقاسم", "مرابط", "زروقي"]
        amounts = [value for value, _ in Student.AMOUNT_CHOICES]

        for i in range(count):
            father = rng.choice(first_names)
            family = rng.choice(family_names)
            full_name = f"{rng.choice(first_names)} {father} {family}"
            student = add_student(
                owner,
                full_name=full_name,
                guardian_name=f"{father} {family}",
                phone1=f"05{rng.randint(10000000, 99999999)}",
                birth_date=date(rng.randint(2010, 2018), rng.randint(1, 12), rng.randint(1, 28)),
                daily_memorization_amount=rng.choice(amounts),
            )
            self.stdout.write(self.style.SUCCESS(f"✅ تم إنشاء الطالب: {student.full_name} (#{student.pk})"))

        self.stdout.write(self.style.SUCCESS("\nتم الانتهاء من إنشاء الطلبة التجريبيين بنجاح!"))
