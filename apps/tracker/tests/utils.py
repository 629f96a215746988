# apps/tracker/tests/utils.py
from datetime import date

from django.contrib.auth.models import User

from apps.tracker.registry import add_student

PASSWORD = "secret123"


def make_teacher(username="teacher", email="admin1@gmail.com"):
    return User.objects.create_user(username=username, email=email, password=PASSWORD)


def make_student(owner, full_name="أحمد بن علي", **fields):
    data = {
        "guardian_name": "علي",
        "phone1": "0550000000",
        "birth_date": date(2012, 3, 14),
        "registration_date": date(2023, 9, 1),
    }
    data.update(fields)
    return add_student(owner, full_name=full_name, **data)
