# apps/accounts/tests/test_gate.py
from types import SimpleNamespace

from django.contrib.auth.models import User
from django.test import SimpleTestCase, TestCase, override_settings

from apps.accounts.gate import is_allowed_email, is_allowed_user
from apps.accounts.models import Profile


@override_settings(ALLOWED_TEACHER_EMAILS=["admin1@gmail.com", " Admin2@Gmail.com "])
class AllowListTestCase(SimpleTestCase):
    """Allow-list matching"""

    def test_emails_are_case_insensitive(self):
        self.assertTrue(is_allowed_email("ADMIN1@gmail.com"))
        self.assertTrue(is_allowed_email("admin2@gmail.com "))

    def test_unknown_and_empty(self):
        self.assertFalse(is_allowed_email("someone@gmail.com"))
        self.assertFalse(is_allowed_email(""))
        self.assertFalse(is_allowed_email(None))

    def test_anonymous_user(self):
        anonymous = SimpleNamespace(is_authenticated=False, email="admin1@gmail.com")
        self.assertFalse(is_allowed_user(anonymous))
        self.assertFalse(is_allowed_user(None))


@override_settings(TEACHER_DIRECTORY={"admin1@gmail.com": {"name": "الشيخ صهيب", "group": "فوج 1"}})
class ProfileSignalTestCase(TestCase):
    """Profile is created with the user"""

    def test_profile_filled_from_directory(self):
        user = User.objects.create_user(username="t1", email="admin1@gmail.com", password="secret123")
        profile = Profile.objects.get(user=user)
        self.assertEqual(profile.display_name, "الشيخ صهيب")
        self.assertEqual(profile.group, "فوج 1")
        self.assertEqual(str(profile), "الشيخ صهيب")

    def test_profile_for_unknown_email(self):
        user = User.objects.create_user(username="t2", email="x@example.com", password="secret123")
        self.assertEqual(user.profile.group, "")
        self.assertEqual(str(user.profile), "t2")

    def test_profile_created_once(self):
        user = User.objects.create_user(username="t3", email="admin1@gmail.com", password="secret123")
        user.first_name = "صهيب"
        user.save()
        self.assertEqual(Profile.objects.filter(user=user).count(), 1)
