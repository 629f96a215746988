# apps/tracker/tests/test_registry.py
from django.test import TestCase

from apps.tracker.models import Student
from apps.tracker.registry import active_roster, change_status, search_students, update_student

from .utils import make_student, make_teacher


class RegistryTestCase(TestCase):
    """Student registry operations"""

    def setUp(self):
        self.teacher = make_teacher()
        self.other = make_teacher("other", "admin2@gmail.com")

    def test_add_student_defaults(self):
        student = make_student(self.teacher, memorized_surahs_count=30)
        self.assertEqual(student.status, Student.STATUS_ACTIVE)
        self.assertEqual(student.memorized_surahs_count, 0)
        self.assertEqual(student.owner, self.teacher)

    def test_add_student_with_given_id(self):
        student = make_student(self.teacher, student_id=500)
        self.assertEqual(student.pk, 500)

    def test_duplicates_are_allowed(self):
        make_student(self.teacher, "يوسف")
        make_student(self.teacher, "يوسف")
        self.assertEqual(Student.objects.filter(full_name="يوسف").count(), 2)

    def test_update_merges_fields(self):
        student = make_student(self.teacher)
        updated = update_student(self.teacher, student.pk, phone2="0660000000", notes="مجتهد")
        self.assertEqual(updated.phone2, "0660000000")
        student.refresh_from_db()
        self.assertEqual(student.notes, "مجتهد")
        self.assertEqual(student.full_name, "أحمد بن علي")

    def test_update_unknown_student_is_noop(self):
        self.assertIsNone(update_student(self.teacher, 9999, notes="x"))

    def test_update_other_teachers_student_is_noop(self):
        student = make_student(self.other)
        self.assertIsNone(update_student(self.teacher, student.pk, notes="x"))

    def test_change_status_stores_reason(self):
        student = make_student(self.teacher)
        change_status(self.teacher, student.pk, Student.STATUS_EXPELLED, "  سوء السلوك ")
        student.refresh_from_db()
        self.assertEqual(student.status, Student.STATUS_EXPELLED)
        self.assertEqual(student.action_reason, "سوء السلوك")

    def test_deleted_student_is_kept(self):
        student = make_student(self.teacher)
        change_status(self.teacher, student.pk, Student.STATUS_DELETED)
        self.assertTrue(Student.objects.filter(pk=student.pk).exists())
        self.assertNotIn(student, active_roster(self.teacher))

    def test_search_orders_by_status_then_id(self):
        a = make_student(self.teacher, "عمر")
        b = make_student(self.teacher, "عمار")
        c = make_student(self.teacher, "عمران")
        d = make_student(self.teacher, "زيد")
        change_status(self.teacher, a.pk, Student.STATUS_DELETED)
        change_status(self.teacher, b.pk, Student.STATUS_LONG_ABSENT)

        self.assertEqual(list(search_students(self.teacher)), [c, d, b, a])
        self.assertEqual(list(search_students(self.teacher, "عم")), [c, b, a])

    def test_age(self):
        student = make_student(self.teacher)
        self.assertIsNotNone(student.age)
        self.assertGreater(student.age, 10)
