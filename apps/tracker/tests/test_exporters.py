# apps/tracker/tests/test_exporters.py
from datetime import date

from django.test import SimpleTestCase, TestCase

from apps.tracker import exporters
from apps.tracker.models import DailySession
from apps.tracker.progress import confirm_mastery, get_or_start_progress
from apps.tracker.recorder import record_session
from apps.tracker.reports import STUDENT_REPORT, month_label, parse_month, student_report_context

from .utils import make_student, make_teacher


class ReportHelpersTestCase(SimpleTestCase):

    def test_report_filename(self):
        self.assertEqual(
            exporters.report_filename(STUDENT_REPORT, "أحمد بن علي", 5, 2024, "pdf"),
            "student-report_أحمد_بن_علي_5_2024.pdf",
        )

    def test_month_label(self):
        self.assertEqual(month_label(2024, 7), "جويلية 2024")

    def test_parse_month(self):
        today = date(2024, 5, 20)
        self.assertEqual(parse_month("2023-11", today), (2023, 11))
        self.assertEqual(parse_month("2023-13", today), (2024, 5))
        self.assertEqual(parse_month("", today), (2024, 5))
        self.assertEqual(parse_month(None, today), (2024, 5))


class StudentReportTestCase(TestCase):
    """Monthly report context and its three export formats"""

    def setUp(self):
        self.teacher = make_teacher()
        self.student = make_student(self.teacher, "أحمد بن علي")
        self.other = make_student(self.teacher, "عمر")
        record_session(self.teacher, date(2024, 5, 2), DailySession.TYPE_BASIC, [
            {"student_id": self.student.pk, "attendance": "present", "memorization": "excellent",
             "review": True, "behavior": "calm"},
            {"student_id": self.other.pk, "attendance": "absent"},
        ])
        record_session(self.teacher, date(2024, 5, 3), DailySession.TYPE_BASIC, [
            {"student_id": self.student.pk, "attendance": "late"},
            {"student_id": self.other.pk, "attendance": "present"},
        ])
        record_session(self.teacher, date(2024, 5, 4), DailySession.TYPE_HOLIDAY)
        confirm_mastery(get_or_start_progress(self.student))
        self.context = student_report_context(
            self.teacher, self.student, 2024, 5, today=date(2024, 5, 31)
        )

    def test_context(self):
        ctx = self.context
        self.assertEqual(ctx["attendance"], {"present": 1, "absent": 0, "late": 1, "makeup": 0, "holidays": 1})
        self.assertEqual(ctx["points"], 9 + 1)
        self.assertEqual(ctx["rank"], 1)
        self.assertEqual(ctx["ranked_count"], 2)
        self.assertEqual(ctx["teacher"]["group"], "فوج 1")
        self.assertEqual(ctx["month_label"], "ماي 2024")
        self.assertEqual(len(ctx["surahs"]), 114)
        self.assertEqual(ctx["memorized_count"], 1)
        self.assertTrue(ctx["surahs"][113]["memorized"])
        self.assertTrue(ctx["hijri_date"])

    def test_word_export(self):
        content = exporters.export_word(self.context)
        self.assertTrue(content.startswith(exporters.WORD_HEADER.encode("utf-8")))
        self.assertIn("أحمد بن علي".encode("utf-8"), content)

    def test_pdf_export(self):
        self.assertTrue(exporters.export_pdf(self.context).startswith(b"%PDF"))

    def test_png_export(self):
        self.assertTrue(exporters.export_png(self.context).startswith(b"\x89PNG"))

    def test_pdf_without_progress(self):
        context = student_report_context(self.teacher, self.other, 2024, 5, today=date(2024, 5, 31))
        self.assertIsNone(context["progress"])
        self.assertTrue(exporters.export_pdf(context).startswith(b"%PDF"))
