# apps/tracker/tests/test_views.py
import io
from datetime import date

import pandas as pd
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse

from apps.tracker import spreadsheets
from apps.tracker.models import DailyReport, DailySession, Student, SurahProgress
from apps.tracker.recorder import record_session

from .utils import PASSWORD, make_student, make_teacher


class TrackerViewTestCase(TestCase):

    def setUp(self):
        self.teacher = make_teacher()
        self.client.login(username="teacher", password=PASSWORD)
        self.ali = make_student(self.teacher, "علي")
        self.omar = make_student(self.teacher, "عمر")


class AccessTestCase(TestCase):
    """Pages require an allowed teacher"""

    def test_anonymous_is_sent_to_login(self):
        response = self.client.get(reverse("tracker:students"))
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.url.startswith(reverse("accounts:login")))
        self.assertIn("next=", response.url)

    def test_not_allowed_user_is_signed_out(self):
        make_teacher("guest", "guest@example.com")
        self.client.login(username="guest", password=PASSWORD)
        response = self.client.get(reverse("tracker:students"))
        self.assertRedirects(response, reverse("accounts:login"), fetch_redirect_response=False)
        self.assertNotIn("_auth_user_id", self.client.session)

    def test_home_redirects_to_students(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 302)


class PagesTestCase(TrackerViewTestCase):
    """Every page renders for a signed-in teacher"""

    def test_pages(self):
        record_session(self.teacher, date(2024, 5, 2), DailySession.TYPE_BASIC, [
            {"student_id": self.ali.pk, "attendance": "present", "memorization": "good", "behavior": "calm"},
        ])
        names = [
            ("tracker:dashboard", {}),
            ("tracker:students", {}),
            ("tracker:student_add", {}),
            ("tracker:student_edit", {"student_id": self.ali.pk}),
            ("tracker:student_report", {"student_id": self.ali.pk}),
            ("tracker:sessions", {}),
            ("tracker:session_day", {"day": "2024-05-02"}),
            ("tracker:surahs", {}),
            ("tracker:ranking", {}),
            ("tracker:points", {}),
            ("tracker:stats", {}),
            ("tracker:reports", {}),
            ("tracker:report_add", {}),
            ("tracker:data", {}),
        ]
        for name, kwargs in names:
            with self.subTest(name=name):
                response = self.client.get(reverse(name, kwargs=kwargs), {"month": "2024-05"})
                self.assertEqual(response.status_code, 200)

    def test_student_stats_page(self):
        response = self.client.get(reverse("tracker:stats"), {"month": "2024-05", "student": self.ali.pk})
        self.assertEqual(response.status_code, 200)

    def test_other_teachers_student_is_404(self):
        stranger = make_student(make_teacher("other", "admin2@gmail.com"))
        response = self.client.get(reverse("tracker:student_edit", args=[stranger.pk]))
        self.assertEqual(response.status_code, 404)

    def test_bad_session_date_is_404(self):
        response = self.client.get(reverse("tracker:session_day", args=["2024-02-30"]))
        self.assertEqual(response.status_code, 404)


class StudentViewsTestCase(TrackerViewTestCase):

    def test_add_student(self):
        response = self.client.post(reverse("tracker:student_add"), {
            "full_name": "يوسف",
            "guardian_name": "محمد",
            "phone1": "0551111111",
            "phone2": "",
            "birth_date": "2013-06-01",
            "registration_date": "2024-01-10",
            "status": "active",
            "daily_memorization_amount": "half",
            "notes": "",
        })
        self.assertRedirects(response, reverse("tracker:students"), fetch_redirect_response=False)
        student = Student.objects.get(full_name="يوسف")
        self.assertEqual(student.owner, self.teacher)
        self.assertEqual(student.daily_memorization_amount, "half")

    def test_status_change_ajax(self):
        response = self.client.post(
            reverse("tracker:student_status", args=[self.ali.pk]),
            {"status": "expelled", "reason": "غياب"},
            HTTP_X_REQUESTED_WITH="XMLHttpRequest",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["student_status"], "expelled")
        self.ali.refresh_from_db()
        self.assertEqual(self.ali.action_reason, "غياب")

    def test_status_change_invalid_ajax(self):
        response = self.client.post(
            reverse("tracker:student_status", args=[self.ali.pk]),
            {"status": "gone"},
            HTTP_X_REQUESTED_WITH="XMLHttpRequest",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["status"], "error")

    def test_status_change_requires_post(self):
        response = self.client.get(reverse("tracker:student_status", args=[self.ali.pk]))
        self.assertEqual(response.status_code, 405)


class SessionViewsTestCase(TrackerViewTestCase):

    def test_save_session(self):
        url = reverse("tracker:session_day", args=["2024-05-04"])
        response = self.client.post(url, {
            "session_type": "basic",
            f"attendance_{self.ali.pk}": "present",
            f"memorization_{self.ali.pk}": "excellent",
            f"review_{self.ali.pk}": "on",
            f"behavior_{self.ali.pk}": "calm",
            f"notes_{self.ali.pk}": " ممتاز ",
            f"attendance_{self.omar.pk}": "absent",
            f"memorization_{self.omar.pk}": "good",
        })
        self.assertRedirects(response, url, fetch_redirect_response=False)

        session = DailySession.objects.get(owner=self.teacher, date=date(2024, 5, 4))
        ali = session.records.get(student=self.ali)
        self.assertEqual((ali.memorization, ali.review, ali.notes), ("excellent", True, "ممتاز"))
        omar = session.records.get(student=self.omar)
        self.assertIsNone(omar.memorization)

    def test_holiday_session(self):
        url = reverse("tracker:session_day", args=["2024-05-04"])
        self.client.post(url, {"session_type": "holiday", f"attendance_{self.ali.pk}": "present"})
        session = DailySession.objects.get(owner=self.teacher, date=date(2024, 5, 4))
        self.assertTrue(session.is_holiday)
        self.assertFalse(session.records.exists())

    def test_invalid_type_ajax(self):
        response = self.client.post(
            reverse("tracker:session_day", args=["2024-05-04"]),
            {"session_type": "party"},
            HTTP_X_REQUESTED_WITH="XMLHttpRequest",
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(DailySession.objects.exists())

    def test_delete_session(self):
        record_session(self.teacher, date(2024, 5, 4), DailySession.TYPE_HOLIDAY)
        response = self.client.post(reverse("tracker:session_delete", args=["2024-05-04"]))
        self.assertRedirects(response, reverse("tracker:sessions"), fetch_redirect_response=False)
        self.assertFalse(DailySession.objects.exists())


class ProgressViewsTestCase(TrackerViewTestCase):

    def test_confirm_via_ajax(self):
        self.client.get(reverse("tracker:surahs"))
        response = self.client.post(
            reverse("tracker:progress_action", args=[self.ali.pk, "confirm"]),
            HTTP_X_REQUESTED_WITH="XMLHttpRequest",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "success")
        self.assertEqual(SurahProgress.objects.get(student=self.ali).surah_id, 113)

    def test_verse_range_error(self):
        response = self.client.post(
            reverse("tracker:progress_action", args=[self.ali.pk, "verses"]),
            {"from_verse": 1, "to_verse": 50},
            HTTP_X_REQUESTED_WITH="XMLHttpRequest",
        )
        self.assertEqual(response.status_code, 400)

    def test_unknown_action(self):
        response = self.client.post(reverse("tracker:progress_action", args=[self.ali.pk, "skip"]))
        self.assertEqual(response.status_code, 404)


class ReportViewsTestCase(TrackerViewTestCase):

    def test_add_report(self):
        response = self.client.post(reverse("tracker:report_add"), {
            "date": "2024-05-04",
            "category": "complaint",
            "note": "شكوى من الضجيج",
            "author_name": "",
        })
        self.assertRedirects(response, reverse("tracker:reports"), fetch_redirect_response=False)
        self.assertEqual(DailyReport.objects.get().owner, self.teacher)

    def test_empty_report_is_rejected(self):
        response = self.client.post(reverse("tracker:report_add"), {
            "date": "2024-05-04", "category": "general", "note": "   ",
        })
        self.assertEqual(response.status_code, 200)
        self.assertFalse(DailyReport.objects.exists())

    def test_pdf_export(self):
        response = self.client.get(
            reverse("tracker:student_report_export", args=[self.ali.pk, "pdf"]), {"month": "2024-05"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertIn("student-report_", response["Content-Disposition"])
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_unknown_format(self):
        response = self.client.get(reverse("tracker:student_report_export", args=[self.ali.pk, "odt"]))
        self.assertEqual(response.status_code, 404)


class DataExchangeViewsTestCase(TrackerViewTestCase):

    def test_students_export(self):
        response = self.client.get(reverse("tracker:students_export"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], spreadsheets.XLSX_CONTENT_TYPE)
        frame = pd.read_excel(io.BytesIO(response.content), engine="openpyxl")
        self.assertEqual(list(frame[spreadsheets.COL_FULL_NAME]), ["علي", "عمر"])

    def test_students_import(self):
        buffer = io.BytesIO()
        pd.DataFrame([{
            spreadsheets.COL_FULL_NAME: "زيد",
            spreadsheets.COL_BIRTH_DATE: "01/01/2014",
            spreadsheets.COL_REGISTRATION: "01/09/2024",
        }]).to_excel(buffer, index=False, engine="openpyxl")
        upload = SimpleUploadedFile("students.xlsx", buffer.getvalue())

        response = self.client.post(reverse("tracker:students_import"), {"file": upload})

        self.assertRedirects(response, reverse("tracker:data"), fetch_redirect_response=False)
        zaid = Student.objects.get(full_name="زيد")
        self.assertEqual(zaid.guardian_name, "N/A")

    def test_wrong_extension_is_rejected(self):
        upload = SimpleUploadedFile("students.csv", b"a,b")
        self.client.post(reverse("tracker:students_import"), {"file": upload})
        self.assertEqual(Student.objects.count(), 2)

    def test_missing_session_export(self):
        response = self.client.get(reverse("tracker:session_export", args=["2024-05-04"]))
        self.assertRedirects(response, reverse("tracker:data"), fetch_redirect_response=False)
