# apps/tracker/tests/test_spreadsheets.py
import io
from datetime import date, datetime

import pandas as pd
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase

from apps.tracker import spreadsheets as sheets
from apps.tracker.models import DailySession, SessionRecord, Student
from apps.tracker.recorder import record_session
from apps.tracker.registry import change_status

from .utils import make_student, make_teacher


def xlsx(rows, columns):
    buffer = io.BytesIO()
    pd.DataFrame(rows, columns=columns).to_excel(buffer, index=False, engine="openpyxl")
    return SimpleUploadedFile("data.xlsx", buffer.getvalue())


def student_row(name, birth="14/03/2012", registration="01/09/2023", status="نشط", **extra):
    row = {
        sheets.COL_FULL_NAME: name,
        sheets.COL_GUARDIAN: "الولي",
        sheets.COL_PHONE1: "0550000000",
        sheets.COL_BIRTH_DATE: birth,
        sheets.COL_REGISTRATION: registration,
        sheets.COL_STATUS: status,
    }
    row.update(extra)
    return row


class SheetDateTestCase(SimpleTestCase):

    def test_parse_sheet_date(self):
        self.assertEqual(sheets.parse_sheet_date("05/01/2024"), date(2024, 1, 5))
        self.assertEqual(sheets.parse_sheet_date("2024-01-05"), date(2024, 1, 5))
        self.assertEqual(sheets.parse_sheet_date(datetime(2024, 1, 5, 0, 0)), date(2024, 1, 5))
        self.assertEqual(sheets.parse_sheet_date("05/01/24"), date(2024, 1, 5))
        self.assertIsNone(sheets.parse_sheet_date("غدا"))
        self.assertIsNone(sheets.parse_sheet_date("  "))
        self.assertIsNone(sheets.parse_sheet_date(float("nan")))

    def test_format_sheet_date(self):
        self.assertEqual(sheets.format_sheet_date(date(2024, 1, 5)), "05/01/2024")
        self.assertEqual(sheets.format_sheet_date(None), "")


class StudentSheetTestCase(TestCase):
    """Student list import and export"""

    def setUp(self):
        self.teacher = make_teacher()

    def test_import_creates_and_skips_existing(self):
        make_student(self.teacher, "Yusuf Ali")
        upload = xlsx([
            student_row("yusuf ali"),
            student_row("محمد", status="غائب طويل", **{sheets.COL_AMOUNT: "ربع"}),
            student_row("إبراهيم"),
        ], sheets.STUDENT_COLUMNS)

        result = sheets.import_students(self.teacher, upload)

        self.assertEqual(result, {"created": 2, "skipped": 1})
        mohamed = Student.objects.get(full_name="محمد")
        self.assertEqual(mohamed.status, Student.STATUS_LONG_ABSENT)
        self.assertEqual(mohamed.daily_memorization_amount, Student.AMOUNT_QUARTER)
        self.assertEqual(mohamed.birth_date, date(2012, 3, 14))
        self.assertEqual(mohamed.memorized_surahs_count, 0)

    def test_bad_date_aborts_import(self):
        upload = xlsx([
            student_row("محمد"),
            student_row("إبراهيم", birth="31/02/2012"),
        ], sheets.STUDENT_COLUMNS)
        with self.assertRaisesMessage(ValidationError, "الصف رقم 3"):
            sheets.import_students(self.teacher, upload)
        self.assertFalse(Student.objects.exists())

    def test_bad_status_aborts_import(self):
        upload = xlsx([student_row("محمد", status="محذوف")], sheets.STUDENT_COLUMNS)
        with self.assertRaises(ValidationError):
            sheets.import_students(self.teacher, upload)
        self.assertFalse(Student.objects.exists())

    def test_missing_columns(self):
        upload = xlsx([{sheets.COL_FULL_NAME: "محمد"}], [sheets.COL_FULL_NAME])
        with self.assertRaisesMessage(ValidationError, sheets.COL_BIRTH_DATE):
            sheets.import_students(self.teacher, upload)

    def test_unreadable_file(self):
        with self.assertRaises(ValidationError):
            sheets.import_students(self.teacher, SimpleUploadedFile("data.xlsx", b"not a workbook"))

    def test_export_then_import_for_another_teacher(self):
        make_student(self.teacher, "علي", phone2="0660000000", notes="مجتهد")
        expelled = make_student(self.teacher, "عمر")
        change_status(self.teacher, expelled.pk, Student.STATUS_EXPELLED, "غياب متكرر")

        content = sheets.export_students(Student.objects.for_owner(self.teacher))
        other = make_teacher("other", "admin2@gmail.com")
        result = sheets.import_students(other, content)

        self.assertEqual(result["created"], 2)
        copy = Student.objects.for_owner(other).get(full_name="علي")
        self.assertEqual(copy.phone1, "0550000000")
        self.assertEqual(copy.phone2, "0660000000")
        self.assertEqual(copy.notes, "مجتهد")
        self.assertEqual(Student.objects.for_owner(other).get(full_name="عمر").status, Student.STATUS_EXPELLED)


class SessionSheetTestCase(TestCase):
    """Single-day session import and export"""

    def setUp(self):
        self.teacher = make_teacher()
        self.ali = make_student(self.teacher, "علي")
        self.omar = make_student(self.teacher, "عمر")

    def row(self, name, attendance="حاضر", day="04/05/2024", kind="حصة أساسية", **extra):
        row = {
            sheets.COL_DATE: day,
            sheets.COL_SESSION_TYPE: kind,
            sheets.COL_STUDENT: name,
            sheets.COL_ATTENDANCE: attendance,
        }
        row.update(extra)
        return row

    def test_import_session(self):
        upload = xlsx([
            self.row("علي", **{sheets.COL_EVALUATION: "ممتاز", sheets.COL_BEHAVIOR: "هادئ", sheets.COL_REVIEW: "نعم"}),
            self.row("عمر", "غائب"),
        ], sheets.SESSION_COLUMNS)

        session = sheets.import_session(self.teacher, upload)

        self.assertEqual(session.date, date(2024, 5, 4))
        self.assertEqual(session.session_type, DailySession.TYPE_BASIC)
        ali = session.records.get(student=self.ali)
        self.assertEqual((ali.memorization, ali.behavior, ali.review), ("excellent", "calm", True))
        self.assertEqual(session.records.get(student=self.omar).attendance, "absent")

    def test_errors_are_collected(self):
        upload = xlsx([
            self.row("علي"),
            self.row("مجهول"),
            self.row("عمر", "نائم"),
            self.row("علي"),
        ], sheets.SESSION_COLUMNS)

        with self.assertRaises(ValidationError) as ctx:
            sheets.import_session(self.teacher, upload)

        self.assertEqual(len(ctx.exception.messages), 3)
        self.assertIn("مجهول", ctx.exception.messages[0])
        self.assertFalse(DailySession.objects.exists())

    def test_rows_must_share_one_day(self):
        upload = xlsx([self.row("علي"), self.row("عمر", day="05/05/2024")], sheets.SESSION_COLUMNS)
        with self.assertRaises(ValidationError):
            sheets.import_session(self.teacher, upload)
        self.assertFalse(DailySession.objects.exists())

    def test_rows_must_share_one_session_type(self):
        upload = xlsx([
            self.row("علي"),
            self.row("عمر", kind="حصة إضافية 1"),
        ], sheets.SESSION_COLUMNS)
        with self.assertRaises(ValidationError) as ctx:
            sheets.import_session(self.teacher, upload)
        self.assertEqual(len(ctx.exception.messages), 1)
        self.assertIn("الصف رقم 3", ctx.exception.messages[0])
        self.assertFalse(DailySession.objects.exists())

    def test_holiday_row_after_teaching_rows_is_rejected(self):
        upload = xlsx([self.row("علي"), self.row("", kind="يوم عطلة")], sheets.SESSION_COLUMNS)
        with self.assertRaises(ValidationError):
            sheets.import_session(self.teacher, upload)
        self.assertFalse(SessionRecord.objects.exists())

    def test_active_student_preferred_for_duplicate_names(self):
        change_status(self.teacher, self.ali.pk, Student.STATUS_DELETED)
        new_ali = make_student(self.teacher, "علي")
        session = sheets.import_session(self.teacher, xlsx([self.row("علي")], sheets.SESSION_COLUMNS))
        self.assertEqual(session.records.get().student, new_ali)

    def test_holiday_export_and_import(self):
        session = record_session(self.teacher, date(2024, 5, 4), DailySession.TYPE_HOLIDAY)
        content = sheets.export_session(session)
        session.delete()

        imported = sheets.import_session(self.teacher, content)
        self.assertTrue(imported.is_holiday)
        self.assertEqual(SessionRecord.objects.count(), 0)

    def test_exported_session_reimports(self):
        session = record_session(self.teacher, date(2024, 5, 4), DailySession.TYPE_EXTRA_1, [
            {"student_id": self.ali.pk, "attendance": "late", "memorization": "good",
             "review": True, "behavior": "medium", "notes": "تأخر"},
            {"student_id": self.omar.pk, "attendance": "not_required"},
        ])
        content = sheets.export_session(session)
        session.delete()

        imported = sheets.import_session(self.teacher, content)
        self.assertEqual(imported.session_type, DailySession.TYPE_EXTRA_1)
        ali = imported.records.get(student=self.ali)
        self.assertEqual(
            (ali.attendance, ali.memorization, ali.review, ali.behavior, ali.notes),
            ("late", "good", True, "medium", "تأخر"),
        )
        self.assertEqual(imported.records.get(student=self.omar).attendance, "not_required")
