# apps/tracker/tests/test_stats.py
from datetime import date
from types import SimpleNamespace

from django.test import SimpleTestCase

from apps.tracker.stats import monthly_statistics, student_calendar, student_days


def rec(student_id, attendance, memorization=None, behavior=None):
    return SimpleNamespace(
        student_id=student_id, attendance=attendance, memorization=memorization, behavior=behavior,
    )


def sess(day, session_type="basic", records=()):
    return SimpleNamespace(
        date=day, session_type=session_type, is_holiday=session_type == "holiday",
        records=list(records),
    )


class MonthlyStatisticsTestCase(SimpleTestCase):
    """Attendance, behavior and evaluation counters"""

    def setUp(self):
        self.sessions = [
            sess(date(2024, 5, 2), records=[
                rec(1, "present", "excellent", "calm"),
                rec(2, "absent"),
            ]),
            sess(date(2024, 5, 3), "extra_1", records=[
                rec(1, "late", "good", "medium"),
                rec(2, "makeup", "poor", "undisciplined"),
            ]),
            sess(date(2024, 5, 4), "holiday"),
            sess(date(2024, 5, 5), "activity", records=[rec(1, "not_required")]),
        ]

    def test_group_statistics(self):
        stats = monthly_statistics(self.sessions)
        self.assertEqual(stats["total_records"], 5)
        self.assertEqual(stats["attendance"], {"present": 1, "absent": 1, "late": 1, "makeup": 1})
        self.assertEqual(stats["behavior"], {"calm": 1, "medium": 1, "undisciplined": 1})
        self.assertEqual(stats["evaluation"]["excellent"], 1)
        self.assertEqual(stats["evaluation"]["average"], 0)
        self.assertEqual(stats["evaluation"]["none"], 2)
        self.assertEqual(stats["sessions"], 4)
        self.assertEqual(stats["holidays"], 1)
        self.assertEqual(stats["session_types"], {"basic": 1, "extra_1": 1, "extra_2": 0, "activity": 1})

    def test_single_student(self):
        stats = monthly_statistics(self.sessions, student_id=2)
        self.assertEqual(stats["total_records"], 2)
        self.assertEqual(stats["attendance"]["absent"], 1)
        self.assertEqual(stats["attendance"]["makeup"], 1)
        self.assertEqual(stats["attendance"]["present"], 0)
        self.assertEqual(stats["holidays"], 1)
        self.assertEqual(sum(stats["session_types"].values()), 0)

    def test_only_active_students_are_counted(self):
        stats = monthly_statistics(self.sessions, active_ids={1})
        self.assertEqual(stats["total_records"], 3)
        self.assertEqual(stats["attendance"], {"present": 1, "absent": 0, "late": 1, "makeup": 0})
        self.assertEqual(stats["behavior"]["undisciplined"], 0)
        self.assertEqual(stats["session_types"]["extra_1"], 1)

    def test_empty_month(self):
        stats = monthly_statistics([])
        self.assertEqual(stats["total_records"], 0)
        self.assertEqual(stats["holidays"], 0)


class StudentCalendarTestCase(SimpleTestCase):

    def setUp(self):
        self.sessions = [
            sess(date(2024, 5, 2), records=[rec(1, "present"), rec(2, "absent")]),
            sess(date(2024, 5, 4), "holiday"),
            sess(date(2024, 5, 6), records=[rec(2, "late")]),
        ]

    def test_student_days(self):
        days = student_days(self.sessions, 1)
        self.assertEqual(sorted(days), [date(2024, 5, 2), date(2024, 5, 4)])
        self.assertIsNone(days[date(2024, 5, 4)][1])

    def test_calendar_states(self):
        weeks = student_calendar(self.sessions, 2, 2024, 5)
        states = {c["date"].day: c["state"] for week in weeks for c in week if c}
        self.assertEqual(states[2], "absent")
        self.assertEqual(states[4], "holiday")
        self.assertEqual(states[6], "late")
        self.assertIsNone(states[3])
        self.assertEqual(len(states), 31)
