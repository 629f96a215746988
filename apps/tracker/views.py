# apps/tracker/views.py
import logging
from urllib.parse import quote

from django.contrib import messages
from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_POST

from apps.accounts.gate import allowed_teacher_required

from . import evaluation, exporters, progress as hifz, recorder, registry, spreadsheets
from .forms import (
    DailyReportForm, SpreadsheetUploadForm, StatusChangeForm, StudentForm, SurahChoiceForm,
    VerseRangeForm,
)
from .inspiration import daily_quote
from .models import DailyReport, DailySession, SessionRecord, Student, Surah, SurahProgress
from .reports import STUDENT_REPORT, month_label, parse_month, student_report_context, teacher_info
from .scoring import month_window, rank_students, special_badges
from .stats import monthly_statistics, student_calendar

logger = logging.getLogger(__name__)


# ========= أدوات مساعدة =========

def _is_ajax(request):
    return request.headers.get('x-requested-with') == 'XMLHttpRequest'


def _selected_month(request):
    today = timezone.localdate()
    year, month = parse_month(request.GET.get("month"), today)
    return year, month


def _month_context(year, month):
    return {
        "year": year,
        "month": month,
        "month_value": f"{year:04d}-{month:02d}",
        "month_label": month_label(year, month),
    }


def _parse_day(value):
    day = parse_date(value or "")
    if day is None:
        raise Http404("تاريخ غير صالح.")
    return day


def _error_messages(exc):
    return exc.messages if hasattr(exc, "messages") else [str(exc)]


# ========= لوحة الفوج =========

@allowed_teacher_required
def dashboard(request):
    """تقييم الفوج للشهر المختار مع حكمة اليوم."""
    year, month = _selected_month(request)
    start, end = month_window(year, month)
    owner = request.user

    students = Student.objects.for_owner(owner)
    sessions = recorder.sessions_in_range(owner, start, end)
    reports = DailyReport.objects.filter(owner=owner, date__gte=start, date__lt=end)

    metrics = evaluation.collect_group_metrics(students, sessions, reports)
    result = evaluation.evaluate_group(**metrics)

    return render(request, "tracker/dashboard.html", {
        **_month_context(year, month),
        "teacher": teacher_info(owner),
        "metrics": metrics,
        "evaluation": result,
        "active_count": sum(1 for s in students if s.is_active),
        "quote": daily_quote(),
    })


# ========= الطلبة =========

@allowed_teacher_required
def students(request):
    term = request.GET.get("q", "")
    return render(request, "tracker/students.html", {
        "students": registry.search_students(request.user, term),
        "q": term,
        "status_form": StatusChangeForm(),
    })


@allowed_teacher_required
def student_add(request):
    form = StudentForm(request.POST or None)
    if request.method == "POST":
        if form.is_valid():
            student = registry.add_student(request.user, **form.cleaned_data)
            messages.success(request, f"تمت إضافة الطالب {student.full_name} بنجاح.")
            return redirect("tracker:students")
        messages.error(request, "من فضلك صحح الأخطاء في النموذج.")
    return render(request, "tracker/student_form.html", {"form": form, "title": "إضافة طالب"})


@allowed_teacher_required
def student_edit(request, student_id):
    student = get_object_or_404(Student, pk=student_id, owner=request.user)
    form = StudentForm(request.POST or None, instance=student)
    if request.method == "POST":
        if form.is_valid():
            try:
                registry.update_student(request.user, student.pk, **form.cleaned_data)
            except ValidationError as e:
                for msg in _error_messages(e):
                    messages.error(request, msg)
            else:
                messages.success(request, "تم تحديث بيانات الطالب.")
                return redirect("tracker:students")
        else:
            messages.error(request, "من فضلك صحح الأخطاء في النموذج.")
    return render(request, "tracker/student_form.html", {
        "form": form, "student": student, "title": f"تعديل: {student.full_name}",
    })


@allowed_teacher_required
@require_POST
def student_status(request, student_id):
    """طرد / حذف / غياب طويل / تنشيط. لا يوجد حذف نهائي."""
    form = StatusChangeForm(request.POST)
    if not form.is_valid():
        if _is_ajax(request):
            return JsonResponse({'status': 'error', 'message': 'حالة غير صالحة.'}, status=400)
        messages.error(request, "حالة غير صالحة.")
        return redirect("tracker:students")

    student = registry.change_status(
        request.user, student_id, form.cleaned_data["status"], form.cleaned_data["reason"]
    )
    if student is None:
        if _is_ajax(request):
            return JsonResponse({'status': 'error', 'message': 'الطالب غير موجود.'}, status=404)
        raise Http404("الطالب غير موجود.")

    label = student.get_status_display()
    if _is_ajax(request):
        return JsonResponse({'status': 'success', 'student_status': student.status, 'label': label})
    messages.success(request, f"تم تغيير حالة {student.full_name} إلى: {label}.")
    return redirect("tracker:students")


# ========= الحصص اليومية =========

@allowed_teacher_required
def sessions_calendar(request):
    year, month = _selected_month(request)
    today = timezone.localdate()
    return render(request, "tracker/sessions_calendar.html", {
        **_month_context(year, month),
        "weeks": recorder.month_calendar(request.user, year, month, today),
        "today": today,
    })


def _records_from_post(post, students):
    rows = []
    for student in students:
        prefix = f"{student.pk}"
        rows.append({
            "student_id": student.pk,
            "attendance": post.get(f"attendance_{prefix}") or SessionRecord.ATTENDANCE_PRESENT,
            "memorization": post.get(f"memorization_{prefix}") or None,
            "review": post.get(f"review_{prefix}") in ("on", "1", "true"),
            "behavior": post.get(f"behavior_{prefix}") or None,
            "notes": (post.get(f"notes_{prefix}") or "").strip(),
        })
    return rows


@allowed_teacher_required
def session_day(request, day):
    """نموذج حصة اليوم؛ يُملأ دائمًا من الحصة المحفوظة إن وُجدت."""
    day = _parse_day(day)
    owner = request.user
    roster = list(registry.active_roster(owner))

    if request.method == "POST":
        session_type = request.POST.get("session_type") or DailySession.TYPE_BASIC
        records = [] if session_type == DailySession.TYPE_HOLIDAY else _records_from_post(request.POST, roster)
        try:
            recorder.record_session(owner, day, session_type, records)
        except ValidationError as e:
            if _is_ajax(request):
                return JsonResponse({'status': 'error', 'message': "<br>".join(_error_messages(e))}, status=400)
            for msg in _error_messages(e):
                messages.error(request, msg)
        else:
            if _is_ajax(request):
                return JsonResponse({'status': 'success', 'date': day.isoformat()})
            messages.success(request, f"تم حفظ حصة يوم {day:%d/%m/%Y}.")
            return redirect("tracker:session_day", day=day.isoformat())

    session = recorder.get_session(owner, day)
    return render(request, "tracker/session_day.html", {
        "day": day,
        "session": session,
        "session_type": session.session_type if session else DailySession.TYPE_BASIC,
        "rows": recorder.initial_records(roster, session),
        "type_choices": DailySession.TYPE_CHOICES,
        "type_descriptions": DailySession.TYPE_DESCRIPTIONS,
        "attendance_choices": SessionRecord.ATTENDANCE_CHOICES,
        "memorization_choices": SessionRecord.MEMORIZATION_CHOICES,
        "behavior_choices": SessionRecord.BEHAVIOR_CHOICES,
    })


@allowed_teacher_required
@require_POST
def session_delete(request, day):
    day = _parse_day(day)
    if recorder.delete_session(request.user, day):
        messages.success(request, f"تم حذف حصة يوم {day:%d/%m/%Y}.")
    else:
        messages.error(request, "لا توجد حصة مسجلة في هذا اليوم.")
    return redirect("tracker:sessions")


# ========= تتبع حفظ السور =========

@allowed_teacher_required
def surahs(request):
    rows = [
        {"student": student, "progress": hifz.get_or_start_progress(student)}
        for student in registry.active_roster(request.user)
    ]
    return render(request, "tracker/surahs.html", {
        "rows": rows,
        "surahs": Surah.objects.all(),
        "manual_statuses": [(s, dict(SurahProgress.STATUS_CHOICES)[s]) for s in hifz.MANUAL_STATUSES],
    })


def _progress_response(request, progress, message):
    if _is_ajax(request):
        return JsonResponse({
            'status': 'success',
            'message': message,
            'surah': progress.surah.name,
            'pending_surah': progress.pending_surah.name if progress.pending_surah else None,
            'progress_status': progress.status,
            'from_verse': progress.from_verse,
            'to_verse': progress.to_verse,
            'total_verses': progress.total_verses,
            'retake_count': progress.retake_count,
        })
    messages.success(request, message)
    return redirect("tracker:surahs")


@allowed_teacher_required
@require_POST
def progress_action(request, student_id, action):
    student = get_object_or_404(Student.objects.active(), pk=student_id, owner=request.user)
    progress = hifz.get_or_start_progress(student)

    try:
        if action == "choose":
            form = SurahChoiceForm(request.POST)
            if not form.is_valid():
                raise ValidationError("اختر سورة صحيحة.")
            hifz.request_surah_change(progress, form.cleaned_data["surah"])
            message = "تم اختيار السورة، بانتظار تأكيد الإتقان."
        elif action == "confirm":
            hifz.confirm_mastery(progress)
            message = f"تم تأكيد الإتقان. السورة الحالية: {progress.surah.name}."
        elif action == "reject":
            hifz.reject_mastery(progress)
            message = "تم رفض الإتقان، يعيد الطالب حفظ السورة."
        elif action == "verses":
            form = VerseRangeForm(request.POST)
            if not form.is_valid():
                raise ValidationError([e for errors in form.errors.values() for e in errors])
            hifz.update_verses(progress, form.cleaned_data["from_verse"], form.cleaned_data["to_verse"])
            message = "تم تحديث نطاق الآيات."
        elif action == "status":
            hifz.set_status(progress, request.POST.get("status"), request.POST.get("notes"))
            message = "تم تحديث حالة الحفظ."
        else:
            raise Http404("إجراء غير معروف.")
    except ValidationError as e:
        text = "<br>".join(_error_messages(e))
        if _is_ajax(request):
            return JsonResponse({'status': 'error', 'message': text}, status=400)
        messages.error(request, text)
        return redirect("tracker:surahs")

    return _progress_response(request, progress, message)


# ========= الترتيب والنقاط =========

def _monthly_ranking(request):
    year, month = _selected_month(request)
    start, end = month_window(year, month)
    roster = registry.active_roster(request.user)
    sessions = recorder.sessions_in_range(request.user, start, end)
    ranking = rank_students(roster, sessions)
    return year, month, ranking


@allowed_teacher_required
def ranking(request):
    year, month, result = _monthly_ranking(request)
    entries = result["entries"]
    return render(request, "tracker/ranking.html", {
        **_month_context(year, month),
        "entries": entries,
        "podium": entries[:3],
        "badges": special_badges(entries) if result["has_sessions"] else {},
        "has_sessions": result["has_sessions"],
        "session_count": result["session_count"],
    })


@allowed_teacher_required
def points(request):
    year, month, result = _monthly_ranking(request)
    return render(request, "tracker/points.html", {
        **_month_context(year, month),
        "entries": result["entries"],
        "has_sessions": result["has_sessions"],
    })


# ========= الإحصائيات =========

@allowed_teacher_required
def statistics(request):
    year, month = _selected_month(request)
    start, end = month_window(year, month)
    owner = request.user
    roster = list(registry.active_roster(owner))
    sessions = list(recorder.sessions_in_range(owner, start, end))

    selected = None
    student_param = request.GET.get("student")
    if student_param and student_param != "all":
        selected = next((s for s in roster if str(s.pk) == student_param), None)

    student_id = selected.pk if selected else None
    return render(request, "tracker/stats.html", {
        **_month_context(year, month),
        "students": roster,
        "selected": selected,
        "stats": monthly_statistics(
            sessions, student_id=student_id, active_ids={s.pk for s in roster},
        ),
        "weeks": student_calendar(sessions, student_id, year, month) if selected else None,
        "attendance_labels": dict(SessionRecord.ATTENDANCE_CHOICES),
        "behavior_labels": dict(SessionRecord.BEHAVIOR_CHOICES),
        "evaluation_labels": {**dict(SessionRecord.MEMORIZATION_CHOICES), "none": "لا يوجد"},
        "type_labels": dict(DailySession.TYPE_CHOICES),
    })


# ========= التقارير اليومية =========

@allowed_teacher_required
def reports(request):
    qs = DailyReport.objects.filter(owner=request.user)
    category = request.GET.get("category")
    if category:
        qs = qs.filter(category=category)
    return render(request, "tracker/reports.html", {
        "reports": qs,
        "category": category,
        "categories": DailyReport.CATEGORY_CHOICES,
    })


@allowed_teacher_required
def report_form(request, report_id=None):
    instance = None
    if report_id is not None:
        instance = get_object_or_404(DailyReport, pk=report_id, owner=request.user)

    form = DailyReportForm(request.POST or None, request.FILES or None, instance=instance)
    if request.method == "POST":
        if form.is_valid():
            report = form.save(commit=False)
            report.owner = request.user
            if not report.author_name:
                report.author_name = teacher_info(request.user)["name"]
            report.full_clean()
            report.save()
            messages.success(request, "تم حفظ التقرير.")
            return redirect("tracker:reports")
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
    return render(request, "tracker/report_form.html", {"form": form, "report": instance})


@allowed_teacher_required
@require_POST
def report_delete(request, report_id):
    report = get_object_or_404(DailyReport, pk=report_id, owner=request.user)
    report.delete()
    if _is_ajax(request):
        return JsonResponse({'status': 'success'})
    messages.success(request, "تم حذف التقرير.")
    return redirect("tracker:reports")


# ========= تقرير الطالب والتصدير =========

@allowed_teacher_required
def student_report(request, student_id):
    student = get_object_or_404(Student, pk=student_id, owner=request.user)
    year, month = _selected_month(request)
    context = student_report_context(request.user, student, year, month)
    context.update(_month_context(year, month))
    return render(request, "tracker/student_report.html", context)


@allowed_teacher_required
def student_report_export(request, student_id, fmt):
    if fmt not in exporters.EXPORTERS:
        raise Http404("صيغة غير مدعومة.")
    student = get_object_or_404(Student, pk=student_id, owner=request.user)
    year, month = _selected_month(request)
    export, ext, content_type = exporters.EXPORTERS[fmt]

    try:
        context = student_report_context(request.user, student, year, month)
        content = export(context)
    except Exception:
        logger.exception("report export failed (student=%s, format=%s)", student.pk, fmt)
        if _is_ajax(request):
            return JsonResponse({'status': 'error', 'message': 'تعذر إنشاء التقرير.'}, status=500)
        messages.error(request, "تعذر إنشاء التقرير. حاول مرة أخرى.")
        return redirect("tracker:student_report", student_id=student.pk)

    filename = exporters.report_filename(STUDENT_REPORT, student.full_name, month, year, ext)
    response = HttpResponse(content, content_type=content_type)
    response["Content-Disposition"] = f"attachment; filename*=UTF-8''{quote(filename)}"
    return response


# ========= تبادل البيانات (Excel) =========

@allowed_teacher_required
def data_exchange(request):
    return render(request, "tracker/data.html", {
        "upload_form": SpreadsheetUploadForm(),
        "today": timezone.localdate(),
    })


def _xlsx_response(content, filename):
    response = HttpResponse(content, content_type=spreadsheets.XLSX_CONTENT_TYPE)
    response["Content-Disposition"] = f"attachment; filename*=UTF-8''{quote(filename)}"
    return response


@allowed_teacher_required
def students_export(request):
    content = spreadsheets.export_students(registry.search_students(request.user))
    return _xlsx_response(content, "students.xlsx")


@allowed_teacher_required
def session_export(request, day):
    day = _parse_day(day)
    session = recorder.get_session(request.user, day)
    if session is None:
        messages.error(request, "لا توجد حصة مسجلة في هذا اليوم.")
        return redirect("tracker:data")
    return _xlsx_response(spreadsheets.export_session(session), f"session_{day.isoformat()}.xlsx")


def _handle_import(request, importer):
    form = SpreadsheetUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
        return None
    try:
        return importer(request.user, form.cleaned_data["file"])
    except (ValidationError, IntegrityError) as e:
        for msg in _error_messages(e):
            messages.error(request, msg)
        return None


@allowed_teacher_required
@require_POST
def students_import(request):
    result = _handle_import(request, spreadsheets.import_students)
    if result is not None:
        messages.success(
            request,
            f"تم استيراد {result['created']} طالبًا جديدًا. تم تخطي {result['skipped']} طالبًا لوجودهم مسبقًا.",
        )
    return redirect("tracker:data")


@allowed_teacher_required
@require_POST
def session_import(request):
    session = _handle_import(request, spreadsheets.import_session)
    if session is not None:
        messages.success(request, f"تم استيراد حصة يوم {session.date:%d/%m/%Y} بنجاح.")
    return redirect("tracker:data")
