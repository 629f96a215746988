# apps/tracker/exporters.py
"""
تصدير التقرير الشهري: Word و PDF و PNG.

مصدر واحد للبيانات (سياق التقرير من reports.py)، ومنه تُبنى الصيغ الثلاث.
"""
import io
import logging
import os
from xml.sax.saxutils import escape

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from django.conf import settings
from django.template.loader import render_to_string
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)

WORD_CONTENT_TYPE = "application/msword"
PDF_CONTENT_TYPE = "application/pdf"
PNG_CONTENT_TYPE = "image/png"

REPORT_TEMPLATE = "tracker/reports/student_report_document.html"

WORD_HEADER = (
    "<html xmlns:o='urn:schemas-microsoft-com:office:office' "
    "xmlns:w='urn:schemas-microsoft-com:office:word' "
    "xmlns='http://www.w3.org/TR/REC-html40'>"
    "<head><meta charset='utf-8'><title>Export HTML to Word Document</title></head><body dir='rtl'>"
)
WORD_FOOTER = "</body></html>"

FONT_NAME = "ReportArabic"


def report_filename(report_type, student_name, month, year, ext):
    """<نوع التقرير>_<اسم الطالب>_<الشهر>_<السنة>.<الامتداد> مع استبدال المسافات."""
    name = f"{report_type}_{student_name}_{month}_{year}".replace(" ", "_")
    return f"{name}.{ext.lstrip('.')}"


def render_report_html(context):
    return render_to_string(REPORT_TEMPLATE, context)


def export_word(context):
    html = render_report_html(context)
    return (WORD_HEADER + html + WORD_FOOTER).encode("utf-8")


def _table_rows(context):
    student = context["student"]
    attendance = context["attendance"]
    progress = context["progress"]

    info = [
        ["بيانات الطالب", ""],
        ["الاسم الكامل", student.full_name],
        ["اسم الولي", student.guardian_name],
        ["رقم الهاتف", student.phone1],
        ["العمر", f"{student.age} سنة" if student.age is not None else "-"],
        ["تاريخ التسجيل", student.registration_date.strftime("%d/%m/%Y")],
        ["الفوج", context["teacher"]["group"]],
    ]
    monthly = [
        ["إحصائيات الشهر", ""],
        ["حاضر", f"{attendance['present']} يوم"],
        ["غائب", f"{attendance['absent']} يوم"],
        ["متأخر", f"{attendance['late']} يوم"],
        ["تعويض", f"{attendance['makeup']} حصص"],
        ["عطلة", f"{attendance['holidays']} يوم"],
        ["النقاط", str(context["points"])],
        ["الترتيب", f"{context['rank']} / {context['ranked_count']}" if context["rank"] else "-"],
    ]
    current = [["السورة الحالية", ""]]
    if progress is not None:
        current += [
            ["السورة", progress.surah.name],
            ["الآيات", f"{progress.from_verse} - {progress.to_verse} من {progress.total_verses}"],
            ["الحالة", progress.get_status_display()],
            ["مرات الإعادة", str(progress.retake_count)],
        ]
    else:
        current.append(["السورة", "-"])
    return info, monthly, current


def _font_name():
    path = getattr(settings, "REPORT_FONT_PATH", "")
    if not path or not os.path.exists(path):
        return "Helvetica"
    if FONT_NAME not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(FONT_NAME, path))
    return FONT_NAME


def export_pdf(context):
    """PDF بمقاس A4؛ الجداول الطويلة تنتقل تلقائيًا إلى صفحات جديدة."""
    font = _font_name()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, leftMargin=28, rightMargin=28, topMargin=28, bottomMargin=28)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(name="ReportTitle", parent=styles["Title"], fontName=font, fontSize=18)
    body_style = ParagraphStyle(name="ReportBody", parent=styles["Normal"], fontName=font, fontSize=10, alignment=2)

    def styled_table(rows):
        tbl = Table(
            [[Paragraph(escape(str(c)), body_style) for c in reversed(row)] for row in rows],
            colWidths=[330, 180], repeatRows=1,
        )
        tbl.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2980b9")),
            ("GRID", (0, 0), (-1, -1), 0.4, colors.HexColor("#9ca3af")),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        return tbl

    elements = [
        Paragraph(escape(context["school_name"]), title_style),
        Paragraph("تقرير الطالب الشهري", title_style),
        Paragraph(escape(f"شهر: {context['month_label']} | {context['hijri_date']}"), body_style),
        Spacer(1, 12),
    ]
    for rows in _table_rows(context):
        elements += [styled_table(rows), Spacer(1, 10)]

    surah_cells = [f"{'✔' if s['memorized'] else '✘'} {s['name']}" for s in context["surahs"]]
    chunks = [surah_cells[i:i + 5] for i in range(0, len(surah_cells), 5)]
    if chunks:
        chunks[-1] += [""] * (5 - len(chunks[-1]))
        elements.append(Paragraph("السور المحفوظة", body_style))
        surah_table = Table(
            [[Paragraph(escape(c), body_style) for c in row] for row in chunks],
            colWidths=[102] * 5,
        )
        surah_table.setStyle(TableStyle([("FONTSIZE", (0, 0), (-1, -1), 8)]))
        elements.append(surah_table)

    elements += [
        Spacer(1, 30),
        Paragraph("توقيع الشيخ ........ توقيع ولي الأمر ........ توقيع الإدارة ........", body_style),
    ]
    doc.build(elements)
    return buffer.getvalue()


def export_png(context):
    """لقطة للتقرير: جداول البيانات مرسومة بـ matplotlib."""
    sections = _table_rows(context)
    row_count = sum(len(rows) for rows in sections)
    fig, axes = plt.subplots(len(sections), 1, figsize=(6.5, 0.32 * row_count + 1.2))
    fig.suptitle(f"{context['student'].full_name} - {context['month_label']}", fontsize=11)
    for ax, rows in zip(axes, sections):
        ax.axis("off")
        table = ax.table(
            cellText=[[str(value), label] for label, value in rows[1:]],
            colLabels=["", rows[0][0]],
            loc="center",
            cellLoc="right",
        )
        table.auto_set_font_size(False)
        table.set_fontsize(8)
    buffer = io.BytesIO()
    plt.tight_layout()
    plt.savefig(buffer, format="png", dpi=150)
    plt.close(fig)
    return buffer.getvalue()


EXPORTERS = {
    "word": (export_word, "doc", WORD_CONTENT_TYPE),
    "pdf": (export_pdf, "pdf", PDF_CONTENT_TYPE),
    "png": (export_png, "png", PNG_CONTENT_TYPE),
}
