import io
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from punch_attendance.calendar_overrides import (
    CATEGORY_HOLIDAY,
    CATEGORY_TEAM_OUT,
    CATEGORY_WEEKEND,
    ROW_BANNER,
    resolve_rows,
)
from punch_attendance.config import Config
from punch_attendance.models import (
    AttendanceMatrix,
    AttendanceRecord,
    EmployeeSummary,
    EventOverride,
    Status,
)
from punch_attendance.reporting import (
    SUMMARY_COLUMNS,
    TABULAR_COLUMNS,
    footer_rows,
    footer_stats,
    matrix_period_label,
    record_status,
    summary_rows,
    tabular_rows,
)

PRIMARY = colors.Color(79 / 255, 70 / 255, 229 / 255)
SECONDARY = colors.Color(124 / 255, 58 / 255, 237 / 255)

CELL_COLORS = {
    'ontime': (colors.Color(220 / 255, 252 / 255, 231 / 255), colors.Color(22 / 255, 101 / 255, 52 / 255)),
    'late': (colors.Color(224 / 255, 242 / 255, 254 / 255), colors.Color(7 / 255, 89 / 255, 133 / 255)),
    'absent': (colors.Color(254 / 255, 226 / 255, 226 / 255), colors.Color(153 / 255, 27 / 255, 27 / 255)),
    'half-day': (colors.Color(254 / 255, 226 / 255, 226 / 255), colors.Color(153 / 255, 27 / 255, 27 / 255)),
    'wfh': (colors.Color(254 / 255, 249 / 255, 195 / 255), colors.black),
}

OFF_COLORS = {
    CATEGORY_HOLIDAY: (colors.Color(237 / 255, 233 / 255, 254 / 255), colors.Color(91 / 255, 33 / 255, 182 / 255)),
    CATEGORY_TEAM_OUT: (colors.Color(204 / 255, 251 / 255, 241 / 255), colors.Color(17 / 255, 94 / 255, 89 / 255)),
    CATEGORY_WEEKEND: (colors.Color(241 / 255, 245 / 255, 249 / 255), colors.Color(100 / 255, 116 / 255, 139 / 255)),
}


def _draw_page_number(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 9)
    canvas.setFillColor(SECONDARY)
    canvas.drawString(doc.leftMargin, 15, f"Page {doc.page}")
    canvas.restoreState()


def _summary_table(summaries: Iterable[EmployeeSummary]) -> Optional[Table]:
    rows = summary_rows(summaries)
    if not rows:
        return None

    data = [[column.upper() for column in SUMMARY_COLUMNS]]
    data.extend([str(item[column]) for column in SUMMARY_COLUMNS] for item in rows)

    table = Table(data, repeatRows=1)
    style_cmds = [
        ('BACKGROUND', (0, 0), (-1, 0), PRIMARY),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ('ALIGN', (2, 0), (-1, -1), 'CENTER'),
    ]
    for row_idx, item in enumerate(rows, start=1):
        if item['Absent'] > 0:
            fill, text = CELL_COLORS['absent']
            style_cmds.append(('BACKGROUND', (3, row_idx), (3, row_idx), fill))
            style_cmds.append(('TEXTCOLOR', (3, row_idx), (3, row_idx), text))
        if item['Late'] > 0:
            fill, text = CELL_COLORS['late']
            style_cmds.append(('BACKGROUND', (4, row_idx), (4, row_idx), fill))
            style_cmds.append(('TEXTCOLOR', (4, row_idx), (4, row_idx), text))
    table.setStyle(TableStyle(style_cmds))
    return table


def _matrix_table(matrix: AttendanceMatrix, overrides: List[EventOverride]) -> Optional[Table]:
    if matrix.is_empty or not matrix.employees:
        return None

    total_cols = len(matrix.employees) + 1
    data = [["Date", *matrix.employees]]
    style_cmds = [
        ('BACKGROUND', (0, 0), (-1, 0), PRIMARY),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 6),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.lightgrey),
    ]

    for row_idx, display in enumerate(resolve_rows(matrix, overrides), start=1):
        if display.kind == ROW_BANNER:
            data.append([display.date, display.label] + [""] * (total_cols - 2))
            fill, text = OFF_COLORS[display.category]
            style_cmds.extend([
                ('SPAN', (1, row_idx), (-1, row_idx)),
                ('BACKGROUND', (1, row_idx), (-1, row_idx), fill),
                ('TEXTCOLOR', (1, row_idx), (-1, row_idx), text),
                ('FONTNAME', (1, row_idx), (-1, row_idx), 'Helvetica-Bold'),
            ])
            continue

        data.append([display.date] + [cell.text for cell in display.cells])
        for col_idx, cell in enumerate(display.cells, start=1):
            if cell.kind == 'off':
                fill, text = OFF_COLORS[display.category]
            elif cell.kind in CELL_COLORS:
                fill, text = CELL_COLORS[cell.kind]
            else:
                continue
            style_cmds.append(('BACKGROUND', (col_idx, row_idx), (col_idx, row_idx), fill))
            style_cmds.append(('TEXTCOLOR', (col_idx, row_idx), (col_idx, row_idx), text))

    stats = footer_stats(matrix, overrides)
    for label, values in footer_rows(matrix, stats):
        data.append([label, *values])
        row_idx = len(data) - 1
        style_cmds.extend([
            ('BACKGROUND', (0, row_idx), (-1, row_idx), SECONDARY),
            ('TEXTCOLOR', (0, row_idx), (-1, row_idx), colors.white),
            ('FONTNAME', (0, row_idx), (-1, row_idx), 'Helvetica-Bold'),
        ])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle(style_cmds))
    return table


def _status_kind(record: AttendanceRecord) -> Optional[str]:
    if record.is_late:
        return 'late'
    if record.status == Status.HALF_DAY:
        return 'half-day'
    if record.status == Status.WFH:
        return 'wfh'
    if record.is_present:
        return 'ontime'
    if record.is_absent:
        return 'absent'
    return None


def _records_table_data(
    records: List[AttendanceRecord],
    overrides: List[EventOverride]
) -> Tuple[List[List[str]], list]:
    """
    Cleaned punch rows for the document renderer.

    Returns:
        (table data with header row, TableStyle commands)
    """
    status_col = TABULAR_COLUMNS.index('Status')
    late_col = TABULAR_COLUMNS.index('Late')
    data = [[column.upper() for column in TABULAR_COLUMNS]]
    style_cmds = [
        ('BACKGROUND', (0, 0), (-1, 0), PRIMARY),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ]

    for row_idx, (record, item) in enumerate(zip(records, tabular_rows(records)), start=1):
        status_text, category = record_status(record, overrides)
        data.append([status_text if column == 'Status' else item[column] for column in TABULAR_COLUMNS])

        if category is not None:
            fill, text = OFF_COLORS[category]
            style_cmds.append(('BACKGROUND', (0, row_idx), (-1, row_idx), fill))
            style_cmds.append(('TEXTCOLOR', (status_col, row_idx), (status_col, row_idx), text))
            style_cmds.append(('FONTNAME', (status_col, row_idx), (status_col, row_idx), 'Helvetica-Bold'))
            continue

        kind = _status_kind(record)
        if kind is not None:
            fill, text = CELL_COLORS[kind]
            style_cmds.append(('BACKGROUND', (status_col, row_idx), (status_col, row_idx), fill))
            style_cmds.append(('TEXTCOLOR', (status_col, row_idx), (status_col, row_idx), text))
        if record.is_late:
            fill, text = CELL_COLORS['late']
            style_cmds.append(('BACKGROUND', (late_col, row_idx), (late_col, row_idx), fill))
            style_cmds.append(('TEXTCOLOR', (late_col, row_idx), (late_col, row_idx), text))
            style_cmds.append(('FONTNAME', (late_col, row_idx), (late_col, row_idx), 'Helvetica-Bold'))

    return data, style_cmds


def _records_table(records: List[AttendanceRecord], overrides: List[EventOverride]) -> Optional[Table]:
    if not records:
        return None
    data, style_cmds = _records_table_data(records, overrides)
    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle(style_cmds))
    return table


def export_pdf(
    summaries: Optional[List[EmployeeSummary]],
    matrix: AttendanceMatrix,
    overrides: Optional[Iterable[EventOverride]] = None,
    title: str = Config.REPORT_TITLE,
    generated_at: Optional[datetime] = None,
    records: Optional[List[AttendanceRecord]] = None
) -> bytes:
    """Render the summary, record list and matrix sections into a PDF document"""
    overrides = list(overrides or [])
    generated_at = generated_at or datetime.now()

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=landscape(A4),
        rightMargin=30, leftMargin=30, topMargin=30, bottomMargin=30
    )
    styles = getSampleStyleSheet()
    brand_style = ParagraphStyle('Brand', parent=styles['Heading1'], textColor=PRIMARY, fontSize=20)
    section_style = ParagraphStyle('Section', parent=styles['Heading2'], textColor=PRIMARY)

    elements = [
        Paragraph(Config.REPORT_BRAND, brand_style),
        Paragraph(f"{title.upper()} • Generated: {generated_at:%Y-%m-%d %H:%M}", styles['Normal']),
        Spacer(1, 12),
        Paragraph("Employee Attendance Summary", section_style),
    ]
    summary_table = _summary_table(summaries or [])
    elements.append(summary_table if summary_table is not None else Paragraph("No employee data.", styles['Normal']))

    records_table = _records_table(list(records or []), overrides)
    if records_table is not None:
        elements.append(PageBreak())
        elements.append(Paragraph("Attendance Records", section_style))
        elements.append(records_table)

    elements.append(PageBreak())
    elements.append(Paragraph("Monthly Attendance Matrix", section_style))
    elements.append(Paragraph(matrix_period_label(matrix), styles['Normal']))
    elements.append(Spacer(1, 8))
    matrix_table = _matrix_table(matrix, overrides)
    elements.append(matrix_table if matrix_table is not None else Paragraph("No records match the current filters.", styles['Normal']))

    doc.build(elements, onFirstPage=_draw_page_number, onLaterPages=_draw_page_number)
    return buffer.getvalue()
