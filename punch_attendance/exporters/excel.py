import io
from datetime import datetime
from typing import Iterable, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

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

COLORS = {
    'primary': "FF4F46E5",
    'header_bg': "FF1E1B4B",
    'white': "FFFFFFFF",
    'odd_row': "FFF8FAFC",
    'even_row': "FFF1F5F9",
    'present': "FFDCFCE7",
    'present_text': "FF166534",
    'absent': "FFFEE2E2",
    'absent_text': "FF991B1B",
    'late': "FFFFEB9C",
    'late_text': "FF9C0006",
    'border': "FFCBD5E1",
    'holiday': "FFEDE9FE",
    'team_out': "FFCCFBF1",
    'weekend': "FFE1E5EB",
    'matrix_blue': "FF2058A5",
    'matrix_cyan': "FF00B0F0",
    'off_green': "FF00B050",
    'absent_red': "FFFF0000",
    'wfh_yellow': "FFFFFF00",
    'footer_navy': "FF17375E",
    'footer_pink': "FFFF0066",
    'muted': "FF64748B",
}

STRIPE_BY_CATEGORY = {
    CATEGORY_HOLIDAY: 'holiday',
    CATEGORY_TEAM_OUT: 'team_out',
    CATEGORY_WEEKEND: 'weekend',
}

CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")


def _fill(argb: str) -> PatternFill:
    return PatternFill("solid", start_color=argb, end_color=argb)


def _border(argb: str) -> Border:
    side = Side(style="thin", color=argb)
    return Border(left=side, right=side, top=side, bottom=side)


def _write_title(ws: Worksheet, title: str, generated_at: datetime) -> None:
    ws.merge_cells("A1:F1")
    title_cell = ws["A1"]
    title_cell.value = Config.REPORT_BRAND
    title_cell.font = Font(name="Segoe UI", size=18, bold=True, color=COLORS['primary'])
    title_cell.alignment = LEFT
    title_cell.fill = _fill(COLORS['odd_row'])
    ws.row_dimensions[1].height = 30

    ws.merge_cells("A2:F2")
    subtitle = ws["A2"]
    subtitle.value = f"{title} • Generated: {generated_at:%b %d, %Y %I:%M %p}"
    subtitle.font = Font(name="Segoe UI", size=11, italic=True, color=COLORS['muted'])
    subtitle.alignment = LEFT
    ws.row_dimensions[2].height = 22


def _write_header(ws: Worksheet, row_idx: int, columns: List[str]) -> None:
    for col_idx, header in enumerate(columns, start=1):
        cell = ws.cell(row=row_idx, column=col_idx, value=header.upper())
        cell.fill = _fill(COLORS['header_bg'])
        cell.font = Font(name="Segoe UI", bold=True, color=COLORS['white'], size=12)
        cell.alignment = CENTER
        cell.border = Border(bottom=Side(style="medium", color=COLORS['primary']))
    ws.row_dimensions[row_idx].height = 28


# ============================================================================
# LIST SHEETS
# ============================================================================

def _write_summary_sheet(ws: Worksheet, summaries: Iterable[EmployeeSummary]) -> None:
    rows = summary_rows(summaries)
    if not rows:
        return
    _write_header(ws, 4, SUMMARY_COLUMNS)

    for offset, item in enumerate(rows):
        row_idx = 5 + offset
        stripe = COLORS['even_row'] if row_idx % 2 == 0 else COLORS['odd_row']
        for col_idx, column in enumerate(SUMMARY_COLUMNS, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=item[column])
            cell.font = Font(name="Segoe UI", size=10)
            cell.alignment = LEFT
            cell.border = _border(COLORS['border'])
            cell.fill = _fill(stripe)

    for col_idx in range(1, len(SUMMARY_COLUMNS) + 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = 20


def _write_records_sheet(
    ws: Worksheet,
    records: List[AttendanceRecord],
    overrides: List[EventOverride]
) -> None:
    rows = tabular_rows(records)
    if not rows:
        return
    _write_header(ws, 4, TABULAR_COLUMNS)
    status_col = TABULAR_COLUMNS.index('Status') + 1

    for offset, (record, item) in enumerate(zip(records, rows)):
        row_idx = 5 + offset
        status_text, category = record_status(record, overrides)
        if category is None:
            stripe = COLORS['even_row'] if row_idx % 2 == 0 else COLORS['odd_row']
        else:
            stripe = COLORS[STRIPE_BY_CATEGORY[category]]

        for col_idx, column in enumerate(TABULAR_COLUMNS, start=1):
            value = status_text if col_idx == status_col else item[column]
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            cell.font = Font(name="Segoe UI", size=10)
            cell.alignment = LEFT
            cell.border = _border(COLORS['border'])
            cell.fill = _fill(stripe)

        status_cell = ws.cell(row=row_idx, column=status_col)
        lowered = str(status_cell.value).lower()
        if category is None:
            if record.is_late:
                status_cell.fill = _fill(COLORS['late'])
                status_cell.font = Font(bold=True, color=COLORS['late_text'])
            elif 'present' in lowered:
                status_cell.fill = _fill(COLORS['present'])
                status_cell.font = Font(bold=True, color=COLORS['present_text'])
            elif 'absent' in lowered:
                status_cell.fill = _fill(COLORS['absent'])
                status_cell.font = Font(bold=True, color=COLORS['absent_text'])
        else:
            status_cell.font = Font(bold=True)

    for col_idx in range(1, len(TABULAR_COLUMNS) + 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = 20


# ============================================================================
# MATRIX SHEET
# ============================================================================

def _style_matrix_cell(cell, kind: str) -> None:
    cell.alignment = CENTER
    cell.border = _border(COLORS['border'])
    cell.font = Font(name="Segoe UI", size=9)

    if kind in ('absent', 'half-day'):
        cell.fill = _fill(COLORS['absent_red'])
        cell.font = Font(bold=True, italic=True, color=COLORS['white'])
    elif kind == 'wfh':
        cell.fill = _fill(COLORS['wfh_yellow'])
        cell.font = Font(bold=True, color="FF000000")
    elif kind == 'off':
        cell.fill = _fill(COLORS['off_green'])
        cell.font = Font(bold=True, italic=True, color=COLORS['white'])
    elif kind == 'late':
        cell.fill = _fill(COLORS['late'])
        cell.font = Font(bold=True, color=COLORS['late_text'])
    elif kind == 'ontime':
        cell.font = Font(bold=True, color="FF006100")


def _write_matrix_sheet(
    ws: Worksheet,
    matrix: AttendanceMatrix,
    overrides: List[EventOverride]
) -> None:
    if matrix.is_empty or not matrix.employees:
        return

    total_cols = len(matrix.employees) + 1
    white_border = _border(COLORS['white'])

    for col_idx, header in enumerate(["Date", *matrix.employees], start=1):
        cell = ws.cell(row=4, column=col_idx, value=header)
        cell.fill = _fill(COLORS['matrix_blue'])
        cell.font = Font(bold=True, italic=True, color=COLORS['white'], size=10)
        cell.alignment = CENTER
        cell.border = white_border
    ws.row_dimensions[4].height = 25

    ws.merge_cells(start_row=5, start_column=1, end_row=5, end_column=total_cols)
    period = ws.cell(row=5, column=1, value=matrix_period_label(matrix))
    period.fill = _fill(COLORS['matrix_cyan'])
    period.font = Font(bold=True, italic=True, color=COLORS['white'], size=12)
    period.alignment = CENTER
    ws.row_dimensions[5].height = 25
    ws.freeze_panes = "B6"

    row_idx = 5
    for display in resolve_rows(matrix, overrides):
        row_idx += 1
        ws.row_dimensions[row_idx].height = 20
        date_cell = ws.cell(row=row_idx, column=1, value=display.date)
        date_cell.fill = _fill(COLORS['matrix_blue'])
        date_cell.font = Font(bold=True, color=COLORS['white'], size=10)
        date_cell.alignment = CENTER
        date_cell.border = _border(COLORS['border'])

        if display.kind == ROW_BANNER:
            banner = ws.cell(row=row_idx, column=2, value=display.label)
            _style_matrix_cell(banner, 'off')
            if total_cols > 2:
                ws.merge_cells(start_row=row_idx, start_column=2, end_row=row_idx, end_column=total_cols)
            continue

        for offset, cell_display in enumerate(display.cells, start=2):
            cell = ws.cell(row=row_idx, column=offset, value=cell_display.text)
            _style_matrix_cell(cell, cell_display.kind)

    # Statistics footer after a gap row
    row_idx += 1
    stats = footer_stats(matrix, overrides)
    footer_colors = [COLORS['matrix_blue'], COLORS['footer_navy']] + [COLORS['footer_pink']] * 3
    for (label, values), color in zip(footer_rows(matrix, stats), footer_colors):
        row_idx += 1
        ws.row_dimensions[row_idx].height = 25
        for col_idx, value in enumerate([label, *values], start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            cell.fill = _fill(color)
            cell.font = Font(bold=True, italic=True, color=COLORS['white'], size=10)
            cell.alignment = CENTER
            cell.border = white_border

    ws.column_dimensions["A"].width = 18
    for col_idx in range(2, total_cols + 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = 12


def export_excel(
    summaries: Optional[List[EmployeeSummary]],
    matrix: AttendanceMatrix,
    overrides: Optional[Iterable[EventOverride]] = None,
    records: Optional[List[AttendanceRecord]] = None,
    generated_at: Optional[datetime] = None
) -> bytes:
    """
    Build the styled report workbook and return it as .xlsx bytes.
    Sheets: employee summary, optional record list, and the monthly matrix.
    """
    overrides = list(overrides or [])
    generated_at = generated_at or datetime.now()

    wb = Workbook()
    summary_ws = wb.active
    summary_ws.title = Config.SUMMARY_SHEET
    _write_title(summary_ws, "Employee Attendance Summary", generated_at)
    _write_summary_sheet(summary_ws, summaries or [])

    if records:
        records_ws = wb.create_sheet("Attendance Records")
        _write_title(records_ws, "Attendance Records", generated_at)
        _write_records_sheet(records_ws, records, overrides)

    matrix_ws = wb.create_sheet(Config.MATRIX_SHEET)
    _write_title(matrix_ws, "Monthly Attendance Matrix", generated_at)
    _write_matrix_sheet(matrix_ws, matrix, overrides)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
