"""
Format-agnostic report content handed to the spreadsheet and document
renderers: cleaned tabular rows, summary rows and the matrix footer
statistics.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from punch_attendance.calendar_overrides import (
    CATEGORY_WEEKEND,
    ROW_BANNER,
    find_override,
    is_weekend,
    resolve_cell,
    resolve_rows,
)
from punch_attendance.config import Config
from punch_attendance.models import (
    AttendanceMatrix,
    AttendanceRecord,
    EmployeeSummary,
    EventOverride,
    MatrixCell,
    Status,
)
from punch_attendance.timeutils import date_key, format_time_ampm, parse_date

TABULAR_COLUMNS = ['E. Code', 'Name', 'Date', 'InTime', 'OutTime', 'Status', 'Late']
SUMMARY_COLUMNS = ['Code', 'Name', 'Present', 'Absent', 'Late', 'Attendance %']


@dataclass
class EmployeeFooter:
    working_days: int = 0
    present_days: float = 0.0
    absences: int = 0
    late_days: int = 0

    @property
    def penalty(self) -> float:
        return late_penalty(self.late_days)


def late_penalty(late_days: int) -> float:
    """Every two late days deduct a fixed fraction of a day."""
    if late_days <= 0:
        return 0.0
    return (late_days // 2) * Config.LATE_PENALTY_DAYS_PER_PAIR


def tabular_rows(records: Optional[Iterable[AttendanceRecord]]) -> List[Dict[str, str]]:
    rows = []
    for record in records or []:
        rows.append({
            'E. Code': record.employee_code,
            'Name': record.name,
            'Date': record.date,
            'InTime': format_time_ampm(record.in_time) or '-',
            'OutTime': format_time_ampm(record.out_time) or '-',
            'Status': Status.label(record.status) or '-',
            'Late': 'Yes' if record.is_late else 'No',
        })
    return rows


def record_status(
    record: AttendanceRecord,
    overrides: Optional[Iterable[EventOverride]] = None
) -> Tuple[str, Optional[str]]:
    """
    Status text for one tabular row and the off-day category of its date.

    Returns:
        (status text, category) where category is None on ordinary days. On
        holidays, team events and Sundays a record without a worked punch
        reads as the day label instead of its raw status.
    """
    status_text = Status.label(record.status) or '-'
    override = find_override(date_key(record.date), overrides or [])
    if override is not None:
        label, category = override.banner_text, override.category
    elif is_weekend(record.date):
        label, category = Config.WEEKEND_LABEL, CATEGORY_WEEKEND
    else:
        return status_text, None

    display = resolve_cell(MatrixCell(record.in_time, record.status, record.is_late), off_label=label)
    if display.kind == 'off':
        status_text = label
    return status_text, category


def summary_rows(summaries: Optional[Iterable[EmployeeSummary]]) -> List[Dict[str, object]]:
    return [
        {
            'Code': summary.code,
            'Name': summary.name,
            'Present': summary.present,
            'Absent': summary.absent,
            'Late': summary.late,
            'Attendance %': summary.attendance_rate,
        }
        for summary in summaries or []
    ]


def footer_stats(
    matrix: AttendanceMatrix,
    overrides: Optional[Iterable[EventOverride]] = None
) -> Dict[str, EmployeeFooter]:
    """
    Per-employee totals appended under the matrix export.
    Half-day statuses count as half a present day; a missing record on a
    scheduled day counts as an absence.

    A team-event override day stays a scheduled working day, but its cells
    render the event label, so people without a worked punch are not charged
    an absence for it. Only holidays and Sundays leave the working-day count.
    """
    stats = {name: EmployeeFooter() for name in matrix.employees}

    for row in resolve_rows(matrix, overrides):
        for idx, name in enumerate(matrix.employees):
            footer = stats[name]
            if row.is_scheduled:
                footer.working_days += 1
            if row.kind == ROW_BANNER:
                continue

            kind = row.cells[idx].kind
            if kind in ('ontime', 'late', 'wfh'):
                footer.present_days += 1
                if kind == 'late':
                    footer.late_days += 1
            elif kind == 'half-day':
                footer.present_days += 0.5
            elif kind == 'absent' or (kind == 'missing' and row.is_scheduled):
                footer.absences += 1

    return stats


def _days(value: float) -> str:
    return f"{value:g} Day" if value == 1 else f"{value:g} Days"


def footer_rows(matrix: AttendanceMatrix, stats: Dict[str, EmployeeFooter]) -> List[Tuple[str, List[str]]]:
    """Footer label plus one display value per employee, in matrix column order"""
    employees = matrix.employees
    return [
        ("Total Working Days", [_days(stats[name].working_days) for name in employees]),
        ("Total Days Present", [_days(stats[name].present_days) for name in employees]),
        ("No of Leaves Taken", [
            _days(stats[name].absences) if stats[name].absences else "No leaves" for name in employees
        ]),
        ("No of Days Coming Late", [
            _days(stats[name].late_days) if stats[name].late_days else "NA" for name in employees
        ]),
        (f"Every 2 late days deduct {Config.LATE_PENALTY_DAYS_PER_PAIR:g} day", [
            _days(stats[name].penalty) if stats[name].penalty else "NA" for name in employees
        ]),
    ]


def matrix_period_label(matrix: AttendanceMatrix) -> str:
    """Subtitle such as "Attendance for January 2024" from the first parsable date"""
    for value in matrix.dates:
        parsed = parse_date(value)
        if parsed is not None:
            return f"Attendance for {parsed:%B %Y}"
    return "Attendance"
