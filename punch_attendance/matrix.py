import logging
from typing import Dict, Iterable, List, Mapping, Optional

from punch_attendance.models import AttendanceMatrix, AttendanceRecord, EventOverride, MatrixCell
from punch_attendance.timeutils import sort_dates

logger = logging.getLogger(__name__)

FILTER_ALL = 'all'
FILTER_ONTIME = 'ontime'
FILTER_LATE = 'late'
FILTER_ABSENT = 'absent'
FILTER_OPTIONS = (FILTER_ALL, FILTER_ONTIME, FILTER_LATE, FILTER_ABSENT)


def active_filters(column_filters: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Filters that actually constrain the matrix ("all" is inert)."""
    if not column_filters:
        return {}
    return {
        name: value for name, value in column_filters.items()
        if value and value != FILTER_ALL
    }


def filter_matches(cell: Optional[MatrixCell], filter_value: str) -> bool:
    """Whether one employee's cell on a date satisfies a column filter"""
    if cell is None:
        return filter_value == FILTER_ABSENT

    if filter_value == FILTER_ONTIME:
        return not cell.is_late and not cell.is_absent and bool(cell.in_time)
    if filter_value == FILTER_LATE:
        return cell.is_late
    if filter_value == FILTER_ABSENT:
        return cell.is_absent
    return True


def group_by_date(records: Iterable[AttendanceRecord]) -> Dict[str, Dict[str, MatrixCell]]:
    grouped: Dict[str, Dict[str, MatrixCell]] = {}
    for record in records:
        grouped.setdefault(record.date, {})[record.name] = MatrixCell(
            in_time=record.in_time,
            status=record.status,
            is_late=record.is_late,
        )
    return grouped


def build_matrix(
    records: Optional[List[AttendanceRecord]],
    column_filters: Optional[Mapping[str, str]] = None,
    overrides: Optional[List[EventOverride]] = None
) -> AttendanceMatrix:
    """
    Project normalized records into a date x employee grid.

    Overrides are accepted so every consumer calls the builder the same way,
    but the grid itself is purely status based; overrides are applied at
    render time by ``calendar_overrides.resolve_row``.
    """
    if not records:
        return AttendanceMatrix()

    employees = sorted({record.name for record in records if record.name})
    cells = group_by_date(records)
    dates = sort_dates(cells.keys())

    filters = active_filters(column_filters)
    if filters:
        # Focus mode: only the filtered employees are displayed
        employees = sorted(filters.keys())
        dates = [
            day for day in dates
            if all(filter_matches(cells[day].get(name), value) for name, value in filters.items())
        ]
        logger.debug("Matrix focus mode on %s: %d dates kept", employees, len(dates))

    return AttendanceMatrix(dates=dates, employees=employees, cells=cells)
