"""
Calendar override resolution shared by the dashboard matrix and both exports.

A date is "off" when it is a Sunday or carries a user override. Off dates
collapse into a single banner unless somebody actually punched in that day,
in which case real punches are shown and everyone else gets the banner label.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from punch_attendance.config import Config
from punch_attendance.exceptions import InvalidOverrideError
from punch_attendance.models import AttendanceMatrix, EventOverride, MatrixCell, Status
from punch_attendance.timeutils import DateLike, date_key, format_time_ampm, parse_date

CATEGORY_HOLIDAY = 'holiday'
CATEGORY_TEAM_OUT = 'team-out'
CATEGORY_WEEKEND = 'weekend'

ROW_NORMAL = 'normal'
ROW_BANNER = 'banner'
ROW_MIXED = 'mixed'


def is_weekend(value: DateLike) -> bool:
    parsed = parse_date(value)
    return parsed is not None and parsed.weekday() == Config.WEEKEND_WEEKDAY


def find_override(key: Optional[str], overrides: Optional[Iterable[EventOverride]]) -> Optional[EventOverride]:
    if not key or not overrides:
        return None
    for override in overrides:
        if override.date == key:
            return override
    return None


def classify(override: EventOverride) -> str:
    """Holiday-like keywords in the type make a holiday, anything else a team event."""
    return override.category


def anyone_worked(date: str, employees: Sequence[str], matrix: AttendanceMatrix) -> bool:
    for name in employees:
        cell = matrix.cell(date, name)
        if cell is not None and cell.has_real_punch:
            return True
    return False


# ============================================================================
# OVERRIDE REGISTRY
# ============================================================================

class OverrideRegistry:
    """Session-scoped overrides, one per date (adding the same date replaces it)."""

    def __init__(self, overrides: Optional[Iterable[EventOverride]] = None):
        self._by_date: Dict[str, EventOverride] = {}
        for override in overrides or []:
            self.add(override)

    def add(self, override: EventOverride) -> EventOverride:
        key = date_key(override.date)
        if key is None:
            raise InvalidOverrideError(f"Override date {override.date!r} is not a valid date.")
        if not override.label:
            raise InvalidOverrideError("Override label cannot be empty.")

        stored = EventOverride(date=key, label=override.label, type=override.type)
        self._by_date.pop(key, None)
        self._by_date[key] = stored
        return stored

    def remove(self, date: str) -> bool:
        return self._by_date.pop(date, None) is not None

    def clear(self) -> None:
        self._by_date.clear()

    def find(self, key: Optional[str]) -> Optional[EventOverride]:
        return self._by_date.get(key) if key else None

    def as_list(self) -> List[EventOverride]:
        return list(self._by_date.values())

    def __iter__(self) -> Iterator[EventOverride]:
        return iter(self.as_list())

    def __len__(self) -> int:
        return len(self._by_date)


# ============================================================================
# DISPLAY POLICY
# ============================================================================

@dataclass(frozen=True)
class CellDisplay:
    text: str
    kind: str                      # ontime | late | absent | missing | off | half-day | wfh


@dataclass
class RowDisplay:
    date: str
    kind: str                      # normal | banner | mixed
    label: str = ""
    category: Optional[str] = None
    weekend: bool = False
    override: Optional[EventOverride] = None
    cells: List[CellDisplay] = field(default_factory=list)

    @property
    def is_scheduled(self) -> bool:
        """Scheduled working day: not a Sunday and not a holiday-type override."""
        return not self.weekend and self.category != CATEGORY_HOLIDAY


def resolve_cell(cell: Optional[MatrixCell], off_label: Optional[str] = None) -> CellDisplay:
    """
    Display text and kind of one employee's cell. On an off day any cell
    that was not actually worked shows ``off_label``.
    """
    if cell is None:
        if off_label is not None:
            return CellDisplay(off_label, 'off')
        return CellDisplay(Status.NO_RECORD, 'missing')
    if cell.status == Status.HALF_DAY:
        return CellDisplay(Status.HALF_DAY, 'half-day')
    if cell.status == Status.WFH:
        return CellDisplay(Status.WFH, 'wfh')
    if cell.status == Status.PRESENT or (cell.has_real_punch and cell.in_time):
        return CellDisplay(format_time_ampm(cell.in_time), 'late' if cell.is_late else 'ontime')
    if off_label is not None:
        return CellDisplay(off_label, 'off')
    return CellDisplay('ABSENT', 'absent')


def resolve_row(
    date: str,
    matrix: AttendanceMatrix,
    overrides: Optional[Iterable[EventOverride]] = None
) -> RowDisplay:
    """Rendering decision for one matrix row"""
    override = find_override(date_key(date), overrides)
    weekend = is_weekend(date)
    employees = matrix.employees

    if override is None and not weekend:
        return RowDisplay(
            date=date,
            kind=ROW_NORMAL,
            cells=[resolve_cell(matrix.cell(date, name)) for name in employees],
        )

    label = override.banner_text if override else Config.WEEKEND_LABEL
    category = classify(override) if override else CATEGORY_WEEKEND
    row = RowDisplay(date=date, kind=ROW_BANNER, label=label, category=category,
                     weekend=weekend, override=override)

    if anyone_worked(date, employees, matrix):
        row.kind = ROW_MIXED
        row.cells = [resolve_cell(matrix.cell(date, name), off_label=label) for name in employees]
    return row


def resolve_rows(matrix: AttendanceMatrix, overrides: Optional[Iterable[EventOverride]] = None) -> List[RowDisplay]:
    overrides = list(overrides or [])
    return [resolve_row(date, matrix, overrides) for date in matrix.dates]
