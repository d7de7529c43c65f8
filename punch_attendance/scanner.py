"""
Tabular block scanner for biometric punch exports.

The export is a single sheet made of repeated blocks::

    Attendance Date |          | 08-Jan-2024
    SNo | E. Code | Name | InTime | OutTime | Status
    1   | E100    | Alice| 09:40  | 18:00   |
    ...
    Attendance Date |          | 09-Jan-2024
    SNo | E. Code | ...

The scan is a fold over the rows with an explicit ``ScanState``: the current
date and the active header columns travel with the accumulator.
"""

import logging
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import List, Optional, Sequence

from punch_attendance.config import Config
from punch_attendance.models import RawRecord

logger = logging.getLogger(__name__)

DATE_MARKER = 'attendance date'
HEADER_TOKEN = 'SNo'
MARKER_SEARCH_CELLS = 3
BLOCK_END_CELLS = 2
DATE_SEARCH_SPAN = 9


@dataclass(frozen=True)
class HeaderColumns:
    """Column positions resolved from a header row (None when missing)."""

    code: Optional[int] = None
    name: Optional[int] = None
    in_time: Optional[int] = None
    out_time: Optional[int] = None
    status: Optional[int] = None


@dataclass
class ScanState:
    current_date: Optional[str] = None
    columns: Optional[HeaderColumns] = None
    records: List[RawRecord] = field(default_factory=list)
    blocks: int = 0


def cell_text(row: Sequence, index: Optional[int]) -> str:
    """Trimmed text of a cell; missing cells read as empty."""
    if index is None or index < 0 or index >= len(row):
        return ""
    value = row[index]
    if value is None:
        return ""
    return str(value).strip()


def _find_column(headers: List[str], *tokens: str, exact: bool = False) -> Optional[int]:
    for idx, header in enumerate(headers):
        if not header:
            continue
        if exact and header in tokens:
            return idx
        if not exact and any(token in header for token in tokens):
            return idx
    return None


def resolve_header_columns(row: Sequence) -> HeaderColumns:
    """Map a header row to the positions of the columns the scanner reads."""
    headers = [cell_text(row, idx) for idx in range(len(row))]
    return HeaderColumns(
        code=_find_column(headers, 'E. Code', 'Emp Code'),
        name=_find_column(headers, 'Name', exact=True),
        in_time=_find_column(headers, 'InTime', 'In Time'),
        out_time=_find_column(headers, 'OutTime', 'Out Time'),
        status=_find_column(headers, 'Status', exact=True),
    )


def date_marker_index(row: Sequence, span: int = MARKER_SEARCH_CELLS) -> Optional[int]:
    """Index of the "Attendance Date" label within the first cells, if any."""
    for idx in range(min(span, len(row))):
        if cell_text(row, idx).lower() == DATE_MARKER:
            return idx
    return None


def marker_date(row: Sequence, marker_idx: int) -> Optional[str]:
    """First non-empty cell among the cells following the marker."""
    last = min(len(row), marker_idx + 1 + DATE_SEARCH_SPAN)
    for idx in range(marker_idx + 1, last):
        text = cell_text(row, idx)
        if text:
            return text
    return None


def is_header_row(row: Sequence) -> bool:
    return any(HEADER_TOKEN in cell_text(row, idx) for idx in range(len(row)))


def ends_block(row: Sequence) -> bool:
    """A data block stops at a date marker in its first two cells or an "SNo" header."""
    return date_marker_index(row, BLOCK_END_CELLS) is not None or cell_text(row, 0) == HEADER_TOKEN


def is_blank_row(row: Sequence) -> bool:
    return not row or all(not cell_text(row, idx) for idx in range(len(row)))


def _data_record(row: Sequence, columns: HeaderColumns, current_date: Optional[str]) -> Optional[RawRecord]:
    code = cell_text(row, columns.code)
    if not code or code in Config.PLACEHOLDER_CODES:
        return None
    return {
        'E. Code': code,
        'Name': cell_text(row, columns.name),
        'InTime': cell_text(row, columns.in_time),
        'OutTime': cell_text(row, columns.out_time),
        'Status': cell_text(row, columns.status),
        'Attendance Date': current_date or '',
    }


def _scan_outer(state: ScanState, row: Sequence) -> ScanState:
    marker_idx = date_marker_index(row)
    if marker_idx is not None:
        found = marker_date(row, marker_idx)
        return replace(state, current_date=found or state.current_date or "")

    if is_header_row(row):
        if state.current_date is None:
            logger.debug("Ignoring header row before any attendance date marker")
            return state
        return replace(state, columns=resolve_header_columns(row), blocks=state.blocks + 1)

    return state


def _advance(state: ScanState, row: Sequence) -> ScanState:
    if is_blank_row(row):
        return state

    if state.columns is not None:
        if ends_block(row):
            # Boundary row is re-examined as a marker or header
            return _scan_outer(replace(state, columns=None), row)
        record = _data_record(row, state.columns, state.current_date)
        if record is not None:
            state.records.append(record)
        return state

    return _scan_outer(state, row)


def scan(grid: Optional[Sequence[Sequence]]) -> List[RawRecord]:
    """
    Extract flat raw records from a header-less cell grid.
    Returns an empty list when no blocks are recognized.
    """
    if not grid:
        return []

    state = reduce(_advance, grid, ScanState())
    logger.debug("Scanned %d rows: %d blocks, %d records", len(grid), state.blocks, len(state.records))
    return state.records
