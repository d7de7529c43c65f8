import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from punch_attendance.config import Config
from punch_attendance.models import (
    AttendanceRecord,
    EmployeeSummary,
    NormalizedBatch,
    Status,
    TeamStats,
)
from punch_attendance.timeutils import parse_time

logger = logging.getLogger(__name__)

# ============================================================================
# FIELD ALIASES
# ============================================================================

CODE_KEYS = ('E. Code', 'Emp Code', 'Employee Code')
DATE_KEYS = ('Date', 'Attendance Date', 'Punch Date', 'Att Date', 'Log Date', 'Day')
IN_TIME_KEYS = ('InTime', 'In Time', 'Time In')
OUT_TIME_KEYS = ('OutTime', 'Out Time', 'Time Out')
NAME_KEYS = ('Name',)
STATUS_KEYS = ('Status',)


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


# ============================================================================
# RECORD NORMALIZATION
# ============================================================================

class RecordNormalizer:
    """Resolves field aliases and derives status and lateness for raw records"""

    @staticmethod
    def resolve_field(row: Mapping, keys: Tuple[str, ...]) -> str:
        """First non-empty value among the alias keys"""
        for key in keys:
            value = _text(row.get(key))
            if value:
                return value
        return ""

    @staticmethod
    def resolve_date(row: Mapping) -> str:
        """
        Flexible date detection: known aliases first, then any key that
        mentions "date" or "day"
        """
        value = RecordNormalizer.resolve_field(row, DATE_KEYS)
        if value:
            return value
        for key in row.keys():
            lowered = str(key).lower()
            if 'date' in lowered or 'day' in lowered:
                return _text(row.get(key))
        return ""

    @staticmethod
    def derive_status(in_time: str, out_time: str, raw_status: str) -> str:
        """A punch-in always wins over whatever status the export carried"""
        if in_time:
            return Status.PRESENT if out_time else Status.PRESENT_NO_OUT_PUNCH
        return raw_status

    @staticmethod
    def is_late(status: str, in_time: str, late_cutoff_minutes: int) -> bool:
        if not Status.is_present(status):
            return False
        minutes = parse_time(in_time)
        if minutes is None:
            return False
        return minutes > late_cutoff_minutes

    @staticmethod
    def is_valid_code(code: str) -> bool:
        return bool(code) and code not in Config.PLACEHOLDER_CODES

    @staticmethod
    def to_record(row: Mapping, late_cutoff_minutes: int) -> Optional[AttendanceRecord]:
        code = RecordNormalizer.resolve_field(row, CODE_KEYS)
        if not RecordNormalizer.is_valid_code(code):
            return None

        in_time = RecordNormalizer.resolve_field(row, IN_TIME_KEYS)
        out_time = RecordNormalizer.resolve_field(row, OUT_TIME_KEYS)
        status = RecordNormalizer.derive_status(
            in_time, out_time, RecordNormalizer.resolve_field(row, STATUS_KEYS)
        )
        return AttendanceRecord(
            employee_code=code,
            name=RecordNormalizer.resolve_field(row, NAME_KEYS),
            date=RecordNormalizer.resolve_date(row),
            in_time=in_time,
            out_time=out_time,
            status=status,
            is_late=RecordNormalizer.is_late(status, in_time, late_cutoff_minutes),
        )


def normalize(
    raw_records: Optional[Iterable[Mapping]],
    late_cutoff_minutes: int = Config.DEFAULT_LATE_CUTOFF_MINUTES
) -> NormalizedBatch:
    """
    Canonicalize raw records and accumulate per-employee and team counters
    Returns: NormalizedBatch(records, summaries, team_stats)
    """
    if not raw_records:
        return NormalizedBatch()

    records: List[AttendanceRecord] = []
    summaries: Dict[str, EmployeeSummary] = {}
    team = TeamStats()

    for row in raw_records:
        record = RecordNormalizer.to_record(row, late_cutoff_minutes)
        if record is None:
            continue
        records.append(record)

        summary = summaries.get(record.employee_code)
        if summary is None:
            summary = EmployeeSummary(code=record.employee_code, name=record.name)
            summaries[record.employee_code] = summary

        if record.is_present:
            summary.present += 1
            team.present += 1
            if record.is_late:
                summary.late += 1
                team.late += 1
        elif record.is_absent:
            summary.absent += 1
            team.absent += 1

    team.total_employees = len(summaries)
    logger.info(
        "Normalized %d records for %d employees (present=%d absent=%d late=%d)",
        len(records), team.total_employees, team.present, team.absent, team.late
    )
    return NormalizedBatch(records=records, summaries=list(summaries.values()), team_stats=team)
