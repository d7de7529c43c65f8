from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from punch_attendance.config import Config

RawRecord = Dict[str, str]
RawGrid = List[List[str]]


class Status:
    """Canonical status values produced by the normalizer."""

    PRESENT = "Present"
    PRESENT_NO_OUT_PUNCH = "PresentNoOutPunch"
    ABSENT = "Absent"
    HALF_DAY = "Half Day"
    WFH = "WFH"
    NO_RECORD = "-"

    LABELS = {
        PRESENT: "Present",
        PRESENT_NO_OUT_PUNCH: "Present (No Out Punch)",
        ABSENT: "Absent",
    }

    @staticmethod
    def is_present(status: str) -> bool:
        return bool(status) and status.startswith(Status.PRESENT)

    @staticmethod
    def label(status: str) -> str:
        return Status.LABELS.get(status, status)


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee on one day, after normalization."""

    employee_code: str
    name: str
    date: str
    in_time: str = ""
    out_time: str = ""
    status: str = ""
    is_late: bool = False

    @property
    def is_present(self) -> bool:
        return Status.is_present(self.status)

    @property
    def is_absent(self) -> bool:
        return self.status == Status.ABSENT


@dataclass
class EmployeeSummary:
    code: str
    name: str
    present: int = 0
    absent: int = 0
    late: int = 0

    @property
    def attendance_rate(self) -> float:
        total = self.present + self.absent
        if total == 0:
            return 0.0
        return round(self.present / total * 100, 1)


@dataclass
class TeamStats:
    total_employees: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0


@dataclass
class NormalizedBatch:
    """Result of one normalization pass over an upload."""

    records: List[AttendanceRecord] = field(default_factory=list)
    summaries: List[EmployeeSummary] = field(default_factory=list)
    team_stats: TeamStats = field(default_factory=TeamStats)


@dataclass(frozen=True)
class MatrixCell:
    in_time: str
    status: str
    is_late: bool

    @property
    def is_absent(self) -> bool:
        return self.status == Status.ABSENT

    @property
    def has_real_punch(self) -> bool:
        """A record exists that is neither an absence nor a placeholder."""
        return self.status not in (Status.ABSENT, Status.NO_RECORD)


@dataclass
class AttendanceMatrix:
    dates: List[str] = field(default_factory=list)
    employees: List[str] = field(default_factory=list)
    cells: Dict[str, Dict[str, MatrixCell]] = field(default_factory=dict)

    def cell(self, date: str, employee: str) -> Optional[MatrixCell]:
        return self.cells.get(date, {}).get(employee)

    @property
    def is_empty(self) -> bool:
        return not self.dates


@dataclass(frozen=True)
class EventOverride:
    """User-declared calendar exception (holiday or team event)."""

    date: str
    label: str
    type: str = ""

    @property
    def category(self) -> str:
        text = (self.type or "").lower()
        if any(keyword in text for keyword in Config.HOLIDAY_KEYWORDS):
            return 'holiday'
        return 'team-out'

    @property
    def banner_text(self) -> str:
        return (self.label or "").upper()

    @classmethod
    def from_dict(cls, payload: Dict[str, str]) -> "EventOverride":
        return cls(
            date=str(payload.get('date', '')).strip(),
            label=str(payload.get('label', '')).strip(),
            type=str(payload.get('type', '') or '').strip(),
        )


def records_to_frame(records: List[AttendanceRecord]) -> pd.DataFrame:
    """Tabular view of normalized records for pandas-based aggregation."""
    columns = ['employee_code', 'name', 'date', 'in_time', 'out_time', 'status', 'is_late']
    if not records:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([asdict(record) for record in records], columns=columns)


def summaries_to_frame(summaries: List[EmployeeSummary]) -> pd.DataFrame:
    columns = ['code', 'name', 'present', 'absent', 'late']
    if not summaries:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([asdict(summary) for summary in summaries], columns=columns)
