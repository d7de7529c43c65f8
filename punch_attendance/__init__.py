"""
Punch attendance normalization pipeline: scan biometric workbook exports,
normalize them into typed records and derive summaries, the presence matrix,
analytics and styled reports.
"""

from punch_attendance.analytics import (
    daily_trend,
    headline_metrics,
    late_patterns,
    status_distribution,
    top_performers,
    trend,
    trend_window,
)
from punch_attendance.calendar_overrides import OverrideRegistry, resolve_row, resolve_rows
from punch_attendance.config import Config, configure_logging
from punch_attendance.exceptions import (
    AttendanceError,
    InvalidOverrideError,
    UnsupportedFileTypeError,
    WorkbookReadError,
)
from punch_attendance.matrix import build_matrix
from punch_attendance.models import (
    AttendanceMatrix,
    AttendanceRecord,
    EmployeeSummary,
    EventOverride,
    NormalizedBatch,
    TeamStats,
)
from punch_attendance.normalizer import normalize
from punch_attendance.reader import load_attendance, read_grid
from punch_attendance.scanner import scan

__version__ = "1.0.0"
