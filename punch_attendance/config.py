import logging
import os
from typing import Dict, Tuple

# ============================================================================
# CONFIGURATION & CONSTANTS
# ============================================================================

class Config:
    """Centralized configuration for business rules and thresholds"""

    # Lateness
    DEFAULT_LATE_CUTOFF_MINUTES = 635          # 10:35 AM
    LATE_CUTOFF_ENV_VAR = "ATTENDANCE_LATE_CUTOFF"

    # Late pattern buckets (minutes past the cutoff)
    LATE_EARLY_MAX_MINUTES = 15
    LATE_MEDIUM_MAX_MINUTES = 30

    # Every pair of late days deducts this much attendance
    LATE_PENALTY_DAYS_PER_PAIR = 0.25

    # Placeholder values that leak from repeated header rows
    PLACEHOLDER_CODES = ('E. Code', 'Emp Code', 'SNo')

    # Calendar
    WEEKEND_WEEKDAY = 6                        # Sunday (Monday == 0)
    WEEKEND_LABEL = "WEEK-END"
    HOLIDAY_KEYWORDS = ('holiday', 'leave', 'vacation', 'off')
    WEEKDAY_ORDER = (
        'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday'
    )

    # Analytics
    TREND_THRESHOLD_POINTS = 2.0
    TOP_PERFORMERS_LIMIT = 5
    TREND_WINDOWS: Dict[str, int] = {'1W': 7, '2W': 14, '3W': 21, '1M': 30}

    # Accepted uploads
    EXCEL_EXTENSIONS: Tuple[str, ...] = ('.xlsx', '.xls')

    # Export branding
    REPORT_BRAND = "RVS ATTENDANCE MONITOR"
    REPORT_TITLE = "Attendance Full Report"
    SUMMARY_SHEET = "Employee Summary"
    MATRIX_SHEET = "Monthly Matrix"

    LOG_LEVEL_ENV_VAR = "ATTENDANCE_LOG_LEVEL"

    @classmethod
    def late_cutoff_minutes(cls) -> int:
        """
        Late cutoff from the environment ("HH:MM" or plain minutes),
        falling back to the default when unset or invalid
        """
        raw = os.getenv(cls.LATE_CUTOFF_ENV_VAR, "").strip()
        if not raw:
            return cls.DEFAULT_LATE_CUTOFF_MINUTES

        if ':' in raw:
            hours, _, minutes = raw.partition(':')
            if hours.strip().isdigit() and minutes.strip().isdigit():
                return int(hours) * 60 + int(minutes)
        elif raw.isdigit():
            return int(raw)

        logging.getLogger(__name__).warning(
            "Ignoring invalid %s=%r, using %d",
            cls.LATE_CUTOFF_ENV_VAR, raw, cls.DEFAULT_LATE_CUTOFF_MINUTES
        )
        return cls.DEFAULT_LATE_CUTOFF_MINUTES


def configure_logging(level: str = None) -> None:
    """Configure root logging once for the dashboard process."""
    level_name = (level or os.getenv(Config.LOG_LEVEL_ENV_VAR, "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
