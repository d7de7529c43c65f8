from datetime import timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from punch_attendance.config import Config
from punch_attendance.models import AttendanceRecord, EmployeeSummary, records_to_frame
from punch_attendance.timeutils import DateLike, parse_date, parse_time, sort_dates

TREND_COLUMNS = ['date', 'present', 'late', 'absent', 'total', 'attendance_rate']
PERFORMER_COLUMNS = ['code', 'name', 'present', 'absent', 'late', 'attendance_rate']
LATE_PATTERN_COLUMNS = ['day', 'early', 'medium', 'severe']

SummaryLike = Union[EmployeeSummary, Mapping]

# ============================================================================
# HELPERS
# ============================================================================

def _summary_frame(summaries: Optional[Iterable[SummaryLike]]) -> pd.DataFrame:
    """Accept EmployeeSummary objects or plain mappings with the same fields"""
    rows = []
    for summary in summaries or []:
        if isinstance(summary, Mapping):
            get = summary.get
        else:
            get = lambda key, default=None, _s=summary: getattr(_s, key, default)
        rows.append({
            'code': get('code', ''),
            'name': get('name', ''),
            'present': int(get('present', 0) or 0),
            'absent': int(get('absent', 0) or 0),
            'late': int(get('late', 0) or 0),
        })
    return pd.DataFrame(rows, columns=['code', 'name', 'present', 'absent', 'late'])


def _within(value: DateLike, start, end) -> bool:
    parsed = parse_date(value)
    if parsed is None:
        return False
    if start is not None and parsed < start:
        return False
    if end is not None and parsed > end:
        return False
    return True


# ============================================================================
# DAILY TREND & DISTRIBUTION
# ============================================================================

def daily_trend(
    records: Optional[List[AttendanceRecord]],
    start: DateLike = None,
    end: DateLike = None
) -> pd.DataFrame:
    """
    Per-date present/late/absent/total counts within optional inclusive bounds
    Returns DataFrame sorted chronologically
    """
    frame = records_to_frame(records or [])
    start_date, end_date = parse_date(start), parse_date(end)
    if not frame.empty and (start_date or end_date):
        keep = [_within(value, start_date, end_date) for value in frame['date']]
        frame = frame[keep]

    if frame.empty:
        return pd.DataFrame(columns=TREND_COLUMNS)

    frame = frame.assign(
        is_present=frame['status'].fillna('').str.startswith('Present'),
        is_absent=frame['status'] == 'Absent',
        is_late=frame['is_late'].astype(bool),
    )
    trend = frame.groupby('date', sort=False).agg(
        present=('is_present', 'sum'),
        late=('is_late', 'sum'),
        absent=('is_absent', 'sum'),
        total=('status', 'size'),
    )
    trend = trend.loc[sort_dates(trend.index.tolist())].reset_index()
    trend[['present', 'late', 'absent', 'total']] = trend[['present', 'late', 'absent', 'total']].astype(int)

    totals = trend['total'].to_numpy(dtype=float)
    present = trend['present'].to_numpy(dtype=float)
    rates = np.divide(present * 100, totals, out=np.zeros_like(present), where=totals > 0)
    trend['attendance_rate'] = np.round(rates, 1)
    return trend[TREND_COLUMNS]


def status_distribution(summaries: Optional[Iterable[SummaryLike]]) -> Dict[str, int]:
    frame = _summary_frame(summaries)
    return {
        'present': int(frame['present'].sum()),
        'late': int(frame['late'].sum()),
        'absent': int(frame['absent'].sum()),
    }


# ============================================================================
# RANKINGS
# ============================================================================

def top_performers(summaries: Optional[Iterable[SummaryLike]], limit: int = Config.TOP_PERFORMERS_LIMIT) -> pd.DataFrame:
    """
    Employees ranked by attendance rate = present / (present + absent) x 100
    Ties keep the input order
    """
    frame = _summary_frame(summaries)
    if frame.empty or limit <= 0:
        return pd.DataFrame(columns=PERFORMER_COLUMNS)

    present = frame['present'].to_numpy(dtype=float)
    counted = present + frame['absent'].to_numpy(dtype=float)
    rates = np.divide(present * 100, counted, out=np.zeros_like(present), where=counted > 0)
    frame['attendance_rate'] = np.round(rates, 1)

    ranked = frame.sort_values('attendance_rate', ascending=False, kind='mergesort')
    return ranked.head(limit).reset_index(drop=True)[PERFORMER_COLUMNS]


# ============================================================================
# LATE PATTERNS
# ============================================================================

def late_patterns(records: Optional[List[AttendanceRecord]]) -> pd.DataFrame:
    """
    Late arrivals per weekday, split by how far past the cutoff they were.
    Buckets always use the default cutoff, not a per-upload one.
    """
    cutoff = Config.DEFAULT_LATE_CUTOFF_MINUTES
    buckets = {day: {'early': 0, 'medium': 0, 'severe': 0} for day in Config.WEEKDAY_ORDER}

    for record in records or []:
        if not record.is_late:
            continue
        parsed_date = parse_date(record.date)
        minutes = parse_time(record.in_time)
        if parsed_date is None or minutes is None:
            continue

        minutes_late = minutes - cutoff
        if minutes_late <= 0:
            continue
        if minutes_late <= Config.LATE_EARLY_MAX_MINUTES:
            bucket = 'early'
        elif minutes_late <= Config.LATE_MEDIUM_MAX_MINUTES:
            bucket = 'medium'
        else:
            bucket = 'severe'
        buckets[parsed_date.strftime('%A')][bucket] += 1

    rows = [{'day': day, **counts} for day, counts in buckets.items()]
    return pd.DataFrame(rows, columns=LATE_PATTERN_COLUMNS)


# ============================================================================
# TREND DIRECTION & HEADLINE METRICS
# ============================================================================

def trend(records: Optional[List[AttendanceRecord]]) -> Dict[str, object]:
    """Compare average attendance rate of the later half of the period against the earlier half"""
    daily = daily_trend(records)
    if len(daily) < 2:
        return {'trend': 'stable', 'direction': '→', 'percentage': 0.0}

    half = len(daily) // 2
    first_avg = float(daily['attendance_rate'].iloc[:half].mean())
    second_avg = float(daily['attendance_rate'].iloc[half:].mean())
    delta = second_avg - first_avg

    if delta > Config.TREND_THRESHOLD_POINTS:
        direction, arrow = 'up', '↑'
    elif delta < -Config.TREND_THRESHOLD_POINTS:
        direction, arrow = 'down', '↓'
    else:
        direction, arrow = 'stable', '→'
    return {'trend': direction, 'direction': arrow, 'percentage': round(abs(delta), 1)}


def trend_window(records: Optional[List[AttendanceRecord]], range_key: str = '1M') -> Tuple:
    """(start, end) calendar bounds for a 1W/2W/3W/1M range ending at the last recorded date"""
    parsed = [parse_date(record.date) for record in records or []]
    parsed = [value for value in parsed if value is not None]
    if not parsed:
        return None, None

    last_date = max(parsed)
    days = Config.TREND_WINDOWS.get(range_key, Config.TREND_WINDOWS['1M'])
    return last_date - timedelta(days=days), last_date


def _day_label(value: str) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return value
    return f"{parsed:%a}, {parsed:%b} {parsed.day}"


def headline_metrics(
    records: Optional[List[AttendanceRecord]],
    summaries: Optional[Iterable[SummaryLike]]
) -> Dict[str, object]:
    """Headline numbers shown above the analytics charts"""
    records = records or []
    frame = _summary_frame(summaries)

    total_present = int(frame['present'].sum())
    counted = total_present + int(frame['absent'].sum())
    avg_rate = round(total_present / counted * 100, 1) if counted else 0.0

    unique_dates = {record.date for record in records}
    total_late = int(frame['late'].sum())
    avg_late = round(total_late / len(unique_dates), 1) if unique_dates else 0.0

    daily_present: Dict[str, int] = {}
    for record in records:
        if record.is_present:
            daily_present[record.date] = daily_present.get(record.date, 0) + 1

    best_day, best_count = '-', 0
    for day, count in daily_present.items():
        if count > best_count:
            best_day, best_count = _day_label(day), count

    return {
        'avg_attendance_rate': avg_rate,
        'avg_late_per_day': avg_late,
        'best_day': best_day,
        'best_day_present': best_count,
        'total_employees': len(frame),
        'trend': trend(records),
    }
