from datetime import date

from punch_attendance.analytics import (
    daily_trend,
    headline_metrics,
    late_patterns,
    status_distribution,
    top_performers,
    trend,
    trend_window,
)
from punch_attendance.models import EmployeeSummary

from tests.conftest import make_record


def _two_halves():
    records = []
    for day in ("2024-01-01", "2024-01-02"):
        records.append(make_record("A", "Ann", day, "09:00", "18:00"))
        records.append(make_record("B", "Ben", day, status="Absent"))
    for day in ("2024-01-03", "2024-01-04"):
        records.append(make_record("A", "Ann", day, "09:00", "18:00"))
        records.append(make_record("B", "Ben", day, "09:10", "18:00"))
    return records


def test_daily_trend_counts_and_rate():
    trend_df = daily_trend(_two_halves())
    assert trend_df['date'].tolist() == ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04"]
    first = trend_df.iloc[0]
    assert (first['present'], first['absent'], first['total']) == (1, 1, 2)
    assert first['attendance_rate'] == 50.0
    assert trend_df.iloc[-1]['attendance_rate'] == 100.0


def test_daily_trend_bounds_are_inclusive():
    trend_df = daily_trend(_two_halves(), "2024-01-02", date(2024, 1, 3))
    assert trend_df['date'].tolist() == ["2024-01-02", "2024-01-03"]


def test_daily_trend_empty():
    assert daily_trend([]).empty
    assert daily_trend(None).empty


def test_trend_direction_up():
    assert trend(_two_halves()) == {'trend': 'up', 'direction': '↑', 'percentage': 50.0}


def test_trend_needs_two_days():
    records = [make_record("A", "Ann", "2024-01-01", "09:00", "18:00")]
    assert trend(records)['trend'] == 'stable'


def test_top_performers_ranking_and_ties():
    summaries = [
        {'code': 'A', 'name': 'Ann', 'present': 9, 'absent': 1, 'late': 0},
        {'code': 'B', 'name': 'Ben', 'present': 5, 'absent': 5, 'late': 2},
        EmployeeSummary(code='C', name='Cy', present=9, absent=1, late=1),
    ]
    ranked = top_performers(summaries, limit=2)
    assert ranked['code'].tolist() == ['A', 'C']
    assert ranked['attendance_rate'].tolist() == [90.0, 90.0]


def test_top_performers_empty():
    assert top_performers([]).empty


def test_status_distribution():
    summaries = [
        EmployeeSummary(code='A', name='Ann', present=3, absent=1, late=1),
        EmployeeSummary(code='B', name='Ben', present=2, absent=2, late=0),
    ]
    assert status_distribution(summaries) == {'present': 5, 'late': 1, 'absent': 3}


def test_late_patterns_buckets():
    records = [
        make_record("A", "Ann", "2024-01-08", "10:50", "18:00", is_late=True),
        make_record("A", "Ann", "2024-01-15", "11:05", "18:00", is_late=True),
        make_record("A", "Ann", "2024-01-22", "11:30", "18:00", is_late=True),
        make_record("A", "Ann", "2024-01-09", "11:30", "18:00", is_late=False),
        make_record("A", "Ann", "someday", "11:30", "18:00", is_late=True),
    ]
    patterns = late_patterns(records).set_index('day')

    assert len(patterns) == 7
    assert patterns.loc['Monday'].tolist() == [1, 1, 1]
    assert patterns.loc['Tuesday'].tolist() == [0, 0, 0]


def test_trend_window_ends_at_last_date():
    records = _two_halves()
    assert trend_window(records, '1W') == (date(2023, 12, 28), date(2024, 1, 4))
    assert trend_window([], '1W') == (None, None)


def test_headline_metrics(week_records):
    summaries = [
        EmployeeSummary(code='E100', name='Alice', present=3, absent=1, late=1),
        EmployeeSummary(code='E200', name='Bob', present=0, absent=2, late=0),
    ]
    metrics = headline_metrics(week_records, summaries)

    assert metrics['avg_attendance_rate'] == 50.0
    assert metrics['avg_late_per_day'] == round(1 / 4, 1)
    assert metrics['best_day'] == "Sat, Jan 6"
    assert metrics['best_day_present'] == 1
    assert metrics['total_employees'] == 2
