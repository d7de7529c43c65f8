from punch_attendance.normalizer import RecordNormalizer, normalize
from punch_attendance.scanner import scan


def test_late_cutoff_is_strict():
    batch = normalize([
        {'E. Code': 'E1', 'Name': 'A', 'Attendance Date': '08-Jan-2024', 'InTime': '10:35', 'OutTime': '18:00'},
        {'E. Code': 'E2', 'Name': 'B', 'Attendance Date': '08-Jan-2024', 'InTime': '10:36', 'OutTime': '18:00'},
    ])
    on_time, late = batch.records
    assert not on_time.is_late
    assert late.is_late
    assert batch.team_stats.late == 1


def test_custom_cutoff():
    batch = normalize([{'E. Code': 'E1', 'InTime': '09:31', 'OutTime': '18:00'}], late_cutoff_minutes=570)
    assert batch.records[0].is_late


def test_punch_in_overrides_raw_status():
    batch = normalize([
        {'E. Code': 'E1', 'InTime': '09:00', 'OutTime': '', 'Status': 'Absent'},
        {'E. Code': 'E2', 'InTime': '', 'OutTime': '', 'Status': 'Absent'},
    ])
    assert batch.records[0].status == 'PresentNoOutPunch'
    assert batch.records[0].is_present
    assert batch.records[1].status == 'Absent'
    assert batch.summaries[0].present == 1
    assert batch.summaries[1].absent == 1


def test_unknown_status_is_kept_verbatim_and_not_counted():
    batch = normalize([{'E. Code': 'E1', 'Status': 'Half Day'}])
    assert batch.records[0].status == 'Half Day'
    assert batch.summaries[0].present == 0
    assert batch.summaries[0].absent == 0


def test_invalid_codes_are_dropped():
    batch = normalize([
        {'E. Code': 'E. Code', 'Name': 'Name'},
        {'E. Code': '  ', 'Name': 'Ghost'},
        {'Emp Code': 'E9', 'Name': 'Zed', 'Status': 'Absent'},
    ])
    assert [r.employee_code for r in batch.records] == ['E9']
    assert batch.team_stats.total_employees == 1


def test_unparsable_in_time_is_never_late():
    batch = normalize([{'E. Code': 'E1', 'InTime': 'late-ish', 'OutTime': ''}])
    assert batch.records[0].status == 'PresentNoOutPunch'
    assert not batch.records[0].is_late


def test_date_aliases_and_fallback_keys():
    assert RecordNormalizer.resolve_date({'Punch Date': '2024-01-08'}) == '2024-01-08'
    assert RecordNormalizer.resolve_date({'Work day': '2024-01-09'}) == '2024-01-09'
    assert RecordNormalizer.resolve_date({'Other': 'x'}) == ''


def test_summaries_add_up_to_team_totals(punch_grid):
    batch = normalize(scan(punch_grid))

    assert batch.team_stats.total_employees == 2
    assert sum(s.present for s in batch.summaries) == batch.team_stats.present == 3
    assert sum(s.absent for s in batch.summaries) == batch.team_stats.absent == 1
    assert sum(s.late for s in batch.summaries) == batch.team_stats.late == 1
    for summary in batch.summaries:
        assert summary.late <= summary.present


def test_empty_input():
    batch = normalize([])
    assert batch.records == []
    assert batch.summaries == []
    assert batch.team_stats.total_employees == 0
