from punch_attendance.matrix import build_matrix, filter_matches
from punch_attendance.models import MatrixCell

from tests.conftest import make_record


def _records():
    return [
        make_record("E100", "Alice", "09-Jan-2024", "10:50", "18:00", is_late=True),
        make_record("E200", "Bob", "09-Jan-2024", "09:30", "18:00"),
        make_record("E100", "Alice", "2024-01-08", "09:40", "18:00"),
        make_record("E200", "Bob", "2024-01-08", status="Absent"),
        make_record("E300", "Carol", "2024-01-08", "09:55", "18:00"),
    ]


def test_dates_are_chronological_and_employees_sorted():
    matrix = build_matrix(_records())
    assert matrix.dates == ["2024-01-08", "09-Jan-2024"]
    assert matrix.employees == ["Alice", "Bob", "Carol"]
    assert matrix.cell("09-Jan-2024", "Alice").is_late
    assert matrix.cell("09-Jan-2024", "Carol") is None


def test_focus_mode_keeps_only_matching_dates():
    matrix = build_matrix(_records(), {"Alice": "late"})
    assert matrix.employees == ["Alice"]
    assert matrix.dates == ["09-Jan-2024"]


def test_focus_mode_requires_all_filters():
    assert build_matrix(_records(), {"Alice": "ontime", "Bob": "absent"}).dates == ["2024-01-08"]
    assert build_matrix(_records(), {"Alice": "late", "Bob": "absent"}).dates == []


def test_missing_record_matches_absent_filter():
    matrix = build_matrix(_records(), {"Carol": "absent"})
    assert matrix.employees == ["Carol"]
    assert matrix.dates == ["09-Jan-2024"]


def test_all_filter_is_inert():
    assert build_matrix(_records(), {"Alice": "all"}) == build_matrix(_records())


def test_build_is_idempotent():
    records = _records()
    assert build_matrix(records) == build_matrix(records)
    assert len(records) == 5


def test_empty_records():
    matrix = build_matrix([])
    assert matrix.is_empty
    assert matrix.employees == []


def test_filter_matches():
    on_time = MatrixCell(in_time="09:40", status="Present", is_late=False)
    late = MatrixCell(in_time="10:50", status="Present", is_late=True)
    absent = MatrixCell(in_time="", status="Absent", is_late=False)

    assert filter_matches(on_time, "ontime")
    assert not filter_matches(late, "ontime")
    assert not filter_matches(absent, "ontime")
    assert filter_matches(late, "late")
    assert filter_matches(absent, "absent")
    assert filter_matches(None, "absent")
    assert not filter_matches(None, "late")


def test_undated_records_do_not_break_chronological_order():
    records = [
        make_record("E100", "Alice", "2024-01-09", "09:40", "18:00"),
        make_record("E100", "Alice", "", "09:40", "18:00"),
        make_record("E100", "Alice", "2024-01-08", "09:40", "18:00"),
        make_record("E200", "Bob", "garbage", status="Absent"),
        make_record("E200", "Bob", "07-Jan-2024", status="Absent"),
    ]
    assert build_matrix(records).dates == ["07-Jan-2024", "2024-01-08", "2024-01-09", "", "garbage"]
