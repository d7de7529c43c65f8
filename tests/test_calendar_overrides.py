import pytest

from punch_attendance.calendar_overrides import (
    CATEGORY_HOLIDAY,
    CATEGORY_TEAM_OUT,
    CATEGORY_WEEKEND,
    ROW_BANNER,
    ROW_MIXED,
    ROW_NORMAL,
    OverrideRegistry,
    anyone_worked,
    classify,
    is_weekend,
    resolve_cell,
    resolve_row,
    resolve_rows,
)
from punch_attendance.exceptions import InvalidOverrideError
from punch_attendance.matrix import build_matrix
from punch_attendance.models import EventOverride, MatrixCell
from punch_attendance.normalizer import normalize

from tests.conftest import make_record


def test_sunday_is_weekend():
    assert is_weekend("2024-01-07")
    assert is_weekend("07-Jan-2024")
    assert not is_weekend("2024-01-08")
    assert not is_weekend("not a date")


def test_classify_by_type_keywords():
    assert classify(EventOverride("2024-01-01", "New Year", "Public Holiday")) == CATEGORY_HOLIDAY
    assert classify(EventOverride("2024-01-01", "Pongal", "Leave")) == CATEGORY_HOLIDAY
    assert classify(EventOverride("2024-01-01", "Offsite", "Team Outing")) == CATEGORY_TEAM_OUT


def test_holiday_without_punches_is_a_banner(week_records, holiday):
    matrix = build_matrix(week_records)
    row = resolve_row("2024-01-08", matrix, [holiday])
    assert row.kind == ROW_BANNER
    assert row.label == "NEW YEAR HOLIDAY"
    assert row.category == CATEGORY_HOLIDAY
    assert not row.is_scheduled


def test_sunday_holiday_override_wins_over_weekend_label(week_records):
    records = [r for r in week_records if r.date != "2024-01-07"]
    records.append(make_record("E100", "Alice", "2024-01-07", status="Absent"))
    matrix = build_matrix(records)
    row = resolve_row("2024-01-07", matrix, [EventOverride("2024-01-07", "New Year Holiday", "Holiday")])
    assert row.kind == ROW_BANNER
    assert row.label == "NEW YEAR HOLIDAY"


def test_worked_weekend_is_mixed(week_records):
    matrix = build_matrix(week_records)
    row = resolve_row("2024-01-07", matrix)
    assert row.kind == ROW_MIXED
    assert row.category == CATEGORY_WEEKEND
    alice, bob = row.cells
    assert (alice.text, alice.kind) == ("10:00 AM", "ontime")
    assert (bob.text, bob.kind) == ("WEEK-END", "off")


def test_team_event_with_punch_is_mixed():
    matrix = build_matrix([make_record("E100", "Alice", "2024-01-08", "09:40", "18:00")])
    row = resolve_row("2024-01-08", matrix, [EventOverride("2024-01-08", "Team Outing", "Team Outing")])
    assert row.kind == ROW_MIXED
    assert row.category == CATEGORY_TEAM_OUT
    assert row.is_scheduled


def test_ordinary_day_is_normal(week_records):
    rows = resolve_rows(build_matrix(week_records))
    normal = [row for row in rows if row.kind == ROW_NORMAL]
    assert [row.date for row in normal] == ["2024-01-06", "2024-01-08", "2024-01-09"]


def test_resolve_cell_kinds():
    assert resolve_cell(None).kind == "missing"
    assert resolve_cell(None).text == "-"
    assert resolve_cell(MatrixCell("", "Absent", False)).text == "ABSENT"
    assert resolve_cell(MatrixCell("", "Half Day", False)).kind == "half-day"
    assert resolve_cell(MatrixCell("", "WFH", False)).kind == "wfh"
    late = resolve_cell(MatrixCell("11:00", "PresentNoOutPunch", True))
    assert (late.text, late.kind) == ("11:00 AM", "late")
    assert resolve_cell(MatrixCell("", "Absent", False), off_label="DIWALI").kind == "off"


def test_registry_replaces_on_same_date():
    registry = OverrideRegistry()
    registry.add(EventOverride("08-Jan-2024", "Offsite", "Team Outing"))
    registry.add(EventOverride("2024-01-08", "New Year Holiday", "Holiday"))

    assert len(registry) == 1
    stored = registry.find("2024-01-08")
    assert stored.label == "New Year Holiday"
    assert stored.date == "2024-01-08"


def test_registry_remove_and_clear():
    registry = OverrideRegistry([
        EventOverride("2024-01-08", "A", "Holiday"),
        EventOverride("2024-01-09", "B", "Holiday"),
    ])
    assert registry.remove("2024-01-08")
    assert not registry.remove("2024-01-08")
    assert [o.date for o in registry] == ["2024-01-09"]
    registry.clear()
    assert registry.as_list() == []


def test_registry_rejects_invalid_overrides():
    registry = OverrideRegistry()
    with pytest.raises(InvalidOverrideError):
        registry.add(EventOverride("someday", "Party", "Team Event"))
    with pytest.raises(ValueError):
        registry.add(EventOverride("2024-01-08", "", "Holiday"))


def test_override_from_form_payload():
    override = EventOverride.from_dict({'date': ' 2024-01-26 ', 'label': ' Republic Day ', 'type': None})
    assert override == EventOverride("2024-01-26", "Republic Day", "")
    assert override.category == CATEGORY_TEAM_OUT
    assert override.banner_text == "REPUBLIC DAY"


def test_blank_status_record_counts_as_worked():
    batch = normalize([
        {'E. Code': 'E100', 'Name': 'Alice', 'Attendance Date': '2024-01-07', 'Status': ''},
        {'E. Code': 'E200', 'Name': 'Bob', 'Attendance Date': '2024-01-07', 'Status': 'Absent'},
    ])
    matrix = build_matrix(batch.records)

    assert anyone_worked('2024-01-07', ['Alice'], matrix)
    assert not anyone_worked('2024-01-07', ['Bob'], matrix)

    row = resolve_row('2024-01-07', matrix)
    assert row.kind == ROW_MIXED
    assert [(cell.text, cell.kind) for cell in row.cells] == [("WEEK-END", "off"), ("WEEK-END", "off")]


def test_blank_status_on_a_normal_day_reads_absent():
    assert resolve_cell(MatrixCell("", "", False)).kind == "absent"


def test_half_day_on_an_off_day_is_shown():
    assert resolve_cell(MatrixCell("", "Half Day", False), off_label="WEEK-END").kind == "half-day"
