import pytest

from punch_attendance.models import AttendanceRecord, EventOverride


def make_record(code, name, day, in_time="", out_time="", status="", is_late=False):
    if in_time and not status:
        status = "Present" if out_time else "PresentNoOutPunch"
    return AttendanceRecord(
        employee_code=code,
        name=name,
        date=day,
        in_time=in_time,
        out_time=out_time,
        status=status,
        is_late=is_late,
    )


@pytest.fixture
def punch_grid():
    return [
        ["Monthly Punch Report"],
        ["Attendance Date", "", "08-Jan-2024"],
        ["SNo", "E. Code", "Name", "InTime", "OutTime", "Status"],
        ["1", "E100", "Alice", "09:40", "18:00", ""],
        ["2", "E200", "Bob", "", "", "Absent"],
        [],
        ["Attendance Date", "", "09-Jan-2024"],
        ["SNo", "E. Code", "Name", "InTime", "OutTime", "Status"],
        ["1", "E100", "Alice", "10:50", "", ""],
        ["2", "E200", "Bob", "10:30", "18:30", ""],
    ]


@pytest.fixture
def week_records():
    """Sat 6th to Tue 9th of January 2024; Alice also punched on the Sunday."""
    return [
        make_record("E100", "Alice", "2024-01-06", "09:30", "18:00"),
        make_record("E200", "Bob", "2024-01-06", status="Absent"),
        make_record("E100", "Alice", "2024-01-07", "10:00", "14:00"),
        make_record("E100", "Alice", "2024-01-08", status="Absent"),
        make_record("E200", "Bob", "2024-01-08", status="Absent"),
        make_record("E100", "Alice", "2024-01-09", "10:50", "18:00", is_late=True),
        make_record("E200", "Bob", "2024-01-09", status="Half Day"),
    ]


@pytest.fixture
def holiday():
    return EventOverride(date="2024-01-08", label="New Year Holiday", type="Holiday")
