from punch_attendance.scanner import (
    date_marker_index,
    ends_block,
    is_header_row,
    resolve_header_columns,
    scan,
)


def test_scan_tags_records_with_block_date(punch_grid):
    records = scan(punch_grid)

    assert len(records) == 4
    assert records[0] == {
        'E. Code': 'E100',
        'Name': 'Alice',
        'InTime': '09:40',
        'OutTime': '18:00',
        'Status': '',
        'Attendance Date': '08-Jan-2024',
    }
    assert records[1]['Status'] == 'Absent'
    assert [r['Attendance Date'] for r in records[2:]] == ['09-Jan-2024', '09-Jan-2024']


def test_scan_without_date_marker_yields_nothing():
    grid = [
        ["SNo", "E. Code", "Name", "InTime", "OutTime", "Status"],
        ["1", "E100", "Alice", "09:40", "18:00", ""],
    ]
    assert scan(grid) == []


def test_scan_empty_input():
    assert scan([]) == []
    assert scan(None) == []


def test_marker_without_date_keeps_previous_date():
    grid = [
        ["Attendance Date", "", "08-Jan-2024"],
        ["Attendance Date", "", ""],
        ["SNo", "E. Code", "Name", "InTime", "OutTime", "Status"],
        ["1", "E100", "Alice", "09:40", "18:00", ""],
    ]
    assert scan(grid)[0]['Attendance Date'] == '08-Jan-2024'


def test_first_marker_without_date_leaves_date_empty():
    grid = [
        ["Attendance Date"],
        ["SNo", "E. Code", "Name", "InTime", "OutTime", "Status"],
        ["1", "E100", "Alice", "09:40", "18:00", ""],
    ]
    assert scan(grid)[0]['Attendance Date'] == ''


def test_placeholder_codes_and_blank_rows_are_skipped():
    grid = [
        ["Attendance Date", "", "08-Jan-2024"],
        ["SNo", "E. Code", "Name", "InTime", "OutTime", "Status"],
        ["", "E. Code", "Name", "", "", ""],
        ["", "", "", "", "", ""],
        ["3", "", "Nobody", "", "", ""],
        ["4", "E300", "Carol", "", "", "Absent"],
    ]
    records = scan(grid)
    assert [r['E. Code'] for r in records] == ['E300']


def test_ragged_rows_read_missing_cells_as_empty():
    grid = [
        ["Attendance Date", "", "08-Jan-2024"],
        ["SNo", "E. Code", "Name", "InTime", "OutTime", "Status"],
        ["1", "E100", "Alice"],
    ]
    record = scan(grid)[0]
    assert record['InTime'] == ''
    assert record['Status'] == ''


def test_header_columns_resolve_alternate_labels():
    columns = resolve_header_columns(["SNo", "Emp Code", "Name", "In Time", "Out Time", "Status"])
    assert (columns.code, columns.name, columns.in_time, columns.out_time, columns.status) == (1, 2, 3, 4, 5)


def test_header_columns_missing_are_none():
    columns = resolve_header_columns(["SNo", "E. Code", "Name"])
    assert columns.in_time is None
    assert columns.status is None


def test_marker_is_only_found_in_leading_cells():
    assert date_marker_index(["", "attendance date", "x"]) == 1
    assert date_marker_index(["", "", "", "Attendance Date"]) is None


def test_block_boundaries():
    assert is_header_row(["1", "SNo"])
    assert ends_block(["SNo", "E. Code"])
    assert not ends_block(["1", "SNo"])
    assert ends_block(["Attendance Date", "", "09-Jan-2024"])


def test_marker_in_third_cell_does_not_end_a_block():
    assert not ends_block(["", "", "Attendance Date", "09-Jan-2024"])
    assert date_marker_index(["", "", "Attendance Date", "09-Jan-2024"]) == 2
