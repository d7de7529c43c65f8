class AttendanceError(Exception):
    """Base error for the attendance pipeline boundary."""


class UnsupportedFileTypeError(AttendanceError):
    """Raised when an upload is not an Excel workbook."""


class WorkbookReadError(AttendanceError):
    """Raised when a workbook cannot be parsed."""


class InvalidOverrideError(AttendanceError, ValueError):
    """Raised when a calendar override has no usable date or label."""
