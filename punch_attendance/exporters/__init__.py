from punch_attendance.exporters.excel import export_excel
from punch_attendance.exporters.pdf import export_pdf

__all__ = ['export_excel', 'export_pdf']
