import io
import logging
import math
import os
import zipfile
from datetime import date, datetime, time
from typing import Optional

import pandas as pd
from xlrd import XLRDError

from punch_attendance.config import Config
from punch_attendance.exceptions import UnsupportedFileTypeError, WorkbookReadError
from punch_attendance.models import NormalizedBatch, RawGrid
from punch_attendance.normalizer import normalize
from punch_attendance.scanner import scan

logger = logging.getLogger(__name__)

# ============================================================================
# WORKBOOK INGESTION
# ============================================================================

class WorkbookReader:
    """Turns an uploaded workbook into the header-less text grid the scanner reads"""

    @staticmethod
    def _get_excel_extension(name_or_path: str) -> str:
        return os.path.splitext(str(name_or_path or ""))[1].lower()

    @staticmethod
    def _get_excel_engine(ext: str) -> Optional[str]:
        if ext == ".xlsx":
            return "openpyxl"
        if ext == ".xls":
            return "xlrd"
        return None

    @staticmethod
    def _cell_text(value) -> str:
        """Render one cell as the text a person would read in the sheet"""
        if value is None:
            return ""
        if isinstance(value, float):
            if math.isnan(value):
                return ""
            if value.is_integer():
                return str(int(value))
            return str(value)
        if isinstance(value, (datetime, pd.Timestamp)):
            if pd.isna(value):
                return ""
            return value.strftime("%Y-%m-%d")
        if isinstance(value, date):
            return value.strftime("%Y-%m-%d")
        if isinstance(value, time):
            return value.strftime("%H:%M")
        return str(value).strip()

    @staticmethod
    def read_grid(source, filename: Optional[str] = None) -> RawGrid:
        """
        Read the first sheet with no header row and every cell as text
        Returns: list of rows, each a list of cell strings
        """
        name = filename or getattr(source, "name", "") or (source if isinstance(source, str) else "")
        ext = WorkbookReader._get_excel_extension(name)
        if ext not in Config.EXCEL_EXTENSIONS:
            raise UnsupportedFileTypeError(
                f"Unsupported file type {ext or '(none)'!r}. Please upload a .xlsx or .xls file."
            )

        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        if hasattr(source, "seek"):
            source.seek(0)

        engine = WorkbookReader._get_excel_engine(ext)
        try:
            frame = pd.read_excel(source, sheet_name=0, header=None, dtype=object, engine=engine)
        except (ValueError, OSError, KeyError, zipfile.BadZipFile, XLRDError) as exc:
            logger.warning("Failed to read workbook %s: %s", name, exc)
            raise WorkbookReadError(
                "Error reading the uploaded Excel file. Please verify it is a valid .xlsx or .xls."
            ) from exc

        grid = [
            [WorkbookReader._cell_text(value) for value in row]
            for row in frame.itertuples(index=False, name=None)
        ]
        logger.debug("Read %d rows from %s", len(grid), name)
        return grid


def read_grid(source, filename: Optional[str] = None) -> RawGrid:
    return WorkbookReader.read_grid(source, filename)


def load_attendance(
    source,
    filename: Optional[str] = None,
    late_cutoff_minutes: Optional[int] = None
) -> NormalizedBatch:
    """
    Complete ingestion pipeline: workbook -> grid -> raw records -> normalized batch
    """
    cutoff = Config.late_cutoff_minutes() if late_cutoff_minutes is None else late_cutoff_minutes
    grid = read_grid(source, filename)
    raw_records = scan(grid)
    if not raw_records:
        logger.warning("No attendance blocks found in %s", filename or getattr(source, "name", "upload"))
    return normalize(raw_records, cutoff)
