"""
Workbook row source.
Yields raw cell values per spreadsheet row, numbered the way the sheet shows them.
"""
import csv
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple

import openpyxl
import xlrd

from vesting.columns import map_columns
from vesting.exceptions import DataNotFoundError, ParsingError
from vesting.logger import setup_logger
from vesting.schema import FieldRecord

logger = setup_logger(__name__)

Row = Tuple[int, List[Any]]

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
LEGACY_EXCEL_SUFFIXES = {".xls"}
CSV_SUFFIXES = {".csv"}


def _read_xlsx(path: Path, sheet_name: Optional[str], header_height: int) -> Iterator[Row]:
    # data_only: take cached values of formula cells (subtotals are often formulas)
    workbook = openpyxl.load_workbook(path, data_only=True)
    sheet = workbook[sheet_name] if sheet_name else workbook.worksheets[0]
    logger.debug(f"Sheet '{sheet.title}' spans {sheet.dimensions}")
    for number, cells in enumerate(sheet.iter_rows(min_row=header_height, values_only=True), start=header_height):
        yield number, list(cells)


def _read_xls(path: Path, sheet_name: Optional[str], header_height: int) -> Iterator[Row]:
    workbook = xlrd.open_workbook(str(path))
    sheet = workbook.sheet_by_name(sheet_name) if sheet_name else workbook.sheet_by_index(0)
    for index in range(header_height - 1, sheet.nrows):
        cells = sheet.row_values(index)
        # Date cells come back as day serials; turn them into datetimes like openpyxl does
        for col, cell_type in enumerate(sheet.row_types(index)):
            if cell_type == xlrd.XL_CELL_DATE:
                cells[col] = xlrd.xldate_as_datetime(cells[col], workbook.datemode)
        yield index + 1, cells


def _read_csv(path: Path, header_height: int) -> Iterator[Row]:
    # Cells stay text so long digit strings keep every digit; rows may differ in width
    with path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.reader(handle)
        for number, cells in enumerate(reader, start=1):
            if number >= header_height:
                yield number, cells


def read_rows(
    file_path: str,
    sheet_name: Optional[str] = None,
    header_height: int = 5
) -> List[Row]:
    """
    Read the data region of a schedule table.

    Args:
        file_path: Path to .xlsx/.xlsm, .xls or .csv file
        sheet_name: Worksheet to read (defaults to the first one; ignored for CSV)
        header_height: Row number of the first data row (the grand total row)

    Returns:
        List of (row_number, cells) pairs, cells starting at column A

    Raises:
        DataNotFoundError: If file doesn't exist
        ParsingError: If the file can't be read as a table
    """
    path = Path(file_path)
    if not path.exists():
        raise DataNotFoundError(
            f"File not found: {file_path}",
            details={"file_path": str(file_path)}
        )

    suffix = path.suffix.lower()
    logger.info(f"Reading schedule table from {path.name} (first data row {header_height})")

    try:
        if suffix in EXCEL_SUFFIXES:
            rows = list(_read_xlsx(path, sheet_name, header_height))
        elif suffix in LEGACY_EXCEL_SUFFIXES:
            rows = list(_read_xls(path, sheet_name, header_height))
        elif suffix in CSV_SUFFIXES:
            rows = list(_read_csv(path, header_height))
        else:
            raise ParsingError(
                f"Unsupported file type: {suffix or '(none)'}",
                details={"file_path": str(file_path)}
            )
    except ParsingError:
        raise
    except Exception as e:
        logger.error(f"Failed to read {file_path}: {str(e)}")
        raise ParsingError(
            f"Could not read schedule table from {path.name}",
            details={"file_path": str(file_path), "sheet_name": sheet_name, "error": str(e)}
        )

    logger.info(f"Read {len(rows)} rows from {path.name}")
    return rows


def iter_records(
    rows: Iterable[Row],
    columns: Optional[Sequence[Optional[str]]] = None
) -> Iterator[Tuple[int, FieldRecord]]:
    """Apply the column mapping to each row, lazily."""
    for number, cells in rows:
        yield number, map_columns(cells, columns, row=number)
