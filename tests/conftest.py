"""
Shared fixtures: schedule tables written to temporary files.
"""
import csv

import openpyxl
import pytest

from vesting.config import reset_settings

HEADER_ROWS = [
    ["Token distribution schedule"],
    [],
    ["total", "pool", "subtotal", "% of total", "name", "amount", "address",
     "start at", "interval", "duration", "cliff", "portion size", "remainder"],
    [],
]

BIG = "123456789012345678901"
BIG_DOUBLE = "246913578024691357802"

# Rows 5.. of a valid table under the default column layout
VALID_ROWS = [
    [BIG_DOUBLE, None, BIG_DOUBLE],
    [None, "Team", BIG, 50],
    [None, None, None, 25, "Alice", "123456789012345678900", "secret1alice", 0, 86400, 8640000, 0, 1, 0],
    [None, None, None, 25, "Bob", "1", "secret1bob"],
    [None, None, None, None, "note: advisors vest monthly"],
    [None, "Advisors", BIG, 50],
    [None, None, None, 50, "Carol", BIG, "secret1carol"],
    [None, "END", 0, 0],
]


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in ("HEADER_HEIGHT", "SHEET_NAME", "SCHEDULE_COLUMNS", "CHECK_FINAL_POOL"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def write_xlsx(tmp_path):
    """Return a function writing data rows (starting at row 5) to an .xlsx file."""
    def _write(rows, name="schedule.xlsx", title="Schedule"):
        workbook = openpyxl.Workbook()
        sheet = workbook.active
        sheet.title = title
        for row in HEADER_ROWS + rows:
            sheet.append(row)
        path = tmp_path / name
        workbook.save(path)
        return path
    return _write


@pytest.fixture
def write_csv(tmp_path):
    """Return a function writing data rows (starting at row 5) to a .csv file."""
    def _write(rows, name="schedule.csv"):
        path = tmp_path / name
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            for row in HEADER_ROWS + rows:
                writer.writerow(["" if cell is None else cell for cell in row])
        return path
    return _write


@pytest.fixture
def valid_rows():
    """Data rows of a table whose totals reconcile."""
    return [list(row) for row in VALID_ROWS]
