"""
Column mapping: turns the raw cells of one row into a FieldRecord.
Amounts are parsed exactly; values that already lost precision are rejected.
"""
import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

import pandas as pd

from vesting.config import get_settings
from vesting.exceptions import ParsingError
from vesting.logger import setup_logger
from vesting.schema import AMOUNT_FIELDS, INTEGER_FIELDS, TEXT_FIELDS, FieldRecord

logger = setup_logger(__name__)

# Largest integer a float64 cell can hold without rounding
MAX_EXACT_FLOAT = 2 ** 53

_INTEGER_PATTERN = re.compile(r"-?\d+")
_SEPARATORS = (" ", ",", "_", "\xa0", "'")


def is_blank(value: Any) -> bool:
    """Empty cells come back as None, NaN or whitespace."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def clean_integer(value: Any, field: str, row: Optional[int] = None) -> Optional[int]:
    """
    Parse a cell as an exact non-negative integer.

    Args:
        value: Raw cell value (int, float, Decimal, date or string)
        field: Field name, used in error details
        row: Spreadsheet row number, used in error details

    Returns:
        Integer value or None for an empty cell

    Raises:
        ParsingError: If the value is not an exact non-negative integer
    """
    if is_blank(value):
        return None

    details = {"row": row, "field": field, "value": repr(value)}

    if isinstance(value, bool):
        raise ParsingError(f"row {row}: {field} must be a number, got a boolean", details=details)

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        result = int(value.timestamp())
    elif isinstance(value, date):
        result = int(datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp())
    elif isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ParsingError(f"row {row}: {field} must be a whole number, got {value!r}", details=details)
        if abs(value) > MAX_EXACT_FLOAT:
            raise ParsingError(
                f"row {row}: {field} was stored as a floating point number and may have lost digits; "
                f"enter it as text",
                details=details
            )
        result = int(value)
    elif isinstance(value, Decimal):
        if value != value.to_integral_value():
            raise ParsingError(f"row {row}: {field} must be a whole number, got {value}", details=details)
        result = int(value)
    else:
        text = str(value).strip()
        for separator in _SEPARATORS:
            text = text.replace(separator, "")
        if not _INTEGER_PATTERN.fullmatch(text):
            raise ParsingError(f"row {row}: {field} is not an integer: {value!r}", details=details)
        result = int(text)

    if result < 0:
        raise ParsingError(f"row {row}: {field} must not be negative, got {result}", details=details)
    return result


def clean_percent(value: Any, row: Optional[int] = None) -> Optional[Decimal]:
    """Parse a percentage cell; a trailing % sign is allowed."""
    if is_blank(value):
        return None
    if isinstance(value, bool):
        raise ParsingError(
            f"row {row}: percent_of_total must be a number, got a boolean",
            details={"row": row, "field": "percent_of_total", "value": repr(value)}
        )
    text = str(value).strip().rstrip("%").strip()
    try:
        return Decimal(text)
    except InvalidOperation:
        raise ParsingError(
            f"row {row}: percent_of_total is not a number: {value!r}",
            details={"row": row, "field": "percent_of_total", "value": repr(value)}
        )


def clean_text(value: Any) -> Optional[str]:
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def map_columns(
    cells: Sequence[Any],
    columns: Optional[Sequence[Optional[str]]] = None,
    row: Optional[int] = None
) -> FieldRecord:
    """
    Map one row's cells to named fields.

    Args:
        cells: Raw cell values starting at column A
        columns: Field name per column (None skips the column). Defaults to configured layout.
        row: Spreadsheet row number, used in error messages

    Returns:
        FieldRecord with empty cells left absent

    Raises:
        ParsingError: If a cell can't be converted to its field's type
    """
    if columns is None:
        columns = get_settings().columns

    values = {}
    for field, value in zip(columns, cells):
        if field is None:
            continue
        if field in AMOUNT_FIELDS or field in INTEGER_FIELDS:
            values[field] = clean_integer(value, field, row)
        elif field == "percent_of_total":
            values[field] = clean_percent(value, row)
        elif field in TEXT_FIELDS:
            values[field] = clean_text(value)

    return FieldRecord(**values)
