"""
JSON export of finished schedules.
Amounts are written as decimal strings so consumers never round them through a float.
"""
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from vesting.config import get_settings
from vesting.exceptions import ExportError, ParsingError
from vesting.logger import setup_logger
from vesting.schema import Schedule

logger = setup_logger(__name__)


def serialize_schedule(schedule: Schedule, indent: Optional[int] = 2) -> str:
    """
    Render a schedule as JSON text.

    Keys follow the model field order: total, pools; name, total, partial,
    accounts; then the account fields. Account fields left empty in the
    table are omitted.

    Args:
        schedule: Finished schedule
        indent: Indentation (None for compact output)

    Returns:
        JSON string with every amount as a decimal string
    """
    return schedule.model_dump_json(indent=indent, exclude_none=True)


def load_schedule(text: str) -> Schedule:
    """
    Parse serialized schedule JSON back into a Schedule.

    Raises:
        ParsingError: If the text is not a valid serialized schedule
    """
    try:
        return Schedule.model_validate_json(text)
    except PydanticValidationError as e:
        raise ParsingError(
            "Invalid serialized schedule",
            details={"errors": e.errors(include_url=False)}
        )


def export_schedule(schedule: Schedule, output_path: str) -> str:
    """
    Write a schedule to a JSON file.

    Args:
        schedule: Finished schedule
        output_path: Output file path

    Returns:
        Path to created file

    Raises:
        ExportError: If the file can't be written
    """
    logger.info(f"Exporting schedule with {len(schedule.pools)} pools to {output_path}")

    output_file = Path(output_path)
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(serialize_schedule(schedule) + "\n", encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to export schedule: {e}")
        raise ExportError(
            "Failed to export schedule",
            details={"output_path": output_path, "error": str(e)}
        )

    logger.info(f"Successfully exported to {output_path}")
    return output_path


def create_output_filename(source_name: str, base_path: Optional[str] = None) -> str:
    """
    Create timestamped output filename.

    Args:
        source_name: Name or path of the source table; its stem prefixes the file name
        base_path: Base directory path (defaults to configured output path)

    Returns:
        Full output file path
    """
    if base_path is None:
        base_path = get_settings().output_path

    Path(base_path).mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
    filename = f"{Path(source_name).stem}_schedule_{timestamp}.json"

    return str(Path(base_path) / filename)
