"""
Schedule conversion service.
Runs a spreadsheet through the row source, column mapping, builder and export.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from vesting.builder import ScheduleBuilder
from vesting.config import get_settings
from vesting.exceptions import ConfigurationError, FileProcessingError, VestingScheduleException
from vesting.exporters import create_output_filename, export_schedule
from vesting.logger import setup_logger
from vesting.parsing import iter_records, read_rows
from vesting.schema import Schedule

logger = setup_logger(__name__)


class ScheduleService:
    """Service for turning schedule spreadsheets into validated schedules."""
    
    def __init__(self):
        """Initialize schedule service."""
        try:
            self.settings = get_settings()
        except PydanticValidationError as e:
            raise ConfigurationError(
                "Invalid configuration",
                details={"errors": e.errors(include_url=False)}
            )
        self.skipped: List[int] = []
    
    def schedule_from_spreadsheet(self, file_path: str, sheet_name: Optional[str] = None) -> Schedule:
        """
        Read a spreadsheet and build its schedule.
        
        Args:
            file_path: Path to the schedule table
            sheet_name: Worksheet name (defaults to configured sheet, then the first one)
        
        Returns:
            Validated Schedule
        
        Raises:
            VestingScheduleException: Source, structural or invariant errors, unchanged
        """
        rows = read_rows(
            file_path,
            sheet_name=sheet_name or self.settings.sheet,
            header_height=self.settings.header_height
        )
        builder = ScheduleBuilder(
            header_row=self.settings.header_height,
            check_final_pool=self.settings.check_final_pool
        )
        for row, record in iter_records(rows, self.settings.columns):
            builder.feed(row, record)
        schedule = builder.finish()
        self.skipped = builder.skipped
        
        if self.skipped:
            logger.info(f"Skipped {len(self.skipped)} unrecognized rows: {self.skipped}")
        return schedule
    
    def build_statistics(self, schedule: Schedule) -> Dict[str, Any]:
        """
        Summarize a schedule.
        
        Args:
            schedule: Finished schedule
        
        Returns:
            Dictionary with totals (as strings) and counts
        """
        return {
            "total": str(schedule.total),
            "pools": len(schedule.pools),
            "accounts": sum(len(pool.accounts) for pool in schedule.pools),
            "allocated": str(sum(pool.total for pool in schedule.pools)),
            "skipped_rows": list(self.skipped),
        }
    
    def convert_file(self, file_path: str, output_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Convert a schedule spreadsheet to JSON.
        
        Args:
            file_path: Path to the schedule table
            output_path: Target JSON path (defaults to a timestamped file in the output directory)
        
        Returns:
            Dictionary with output_path and statistics
        
        Raises:
            VestingScheduleException: If the table is invalid or export fails
            FileProcessingError: For any other failure while processing
        """
        try:
            logger.info(f"Converting schedule table: {file_path}")
            
            schedule = self.schedule_from_spreadsheet(file_path)
            
            if output_path is None:
                output_path = create_output_filename(Path(file_path).name, self.settings.output_path)
            export_schedule(schedule, output_path)
            
            return {
                "output_path": output_path,
                "stats": self.build_statistics(schedule),
            }
        
        except VestingScheduleException:
            raise
        except Exception as e:
            logger.error(f"Schedule conversion failed for {file_path}: {e}", exc_info=True)
            raise FileProcessingError(
                "Failed to convert schedule table",
                details={"file_path": file_path, "error": str(e)}
            )
