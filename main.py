"""
Main entry point for the vesting schedule builder.

Converts one schedule spreadsheet into its JSON schedule:

    python main.py schedule.xlsx [output.json]
"""
import sys
from pathlib import Path

# Add project root to Python path for module imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

from vesting.exceptions import VestingScheduleException
from vesting.logger import setup_logger

# Load environment variables from .env file
_env_file = PROJECT_ROOT / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

logger = setup_logger(__name__)


def main(argv=None) -> int:
    """Main application entry point."""
    args = sys.argv[1:] if argv is None else argv
    if not args or len(args) > 2:
        print("usage: main.py SCHEDULE_TABLE [OUTPUT_JSON]", file=sys.stderr)
        return 2

    try:
        from services.schedule_service import ScheduleService

        service = ScheduleService()
        settings = service.settings

        logger.info(f"Starting {settings.app_name}")
        logger.info(f"First data row: {settings.header_height}")
        logger.info(f"Check final pool: {settings.check_final_pool}")

        result = service.convert_file(args[0], args[1] if len(args) > 1 else None)

        logger.info(f"Schedule stats: {result['stats']}")
        print(result["output_path"])
        return 0

    except VestingScheduleException as e:
        logger.error(f"Schedule error: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        return 1

    except Exception as e:
        logger.error(f"Failed to convert schedule: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
