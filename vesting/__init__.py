"""
Core modules for building vesting schedules from spreadsheets.

This package contains:
- config: Application configuration and settings
- exceptions: Custom exception classes
- logger: Logging configuration
- schema: Pydantic models for field records and the schedule tree
- columns: Mapping of raw row cells to named fields
- parsing: Workbook row source
- builder: Schedule construction and validation
- exporters: JSON serialization of finished schedules
"""
