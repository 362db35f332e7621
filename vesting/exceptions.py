"""
Custom exceptions for schedule building.
"""
from typing import Any, Dict, Optional


class VestingScheduleException(Exception):
    """Base exception for all vesting schedule errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.
        
        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StructuralError(VestingScheduleException):
    """Raised when a row does not fit the table structure at its position."""
    
    def __init__(self, message: str, row: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.row = row


class InvariantError(VestingScheduleException):
    """
    Raised when totals do not reconcile.
    
    ``invariant`` names the relationship that failed:
    schedule_total (grand total equals its subtotal), pool_total (accounts
    add up to their pool) or total_bound (pools stay within the grand total).
    """
    
    def __init__(
        self,
        message: str,
        row: int,
        invariant: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.row = row
        self.invariant = invariant


class ParsingError(VestingScheduleException):
    """Raised when a workbook or a cell value cannot be parsed."""
    pass


class DataNotFoundError(VestingScheduleException):
    """Raised when required data is not found."""
    pass


class ExportError(VestingScheduleException):
    """Raised when writing a serialized schedule fails."""
    pass


class ConfigurationError(VestingScheduleException):
    """Raised when configuration is invalid."""
    pass


class FileProcessingError(VestingScheduleException):
    """Raised when converting a file fails for reasons outside the table itself."""
    pass
