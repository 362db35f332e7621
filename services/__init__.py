"""
Service layer for business logic.

This package contains service classes that orchestrate the
schedule pipeline: reading the table, mapping columns,
building the schedule, and export.
"""
