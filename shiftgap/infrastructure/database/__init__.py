"""Database infrastructure for the staffing read model."""

from .session import create_engine, create_session_factory
from .staffing_data_client import SqlStaffingDataClient

__all__ = ["SqlStaffingDataClient", "create_engine", "create_session_factory"]
