"""Staffing repository interfaces."""

from .staffing_data_client import StaffingDataClient

__all__ = ["StaffingDataClient"]
