"""
Shift Staffing Domain

Staffing demand versus assignments per machine, and competence coverage of
the assigned employees against station skill requirements.
"""

from .entities import (
    CompetenceGap,
    LineGapsResult,
    LineOverviewData,
    MachineGapRow,
    ShiftRule,
)
from .repositories import StaffingDataClient
from .services import GapEngine, compute_line_gaps, fetch_line_overview
from .value_objects import CompetenceStatus, GapSeverity, SuggestedAction

__all__ = [
    "CompetenceGap",
    "CompetenceStatus",
    "GapEngine",
    "GapSeverity",
    "LineGapsResult",
    "LineOverviewData",
    "MachineGapRow",
    "ShiftRule",
    "StaffingDataClient",
    "SuggestedAction",
    "compute_line_gaps",
    "fetch_line_overview",
]
