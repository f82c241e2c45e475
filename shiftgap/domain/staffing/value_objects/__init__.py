"""Staffing value objects."""

from .enums import (
    CompetenceStatus,
    GapSeverity,
    LineMachineStatus,
    ShiftType,
    SuggestedAction,
)
from .net_time import (
    add_hours_to_time,
    compute_net_factor,
    net_shift_hours,
    segment_gross_hours,
    segment_gross_minutes,
    segment_net_hours,
    shift_gross_minutes,
    time_ranges_overlap,
    time_to_minutes,
)

__all__ = [
    "CompetenceStatus",
    "GapSeverity",
    "LineMachineStatus",
    "ShiftType",
    "SuggestedAction",
    "add_hours_to_time",
    "compute_net_factor",
    "net_shift_hours",
    "segment_gross_hours",
    "segment_gross_minutes",
    "segment_net_hours",
    "shift_gross_minutes",
    "time_ranges_overlap",
    "time_to_minutes",
]
