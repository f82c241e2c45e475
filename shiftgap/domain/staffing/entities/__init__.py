"""Staffing domain entities."""

from .gap_report import CompetenceGap, LineGapsResult, LineGapsSummary, MachineGapRow
from .line_overview import (
    AssignedPerson,
    Assignment,
    LineInfo,
    LineOverviewData,
    LineOverviewLine,
    LineOverviewMachine,
    MachineInfo,
)
from .planning import AssignmentSegment, MachineDemand, PlanningMachine
from .reference import (
    Competence,
    RequirementDetail,
    ShiftRule,
    Station,
    StationRoleRequirement,
)

__all__ = [
    "AssignedPerson",
    "Assignment",
    "AssignmentSegment",
    "Competence",
    "CompetenceGap",
    "LineGapsResult",
    "LineGapsSummary",
    "LineInfo",
    "LineOverviewData",
    "LineOverviewLine",
    "LineOverviewMachine",
    "MachineDemand",
    "MachineGapRow",
    "MachineInfo",
    "PlanningMachine",
    "RequirementDetail",
    "ShiftRule",
    "Station",
    "StationRoleRequirement",
]
