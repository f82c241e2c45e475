"""Staffing domain services."""

from .competence_policy import (
    DEFAULT_POLICY,
    EVALUATE_MANDATORY_ONLY,
    AssignedEmployee,
    GapPolicy,
    SkillFinding,
    classify_skill_level,
    evaluate_machine_competence,
)
from .competence_resolver import (
    LevelLookup,
    lookup_employee_levels,
    resolve_competence_levels,
)
from .gap_engine import (
    GapEngine,
    MachineHeadcount,
    build_requirement_map,
    compute_line_gaps,
    required_headcount,
)
from .line_overview import (
    build_line_overview,
    fetch_line_overview,
    machine_status,
    shift_param_to_db_value,
)
from .station_matcher import StationMatcher, match_stations_to_machines

__all__ = [
    "DEFAULT_POLICY",
    "EVALUATE_MANDATORY_ONLY",
    "AssignedEmployee",
    "GapEngine",
    "GapPolicy",
    "LevelLookup",
    "MachineHeadcount",
    "SkillFinding",
    "StationMatcher",
    "build_line_overview",
    "build_requirement_map",
    "classify_skill_level",
    "compute_line_gaps",
    "evaluate_machine_competence",
    "fetch_line_overview",
    "lookup_employee_levels",
    "machine_status",
    "match_stations_to_machines",
    "required_headcount",
    "resolve_competence_levels",
    "shift_param_to_db_value",
]
