"""
Gap Engine Domain Service

Computes the staffing and competence gap report for one line, date and shift:

- required headcount from demand hours and the net (break-adjusted) shift
- assigned headcount from distinct assigned employees
- competence status (OK / GAP / RISK / NO-GO) per machine, checked against
  the requirements of the station matched to the machine
"""

import math
import time
from collections.abc import Sequence
from dataclasses import dataclass

from shiftgap.core.config import settings
from shiftgap.core.observability import get_logger, record_gap_computation
from shiftgap.shared.exceptions import OrgScopeError

from ..entities.gap_report import LineGapsResult, MachineGapRow
from ..entities.line_overview import LineOverviewData, LineOverviewMachine
from ..entities.reference import Competence, RequirementDetail, StationRoleRequirement
from ..repositories.staffing_data_client import StaffingDataClient
from ..value_objects.net_time import net_shift_hours as compute_net_shift_hours
from .competence_policy import (
    DEFAULT_POLICY,
    AssignedEmployee,
    GapPolicy,
    evaluate_machine_competence,
)
from .competence_resolver import resolve_competence_levels
from .station_matcher import match_stations_to_machines

logger = get_logger(__name__)


@dataclass(frozen=True)
class MachineHeadcount:
    machine_code: str
    required: int
    assigned: int
    employee_codes: tuple[str, ...]

    @property
    def staffing_gap(self) -> int:
        return max(self.required - self.assigned, 0)


def required_headcount(required_hours: float, net_shift_hours: float) -> int:
    """People needed to cover ``required_hours`` of net working time."""
    if required_hours <= 0:
        return 0
    return math.ceil(required_hours / net_shift_hours)


def machine_headcount(
    machine: LineOverviewMachine, net_shift_hours: float
) -> MachineHeadcount:
    codes = tuple(machine.employee_codes)
    return MachineHeadcount(
        machine_code=machine.machine.machine_code,
        required=required_headcount(machine.required_hours, net_shift_hours),
        assigned=len(codes),
        employee_codes=codes,
    )


def build_requirement_map(
    requirements: Sequence[StationRoleRequirement],
    competences: Sequence[Competence],
) -> dict[str, list[RequirementDetail]]:
    """Group requirements by station, joined with competence display data."""
    catalog = {c.id: c for c in competences}
    req_map: dict[str, list[RequirementDetail]] = {}
    for req in requirements:
        competence = catalog.get(req.skill_id)
        req_map.setdefault(req.station_id, []).append(
            RequirementDetail(
                skill_id=req.skill_id,
                skill_name=competence.name if competence and competence.name else "Unknown",
                skill_code=competence.code if competence else "",
                required_level=req.required_level,
                is_mandatory=req.is_mandatory,
            )
        )
    return req_map


def _validate_org_scope(org_id: object, strict_org_scope: bool) -> None:
    if not strict_org_scope:
        return
    if not isinstance(org_id, str) or not org_id.strip():
        raise OrgScopeError(org_id)


class GapEngine:
    """
    Line gap computation over an org-scoped data client.

    Holds no state between calls; every computation builds its own maps.
    """

    def __init__(
        self,
        data_client: StaffingDataClient,
        fallback_net_shift_hours: float | None = None,
        competence_fetch_concurrency: int | None = None,
        policy: GapPolicy = DEFAULT_POLICY,
    ) -> None:
        self.data_client = data_client
        self.fallback_net_shift_hours = (
            fallback_net_shift_hours
            if fallback_net_shift_hours is not None
            else settings.FALLBACK_NET_SHIFT_HOURS
        )
        self.competence_fetch_concurrency = (
            competence_fetch_concurrency
            if competence_fetch_concurrency is not None
            else settings.COMPETENCE_FETCH_CONCURRENCY
        )
        self.policy = policy

    async def net_shift_hours(self, org_id: str, shift_type: str) -> float:
        rule = await self.data_client.get_shift_rule(org_id, shift_type)
        hours = compute_net_shift_hours(rule, self.fallback_net_shift_hours)
        if rule is None:
            logger.info(
                "No shift rule found; using fallback net hours",
                shift_type=shift_type,
                net_shift_hours=hours,
            )
        return hours

    async def compute(
        self,
        *,
        org_id: str,
        line: str,
        date: str,
        shift_type: str,
        line_overview_data: LineOverviewData,
        strict_org_scope: bool = True,
    ) -> LineGapsResult:
        """
        Compute the gap report for one line on a date and shift.

        Args:
            org_id: Organization identifier
            line: Line code to report on
            date: Plan date (``YYYY-MM-DD``), used as the competence effective date
            shift_type: Shift name as stored
            line_overview_data: Demand and assignment snapshot
            strict_org_scope: Reject a missing org before any data access

        Returns:
            One row per machine of the line, in snapshot order

        Raises:
            OrgScopeError: If ``strict_org_scope`` and ``org_id`` is empty
        """
        _validate_org_scope(org_id, strict_org_scope)
        started = time.perf_counter()

        selected = line_overview_data.find_line(line)
        if selected is None or not selected.machines:
            logger.info("No demand configured for line", line=line, shift_type=shift_type)
            record_gap_computation("no_demand", time.perf_counter() - started)
            return LineGapsResult(machine_rows=[])

        machines = selected.machines
        net_hours = await self.net_shift_hours(org_id, shift_type)

        headcounts = [machine_headcount(m, net_hours) for m in machines]
        all_codes = list(
            dict.fromkeys(code for hc in headcounts for code in hc.employee_codes)
        )

        code_to_id: dict[str, str] = {}
        if all_codes:
            code_to_id = await self.data_client.resolve_employee_ids_by_code(
                org_id, all_codes
            )

        stations = await self.data_client.get_stations(org_id, line, active_only=True)
        station_ids = [s.id for s in stations]
        requirements = (
            await self.data_client.get_station_role_requirements(station_ids, org_id)
            if station_ids
            else []
        )
        skill_ids = list(dict.fromkeys(r.skill_id for r in requirements if r.skill_id))
        competences = (
            await self.data_client.get_competences(skill_ids, org_id) if skill_ids else []
        )
        req_map = build_requirement_map(requirements, competences)

        station_for_machine = match_stations_to_machines(
            stations, [m.machine for m in machines]
        )

        employee_ids = list(
            dict.fromkeys(code_to_id[code] for code in all_codes if code in code_to_id)
        )
        names: dict[str, str] = {}
        if employee_ids:
            names = await self.data_client.get_employee_names(org_id, employee_ids)

        required_competence_ids = list(
            dict.fromkeys(
                req.skill_id for reqs in req_map.values() for req in reqs if req.skill_id
            )
        )
        levels = await resolve_competence_levels(
            self.data_client,
            org_id,
            employee_ids,
            required_competence_ids,
            effective_date=date,
            concurrency=self.competence_fetch_concurrency,
        )

        rows: list[MachineGapRow] = []
        for machine, headcount in zip(machines, headcounts):
            station_id = station_for_machine.get(headcount.machine_code)
            station_reqs = req_map.get(station_id, []) if station_id else []

            assigned_employees = []
            for code in headcount.employee_codes:
                employee_id = code_to_id.get(code)
                if not employee_id or employee_id not in names:
                    continue
                assigned_employees.append(
                    AssignedEmployee(employee_id=employee_id, name=names[employee_id])
                )

            status, gaps = evaluate_machine_competence(
                assigned_employees, station_reqs, levels, self.policy
            )
            rows.append(
                MachineGapRow(
                    station_or_machine=machine.machine.machine_name
                    or headcount.machine_code,
                    station_or_machine_code=headcount.machine_code,
                    required=headcount.required,
                    assigned=headcount.assigned,
                    staffing_gap=headcount.staffing_gap,
                    competence_status=status,
                    competence_gaps=gaps,
                )
            )

        duration = time.perf_counter() - started
        record_gap_computation(
            "computed", duration, [row.competence_status.value for row in rows]
        )
        logger.info(
            "Line gaps computed",
            line=line,
            date=date,
            shift_type=shift_type,
            machines=len(rows),
            net_shift_hours=net_hours,
            stations=len(stations),
            matched_stations=sum(1 for s in station_for_machine.values() if s),
            duration_seconds=round(duration, 4),
        )
        return LineGapsResult(machine_rows=rows)


async def compute_line_gaps(
    *,
    org_id: str,
    line: str,
    date: str,
    shift_type: str,
    data_client: StaffingDataClient,
    line_overview_data: LineOverviewData,
    strict_org_scope: bool | None = None,
    policy: GapPolicy = DEFAULT_POLICY,
) -> LineGapsResult:
    """Compute the gap report for one line; see ``GapEngine.compute``."""
    if strict_org_scope is None:
        strict_org_scope = settings.STRICT_ORG_SCOPE
    engine = GapEngine(data_client, policy=policy)
    return await engine.compute(
        org_id=org_id,
        line=line,
        date=date,
        shift_type=shift_type,
        line_overview_data=line_overview_data,
        strict_org_scope=strict_org_scope,
    )
