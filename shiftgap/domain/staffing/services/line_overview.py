"""
Line overview assembly.

Builds the ``LineOverviewData`` snapshot the gap engine consumes from raw
planning rows: machines of a line, demand hours and assignment segments.
Hours here are gross clock hours; the engine does the net conversion.
"""

from collections.abc import Sequence

from shiftgap.core.observability import get_logger

from ..entities.line_overview import (
    AssignedPerson,
    Assignment,
    LineInfo,
    LineOverviewData,
    LineOverviewLine,
    LineOverviewMachine,
    MachineInfo,
)
from ..entities.planning import AssignmentSegment, MachineDemand, PlanningMachine
from ..repositories.staffing_data_client import StaffingDataClient
from ..value_objects.enums import LineMachineStatus, ShiftType
from ..value_objects.net_time import segment_gross_hours

logger = get_logger(__name__)


def shift_param_to_db_value(shift: str | None) -> str:
    """Map ``day``/``evening``/``night`` (any case) to the stored shift name."""
    return ShiftType.from_param(shift).value


def machine_status(required_hours: float, assigned_hours: float) -> LineMachineStatus:
    if required_hours > 0:
        if assigned_hours == 0:
            return LineMachineStatus.GAP
        if assigned_hours < required_hours:
            return LineMachineStatus.PARTIAL
        if assigned_hours > required_hours:
            return LineMachineStatus.OVER
        return LineMachineStatus.OK
    if assigned_hours > 0:
        return LineMachineStatus.OVER
    return LineMachineStatus.NO_DEMAND


def build_machine_overview(
    machine: PlanningMachine,
    demand: MachineDemand | None,
    segments: Sequence[AssignmentSegment],
) -> LineOverviewMachine:
    required_hours = demand.required_hours if demand else 0.0

    assigned_hours = 0.0
    people: list[AssignedPerson] = []
    for seg in segments:
        hours = segment_gross_hours(seg.start_time, seg.end_time)
        assigned_hours += hours
        # ids and names are resolved later by the gap engine
        people.append(
            AssignedPerson(
                assignment_id=seg.id,
                employee_code=seg.employee_code,
                start_time=seg.start_time,
                end_time=seg.end_time,
                hours=hours,
            )
        )

    return LineOverviewMachine(
        machine=MachineInfo(
            id=machine.id,
            machine_code=machine.machine_code,
            machine_name=machine.machine_name,
            line_code=machine.line_code,
        ),
        required_hours=required_hours,
        assigned_hours=assigned_hours,
        gap=required_hours - assigned_hours,
        over_assigned=max(assigned_hours - required_hours, 0.0),
        status=machine_status(required_hours, assigned_hours),
        assignments=[
            Assignment(
                id=seg.id,
                plan_date=seg.plan_date,
                shift_type=seg.shift_type,
                machine_code=seg.machine_code,
                employee_code=seg.employee_code,
                start_time=seg.start_time,
                end_time=seg.end_time,
                role_note=seg.role_note,
            )
            for seg in segments
        ],
        assigned_people=people,
    )


def build_line_overview(
    line: str,
    machines: Sequence[PlanningMachine],
    demand: Sequence[MachineDemand],
    segments: Sequence[AssignmentSegment],
    line_name: str | None = None,
) -> LineOverviewData:
    """
    Assemble a single-line snapshot.

    Machines keep the order given; demand and segments are matched by
    machine code.
    """
    demand_by_machine = {d.machine_code: d for d in demand}
    segments_by_machine: dict[str, list[AssignmentSegment]] = {}
    for seg in segments:
        segments_by_machine.setdefault(seg.machine_code, []).append(seg)

    return LineOverviewData(
        lines=[
            LineOverviewLine(
                line=LineInfo(id=line, line_code=line, line_name=line_name or line),
                machines=[
                    build_machine_overview(
                        m,
                        demand_by_machine.get(m.machine_code),
                        segments_by_machine.get(m.machine_code, []),
                    )
                    for m in machines
                ],
            )
        ]
    )


async def fetch_line_overview(
    data_client: StaffingDataClient,
    org_id: str,
    date: str,
    shift_type: str,
    line: str,
) -> LineOverviewData | None:
    """
    Load planning rows for one line and build its snapshot.

    Returns None when the line has no machines.
    """
    shift = shift_param_to_db_value(shift_type)
    machines = await data_client.get_line_machines(org_id, line)
    if not machines:
        logger.warning("No machines found for line", line=line)
        return None

    machine_codes = [m.machine_code for m in machines]
    demand = await data_client.get_machine_demand(org_id, date, shift, machine_codes)
    segments = await data_client.get_assignment_segments(
        org_id, date, shift, machine_codes
    )
    return build_line_overview(line, machines, demand, segments)
