"""Raw planning rows used to assemble a line overview snapshot."""

from .reference import ReferenceModel


class PlanningMachine(ReferenceModel):
    id: str
    machine_code: str
    machine_name: str = ""
    line_code: str = ""


class MachineDemand(ReferenceModel):
    machine_code: str
    required_hours: float = 0.0


class AssignmentSegment(ReferenceModel):
    id: str
    plan_date: str
    shift_type: str
    machine_code: str
    employee_code: str
    start_time: str
    end_time: str
    role_note: str | None = None
