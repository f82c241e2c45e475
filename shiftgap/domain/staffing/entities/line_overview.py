"""
Line overview snapshot.

Demand and assignments for every machine of one or more lines on one date and
shift. The snapshot is assembled outside the gap engine (see
``services.line_overview``) and passed in as-is.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..value_objects.enums import LineMachineStatus


class SnapshotModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class MachineInfo(SnapshotModel):
    id: str = ""
    machine_code: str = ""
    machine_name: str = ""
    line_code: str = ""


class Assignment(SnapshotModel):
    """One assignment segment; ``end_time <= start_time`` crosses midnight."""

    id: str = ""
    plan_date: str = ""
    shift_type: str = ""
    machine_code: str = ""
    employee_code: str = ""
    start_time: str
    end_time: str
    role_note: str | None = None


class AssignedPerson(SnapshotModel):
    assignment_id: str = ""
    employee_id: str = ""
    employee_code: str = ""
    employee_name: str = ""
    start_time: str
    end_time: str
    hours: float = 0.0


class LineOverviewMachine(SnapshotModel):
    machine: MachineInfo
    required_hours: float = Field(default=0.0, ge=0)
    assigned_hours: float = 0.0
    gap: float = 0.0
    over_assigned: float = 0.0
    status: LineMachineStatus = LineMachineStatus.NO_DEMAND
    assignments: list[Assignment] = Field(default_factory=list)
    assigned_people: list[AssignedPerson] = Field(default_factory=list)

    @field_validator("required_hours", mode="before")
    @classmethod
    def _null_demand(cls, v: object) -> object:
        return 0.0 if v is None else v

    @property
    def employee_codes(self) -> list[str]:
        """Distinct assigned employee codes in first-seen order."""
        return list(
            dict.fromkeys(a.employee_code for a in self.assignments if a.employee_code)
        )


class LineInfo(SnapshotModel):
    id: str = ""
    line_code: str
    line_name: str = ""


class LineOverviewLine(SnapshotModel):
    line: LineInfo
    machines: list[LineOverviewMachine] = Field(default_factory=list)


class LineOverviewData(SnapshotModel):
    lines: list[LineOverviewLine] = Field(default_factory=list)

    def find_line(self, line_code: str) -> LineOverviewLine | None:
        for entry in self.lines:
            if entry.line.line_code == line_code:
                return entry
        return None
