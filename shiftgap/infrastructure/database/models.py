"""
SQLModel table definitions for the staffing read model.

Only the columns the gap engine and the line overview builder read are
mapped. Every table is tenant-scoped by ``org_id`` except
``employee_competences``, which is scoped through its employee.
"""

from datetime import date, time
from uuid import uuid4

from sqlmodel import Field, SQLModel


def _uuid() -> str:
    return str(uuid4())


class OrgScopedModel(SQLModel):
    """Base model with string UUID primary key and tenant column."""

    id: str = Field(default_factory=_uuid, primary_key=True)
    org_id: str = Field(index=True, max_length=64)


class ShiftRuleRow(OrgScopedModel, table=True):
    __tablename__ = "shift_rules"

    shift_type: str = Field(max_length=32, index=True)
    shift_start: time
    shift_end: time
    break_minutes: int = Field(default=0, ge=0)
    paid_break_minutes: int = Field(default=0, ge=0)


class StationRow(OrgScopedModel, table=True):
    __tablename__ = "stations"

    name: str = Field(max_length=200)
    code: str | None = Field(default=None, max_length=64, index=True)
    line: str = Field(max_length=64, index=True)
    is_active: bool = Field(default=True)


class StationRoleRequirementRow(OrgScopedModel, table=True):
    __tablename__ = "station_role_requirements"

    station_id: str = Field(foreign_key="stations.id", index=True)
    skill_id: str = Field(foreign_key="competences.id", index=True)
    required_level: int = Field(default=1, ge=0)
    is_mandatory: bool = Field(default=True)


class CompetenceRow(OrgScopedModel, table=True):
    __tablename__ = "competences"

    name: str = Field(max_length=200)
    code: str | None = Field(default=None, max_length=64)


class PlanningEmployeeRow(OrgScopedModel, table=True):
    """Primary code source: employees known to the planning tables."""

    __tablename__ = "pl_employees"

    employee_code: str = Field(max_length=64, index=True)


class EmployeeRow(OrgScopedModel, table=True):
    __tablename__ = "employees"

    code: str | None = Field(default=None, max_length=64, index=True)
    name: str | None = Field(default=None, max_length=200)


class EmployeeCompetenceRow(SQLModel, table=True):
    __tablename__ = "employee_competences"

    id: str = Field(default_factory=_uuid, primary_key=True)
    employee_id: str = Field(foreign_key="employees.id", index=True)
    competence_id: str = Field(foreign_key="competences.id", index=True)
    level: int = Field(default=0, ge=0)
    valid_from: date | None = None
    valid_to: date | None = None


class PlanningMachineRow(OrgScopedModel, table=True):
    __tablename__ = "pl_machines"

    machine_code: str = Field(max_length=64, index=True)
    machine_name: str = Field(default="", max_length=200)
    line_code: str = Field(max_length=64, index=True)


class MachineDemandRow(OrgScopedModel, table=True):
    __tablename__ = "pl_machine_demand"

    plan_date: date = Field(index=True)
    shift_type: str = Field(max_length=32)
    machine_code: str = Field(max_length=64, index=True)
    required_hours: float = Field(default=0.0, ge=0)


class AssignmentSegmentRow(OrgScopedModel, table=True):
    __tablename__ = "pl_assignment_segments"

    plan_date: date = Field(index=True)
    shift_type: str = Field(max_length=32)
    machine_code: str = Field(max_length=64, index=True)
    employee_code: str = Field(max_length=64)
    start_time: time
    end_time: time
    role_note: str | None = None
