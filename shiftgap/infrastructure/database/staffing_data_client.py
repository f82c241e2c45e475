"""
SQL implementation of the staffing data client.

Reads the org-scoped staffing tables through one ``AsyncSession``. An
``AsyncSession`` must not be used by concurrent tasks, and the competence
lookups fan out with ``asyncio.gather``, so every use of the session goes
through a per-client lock. Optional columns (``stations.is_active``,
competence validity dates) are detected once per client with the SQLAlchemy
inspector instead of trial queries.
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import date, time

from sqlalchemy import inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shiftgap.domain.staffing.entities.planning import (
    AssignmentSegment,
    MachineDemand,
    PlanningMachine,
)
from shiftgap.domain.staffing.entities.reference import (
    Competence,
    ShiftRule,
    Station,
    StationRoleRequirement,
)
from shiftgap.domain.staffing.repositories.staffing_data_client import (
    StaffingDataClient,
)
from shiftgap.shared.exceptions import RepositoryError

from .models import (
    AssignmentSegmentRow,
    CompetenceRow,
    EmployeeCompetenceRow,
    EmployeeRow,
    MachineDemandRow,
    PlanningEmployeeRow,
    PlanningMachineRow,
    ShiftRuleRow,
    StationRoleRequirementRow,
    StationRow,
)

logger = logging.getLogger(__name__)


def _format_time(value: time | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, time):
        return f"{value.hour:02d}:{value.minute:02d}"
    return str(value)[:5]


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class SqlStaffingDataClient(StaffingDataClient):
    """Staffing data client over SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._columns: dict[str, frozenset[str]] = {}
        self._session_lock = asyncio.Lock()

    async def _table_columns(self, table: str) -> frozenset[str]:
        if table in self._columns:
            return self._columns[table]
        async with self._session_lock:
            if table not in self._columns:
                conn = await self.session.connection()
                names = await conn.run_sync(
                    lambda sync_conn: [
                        col["name"] for col in inspect(sync_conn).get_columns(table)
                    ]
                )
                self._columns[table] = frozenset(names)
        return self._columns[table]

    async def has_column(self, table: str, column: str) -> bool:
        """Whether ``table.column`` exists in the connected schema (cached)."""
        try:
            return column in await self._table_columns(table)
        except SQLAlchemyError as e:
            raise RepositoryError("inspect_schema", str(e), table) from e

    async def _all(self, operation: str, table: str, statement) -> list:
        async with self._session_lock:
            try:
                result = await self.session.execute(statement)
                return list(result.all())
            except SQLAlchemyError as e:
                logger.error(f"Staffing query {operation} on {table} failed: {e}")
                raise RepositoryError(operation, str(e), table) from e

    async def get_shift_rule(self, org_id: str, shift_type: str) -> ShiftRule | None:
        rows = await self._all(
            "get_shift_rule",
            ShiftRuleRow.__tablename__,
            select(
                ShiftRuleRow.shift_start,
                ShiftRuleRow.shift_end,
                ShiftRuleRow.break_minutes,
                ShiftRuleRow.paid_break_minutes,
            )
            .where(ShiftRuleRow.org_id == org_id)
            .where(ShiftRuleRow.shift_type == shift_type)
            .limit(1),
        )
        if not rows:
            return None
        row = rows[0]
        return ShiftRule(
            shift_start=_format_time(row.shift_start),
            shift_end=_format_time(row.shift_end),
            break_minutes=row.break_minutes,
            paid_break_minutes=row.paid_break_minutes,
        )

    async def get_stations(
        self, org_id: str, line: str, active_only: bool = True
    ) -> list[Station]:
        statement = (
            select(StationRow.id, StationRow.name, StationRow.code, StationRow.line)
            .where(StationRow.org_id == org_id)
            .where(StationRow.line == line)
        )
        if active_only and await self.has_column(StationRow.__tablename__, "is_active"):
            statement = statement.where(StationRow.is_active.is_(True))

        rows = await self._all("get_stations", StationRow.__tablename__, statement)
        return [
            Station(id=row.id, name=row.name, code=row.code, line=row.line)
            for row in rows
        ]

    async def get_station_role_requirements(
        self, station_ids: Sequence[str], org_id: str
    ) -> list[StationRoleRequirement]:
        if not station_ids:
            return []
        rows = await self._all(
            "get_station_role_requirements",
            StationRoleRequirementRow.__tablename__,
            select(
                StationRoleRequirementRow.station_id,
                StationRoleRequirementRow.skill_id,
                StationRoleRequirementRow.required_level,
                StationRoleRequirementRow.is_mandatory,
            )
            .where(StationRoleRequirementRow.station_id.in_(list(station_ids)))
            .where(StationRoleRequirementRow.org_id == org_id),
        )
        return [
            StationRoleRequirement(
                station_id=row.station_id,
                skill_id=row.skill_id,
                required_level=row.required_level,
                is_mandatory=row.is_mandatory,
            )
            for row in rows
        ]

    async def get_competences(
        self, skill_ids: Sequence[str], org_id: str
    ) -> list[Competence]:
        if not skill_ids:
            return []
        rows = await self._all(
            "get_competences",
            CompetenceRow.__tablename__,
            select(CompetenceRow.id, CompetenceRow.name, CompetenceRow.code)
            .where(CompetenceRow.id.in_(list(skill_ids)))
            .where(CompetenceRow.org_id == org_id),
        )
        return [Competence(id=row.id, name=row.name, code=row.code) for row in rows]

    async def resolve_employee_ids_by_code(
        self, org_id: str, codes: Sequence[str]
    ) -> dict[str, str]:
        unique_codes = list(dict.fromkeys(c for c in codes if c))
        if not unique_codes:
            return {}

        resolved: dict[str, str] = {}
        primary = await self._all(
            "resolve_employee_ids_by_code",
            PlanningEmployeeRow.__tablename__,
            select(PlanningEmployeeRow.employee_code, PlanningEmployeeRow.id)
            .where(PlanningEmployeeRow.org_id == org_id)
            .where(PlanningEmployeeRow.employee_code.in_(unique_codes)),
        )
        for row in primary:
            resolved[row.employee_code] = row.id

        missing = [c for c in unique_codes if c not in resolved]
        if missing:
            secondary = await self._all(
                "resolve_employee_ids_by_code",
                EmployeeRow.__tablename__,
                select(EmployeeRow.code, EmployeeRow.id)
                .where(EmployeeRow.org_id == org_id)
                .where(EmployeeRow.code.in_(missing)),
            )
            for row in secondary:
                if row.code and row.code not in resolved:
                    resolved[row.code] = row.id
        return resolved

    async def get_employee_names(
        self, org_id: str, employee_ids: Sequence[str]
    ) -> dict[str, str]:
        if not employee_ids:
            return {}
        rows = await self._all(
            "get_employee_names",
            EmployeeRow.__tablename__,
            select(EmployeeRow.id, EmployeeRow.name)
            .where(EmployeeRow.id.in_(list(employee_ids)))
            .where(EmployeeRow.org_id == org_id),
        )
        return {row.id: row.name or "Unknown" for row in rows}

    async def get_employee_competence_levels(
        self,
        org_id: str,
        employee_id: str,
        competence_ids: Sequence[str] | None = None,
        effective_date: str | None = None,
    ) -> dict[str, int]:
        # employee_competences has no org_id; the employee id was resolved
        # inside the org and the competence ids come from org requirements
        statement = select(
            EmployeeCompetenceRow.competence_id, EmployeeCompetenceRow.level
        ).where(EmployeeCompetenceRow.employee_id == employee_id)
        if competence_ids:
            statement = statement.where(
                EmployeeCompetenceRow.competence_id.in_(list(competence_ids))
            )

        on_date = _parse_date(effective_date)
        table = EmployeeCompetenceRow.__tablename__
        if on_date is not None:
            if await self.has_column(table, "valid_from"):
                statement = statement.where(
                    or_(
                        EmployeeCompetenceRow.valid_from.is_(None),
                        EmployeeCompetenceRow.valid_from <= on_date,
                    )
                )
            if await self.has_column(table, "valid_to"):
                statement = statement.where(
                    or_(
                        EmployeeCompetenceRow.valid_to.is_(None),
                        EmployeeCompetenceRow.valid_to >= on_date,
                    )
                )

        rows = await self._all("get_employee_competence_levels", table, statement)
        levels: dict[str, int] = {}
        for row in rows:
            levels[row.competence_id] = max(levels.get(row.competence_id, 0), row.level)
        return levels

    async def get_line_machines(self, org_id: str, line: str) -> list[PlanningMachine]:
        rows = await self._all(
            "get_line_machines",
            PlanningMachineRow.__tablename__,
            select(
                PlanningMachineRow.id,
                PlanningMachineRow.machine_code,
                PlanningMachineRow.machine_name,
                PlanningMachineRow.line_code,
            )
            .where(PlanningMachineRow.org_id == org_id)
            .where(PlanningMachineRow.line_code == line)
            .order_by(PlanningMachineRow.machine_code),
        )
        return [
            PlanningMachine(
                id=row.id,
                machine_code=row.machine_code,
                machine_name=row.machine_name,
                line_code=row.line_code,
            )
            for row in rows
        ]

    async def get_machine_demand(
        self,
        org_id: str,
        plan_date: str,
        shift_type: str,
        machine_codes: Sequence[str],
    ) -> list[MachineDemand]:
        on_date = _parse_date(plan_date)
        if not machine_codes or on_date is None:
            return []
        rows = await self._all(
            "get_machine_demand",
            MachineDemandRow.__tablename__,
            select(MachineDemandRow.machine_code, MachineDemandRow.required_hours)
            .where(MachineDemandRow.org_id == org_id)
            .where(MachineDemandRow.plan_date == on_date)
            .where(MachineDemandRow.shift_type == shift_type)
            .where(MachineDemandRow.machine_code.in_(list(machine_codes))),
        )
        return [
            MachineDemand(
                machine_code=row.machine_code, required_hours=row.required_hours
            )
            for row in rows
        ]

    async def get_assignment_segments(
        self,
        org_id: str,
        plan_date: str,
        shift_type: str,
        machine_codes: Sequence[str],
    ) -> list[AssignmentSegment]:
        on_date = _parse_date(plan_date)
        if not machine_codes or on_date is None:
            return []
        rows = await self._all(
            "get_assignment_segments",
            AssignmentSegmentRow.__tablename__,
            select(AssignmentSegmentRow)
            .where(AssignmentSegmentRow.org_id == org_id)
            .where(AssignmentSegmentRow.plan_date == on_date)
            .where(AssignmentSegmentRow.shift_type == shift_type)
            .where(AssignmentSegmentRow.machine_code.in_(list(machine_codes)))
            .order_by(AssignmentSegmentRow.start_time),
        )
        return [
            AssignmentSegment(
                id=seg.id,
                plan_date=seg.plan_date.isoformat(),
                shift_type=seg.shift_type,
                machine_code=seg.machine_code,
                employee_code=seg.employee_code,
                start_time=_format_time(seg.start_time),
                end_time=_format_time(seg.end_time),
                role_note=seg.role_note,
            )
            for (seg,) in rows
        ]
