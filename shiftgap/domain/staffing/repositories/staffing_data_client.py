"""
Staffing Data Client Interface

Defines the org-scoped, read-only data access contract the gap engine and the
line overview builder depend on.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..entities.planning import AssignmentSegment, MachineDemand, PlanningMachine
from ..entities.reference import (
    Competence,
    ShiftRule,
    Station,
    StationRoleRequirement,
)


class StaffingDataClient(ABC):
    """
    Abstract data client for staffing reference data.

    Every operation is implicitly scoped to the organization passed in; the
    infrastructure layer must never return rows belonging to another org.
    """

    @abstractmethod
    async def get_shift_rule(self, org_id: str, shift_type: str) -> ShiftRule | None:
        """
        Retrieve the shift rule for a shift type.

        Args:
            org_id: Organization identifier
            shift_type: Shift name as stored (e.g. "Day")

        Returns:
            ShiftRule or None if the org has no rule for the shift

        Raises:
            RepositoryError: If retrieval operation fails
        """
        pass

    @abstractmethod
    async def get_stations(
        self, org_id: str, line: str, active_only: bool = True
    ) -> list[Station]:
        """
        Retrieve the stations of a line.

        Args:
            org_id: Organization identifier
            line: Line code
            active_only: Restrict to active stations where the schema tracks it

        Returns:
            List of stations
        """
        pass

    @abstractmethod
    async def get_station_role_requirements(
        self, station_ids: Sequence[str], org_id: str
    ) -> list[StationRoleRequirement]:
        """
        Retrieve mandatory and optional skill requirements for stations.

        Args:
            station_ids: Stations to look up
            org_id: Organization identifier

        Returns:
            List of requirements (empty when ``station_ids`` is empty)
        """
        pass

    @abstractmethod
    async def get_competences(
        self, skill_ids: Sequence[str], org_id: str
    ) -> list[Competence]:
        """Retrieve competence catalog rows by id."""
        pass

    @abstractmethod
    async def resolve_employee_ids_by_code(
        self, org_id: str, codes: Sequence[str]
    ) -> dict[str, str]:
        """
        Map employee codes to internal employee ids.

        Implementations try the primary planning employee table first and the
        secondary employee table only for codes the first did not resolve.
        Unknown codes are absent from the result.
        """
        pass

    @abstractmethod
    async def get_employee_names(
        self, org_id: str, employee_ids: Sequence[str]
    ) -> dict[str, str]:
        """Map employee ids to display names."""
        pass

    @abstractmethod
    async def get_employee_competence_levels(
        self,
        org_id: str,
        employee_id: str,
        competence_ids: Sequence[str] | None = None,
        effective_date: str | None = None,
    ) -> dict[str, int]:
        """
        Retrieve one employee's competence levels.

        Args:
            org_id: Organization identifier
            employee_id: Employee (must belong to the org)
            competence_ids: Restrict to these competences when given
            effective_date: ``YYYY-MM-DD`` validity date, when tracked

        Returns:
            Mapping of competence id to level; missing competences are absent

        Raises:
            RepositoryError: If retrieval operation fails
        """
        pass

    @abstractmethod
    async def get_line_machines(self, org_id: str, line: str) -> list[PlanningMachine]:
        """Retrieve the machines of a line ordered by machine code."""
        pass

    @abstractmethod
    async def get_machine_demand(
        self,
        org_id: str,
        plan_date: str,
        shift_type: str,
        machine_codes: Sequence[str],
    ) -> list[MachineDemand]:
        """Retrieve demand hours for machines on one date and shift."""
        pass

    @abstractmethod
    async def get_assignment_segments(
        self,
        org_id: str,
        plan_date: str,
        shift_type: str,
        machine_codes: Sequence[str],
    ) -> list[AssignmentSegment]:
        """Retrieve assignment segments for machines on one date and shift."""
        pass
