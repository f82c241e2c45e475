"""
Tests for the SQL staffing data client.

Runs against SQLite through aiosqlite; see conftest for the session fixture.
"""

import asyncio
from datetime import date, time

import pytest

from shiftgap.domain.staffing.entities.line_overview import (
    Assignment,
    LineInfo,
    LineOverviewData,
    LineOverviewLine,
    LineOverviewMachine,
    MachineInfo,
)
from shiftgap.domain.staffing.services.competence_resolver import resolve_competence_levels
from shiftgap.domain.staffing.services.gap_engine import compute_line_gaps
from shiftgap.domain.staffing.services.line_overview import fetch_line_overview
from shiftgap.domain.staffing.value_objects.enums import CompetenceStatus, LineMachineStatus
from shiftgap.infrastructure.database import (
    SqlStaffingDataClient,
    create_engine,
    create_session_factory,
)
from shiftgap.infrastructure.database.models import (
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
from shiftgap.shared.exceptions import ErrorType, RepositoryError

ORG = "org-1"
OTHER_ORG = "org-2"
PLAN_DATE = date(2025, 1, 27)


async def _seed(session):
    session.add_all(
        [
            ShiftRuleRow(
                org_id=ORG,
                shift_type="Day",
                shift_start=time(7, 0),
                shift_end=time(16, 0),
                break_minutes=60,
                paid_break_minutes=0,
            ),
            ShiftRuleRow(
                org_id=OTHER_ORG,
                shift_type="Day",
                shift_start=time(6, 0),
                shift_end=time(14, 0),
            ),
            StationRow(id="st-1", org_id=ORG, name="Press 1", code="M1", line="L1"),
            StationRow(
                id="st-old", org_id=ORG, name="Old press", code="M0", line="L1", is_active=False
            ),
            StationRow(id="st-2", org_id=ORG, name="Welder", code="W1", line="L2"),
            StationRow(id="st-x", org_id=OTHER_ORG, name="Press 1", code="M1", line="L1"),
            CompetenceRow(id="safety", org_id=ORG, name="SAFETY", code="SAF"),
            CompetenceRow(id="forklift", org_id=ORG, name="FORKLIFT", code=None),
            StationRoleRequirementRow(
                org_id=ORG, station_id="st-1", skill_id="safety", required_level=2
            ),
            StationRoleRequirementRow(
                org_id=OTHER_ORG, station_id="st-1", skill_id="forklift", required_level=3
            ),
            PlanningEmployeeRow(id="emp-1", org_id=ORG, employee_code="E1"),
            EmployeeRow(id="emp-1", org_id=ORG, code="E1", name="Ewa"),
            EmployeeRow(id="emp-2", org_id=ORG, code="E2", name=None),
            EmployeeRow(id="emp-9", org_id=OTHER_ORG, code="E9", name="Outsider"),
            EmployeeCompetenceRow(employee_id="emp-1", competence_id="safety", level=1),
            EmployeeCompetenceRow(
                employee_id="emp-1",
                competence_id="forklift",
                level=3,
                valid_from=date(2025, 2, 1),
            ),
            EmployeeCompetenceRow(
                employee_id="emp-2",
                competence_id="safety",
                level=4,
                valid_to=date(2024, 12, 31),
            ),
            EmployeeCompetenceRow(employee_id="emp-2", competence_id="safety", level=2),
            PlanningMachineRow(
                id="m-2", org_id=ORG, machine_code="M2", machine_name="Lathe", line_code="L1"
            ),
            PlanningMachineRow(
                id="m-1", org_id=ORG, machine_code="M1", machine_name="Press 1", line_code="L1"
            ),
            MachineDemandRow(
                org_id=ORG,
                plan_date=PLAN_DATE,
                shift_type="Day",
                machine_code="M1",
                required_hours=8,
            ),
            MachineDemandRow(
                org_id=ORG,
                plan_date=PLAN_DATE,
                shift_type="Night",
                machine_code="M2",
                required_hours=8,
            ),
            AssignmentSegmentRow(
                id="seg-1",
                org_id=ORG,
                plan_date=PLAN_DATE,
                shift_type="Day",
                machine_code="M1",
                employee_code="E1",
                start_time=time(7, 0),
                end_time=time(16, 0),
            ),
        ]
    )
    await session.commit()


class TestReferenceQueries:

    @pytest.mark.asyncio
    async def test_shift_rule_is_org_scoped(self, db_session):
        await _seed(db_session)
        client = SqlStaffingDataClient(db_session)

        rule = await client.get_shift_rule(ORG, "Day")

        assert rule is not None
        assert (rule.shift_start, rule.shift_end) == ("07:00", "16:00")
        assert (rule.break_minutes, rule.paid_break_minutes) == (60, 0)
        assert await client.get_shift_rule(ORG, "Night") is None

    @pytest.mark.asyncio
    async def test_stations_filter_inactive_and_other_orgs(self, db_session):
        await _seed(db_session)
        client = SqlStaffingDataClient(db_session)

        active = await client.get_stations(ORG, "L1")
        everything = await client.get_stations(ORG, "L1", active_only=False)

        assert [s.id for s in active] == ["st-1"]
        assert sorted(s.id for s in everything) == ["st-1", "st-old"]

    @pytest.mark.asyncio
    async def test_requirements_and_competences_are_org_scoped(self, db_session):
        await _seed(db_session)
        client = SqlStaffingDataClient(db_session)

        requirements = await client.get_station_role_requirements(["st-1"], ORG)
        competences = await client.get_competences(["safety", "forklift"], ORG)

        assert [(r.skill_id, r.required_level, r.is_mandatory) for r in requirements] == [
            ("safety", 2, True)
        ]
        assert sorted((c.id, c.code) for c in competences) == [
            ("forklift", ""),
            ("safety", "SAF"),
        ]

    @pytest.mark.asyncio
    async def test_empty_id_lists_skip_queries(self, db_session):
        client = SqlStaffingDataClient(db_session)
        assert await client.get_station_role_requirements([], ORG) == []
        assert await client.get_competences([], ORG) == []
        assert await client.get_employee_names(ORG, []) == {}
        assert await client.resolve_employee_ids_by_code(ORG, []) == {}

    @pytest.mark.asyncio
    async def test_column_detection_is_cached(self, db_session):
        client = SqlStaffingDataClient(db_session)

        assert await client.has_column("stations", "is_active")
        assert not await client.has_column("stations", "retired_at")
        assert list(client._columns) == ["stations"]


class TestEmployeeQueries:

    @pytest.mark.asyncio
    async def test_codes_resolve_through_primary_then_secondary(self, db_session):
        await _seed(db_session)
        client = SqlStaffingDataClient(db_session)

        resolved = await client.resolve_employee_ids_by_code(ORG, ["E1", "E2", "E9", "NOPE"])

        assert resolved == {"E1": "emp-1", "E2": "emp-2"}

    @pytest.mark.asyncio
    async def test_names_default_to_unknown(self, db_session):
        await _seed(db_session)
        client = SqlStaffingDataClient(db_session)

        names = await client.get_employee_names(ORG, ["emp-1", "emp-2", "emp-9"])

        assert names == {"emp-1": "Ewa", "emp-2": "Unknown"}

    @pytest.mark.asyncio
    async def test_competence_levels_respect_validity_window(self, db_session):
        await _seed(db_session)
        client = SqlStaffingDataClient(db_session)

        on_plan_date = await client.get_employee_competence_levels(
            ORG, "emp-1", ["safety", "forklift"], "2025-01-27"
        )
        later = await client.get_employee_competence_levels(
            ORG, "emp-1", ["safety", "forklift"], "2025-03-01"
        )

        assert on_plan_date == {"safety": 1}
        assert later == {"safety": 1, "forklift": 3}

    @pytest.mark.asyncio
    async def test_expired_competence_is_ignored(self, db_session):
        await _seed(db_session)
        client = SqlStaffingDataClient(db_session)

        dated = await client.get_employee_competence_levels(ORG, "emp-2", ["safety"], "2025-01-27")
        undated = await client.get_employee_competence_levels(ORG, "emp-2", ["safety"])

        assert dated == {"safety": 2}
        assert undated == {"safety": 4}


class TestPlanningQueries:

    @pytest.mark.asyncio
    async def test_line_machines_are_ordered_by_code(self, db_session):
        await _seed(db_session)
        client = SqlStaffingDataClient(db_session)

        machines = await client.get_line_machines(ORG, "L1")

        assert [m.machine_code for m in machines] == ["M1", "M2"]
        assert await client.get_line_machines(OTHER_ORG, "L1") == []

    @pytest.mark.asyncio
    async def test_demand_and_segments_filter_by_date_and_shift(self, db_session):
        await _seed(db_session)
        client = SqlStaffingDataClient(db_session)

        demand = await client.get_machine_demand(ORG, "2025-01-27", "Day", ["M1", "M2"])
        segments = await client.get_assignment_segments(ORG, "2025-01-27", "Day", ["M1", "M2"])

        assert [(d.machine_code, d.required_hours) for d in demand] == [("M1", 8.0)]
        assert len(segments) == 1
        seg = segments[0]
        assert (seg.plan_date, seg.start_time, seg.end_time) == ("2025-01-27", "07:00", "16:00")
        assert seg.employee_code == "E1"

    @pytest.mark.asyncio
    async def test_unparseable_plan_date_returns_nothing(self, db_session):
        client = SqlStaffingDataClient(db_session)
        assert await client.get_machine_demand(ORG, "27/01/2025", "Day", ["M1"]) == []
        assert await client.get_assignment_segments(ORG, "", "Day", ["M1"]) == []


class TestFailures:

    @pytest.mark.asyncio
    async def test_query_errors_are_wrapped(self, tmp_path):
        engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        try:
            async with create_session_factory(engine)() as session:
                client = SqlStaffingDataClient(session)
                with pytest.raises(RepositoryError) as exc_info:
                    await client.get_shift_rule(ORG, "Day")
        finally:
            await engine.dispose()

        error = exc_info.value
        assert error.error_type is ErrorType.REPOSITORY
        assert error.operation == "get_shift_rule"
        assert error.table == "shift_rules"


class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_gap_report_from_database(self, db_session):
        await _seed(db_session)
        client = SqlStaffingDataClient(db_session)

        overview = await fetch_line_overview(client, ORG, "2025-01-27", "day", "L1")
        assert overview is not None
        machines = overview.lines[0].machines
        assert [m.status for m in machines] == [LineMachineStatus.OVER, LineMachineStatus.NO_DEMAND]

        result = await compute_line_gaps(
            org_id=ORG,
            line="L1",
            date="2025-01-27",
            shift_type="Day",
            data_client=client,
            line_overview_data=overview,
        )

        press, lathe = result.machine_rows
        assert (press.required, press.assigned, press.staffing_gap) == (1, 1, 0)
        assert press.competence_status is CompetenceStatus.GAP
        assert [(g.employee, g.skill_code) for g in press.competence_gaps] == [("Ewa", "SAF")]
        assert (lathe.required, lathe.assigned, lathe.competence_status) == (
            0,
            0,
            CompetenceStatus.OK,
        )


CREW = [
    ("E11", "emp-11", "Ada"),
    ("E12", "emp-12", "Bo"),
    ("E13", "emp-13", "Cy"),
    ("E14", "emp-14", "Di"),
]


async def _seed_crew(session):
    rows = []
    for code, emp_id, name in CREW:
        rows.extend(
            [
                PlanningEmployeeRow(id=emp_id, org_id=ORG, employee_code=code),
                EmployeeRow(id=emp_id, org_id=ORG, code=code, name=name),
                EmployeeCompetenceRow(employee_id=emp_id, competence_id="safety", level=3),
            ]
        )
    session.add_all(rows)
    await session.commit()


def _crew_overview() -> LineOverviewData:
    machine = LineOverviewMachine(
        machine=MachineInfo(id="m-1", machine_code="M1", machine_name="Press 1", line_code="L1"),
        required_hours=32,
        assignments=[
            Assignment(machine_code="M1", employee_code=code, start_time="07:00", end_time="16:00")
            for code, _, _ in CREW
        ],
    )
    return LineOverviewData(
        lines=[LineOverviewLine(line=LineInfo(line_code="L1"), machines=[machine])]
    )


class TestConcurrentLookups:
    """The competence fan-out shares one session with the rest of the client."""

    @pytest.mark.asyncio
    async def test_session_is_never_used_concurrently(self, db_session, monkeypatch):
        await _seed(db_session)
        await _seed_crew(db_session)
        client = SqlStaffingDataClient(db_session)

        in_flight = 0
        peak = 0
        execute = db_session.execute

        async def tracking_execute(*args, **kwargs):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            try:
                await asyncio.sleep(0)
                return await execute(*args, **kwargs)
            finally:
                in_flight -= 1

        monkeypatch.setattr(db_session, "execute", tracking_execute)

        levels = await resolve_competence_levels(
            client, ORG, [emp_id for _, emp_id, _ in CREW], ["safety"], "2025-01-27"
        )

        assert peak == 1
        assert levels == {emp_id: {"safety": 3} for _, emp_id, _ in CREW}

    @pytest.mark.asyncio
    async def test_qualified_crew_on_one_machine_is_ok(self, db_session):
        await _seed(db_session)
        await _seed_crew(db_session)
        client = SqlStaffingDataClient(db_session)

        result = await compute_line_gaps(
            org_id=ORG,
            line="L1",
            date="2025-01-27",
            shift_type="Day",
            data_client=client,
            line_overview_data=_crew_overview(),
        )

        (row,) = result.machine_rows
        assert (row.required, row.assigned, row.staffing_gap) == (4, 4, 0)
        assert row.competence_status is CompetenceStatus.OK
        assert row.competence_gaps == []
