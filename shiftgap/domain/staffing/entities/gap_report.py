"""
Gap report returned by the engine.

Derived per invocation and never persisted. Serialises with camelCase keys
(``model_dump(by_alias=True)``) to match what the UI consumes.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..value_objects.enums import CompetenceStatus, GapSeverity, SuggestedAction


class ReportModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CompetenceGap(ReportModel):
    """One employee falling short of one required skill."""

    employee: str
    employee_id: str
    skill: str
    skill_code: str = ""
    required_level: int
    current_level: int
    severity: GapSeverity
    suggested_action: SuggestedAction


class MachineGapRow(ReportModel):
    station_or_machine: str
    station_or_machine_code: str
    required: int = Field(ge=0)
    assigned: int = Field(ge=0)
    staffing_gap: int = Field(ge=0)
    competence_status: CompetenceStatus = CompetenceStatus.OK
    competence_gaps: list[CompetenceGap] = Field(default_factory=list)


class LineGapsSummary(ReportModel):
    total_rows: int
    rows_with_staffing_gap: int
    rows_with_competence_issues: int


class LineGapsResult(ReportModel):
    machine_rows: list[MachineGapRow] = Field(default_factory=list)

    def summary(self) -> LineGapsSummary:
        return LineGapsSummary(
            total_rows=len(self.machine_rows),
            rows_with_staffing_gap=sum(
                1 for row in self.machine_rows if row.staffing_gap > 0
            ),
            rows_with_competence_issues=sum(
                1
                for row in self.machine_rows
                if row.competence_status is not CompetenceStatus.OK
            ),
        )
