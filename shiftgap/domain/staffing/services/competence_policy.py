"""
Competence classification policy.

Turns an employee's level on a required skill into a severity and a suggested
action, and folds a machine's findings into one competence status.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from ..entities.gap_report import CompetenceGap
from ..entities.reference import RequirementDetail
from ..value_objects.enums import CompetenceStatus, GapSeverity, SuggestedAction

# Optional requirements are collected but not evaluated.
EVALUATE_MANDATORY_ONLY = True


@dataclass(frozen=True)
class GapPolicy:
    evaluate_mandatory_only: bool = EVALUATE_MANDATORY_ONLY

    def requirements_to_evaluate(
        self, requirements: Sequence[RequirementDetail]
    ) -> list[RequirementDetail]:
        if self.evaluate_mandatory_only:
            return [req for req in requirements if req.is_mandatory]
        return list(requirements)


DEFAULT_POLICY = GapPolicy()


@dataclass(frozen=True)
class SkillFinding:
    severity: GapSeverity
    suggested_action: SuggestedAction
    blocks_machine: bool = False


def classify_skill_level(current_level: int, required_level: int) -> SkillFinding | None:
    """
    Classify one employee/skill pair; None when the requirement is met.

    A skill missing entirely (level 0) blocks the machine. One level short can
    be covered by a buddy; further short needs training.
    """
    if current_level == 0 and required_level > 0:
        return SkillFinding(GapSeverity.RISK, SuggestedAction.TRAIN, blocks_machine=True)
    if current_level < required_level:
        if current_level >= required_level - 1:
            return SkillFinding(GapSeverity.GAP, SuggestedAction.BUDDY)
        return SkillFinding(GapSeverity.RISK, SuggestedAction.TRAIN)
    return None


@dataclass(frozen=True)
class AssignedEmployee:
    employee_id: str
    name: str


def evaluate_machine_competence(
    employees: Sequence[AssignedEmployee],
    requirements: Sequence[RequirementDetail],
    levels_by_employee: Mapping[str, Mapping[str, int]],
    policy: GapPolicy = DEFAULT_POLICY,
) -> tuple[CompetenceStatus, list[CompetenceGap]]:
    """
    Evaluate every assigned employee against a station's requirements.

    A station without requirements gives no opinion: the machine stays OK with
    no gaps whoever is assigned.
    """
    if not requirements:
        return CompetenceStatus.OK, []

    evaluated = policy.requirements_to_evaluate(requirements)
    gaps: list[CompetenceGap] = []
    status = CompetenceStatus.OK

    for employee in employees:
        levels = levels_by_employee.get(employee.employee_id) or {}
        for req in evaluated:
            current_level = levels.get(req.skill_id, 0) or 0
            finding = classify_skill_level(current_level, req.required_level)
            if finding is None:
                continue

            if finding.blocks_machine:
                found = CompetenceStatus.NO_GO
            else:
                found = CompetenceStatus(finding.severity.value)
            if found.rank > status.rank:
                status = found

            gaps.append(
                CompetenceGap(
                    employee=employee.name,
                    employee_id=employee.employee_id,
                    skill=req.skill_name,
                    skill_code=req.skill_code,
                    required_level=req.required_level,
                    current_level=current_level,
                    severity=finding.severity,
                    suggested_action=finding.suggested_action,
                )
            )

    return status, gaps
