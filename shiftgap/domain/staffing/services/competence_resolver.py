"""
Competence level resolution.

Fans out one competence-level lookup per employee and joins the results into
a plain ``employee_id -> {competence_id: level}`` value. A failed lookup
degrades that employee to "no recorded competences" instead of failing the
batch.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

from shiftgap.core.observability import get_logger, record_competence_fetch_failure

from ..repositories.staffing_data_client import StaffingDataClient

logger = get_logger(__name__)


@dataclass(frozen=True)
class LevelLookup:
    """Outcome of one employee's competence-level lookup."""

    employee_id: str
    levels: dict[str, int] = field(default_factory=dict)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def levels_or_empty(self) -> dict[str, int]:
        return dict(self.levels) if self.ok else {}


async def lookup_employee_levels(
    data_client: StaffingDataClient,
    org_id: str,
    employee_id: str,
    competence_ids: Sequence[str],
    effective_date: str | None = None,
) -> LevelLookup:
    try:
        levels = await data_client.get_employee_competence_levels(
            org_id, employee_id, list(competence_ids), effective_date
        )
    except Exception as exc:
        return LevelLookup(employee_id=employee_id, error=exc)
    return LevelLookup(employee_id=employee_id, levels=dict(levels or {}))


async def resolve_competence_levels(
    data_client: StaffingDataClient,
    org_id: str,
    employee_ids: Sequence[str],
    competence_ids: Sequence[str],
    effective_date: str | None = None,
    concurrency: int = 0,
) -> dict[str, dict[str, int]]:
    """
    Resolve competence levels for a batch of employees concurrently.

    Args:
        data_client: Org-scoped data client
        org_id: Organization identifier
        employee_ids: Employees to resolve
        competence_ids: Only these competences are fetched
        effective_date: Passed through to the lookup
        concurrency: Maximum lookups in flight (0 = unbounded)

    Returns:
        Level map per employee; employees whose lookup failed map to ``{}``
    """
    unique_ids = list(dict.fromkeys(employee_ids))
    if not unique_ids or not competence_ids:
        return {}

    semaphore = asyncio.Semaphore(concurrency) if concurrency > 0 else None

    async def _lookup(employee_id: str) -> LevelLookup:
        if semaphore is None:
            return await lookup_employee_levels(
                data_client, org_id, employee_id, competence_ids, effective_date
            )
        async with semaphore:
            return await lookup_employee_levels(
                data_client, org_id, employee_id, competence_ids, effective_date
            )

    lookups = await asyncio.gather(*(_lookup(emp_id) for emp_id in unique_ids))

    resolved: dict[str, dict[str, int]] = {}
    for lookup in lookups:
        if not lookup.ok:
            logger.warning(
                "Competence level lookup failed; treating employee as untrained",
                employee_id=lookup.employee_id,
                error=str(lookup.error),
                error_type=type(lookup.error).__name__,
            )
            record_competence_fetch_failure()
        resolved[lookup.employee_id] = lookup.levels_or_empty()
    return resolved
