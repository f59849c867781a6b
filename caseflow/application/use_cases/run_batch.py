"""RunAssignmentBatchUseCase — readers → distributor → persister."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from caseflow.application.use_cases.load_backlog import LoadBacklogUseCase
from caseflow.application.use_cases.load_officers import LoadAvailableOfficersUseCase
from caseflow.application.use_cases.persist_assignments import PersistAssignmentsUseCase
from caseflow.domain.entities.assignment import AssignmentOutcome, SkippedGroup
from caseflow.domain.policies.distribution import build_plan

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Summary of one distribution batch."""

    planned_count: int
    outcomes: list[AssignmentOutcome] = field(default_factory=list)
    skipped_groups: list[SkippedGroup] = field(default_factory=list)
    officers_considered: int = 0
    message: str = ""

    @property
    def successful(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> list[AssignmentOutcome]:
        return [o for o in self.outcomes if not o.success]


class RunAssignmentBatchUseCase:
    """Assign a batch of backlog accounts to officers with room.

    Setup failures (reading officers or backlog) propagate to the caller;
    per-record write failures are reported in ``BatchResult.outcomes``.
    """

    def __init__(
        self,
        load_officers: LoadAvailableOfficersUseCase,
        load_backlog: LoadBacklogUseCase,
        persist: PersistAssignmentsUseCase,
    ):
        self._load_officers = load_officers
        self._load_backlog = load_backlog
        self._persist = persist

    async def execute(
        self,
        specialization: str | None = None,
        limit: int = 50,
        exclude_assigned: bool = True,
        requested_by: str | None = None,
    ) -> BatchResult:
        logger.info(
            "Starting assignment batch for %s (limit=%d)",
            specialization or "all product types", limit,
        )

        directory = await self._load_officers.execute(specialization)
        backlog = await self._load_backlog.execute(specialization, limit, exclude_assigned)

        plan = build_plan(
            backlog,
            directory.available,
            requested_by=requested_by,
            requested_specialization=specialization,
            saturated=directory.saturated,
        )

        outcomes = await self._persist.execute(plan.assignments) if plan.assignments else []

        result = BatchResult(
            planned_count=len(plan.assignments),
            outcomes=outcomes,
            skipped_groups=plan.skipped_groups,
            officers_considered=len(directory.available),
        )
        result.message = _summarize(result, backlog_size=len(backlog))

        logger.info(
            "Batch complete: %d/%d successful, %d skipped groups",
            result.successful, result.planned_count, len(result.skipped_groups),
        )
        return result


def _summarize(result: BatchResult, backlog_size: int) -> str:
    if backlog_size == 0:
        return "No unassigned customers available"
    if result.officers_considered == 0:
        return "No officers available"
    if result.planned_count == 0:
        return "No assignments made (capacity limits or specialization gaps)"
    return (
        f"Assigned {result.successful} customers to "
        f"{result.officers_considered} officers"
    )
