"""PersistAssignmentsUseCase — applies planned assignments one record at a time."""

from __future__ import annotations

import logging

from caseflow.application.ports.customer_repo import CustomerRepository
from caseflow.application.ports.officer_repo import OfficerRepository
from caseflow.application.ports.transaction_port import (
    NullTransactionManager,
    TransactionManager,
)
from caseflow.domain.entities.assignment import AssignmentOutcome, PlannedAssignment
from caseflow.domain.entities.customer import AssignmentHistoryEntry
from caseflow.domain.exceptions import (
    AssignmentError,
    NotFoundError,
    SpecializationMismatchError,
)

logger = logging.getLogger(__name__)

AUTOMATIC_ASSIGNMENT_REASON = "Automatic assignment by system"


class PersistAssignmentsUseCase:
    """Writes each planned assignment independently.

    A failing record is reported in the outcome list and the loop moves on;
    there is no cross-record transaction and no retry.
    """

    def __init__(
        self,
        officer_repo: OfficerRepository,
        customer_repo: CustomerRepository,
        tx: TransactionManager | None = None,
        increment_external_load: bool = True,
    ):
        self._officers = officer_repo
        self._customers = customer_repo
        self._tx = tx or NullTransactionManager()
        self._increment_external_load = increment_external_load

    async def execute(self, planned: list[PlannedAssignment]) -> list[AssignmentOutcome]:
        outcomes = []
        for assignment in planned:
            outcomes.append(await self._persist_one(assignment))

        successful = sum(1 for o in outcomes if o.success)
        logger.info("Persisted %d/%d assignments", successful, len(outcomes))
        return outcomes

    async def _persist_one(self, assignment: PlannedAssignment) -> AssignmentOutcome:
        try:
            async with self._tx.savepoint():
                # Step 1: the officer may have changed since the plan was built
                officer = await self._officers.get_by_id(assignment.officer_id)
                if officer is None:
                    raise NotFoundError("officer", assignment.officer_id)
                if not officer.specializes_in(assignment.product_type):
                    raise SpecializationMismatchError(
                        officer.id, officer.specialization, assignment.product_type
                    )

                # Step 2: customer side (normative owner pointer + history)
                entry = AssignmentHistoryEntry(
                    officer_id=officer.id,
                    assigned_at=assignment.planned_at,
                    assigned_by=assignment.requested_by,
                    reason=AUTOMATIC_ASSIGNMENT_REASON,
                )
                await self._customers.assign_owner(
                    assignment.customer_id, officer.id, entry
                )

                # Step 3: officer side (roster cache + load counter)
                await self._officers.add_to_roster(officer.id, assignment.customer_id)
                if self._increment_external_load:
                    await self._officers.adjust_load(officer.id, 1)

        except AssignmentError as e:
            logger.warning(
                "Failed to assign customer %s to officer %s: %s",
                assignment.customer_id, assignment.officer_id, e,
            )
            return AssignmentOutcome(
                customer_id=assignment.customer_id,
                officer_id=assignment.officer_id,
                success=False,
                reason=str(e),
            )
        except Exception as e:
            logger.exception(
                "Error persisting assignment of customer %s to officer %s",
                assignment.customer_id, assignment.officer_id,
            )
            return AssignmentOutcome(
                customer_id=assignment.customer_id,
                officer_id=assignment.officer_id,
                success=False,
                reason=f"Persistence failure ({type(e).__name__})",
            )

        logger.debug(
            "Assigned customer %s to officer %s",
            assignment.customer_id, assignment.officer_id,
        )
        return AssignmentOutcome(
            customer_id=assignment.customer_id,
            officer_id=assignment.officer_id,
            success=True,
        )
