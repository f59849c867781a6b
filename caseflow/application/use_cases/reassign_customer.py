"""ReassignCustomerUseCase — move one account to a different officer."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable

from caseflow.application.ports.customer_repo import CustomerRepository
from caseflow.application.ports.officer_repo import OfficerRepository
from caseflow.application.ports.transaction_port import (
    NullTransactionManager,
    TransactionManager,
)
from caseflow.domain.entities.assignment import ReassignmentOutcome
from caseflow.domain.entities.customer import AssignmentHistoryEntry
from caseflow.domain.exceptions import (
    NotFoundError,
    PartialWriteError,
    SpecializationMismatchError,
)

logger = logging.getLogger(__name__)

DEFAULT_REASON = "Manual reassignment"

Undo = Callable[[], Awaitable[object]]


class ReassignCustomerUseCase:
    """Validates first, then runs the three writes as one scope.

    Order of writes:
      1. remove from the previous officer's roster (and load)
      2. add to the new officer's roster (and load)
      3. set the owner pointer and append history

    If a write fails, the completed ones are undone in reverse order
    (unless the store's savepoint already does that) and PartialWriteError
    is raised. A raised error means no change is visible.
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

    async def execute(
        self,
        customer_id: int,
        new_officer_id: int,
        reason: str | None = None,
        actor: str | None = None,
    ) -> ReassignmentOutcome:
        customer = await self._customers.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError("customer", customer_id)

        officer = await self._officers.get_by_id(new_officer_id)
        if officer is None:
            raise NotFoundError("officer", new_officer_id)
        if not officer.specializes_in(customer.product_type):
            raise SpecializationMismatchError(
                officer.id, officer.specialization, customer.product_type
            )

        previous_id = customer.owner_id
        if previous_id == officer.id:
            return ReassignmentOutcome(
                customer_id=customer_id,
                previous_officer_id=previous_id,
                new_officer_id=officer.id,
                changed=False,
                message=f"Customer {customer.name} is already assigned to {officer.username}",
            )

        entry = AssignmentHistoryEntry(
            officer_id=officer.id,
            assigned_at=datetime.now(timezone.utc),
            assigned_by=actor,
            reason=reason or DEFAULT_REASON,
        )

        undo: list[Undo] = []
        step = "remove from previous officer"
        async with self._tx.savepoint():
            try:
                # Undo only what each write actually changed: roster writes are
                # idempotent and load is clamped at zero.
                if previous_id is not None:
                    if await self._officers.remove_from_roster(previous_id, customer_id):
                        undo.append(lambda: self._officers.add_to_roster(previous_id, customer_id))
                    if self._increment_external_load:
                        freed = await self._officers.adjust_load(previous_id, -1)
                        if freed:
                            undo.append(lambda: self._officers.adjust_load(previous_id, -freed))

                step = "add to new officer"
                if await self._officers.add_to_roster(officer.id, customer_id):
                    undo.append(lambda: self._officers.remove_from_roster(officer.id, customer_id))
                if self._increment_external_load:
                    added = await self._officers.adjust_load(officer.id, 1)
                    if added:
                        undo.append(lambda: self._officers.adjust_load(officer.id, -added))

                step = "set owner"
                await self._customers.assign_owner(customer_id, officer.id, entry)
            except Exception as e:
                logger.exception(
                    "Reassignment of customer %s to officer %s failed at '%s'",
                    customer_id, officer.id, step,
                )
                rolled_back = await self._rollback(undo)
                raise PartialWriteError(customer_id, step, rolled_back, e) from e

        logger.info(
            "Reassigned customer %s from %s to officer %s (by %s)",
            customer_id, previous_id or "unassigned", officer.id, actor,
        )
        return ReassignmentOutcome(
            customer_id=customer_id,
            previous_officer_id=previous_id,
            new_officer_id=officer.id,
            changed=True,
            message=(
                f"Reassigned {customer.name} from "
                f"{previous_id if previous_id is not None else 'unassigned'} "
                f"to {officer.username}"
            ),
        )

    async def _rollback(self, undo: list[Undo]) -> bool:
        if self._tx.supports_rollback:
            return True

        for action in reversed(undo):
            try:
                await action()
            except Exception:
                logger.exception("Compensating write failed; manual repair needed")
                return False
        return True
