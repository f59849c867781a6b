"""DistributionPolicy — builds a capacity- and specialization-respecting plan.

Nothing here touches storage: the plan is a list of in-memory pairings that
the persister applies afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from caseflow.domain.entities.assignment import PlannedAssignment, SkippedGroup
from caseflow.domain.entities.customer import CustomerAccount
from caseflow.domain.entities.officer import Officer
from caseflow.domain.policies.round_robin import pick_next
from caseflow.domain.value_objects.enums import SkipReason

logger = logging.getLogger(__name__)


@dataclass
class DistributionPlan:
    assignments: list[PlannedAssignment] = field(default_factory=list)
    skipped_groups: list[SkippedGroup] = field(default_factory=list)

    def count_for(self, officer_id: int) -> int:
        return sum(1 for a in self.assignments if a.officer_id == officer_id)


def group_by_product_type(
    customers: list[CustomerAccount],
) -> dict[str, list[CustomerAccount]]:
    """Group accounts preserving backlog order inside and across groups."""
    groups: dict[str, list[CustomerAccount]] = {}
    for customer in customers:
        groups.setdefault(customer.product_type, []).append(customer)
    return groups


def build_plan(
    backlog: list[CustomerAccount],
    officers: list[Officer],
    requested_by: str | None = None,
    requested_specialization: str | None = None,
    saturated: set[str] | None = None,
    now: datetime | None = None,
) -> DistributionPlan:
    """Round-robin each product-type group across its officers.

    Args:
        backlog: accounts in priority order.
        officers: available officers in directory order (least loaded first).
        requested_by: principal recorded on every planned assignment.
        requested_specialization: filter the batch was run with; reported as
            a gap when it has neither officers nor backlog.
        saturated: specializations whose officers exist but are all full.
        now: timestamp for the plan (defaults to current UTC time).
    """
    planned_at = now or datetime.now(timezone.utc)
    saturated = saturated or set()
    plan = DistributionPlan()

    running_load = {o.id: o.current_load for o in officers}
    groups = group_by_product_type(backlog)

    for product_type, accounts in groups.items():
        cycle = [o for o in officers if o.specializes_in(product_type)]

        if not cycle:
            reason = (
                SkipReason.NO_CAPACITY if product_type in saturated
                else SkipReason.NO_OFFICERS
            )
            logger.warning(
                "No officers with room for %s: skipping %d accounts (%s)",
                product_type, len(accounts), reason.value,
            )
            plan.skipped_groups.append(
                SkippedGroup(product_type=product_type, reason=reason,
                             unassigned_count=len(accounts))
            )
            continue

        counter = 0
        for index, account in enumerate(accounts):
            officer, counter = pick_next(cycle, counter, running_load)
            if officer is None:
                remaining = len(accounts) - index
                logger.info(
                    "All %d %s officers at capacity, %d accounts left unassigned",
                    len(cycle), product_type, remaining,
                )
                plan.skipped_groups.append(
                    SkippedGroup(product_type=product_type,
                                 reason=SkipReason.NO_CAPACITY,
                                 unassigned_count=remaining)
                )
                break

            running_load[officer.id] += 1
            plan.assignments.append(
                PlannedAssignment(
                    customer_id=account.id,
                    officer_id=officer.id,
                    product_type=product_type,
                    requested_by=requested_by,
                    planned_at=planned_at,
                )
            )

    if (
        requested_specialization is not None
        and requested_specialization not in groups
        and not any(o.specializes_in(requested_specialization) for o in officers)
    ):
        reason = (
            SkipReason.NO_CAPACITY if requested_specialization in saturated
            else SkipReason.NO_OFFICERS
        )
        plan.skipped_groups.append(
            SkippedGroup(product_type=requested_specialization, reason=reason)
        )

    logger.info(
        "Planned %d assignments across %d product types (%d skipped groups)",
        len(plan.assignments), len(groups), len(plan.skipped_groups),
    )
    return plan
