"""BacklogPriorityPolicy — which accounts are eligible and who goes first.

Highest-risk accounts (largest overdue amount, then largest balance) are
assigned first so that, under capacity pressure, the low-risk ones are the
accounts left unassigned.
"""

from __future__ import annotations

from caseflow.domain.entities.customer import CustomerAccount


def is_eligible(
    customer: CustomerAccount,
    product_type: str | None = None,
    unowned_only: bool = True,
) -> bool:
    if not customer.is_collectable():
        return False
    if product_type is not None and customer.product_type != product_type:
        return False
    if unowned_only and customer.is_assigned():
        return False
    return True


def priority_key(customer: CustomerAccount) -> tuple[float, float, int]:
    return (-customer.overdue_amount, -customer.outstanding_balance, customer.id or 0)


def select_backlog(
    customers: list[CustomerAccount],
    product_type: str | None,
    limit: int,
    unowned_only: bool = True,
) -> list[CustomerAccount]:
    """Filter eligible accounts, order by priority, truncate to *limit*."""
    eligible = [c for c in customers if is_eligible(c, product_type, unowned_only)]
    eligible.sort(key=priority_key)
    return eligible[:limit]
