"""LoadBacklogUseCase — the customer backlog reader."""

from __future__ import annotations

import logging

from caseflow.application.ports.customer_repo import CustomerRepository
from caseflow.domain.entities.customer import CustomerAccount

logger = logging.getLogger(__name__)


class LoadBacklogUseCase:
    def __init__(self, customer_repo: CustomerRepository):
        self._customers = customer_repo

    async def execute(
        self,
        product_type: str | None = None,
        limit: int = 50,
        exclude_assigned: bool = True,
    ) -> list[CustomerAccount]:
        """Eligible accounts ordered by overdue amount, then balance (both DESC)."""
        if limit <= 0:
            return []

        backlog = await self._customers.get_eligible(
            product_type, limit, unowned_only=exclude_assigned
        )
        logger.info(
            "Backlog for %s: %d accounts (limit=%d, exclude_assigned=%s)",
            product_type or "all product types", len(backlog), limit, exclude_assigned,
        )
        return backlog
