"""AssignmentStatsUseCase — coverage and load figures."""

from __future__ import annotations

from caseflow.application.ports.customer_repo import CustomerRepository
from caseflow.application.ports.officer_repo import OfficerRepository
from caseflow.domain.policies.statistics import AssignmentStats, summarize


class AssignmentStatsUseCase:
    def __init__(self, officer_repo: OfficerRepository, customer_repo: CustomerRepository):
        self._officers = officer_repo
        self._customers = customer_repo

    async def execute(self) -> AssignmentStats:
        customers = await self._customers.get_all()
        officers = await self._officers.get_all()
        return summarize(customers, officers)
