"""AuditConsistencyUseCase — read-only comparison of owner pointers and rosters."""

from __future__ import annotations

import logging

from caseflow.application.ports.customer_repo import CustomerRepository
from caseflow.application.ports.officer_repo import OfficerRepository
from caseflow.domain.policies.consistency import AuditReport, audit

logger = logging.getLogger(__name__)


class AuditConsistencyUseCase:
    def __init__(self, officer_repo: OfficerRepository, customer_repo: CustomerRepository):
        self._officers = officer_repo
        self._customers = customer_repo

    async def execute(self) -> AuditReport:
        officers = await self._officers.get_all()
        customers = await self._customers.get_all()

        report = audit(officers, customers)
        if report.is_clean():
            logger.info("Audit clean: %d officers, %d customers", len(officers), len(customers))
        else:
            logger.warning(
                "Audit found %d multi-owner, %d roster-drift, %d capacity defects",
                len(report.multi_owner_defects),
                len(report.roster_drift_defects),
                len(report.capacity_defects),
            )
        return report
