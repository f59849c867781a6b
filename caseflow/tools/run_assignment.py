"""Run an assignment batch or a consistency audit from the command line.

Usage:
    python -m caseflow.tools.run_assignment
    python -m caseflow.tools.run_assignment --specialization SME --limit 100
    python -m caseflow.tools.run_assignment --include-assigned
    python -m caseflow.tools.run_assignment --audit
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from caseflow.adapters.persistence.database import async_session_factory, engine
from caseflow.adapters.persistence.repositories import (
    SqlCustomerRepository,
    SqlOfficerRepository,
)
from caseflow.application.use_cases.audit_consistency import AuditConsistencyUseCase
from caseflow.config import settings
from caseflow.infrastructure.api.dependencies import build_run_batch_uc

logger = logging.getLogger(__name__)


async def run_batch(
    specialization: str | None, limit: int, exclude_assigned: bool, actor: str
) -> int:
    async with async_session_factory() as session:
        batch_uc = build_run_batch_uc(session)
        try:
            result = await batch_uc.execute(
                specialization=specialization,
                limit=limit,
                exclude_assigned=exclude_assigned,
                requested_by=actor,
            )
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Assignment batch failed")
            return 2

    print(result.message)
    print(f"Planned: {result.planned_count}  successful: {result.successful}  "
          f"failed: {len(result.failed)}")
    for group in result.skipped_groups:
        print(f"  skipped {group.product_type}: {group.reason.value} "
              f"({group.unassigned_count} accounts)")
    for outcome in result.failed:
        print(f"  failed customer {outcome.customer_id} -> officer "
              f"{outcome.officer_id}: {outcome.reason}")
    return 1 if result.failed else 0


async def run_audit() -> int:
    async with async_session_factory() as session:
        report = await AuditConsistencyUseCase(
            SqlOfficerRepository(session), SqlCustomerRepository(session)
        ).execute()

    for d in report.multi_owner_defects:
        print(f"multi-owner: customer {d.customer_id} in rosters of {list(d.officer_ids)} "
              f"(owner {d.recorded_owner_id})")
    for d in report.roster_drift_defects:
        print(f"roster-drift: customer {d.customer_id} / officer {d.officer_id} "
              f"(owner {d.recorded_owner_id}, {d.kind.value})")
    for d in report.capacity_defects:
        print(f"capacity: officer {d.officer_id} load {d.current_load} > {d.max_caseload}")
    print(f"Total issues: {report.total_issues}")
    return 0 if report.is_clean() else 1


def main():
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s | %(message)s")

    parser = argparse.ArgumentParser(description="Assign backlog accounts to collections officers")
    parser.add_argument("--specialization", type=str, default=None,
                        help="Only this product type (default: all)")
    parser.add_argument("--limit", type=int, default=settings.default_batch_limit,
                        help="Maximum accounts to take from the backlog")
    parser.add_argument("--include-assigned", action="store_true",
                        help="Also redistribute accounts that already have an owner")
    parser.add_argument("--actor", type=str, default=settings.system_actor,
                        help="Principal recorded in the assignment history")
    parser.add_argument("--audit", action="store_true",
                        help="Only run the consistency audit")
    args = parser.parse_args()

    async def run() -> int:
        try:
            if args.audit:
                return await run_audit()
            return await run_batch(
                args.specialization, args.limit, not args.include_assigned, args.actor
            )
        finally:
            await engine.dispose()

    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
