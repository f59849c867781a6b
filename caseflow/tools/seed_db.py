"""Seed database from CSV files.

Usage:
    python -m caseflow.tools.seed_db
    python -m caseflow.tools.seed_db --data-dir data
    python -m caseflow.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.adapters.csv_loader.loader import load_customers, load_officers
from caseflow.adapters.persistence.database import async_session_factory
from caseflow.adapters.persistence.models import (
    AssignmentHistoryModel,
    CustomerModel,
    OfficerModel,
)
from caseflow.config import settings

logger = logging.getLogger(__name__)


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [AssignmentHistoryModel, CustomerModel, OfficerModel]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def seed(data_dir: Path, drop: bool = False) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"officers": 0, "customers": 0}

    officer_csv = _find_csv(data_dir, ["officers", "users", "staff"])
    customer_csv = _find_csv(data_dir, ["customers", "accounts", "backlog"])

    if not officer_csv:
        raise FileNotFoundError(
            f"No officers CSV found in {data_dir}. Expected something like officers.csv"
        )

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        # 1. Seed officers
        for od in load_officers(officer_csv):
            existing = await session.execute(
                select(OfficerModel).where(OfficerModel.username == od["username"])
            )
            if existing.scalar_one_or_none():
                logger.debug("Officer '%s' already exists, skipping", od["username"])
                continue

            max_caseload = od["max_caseload"]
            priority_weight = od["priority_weight"]
            session.add(
                OfficerModel(
                    username=od["username"],
                    specialization=od["specialization"],
                    is_active=od["is_active"],
                    max_caseload=(
                        max_caseload if max_caseload is not None
                        else settings.default_max_caseload
                    ),
                    priority_weight=(
                        priority_weight if priority_weight and priority_weight > 0
                        else settings.default_priority_weight
                    ),
                    external_load=od["external_load"],
                    roster=[],
                )
            )
            counts["officers"] += 1

        await session.commit()

        # 2. Seed customers (if CSV exists); ownership is left to the engine
        if customer_csv:
            for cd in load_customers(customer_csv):
                existing = await session.execute(
                    select(CustomerModel).where(
                        CustomerModel.account_number == cd["account_number"]
                    )
                )
                if existing.scalar_one_or_none():
                    logger.debug("Customer '%s' already exists, skipping", cd["account_number"])
                    continue

                session.add(CustomerModel(**cd))
                counts["customers"] += 1

            await session.commit()
        else:
            logger.info("No customers CSV found — skipping customer import")

    logger.info(
        "Seed complete: %d officers, %d customers",
        counts["officers"], counts["customers"],
    )
    return counts


def _find_csv(data_dir: Path, name_hints: list[str]) -> Path | None:
    """Find a CSV file matching any of the name hints."""
    for f in sorted(data_dir.glob("*.csv")):
        fname_lower = f.stem.lower()
        for hint in name_hints:
            if hint in fname_lower:
                logger.info("Found CSV: %s (matched hint '%s')", f.name, hint)
                return f
    return None


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        officer_rows = (
            await session.execute(
                select(OfficerModel.specialization, func.count(OfficerModel.id))
                .where(OfficerModel.is_active.is_(True))
                .group_by(OfficerModel.specialization)
            )
        ).all()
        customer_rows = (
            await session.execute(
                select(CustomerModel.product_type, func.count(CustomerModel.id))
                .where(CustomerModel.is_active.is_(True))
                .group_by(CustomerModel.product_type)
            )
        ).all()

        officers_by_type = {row[0]: row[1] for row in officer_rows}
        customers_by_type = {row[0]: row[1] for row in customer_rows}

        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        print(f"Active officers:  {sum(officers_by_type.values())}")
        print(f"Active customers: {sum(customers_by_type.values())}")
        for product_type in sorted(set(officers_by_type) | set(customers_by_type)):
            officers = officers_by_type.get(product_type, 0)
            customers = customers_by_type.get(product_type, 0)
            avg = f"{customers / officers:.1f}" if officers else "no officers"
            print(f"  {product_type}: {customers} customers, {officers} officers (avg: {avg})")
        print(f"{'='*50}\n")


def main():
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s | %(message)s")

    parser = argparse.ArgumentParser(description="Seed caseflow database from CSV files")
    parser.add_argument(
        "--data-dir", type=str, default=settings.csv_data_path,
        help="Directory containing CSV files (default: CSV_DATA_PATH)",
    )
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing data before seeding",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    args = parser.parse_args()

    data_dir = Path(args.data_dir)
    if not args.verify_only and not data_dir.exists():
        logger.error("Data directory not found: %s", data_dir)
        sys.exit(1)

    if args.verify_only:
        asyncio.run(_verify_data())
    else:
        async def run_all():
            await seed(data_dir, drop=args.drop)
            await _verify_data()
        asyncio.run(run_all())


if __name__ == "__main__":
    main()
