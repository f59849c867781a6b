"""SQLAlchemy repository implementations."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from caseflow.adapters.persistence.models import (
    AssignmentHistoryModel,
    CustomerModel,
    OfficerModel,
)
from caseflow.application.ports.customer_repo import CustomerRepository
from caseflow.application.ports.officer_repo import OfficerRepository
from caseflow.application.ports.transaction_port import TransactionManager
from caseflow.domain.entities.customer import AssignmentHistoryEntry, CustomerAccount
from caseflow.domain.entities.officer import Capacity, Officer
from caseflow.domain.exceptions import NotFoundError

logger = logging.getLogger(__name__)

# ─── Mappers ─────────────────────────────────────────────────────────


def _officer_to_domain(m: OfficerModel) -> Officer:
    return Officer(
        id=m.id,
        username=m.username,
        specialization=m.specialization,
        capacity=Capacity(
            max_caseload=m.max_caseload,
            priority_weight=m.priority_weight,
            external_load=m.external_load,
        ),
        roster=set(m.roster) if m.roster else set(),
        is_active=m.is_active,
    )


def _history_to_domain(m: AssignmentHistoryModel) -> AssignmentHistoryEntry:
    return AssignmentHistoryEntry(
        officer_id=m.officer_id,
        assigned_at=m.assigned_at,
        assigned_by=m.assigned_by,
        reason=m.reason,
    )


def _customer_to_domain(m: CustomerModel, with_history: bool = True) -> CustomerAccount:
    return CustomerAccount(
        id=m.id,
        account_number=m.account_number,
        name=m.name,
        product_type=m.product_type,
        outstanding_balance=m.outstanding_balance,
        overdue_amount=m.overdue_amount,
        is_active=m.is_active,
        owner_id=m.owner_id,
        assignment_history=[_history_to_domain(h) for h in m.history] if with_history else [],
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlOfficerRepository(OfficerRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, officer: Officer) -> Officer:
        m = OfficerModel(
            username=officer.username,
            specialization=officer.specialization,
            is_active=officer.is_active,
            max_caseload=officer.capacity.max_caseload,
            priority_weight=officer.capacity.priority_weight,
            external_load=officer.capacity.external_load,
            roster=sorted(officer.roster),
        )
        self._s.add(m)
        await self._s.flush()
        officer.id = m.id
        return officer

    async def get_by_id(self, officer_id: int) -> Officer | None:
        m = await self._s.get(OfficerModel, officer_id, populate_existing=True)
        return _officer_to_domain(m) if m else None

    async def get_all(self) -> list[Officer]:
        result = await self._s.execute(select(OfficerModel).order_by(OfficerModel.id))
        return [_officer_to_domain(m) for m in result.scalars()]

    async def get_active(self, specialization: str | None = None) -> list[Officer]:
        stmt = select(OfficerModel).where(OfficerModel.is_active.is_(True))
        if specialization is not None:
            stmt = stmt.where(OfficerModel.specialization == specialization)
        result = await self._s.execute(stmt.order_by(OfficerModel.id))
        return [_officer_to_domain(m) for m in result.scalars()]

    async def _lock(self, officer_id: int) -> OfficerModel | None:
        # Row lock serializes concurrent roster/load writers on the same officer
        result = await self._s.execute(
            select(OfficerModel)
            .where(OfficerModel.id == officer_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def add_to_roster(self, officer_id: int, customer_id: int) -> bool:
        m = await self._lock(officer_id)
        if m is None:
            raise NotFoundError("officer", officer_id)
        if customer_id in m.roster:
            return False
        # ARRAY columns are not mutation-tracked; assign a new list
        m.roster = [*m.roster, customer_id]
        await self._s.flush()
        return True

    async def remove_from_roster(self, officer_id: int, customer_id: int) -> bool:
        m = await self._lock(officer_id)
        if m is None:
            logger.warning("Officer %s not found, nothing to remove", officer_id)
            return False
        if customer_id not in m.roster:
            return False
        m.roster = [c for c in m.roster if c != customer_id]
        await self._s.flush()
        return True

    async def adjust_load(self, officer_id: int, delta: int) -> int:
        m = await self._lock(officer_id)
        if m is None:
            logger.warning("Officer %s not found, load left unchanged", officer_id)
            return 0
        before = m.external_load
        m.external_load = max(before + delta, 0)
        await self._s.flush()
        return m.external_load - before


class SqlCustomerRepository(CustomerRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, customer: CustomerAccount) -> CustomerAccount:
        m = CustomerModel(
            account_number=customer.account_number,
            name=customer.name,
            product_type=customer.product_type,
            outstanding_balance=customer.outstanding_balance,
            overdue_amount=customer.overdue_amount,
            is_active=customer.is_active,
            owner_id=customer.owner_id,
        )
        self._s.add(m)
        await self._s.flush()
        customer.id = m.id
        return customer

    async def get_by_id(self, customer_id: int) -> CustomerAccount | None:
        result = await self._s.execute(
            select(CustomerModel)
            .options(selectinload(CustomerModel.history))
            .where(CustomerModel.id == customer_id)
            .execution_options(populate_existing=True)
        )
        m = result.scalar_one_or_none()
        return _customer_to_domain(m) if m else None

    async def get_all(self) -> list[CustomerAccount]:
        """All accounts without their history (audit and stats never need it)."""
        result = await self._s.execute(select(CustomerModel).order_by(CustomerModel.id))
        return [_customer_to_domain(m, with_history=False) for m in result.scalars()]

    async def get_eligible(
        self,
        product_type: str | None,
        limit: int,
        unowned_only: bool = True,
    ) -> list[CustomerAccount]:
        stmt = select(CustomerModel).where(
            CustomerModel.is_active.is_(True),
            CustomerModel.outstanding_balance > 0,
        )
        if product_type is not None:
            stmt = stmt.where(CustomerModel.product_type == product_type)
        if unowned_only:
            stmt = stmt.where(CustomerModel.owner_id.is_(None))

        result = await self._s.execute(
            stmt.order_by(
                CustomerModel.overdue_amount.desc(),
                CustomerModel.outstanding_balance.desc(),
                CustomerModel.id,
            ).limit(limit)
        )
        return [_customer_to_domain(m, with_history=False) for m in result.scalars()]

    async def assign_owner(
        self, customer_id: int, officer_id: int, entry: AssignmentHistoryEntry
    ) -> CustomerAccount:
        result = await self._s.execute(
            select(CustomerModel)
            .options(selectinload(CustomerModel.history))
            .where(CustomerModel.id == customer_id)
            .with_for_update()
        )
        m = result.scalar_one_or_none()
        if m is None:
            raise NotFoundError("customer", customer_id)

        m.owner_id = officer_id
        m.history.append(
            AssignmentHistoryModel(
                officer_id=entry.officer_id,
                assigned_at=entry.assigned_at,
                assigned_by=entry.assigned_by,
                reason=entry.reason,
            )
        )
        await self._s.flush()
        return _customer_to_domain(m)


class SqlTransactionManager(TransactionManager):
    """Each scope is its own committed transaction.

    A clean scope is committed before it exits, so a commit failure surfaces
    inside the scope and row locks are released record by record. A failing
    scope is rolled back; earlier scopes stay committed.
    """

    supports_rollback = True

    def __init__(self, session: AsyncSession):
        self._s = session

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        try:
            yield
            await self._s.commit()
        except BaseException:
            await self._s.rollback()
            raise
