"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import copy

import pytest

from caseflow.application.ports.customer_repo import CustomerRepository
from caseflow.application.ports.officer_repo import OfficerRepository
from caseflow.domain.entities.customer import AssignmentHistoryEntry, CustomerAccount
from caseflow.domain.entities.officer import Capacity, Officer
from caseflow.domain.exceptions import NotFoundError
from caseflow.domain.policies.backlog_priority import select_backlog

# ─── In-memory fakes ────────────────────────────────────────────────


class _FailureInjection:
    """``fail_on[method_name] = exc`` makes every call to that method raise."""

    def __init__(self):
        self.fail_on: dict[str, Exception] = {}

    def _maybe_fail(self, method: str) -> None:
        if method in self.fail_on:
            raise self.fail_on[method]


class FakeOfficerRepo(_FailureInjection, OfficerRepository):
    def __init__(self, officers: list[Officer] | None = None):
        super().__init__()
        self._officers = {o.id: o for o in officers or []}

    def raw(self, officer_id: int) -> Officer:
        """Live stored record, for assertions and manual corruption."""
        return self._officers[officer_id]

    async def save(self, officer):
        if officer.id is None:
            officer.id = max(self._officers, default=0) + 1
        self._officers[officer.id] = copy.deepcopy(officer)
        return officer

    async def get_by_id(self, officer_id):
        self._maybe_fail("get_by_id")
        o = self._officers.get(officer_id)
        return copy.deepcopy(o) if o else None

    async def get_all(self):
        return [copy.deepcopy(o) for o in sorted(self._officers.values(), key=lambda o: o.id)]

    async def get_active(self, specialization=None):
        self._maybe_fail("get_active")
        return [
            copy.deepcopy(o)
            for o in sorted(self._officers.values(), key=lambda o: o.id)
            if o.is_active and (specialization is None or o.specialization == specialization)
        ]

    async def add_to_roster(self, officer_id, customer_id):
        self._maybe_fail("add_to_roster")
        if officer_id not in self._officers:
            raise NotFoundError("officer", officer_id)
        roster = self._officers[officer_id].roster
        if customer_id in roster:
            return False
        roster.add(customer_id)
        return True

    async def remove_from_roster(self, officer_id, customer_id):
        self._maybe_fail("remove_from_roster")
        if officer_id not in self._officers:
            return False
        roster = self._officers[officer_id].roster
        if customer_id not in roster:
            return False
        roster.discard(customer_id)
        return True

    async def adjust_load(self, officer_id, delta):
        self._maybe_fail("adjust_load")
        if officer_id not in self._officers:
            return 0
        cap = self._officers[officer_id].capacity
        before = cap.external_load
        cap.external_load = max(before + delta, 0)
        return cap.external_load - before


class FakeCustomerRepo(_FailureInjection, CustomerRepository):
    def __init__(self, customers: list[CustomerAccount] | None = None):
        super().__init__()
        self._customers = {c.id: c for c in customers or []}

    def raw(self, customer_id: int) -> CustomerAccount:
        return self._customers[customer_id]

    async def save(self, customer):
        if customer.id is None:
            customer.id = max(self._customers, default=0) + 1
        self._customers[customer.id] = copy.deepcopy(customer)
        return customer

    async def get_by_id(self, customer_id):
        c = self._customers.get(customer_id)
        return copy.deepcopy(c) if c else None

    async def get_all(self):
        return [copy.deepcopy(c) for c in sorted(self._customers.values(), key=lambda c: c.id)]

    async def get_eligible(self, product_type, limit, unowned_only=True):
        self._maybe_fail("get_eligible")
        chosen = select_backlog(list(self._customers.values()), product_type, limit, unowned_only)
        return [copy.deepcopy(c) for c in chosen]

    async def assign_owner(self, customer_id, officer_id, entry: AssignmentHistoryEntry):
        self._maybe_fail("assign_owner")
        if customer_id not in self._customers:
            raise NotFoundError("customer", customer_id)
        c = self._customers[customer_id]
        c.owner_id = officer_id
        c.assignment_history.append(entry)
        return copy.deepcopy(c)


class InMemoryStore:
    def __init__(self):
        self.officers = FakeOfficerRepo()
        self.customers = FakeCustomerRepo()

    def add_officer(
        self,
        officer_id: int,
        specialization: str = "SME",
        max_caseload: int = 50,
        priority_weight: float = 1.0,
        external_load: int = 0,
        roster: set[int] | None = None,
        is_active: bool = True,
        username: str | None = None,
    ) -> Officer:
        officer = Officer(
            id=officer_id,
            username=username or f"officer{officer_id}",
            specialization=specialization,
            capacity=Capacity(
                max_caseload=max_caseload,
                priority_weight=priority_weight,
                external_load=external_load,
            ),
            roster=set(roster or ()),
            is_active=is_active,
        )
        self.officers._officers[officer_id] = officer
        return officer

    def add_customer(
        self,
        customer_id: int,
        product_type: str = "SME",
        overdue_amount: float = 100.0,
        outstanding_balance: float = 1000.0,
        owner_id: int | None = None,
        is_active: bool = True,
        name: str | None = None,
    ) -> CustomerAccount:
        customer = CustomerAccount(
            id=customer_id,
            account_number=f"ACC-{customer_id:04d}",
            name=name or f"Customer {customer_id}",
            product_type=product_type,
            outstanding_balance=outstanding_balance,
            overdue_amount=overdue_amount,
            is_active=is_active,
            owner_id=owner_id,
        )
        self.customers._customers[customer_id] = customer
        return customer


# ─── Fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()
