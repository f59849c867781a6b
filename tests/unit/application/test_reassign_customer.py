"""Tests for ReassignCustomerUseCase."""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest

from caseflow.application.ports.transaction_port import TransactionManager
from caseflow.application.use_cases.reassign_customer import (
    DEFAULT_REASON,
    ReassignCustomerUseCase,
)
from caseflow.domain.exceptions import (
    NotFoundError,
    PartialWriteError,
    SpecializationMismatchError,
)


class RecordingTransactionManager(TransactionManager):
    """Pretends the store discards the scope on error."""

    supports_rollback = True

    def __init__(self):
        self.scopes = 0

    @asynccontextmanager
    async def savepoint(self):
        self.scopes += 1
        yield


def _setup(store):
    store.add_officer(1, specialization="SME", roster={10}, external_load=1)
    store.add_officer(2, specialization="SME")
    store.add_officer(3, specialization="Auto")
    store.add_customer(10, product_type="SME", owner_id=1, name="Acme")
    return ReassignCustomerUseCase(store.officers, store.customers)


@pytest.mark.asyncio
async def test_reassign_moves_ownership(store):
    uc = _setup(store)

    outcome = await uc.execute(10, 2, reason="Escalation", actor="sup1")

    assert outcome.changed
    assert outcome.previous_officer_id == 1
    assert outcome.new_officer_id == 2
    assert outcome.message == "Reassigned Acme from 1 to officer2"
    assert store.customers.raw(10).owner_id == 2
    assert store.officers.raw(1).roster == set()
    assert store.officers.raw(2).roster == {10}
    assert store.officers.raw(1).capacity.external_load == 0
    assert store.officers.raw(2).capacity.external_load == 1

    entry = store.customers.raw(10).assignment_history[-1]
    assert (entry.officer_id, entry.assigned_by, entry.reason) == (2, "sup1", "Escalation")


@pytest.mark.asyncio
async def test_reassign_unowned_customer(store):
    store.add_officer(2)
    store.add_customer(11)
    uc = ReassignCustomerUseCase(store.officers, store.customers)

    outcome = await uc.execute(11, 2)

    assert outcome.previous_officer_id is None
    assert "from unassigned" in outcome.message
    assert store.customers.raw(11).assignment_history[-1].reason == DEFAULT_REASON


@pytest.mark.asyncio
async def test_mismatch_leaves_state_untouched(store):
    uc = _setup(store)

    with pytest.raises(SpecializationMismatchError):
        await uc.execute(10, 3)

    assert store.customers.raw(10).owner_id == 1
    assert store.officers.raw(1).roster == {10}
    assert store.officers.raw(3).roster == set()


@pytest.mark.asyncio
async def test_unknown_customer_or_officer(store):
    uc = _setup(store)

    with pytest.raises(NotFoundError, match="Customer 99 not found"):
        await uc.execute(99, 2)
    with pytest.raises(NotFoundError, match="Officer 99 not found"):
        await uc.execute(10, 99)


@pytest.mark.asyncio
async def test_reassign_to_current_owner_is_noop(store):
    uc = _setup(store)

    outcome = await uc.execute(10, 1)

    assert not outcome.changed
    assert store.customers.raw(10).assignment_history == []
    assert store.officers.raw(1).roster == {10}


@pytest.mark.asyncio
async def test_owner_write_failure_is_compensated(store):
    uc = _setup(store)
    store.customers.fail_on["assign_owner"] = RuntimeError("timeout")

    with pytest.raises(PartialWriteError) as exc_info:
        await uc.execute(10, 2)

    assert exc_info.value.step == "set owner"
    assert exc_info.value.rolled_back
    assert store.customers.raw(10).owner_id == 1
    assert store.officers.raw(1).roster == {10}
    assert store.officers.raw(2).roster == set()
    assert store.officers.raw(1).capacity.external_load == 1
    assert store.officers.raw(2).capacity.external_load == 0


@pytest.mark.asyncio
async def test_failed_compensation_is_reported(store):
    uc = _setup(store)
    # removal from officer 1 succeeds; re-adding it during undo fails too
    store.officers.fail_on["add_to_roster"] = RuntimeError("roster store down")

    with pytest.raises(PartialWriteError) as exc_info:
        await uc.execute(10, 2)

    assert exc_info.value.step == "add to new officer"
    assert not exc_info.value.rolled_back
    assert "NOT rolled back" in str(exc_info.value)


@pytest.mark.asyncio
async def test_transactional_store_skips_compensation(store):
    store.add_officer(1, roster={10})
    store.add_officer(2)
    store.add_customer(10, owner_id=1)
    tx = RecordingTransactionManager()
    uc = ReassignCustomerUseCase(store.officers, store.customers, tx=tx)
    store.customers.fail_on["assign_owner"] = RuntimeError("timeout")

    with pytest.raises(PartialWriteError) as exc_info:
        await uc.execute(10, 2)

    assert tx.scopes == 1
    assert exc_info.value.rolled_back
    # no undo ran: the fake is not transactional, so the roster write stays
    assert store.officers.raw(2).roster == {10}


@pytest.mark.asyncio
async def test_compensation_restores_zero_load_of_previous_owner(store):
    store.add_officer(1, roster={10}, external_load=0)
    store.add_officer(2)
    store.add_customer(10, owner_id=1)
    uc = ReassignCustomerUseCase(store.officers, store.customers)
    store.customers.fail_on["assign_owner"] = RuntimeError("timeout")

    with pytest.raises(PartialWriteError) as exc_info:
        await uc.execute(10, 2)

    assert exc_info.value.rolled_back
    assert store.officers.raw(1).capacity.external_load == 0
    assert store.officers.raw(2).capacity.external_load == 0
    assert store.officers.raw(1).roster == {10}


@pytest.mark.asyncio
async def test_compensation_keeps_roster_entry_present_before_the_move(store):
    # officer 2 already lists the customer although officer 1 owns it
    store.add_officer(1, roster={10})
    store.add_officer(2, roster={10})
    store.add_customer(10, owner_id=1)
    uc = ReassignCustomerUseCase(store.officers, store.customers)
    store.customers.fail_on["assign_owner"] = RuntimeError("timeout")

    with pytest.raises(PartialWriteError) as exc_info:
        await uc.execute(10, 2)

    assert exc_info.value.rolled_back
    assert store.officers.raw(1).roster == {10}
    assert store.officers.raw(2).roster == {10}
