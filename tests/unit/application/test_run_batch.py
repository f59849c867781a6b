"""Tests for RunAssignmentBatchUseCase with in-memory fakes."""

from __future__ import annotations

import pytest

from caseflow.application.use_cases.load_backlog import LoadBacklogUseCase
from caseflow.application.use_cases.load_officers import LoadAvailableOfficersUseCase
from caseflow.application.use_cases.persist_assignments import (
    AUTOMATIC_ASSIGNMENT_REASON,
    PersistAssignmentsUseCase,
)
from caseflow.application.use_cases.run_batch import RunAssignmentBatchUseCase
from caseflow.domain.policies.consistency import audit
from caseflow.domain.value_objects.enums import SkipReason


def _make_uc(store, increment_external_load=True):
    return RunAssignmentBatchUseCase(
        load_officers=LoadAvailableOfficersUseCase(store.officers),
        load_backlog=LoadBacklogUseCase(store.customers),
        persist=PersistAssignmentsUseCase(
            store.officers, store.customers,
            increment_external_load=increment_external_load,
        ),
    )


@pytest.mark.asyncio
async def test_batch_assigns_round_robin_within_capacity(store):
    store.add_officer(1, max_caseload=2)
    store.add_officer(2, max_caseload=1)
    store.add_customer(10, overdue_amount=300)
    store.add_customer(11, overdue_amount=200)
    store.add_customer(12, overdue_amount=100)

    result = await _make_uc(store, increment_external_load=False).execute()

    assert result.planned_count == 3
    assert result.successful == 3
    assert result.failed == []
    assert store.customers.raw(10).owner_id == 1
    assert store.customers.raw(11).owner_id == 2
    assert store.customers.raw(12).owner_id == 1
    assert store.officers.raw(1).roster == {10, 12}
    assert store.officers.raw(2).roster == {11}
    assert result.message == "Assigned 3 customers to 2 officers"


@pytest.mark.asyncio
async def test_batch_reports_product_type_without_officers(store):
    store.add_officer(1, specialization="SME")
    store.add_customer(10, product_type="SME")
    store.add_customer(11, product_type="Auto")

    result = await _make_uc(store).execute()

    assert result.successful == 1
    assert store.customers.raw(11).owner_id is None
    assert [(g.product_type, g.reason, g.unassigned_count) for g in result.skipped_groups] == [
        ("Auto", SkipReason.NO_OFFICERS, 1)
    ]


@pytest.mark.asyncio
async def test_batch_reports_saturated_specialization(store):
    store.add_officer(1, specialization="Auto", max_caseload=1, external_load=1)
    store.add_customer(10, product_type="Auto")

    result = await _make_uc(store).execute(specialization="Auto")

    assert result.planned_count == 0
    assert result.skipped_groups[0].reason == SkipReason.NO_CAPACITY
    assert result.message == "No officers available"


@pytest.mark.asyncio
async def test_batch_never_pushes_officer_over_capacity(store):
    store.add_officer(1, max_caseload=3, external_load=1)
    store.add_officer(2, max_caseload=4, roster={90})
    store.add_customer(90, owner_id=2)
    for cid in range(100, 112):
        store.add_customer(cid, overdue_amount=float(cid))

    result = await _make_uc(store, increment_external_load=False).execute()

    assert result.successful == 5
    for oid in (1, 2):
        officer = store.officers.raw(oid)
        assert officer.current_load <= officer.capacity.max_caseload
    assert audit(await store.officers.get_all(), await store.customers.get_all()).is_clean()


@pytest.mark.asyncio
async def test_batch_double_counts_load_when_enabled(store):
    store.add_officer(1, max_caseload=2)
    store.add_customer(10)
    store.add_customer(11)

    result = await _make_uc(store, increment_external_load=True).execute()

    officer = store.officers.raw(1)
    assert result.successful == 2
    assert officer.capacity.external_load == 2
    assert officer.current_load == 4
    report = audit(await store.officers.get_all(), await store.customers.get_all())
    assert [d.officer_id for d in report.capacity_defects] == [1]


@pytest.mark.asyncio
async def test_batch_records_history(store):
    store.add_officer(1)
    store.add_customer(10)

    await _make_uc(store).execute(requested_by="supervisor")

    history = store.customers.raw(10).assignment_history
    assert len(history) == 1
    assert history[0].officer_id == 1
    assert history[0].assigned_by == "supervisor"
    assert history[0].reason == AUTOMATIC_ASSIGNMENT_REASON


@pytest.mark.asyncio
async def test_second_batch_skips_assigned_accounts(store):
    store.add_officer(1)
    store.add_customer(10)
    uc = _make_uc(store)

    await uc.execute()
    second = await uc.execute()

    assert second.planned_count == 0
    assert second.message == "No unassigned customers available"
    assert len(store.customers.raw(10).assignment_history) == 1


@pytest.mark.asyncio
async def test_batch_respects_limit(store):
    store.add_officer(1)
    for cid in range(1, 6):
        store.add_customer(cid, overdue_amount=float(cid))

    result = await _make_uc(store).execute(limit=2)

    assert sorted(o.customer_id for o in result.outcomes) == [4, 5]


@pytest.mark.asyncio
async def test_batch_without_officers(store):
    store.add_customer(10)

    result = await _make_uc(store).execute()

    assert result.planned_count == 0
    assert result.message == "No officers available"
    assert result.skipped_groups[0].reason == SkipReason.NO_OFFICERS


@pytest.mark.asyncio
async def test_batch_continues_after_storage_failure(store):
    store.add_officer(1)
    store.add_customer(10)
    store.customers.fail_on["assign_owner"] = RuntimeError("disk full")

    result = await _make_uc(store).execute()

    assert result.successful == 0
    assert result.failed[0].reason == "Persistence failure (RuntimeError)"


@pytest.mark.asyncio
async def test_backlog_read_failure_propagates(store):
    store.add_officer(1)
    store.customers.fail_on["get_eligible"] = ConnectionError("db down")

    with pytest.raises(ConnectionError):
        await _make_uc(store).execute()
