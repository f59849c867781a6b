"""Tests for ConsistencyPolicy."""

from caseflow.domain.entities.customer import CustomerAccount
from caseflow.domain.entities.officer import Capacity, Officer
from caseflow.domain.policies.consistency import audit, roster_index
from caseflow.domain.value_objects.enums import DriftKind


def _officer(oid, roster=(), max_caseload=10, external=0):
    return Officer(
        id=oid, username=f"O{oid}", specialization="SME",
        capacity=Capacity(max_caseload=max_caseload, external_load=external),
        roster=set(roster),
    )


def _customer(cid, owner=None):
    return CustomerAccount(
        id=cid, account_number=f"A{cid}", name=f"C{cid}", product_type="SME",
        outstanding_balance=100.0, owner_id=owner,
    )


def test_consistent_state_is_clean():
    report = audit([_officer(1, roster={10}), _officer(2)], [_customer(10, owner=1), _customer(11)])
    assert report.is_clean()
    assert report.total_issues == 0


def test_customer_in_two_rosters():
    """Owned by A, listed by A and B → one drift defect pointing at B."""
    officers = [_officer(1, roster={10}), _officer(2, roster={10})]
    report = audit(officers, [_customer(10, owner=1)])

    assert len(report.roster_drift_defects) == 1
    drift = report.roster_drift_defects[0]
    assert drift.officer_id == 2
    assert drift.customer_id == 10
    assert drift.recorded_owner_id == 1
    assert drift.kind == DriftKind.STALE_ROSTER_ENTRY

    assert len(report.multi_owner_defects) == 1
    multi = report.multi_owner_defects[0]
    assert multi.customer_id == 10
    assert multi.officer_ids == (1, 2)


def test_owner_missing_from_roster():
    report = audit([_officer(1)], [_customer(10, owner=1)])
    assert [(d.officer_id, d.kind) for d in report.roster_drift_defects] == [
        (1, DriftKind.MISSING_ROSTER_ENTRY)
    ]
    assert report.multi_owner_defects == []


def test_roster_entry_for_unowned_customer():
    report = audit([_officer(1, roster={10})], [_customer(10)])
    assert report.roster_drift_defects[0].recorded_owner_id is None
    assert report.roster_drift_defects[0].kind == DriftKind.STALE_ROSTER_ENTRY


def test_owner_pointing_to_unknown_officer():
    report = audit([], [_customer(10, owner=99)])
    assert report.roster_drift_defects[0].kind == DriftKind.UNKNOWN_OWNER


def test_capacity_defect():
    report = audit([_officer(1, roster={10}, max_caseload=1, external=1)], [_customer(10, owner=1)])
    assert len(report.capacity_defects) == 1
    assert report.capacity_defects[0].current_load == 2
    assert report.roster_drift_defects == []


def test_roster_index():
    index = roster_index([_officer(2, roster={5}), _officer(1, roster={5, 6})])
    assert index == {5: [1, 2], 6: [1]}
