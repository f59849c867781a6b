"""ConsistencyPolicy — compares owner pointers against officer rosters.

The customer-side ``owner_id`` is the normative record; rosters are a
denormalized cache. Every check here is read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from caseflow.domain.entities.customer import CustomerAccount
from caseflow.domain.entities.officer import Officer
from caseflow.domain.value_objects.enums import DriftKind


@dataclass(frozen=True)
class MultiOwnerDefect:
    customer_id: int
    officer_ids: tuple[int, ...]
    recorded_owner_id: int | None


@dataclass(frozen=True)
class RosterDriftDefect:
    customer_id: int
    officer_id: int
    recorded_owner_id: int | None
    kind: DriftKind


@dataclass(frozen=True)
class CapacityDefect:
    officer_id: int
    current_load: int
    max_caseload: int


@dataclass
class AuditReport:
    multi_owner_defects: list[MultiOwnerDefect] = field(default_factory=list)
    roster_drift_defects: list[RosterDriftDefect] = field(default_factory=list)
    capacity_defects: list[CapacityDefect] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        return (
            len(self.multi_owner_defects)
            + len(self.roster_drift_defects)
            + len(self.capacity_defects)
        )

    def is_clean(self) -> bool:
        return self.total_issues == 0


def roster_index(officers: list[Officer]) -> dict[int, list[int]]:
    """customer id -> ids of every officer whose roster lists it."""
    index: dict[int, list[int]] = {}
    for officer in sorted(officers, key=lambda o: o.id):
        for customer_id in officer.roster:
            index.setdefault(customer_id, []).append(officer.id)
    return index


def find_multi_owner_defects(
    officers: list[Officer], customers: list[CustomerAccount]
) -> list[MultiOwnerDefect]:
    owners = {c.id: c.owner_id for c in customers}
    return [
        MultiOwnerDefect(
            customer_id=customer_id,
            officer_ids=tuple(officer_ids),
            recorded_owner_id=owners.get(customer_id),
        )
        for customer_id, officer_ids in sorted(roster_index(officers).items())
        if len(officer_ids) > 1
    ]


def find_roster_drift(
    officers: list[Officer], customers: list[CustomerAccount]
) -> list[RosterDriftDefect]:
    by_id = {o.id: o for o in officers}
    owners = {c.id: c.owner_id for c in customers}
    defects: list[RosterDriftDefect] = []

    # Officer side: roster entries the customer does not point back to
    for officer in sorted(officers, key=lambda o: o.id):
        for customer_id in sorted(officer.roster):
            owner_id = owners.get(customer_id)
            if owner_id != officer.id:
                defects.append(
                    RosterDriftDefect(
                        customer_id=customer_id,
                        officer_id=officer.id,
                        recorded_owner_id=owner_id,
                        kind=DriftKind.STALE_ROSTER_ENTRY,
                    )
                )

    # Customer side: owner pointers the officer roster does not reflect
    for customer in sorted(customers, key=lambda c: c.id):
        if customer.owner_id is None:
            continue
        owner = by_id.get(customer.owner_id)
        if owner is None:
            defects.append(
                RosterDriftDefect(
                    customer_id=customer.id,
                    officer_id=customer.owner_id,
                    recorded_owner_id=customer.owner_id,
                    kind=DriftKind.UNKNOWN_OWNER,
                )
            )
        elif not owner.owns(customer.id):
            defects.append(
                RosterDriftDefect(
                    customer_id=customer.id,
                    officer_id=owner.id,
                    recorded_owner_id=customer.owner_id,
                    kind=DriftKind.MISSING_ROSTER_ENTRY,
                )
            )

    return defects


def find_capacity_defects(officers: list[Officer]) -> list[CapacityDefect]:
    return [
        CapacityDefect(
            officer_id=o.id,
            current_load=o.current_load,
            max_caseload=o.capacity.max_caseload,
        )
        for o in sorted(officers, key=lambda o: o.id)
        if o.is_over_capacity()
    ]


def audit(officers: list[Officer], customers: list[CustomerAccount]) -> AuditReport:
    return AuditReport(
        multi_owner_defects=find_multi_owner_defects(officers, customers),
        roster_drift_defects=find_roster_drift(officers, customers),
        capacity_defects=find_capacity_defects(officers),
    )
