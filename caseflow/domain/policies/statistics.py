"""StatisticsPolicy — assignment coverage and load figures for reporting."""

from __future__ import annotations

from dataclasses import dataclass, field

from caseflow.domain.entities.customer import CustomerAccount
from caseflow.domain.entities.officer import Officer


def _rate(part: int, whole: int) -> float:
    return round(part / whole, 4) if whole else 0.0


@dataclass(frozen=True)
class ProductTypeStats:
    product_type: str
    total: int
    assigned: int

    @property
    def assignment_rate(self) -> float:
        return _rate(self.assigned, self.total)


@dataclass(frozen=True)
class OfficerLoadStats:
    officer_id: int
    username: str
    specialization: str
    owned_accounts: int
    roster_size: int
    external_load: int
    current_load: int
    max_caseload: int

    @property
    def utilisation(self) -> float:
        return _rate(self.current_load, self.max_caseload)


@dataclass
class AssignmentStats:
    total: int = 0
    assigned: int = 0
    by_product_type: list[ProductTypeStats] = field(default_factory=list)
    by_officer: list[OfficerLoadStats] = field(default_factory=list)

    @property
    def assignment_rate(self) -> float:
        return _rate(self.assigned, self.total)


def summarize(
    customers: list[CustomerAccount], officers: list[Officer]
) -> AssignmentStats:
    """Aggregate over active accounts; officers listed busiest first."""
    active = [c for c in customers if c.is_active]

    totals: dict[str, list[int]] = {}
    owned: dict[int, int] = {}
    for c in active:
        bucket = totals.setdefault(c.product_type, [0, 0])
        bucket[0] += 1
        if c.is_assigned():
            bucket[1] += 1
            owned[c.owner_id] = owned.get(c.owner_id, 0) + 1

    by_type = [
        ProductTypeStats(product_type=pt, total=t, assigned=a)
        for pt, (t, a) in sorted(totals.items())
    ]
    by_officer = [
        OfficerLoadStats(
            officer_id=o.id,
            username=o.username,
            specialization=o.specialization,
            owned_accounts=owned.get(o.id, 0),
            roster_size=len(o.roster),
            external_load=o.capacity.external_load,
            current_load=o.current_load,
            max_caseload=o.capacity.max_caseload,
        )
        for o in sorted(officers, key=lambda o: (-o.current_load, o.id))
    ]

    return AssignmentStats(
        total=len(active),
        assigned=sum(a for _, a in totals.values()),
        by_product_type=by_type,
        by_officer=by_officer,
    )
