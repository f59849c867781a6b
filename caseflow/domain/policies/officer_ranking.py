"""OfficerRankingPolicy — capacity filter and priority-weighted load ordering."""

from __future__ import annotations

from caseflow.domain.entities.officer import Officer


def load_score(officer: Officer) -> float:
    """Composite score; lower is served first."""
    return officer.current_load * officer.capacity.priority_weight


def rank_available(officers: list[Officer]) -> list[Officer]:
    """Drop officers at capacity and order the rest by (score ASC, id ASC)."""
    available = [o for o in officers if o.has_room()]
    return sorted(available, key=lambda o: (load_score(o), o.id))


def saturated_specializations(
    officers: list[Officer], available: list[Officer]
) -> set[str]:
    """Specializations that have active officers but none with room left."""
    with_room = {o.specialization for o in available}
    return {o.specialization for o in officers} - with_room
