"""RoundRobinPolicy — capacity-aware cyclic officer selection."""

from __future__ import annotations

from caseflow.domain.entities.officer import Officer


def pick_next(
    cycle: list[Officer],
    counter: int,
    running_load: dict[int, int],
) -> tuple[Officer | None, int]:
    """Pick the next officer in *cycle* that still has room.

    1. Start at position *counter mod len(cycle)*.
    2. Skip any officer whose running load has reached its max caseload.
    3. Return the first officer with room and the counter pointing past it.

    The cycle order is kept as given; callers pass officers already ranked
    by the directory reader.

    Args:
        cycle: non-empty list of officers sharing one specialization.
        counter: current round-robin position.
        running_load: officer id -> load including in-memory picks so far.

    Returns:
        (chosen_officer, new_counter), or (None, counter) when every
        officer in the cycle is full.

    Raises:
        ValueError: if the cycle is empty.
    """
    if not cycle:
        raise ValueError("Cannot pick from an empty officer cycle")

    size = len(cycle)
    for step in range(size):
        position = (counter + step) % size
        officer = cycle[position]
        if running_load[officer.id] + 1 <= officer.capacity.max_caseload:
            return officer, position + 1

    return None, counter
