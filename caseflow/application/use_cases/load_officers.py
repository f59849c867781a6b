"""LoadAvailableOfficersUseCase — the officer directory reader."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from caseflow.application.ports.officer_repo import OfficerRepository
from caseflow.domain.entities.officer import Officer
from caseflow.domain.policies.officer_ranking import (
    rank_available,
    saturated_specializations,
)

logger = logging.getLogger(__name__)


@dataclass
class OfficerDirectory:
    """Officers with room, least loaded first."""

    available: list[Officer] = field(default_factory=list)
    saturated: set[str] = field(default_factory=set)

    def is_empty(self) -> bool:
        return not self.available


class LoadAvailableOfficersUseCase:
    def __init__(self, officer_repo: OfficerRepository):
        self._officers = officer_repo

    async def execute(self, specialization: str | None = None) -> OfficerDirectory:
        active = await self._officers.get_active(specialization)
        available = rank_available(active)
        saturated = saturated_specializations(active, available)

        logger.info(
            "Officers for %s: %d active, %d with room",
            specialization or "all specializations", len(active), len(available),
        )
        if saturated:
            logger.info("Saturated specializations: %s", ", ".join(sorted(saturated)))

        return OfficerDirectory(available=available, saturated=saturated)
