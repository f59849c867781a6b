"""Officer endpoints — availability for the next batch."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from caseflow.application.use_cases.load_officers import LoadAvailableOfficersUseCase
from caseflow.domain.policies.officer_ranking import load_score
from caseflow.infrastructure.api.dependencies import get_load_officers_uc

router = APIRouter(prefix="/officers", tags=["officers"])


@router.get("/available")
async def available_officers(
    specialization: str | None = None,
    load_uc: LoadAvailableOfficersUseCase = Depends(get_load_officers_uc),
):
    """Officers with room, in the order the next batch will serve them."""
    directory = await load_uc.execute(specialization)
    return {
        "total_available": len(directory.available),
        "saturated_specializations": sorted(directory.saturated),
        "officers": [
            {
                "id": o.id,
                "username": o.username,
                "specialization": o.specialization,
                "current_load": o.current_load,
                "max_caseload": o.capacity.max_caseload,
                "priority_weight": o.capacity.priority_weight,
                "load_score": load_score(o),
            }
            for o in directory.available
        ],
    }
