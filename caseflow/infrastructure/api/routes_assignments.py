"""Assignment endpoints — run a batch, reassign, audit, stats."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.adapters.persistence.database import get_session
from caseflow.application.use_cases.assignment_stats import AssignmentStatsUseCase
from caseflow.application.use_cases.audit_consistency import AuditConsistencyUseCase
from caseflow.application.use_cases.reassign_customer import ReassignCustomerUseCase
from caseflow.application.use_cases.run_batch import RunAssignmentBatchUseCase
from caseflow.config import settings
from caseflow.domain.exceptions import (
    NotFoundError,
    PartialWriteError,
    SpecializationMismatchError,
)
from caseflow.infrastructure.api.dependencies import (
    get_audit_uc,
    get_reassign_uc,
    get_run_batch_uc,
    get_stats_uc,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["assignments"])


class RunBatchRequest(BaseModel):
    specialization: str | None = None
    limit: int = Field(default_factory=lambda: settings.default_batch_limit, ge=1)
    exclude_assigned: bool = True
    requested_by: str | None = None


class ReassignRequest(BaseModel):
    customer_id: int
    new_officer_id: int
    reason: str | None = None
    requested_by: str | None = None


@router.post("/run")
async def run_batch(
    body: RunBatchRequest,
    batch_uc: RunAssignmentBatchUseCase = Depends(get_run_batch_uc),
    session: AsyncSession = Depends(get_session),
):
    """Distribute backlog accounts across officers with room."""
    try:
        result = await batch_uc.execute(
            specialization=body.specialization,
            limit=body.limit,
            exclude_assigned=body.exclude_assigned,
            requested_by=body.requested_by or settings.system_actor,
        )
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Assignment batch failed")
        raise HTTPException(status_code=503, detail="Assignment batch could not be started")

    return {
        "status": "ok",
        "message": result.message,
        "planned_count": result.planned_count,
        "successful": result.successful,
        "failed": len(result.failed),
        "outcomes": [
            {
                "customer_id": o.customer_id,
                "officer_id": o.officer_id,
                "success": o.success,
                "reason": o.reason,
            }
            for o in result.outcomes
        ],
        "skipped_groups": [
            {
                "product_type": g.product_type,
                "reason": g.reason.value,
                "unassigned_count": g.unassigned_count,
            }
            for g in result.skipped_groups
        ],
    }


@router.post("/reassign")
async def reassign(
    body: ReassignRequest,
    reassign_uc: ReassignCustomerUseCase = Depends(get_reassign_uc),
    session: AsyncSession = Depends(get_session),
):
    """Move one customer to a different officer."""
    try:
        outcome = await reassign_uc.execute(
            customer_id=body.customer_id,
            new_officer_id=body.new_officer_id,
            reason=body.reason,
            actor=body.requested_by or settings.system_actor,
        )
        await session.commit()
    except NotFoundError as e:
        await session.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except SpecializationMismatchError as e:
        await session.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except PartialWriteError as e:
        await session.rollback()
        raise HTTPException(status_code=500, detail=str(e))
    except Exception:
        await session.rollback()
        logger.exception("Reassignment of customer %s failed", body.customer_id)
        raise HTTPException(status_code=503, detail="Reassignment could not be completed")

    return {
        "status": "ok" if outcome.changed else "unchanged",
        "customer_id": outcome.customer_id,
        "previous_officer_id": outcome.previous_officer_id,
        "new_officer_id": outcome.new_officer_id,
        "message": outcome.message,
    }


@router.get("/audit")
async def audit(audit_uc: AuditConsistencyUseCase = Depends(get_audit_uc)):
    """Report divergence between owner pointers and officer rosters."""
    report = await audit_uc.execute()
    return {
        "multi_owner_defects": [
            {
                "customer_id": d.customer_id,
                "officer_ids": list(d.officer_ids),
                "recorded_owner_id": d.recorded_owner_id,
            }
            for d in report.multi_owner_defects
        ],
        "roster_drift_defects": [
            {
                "customer_id": d.customer_id,
                "officer_id": d.officer_id,
                "recorded_owner_id": d.recorded_owner_id,
                "kind": d.kind.value,
            }
            for d in report.roster_drift_defects
        ],
        "capacity_defects": [
            {
                "officer_id": d.officer_id,
                "current_load": d.current_load,
                "max_caseload": d.max_caseload,
            }
            for d in report.capacity_defects
        ],
        "summary": {
            "multi_owner_count": len(report.multi_owner_defects),
            "roster_drift_count": len(report.roster_drift_defects),
            "capacity_count": len(report.capacity_defects),
            "total_issues": report.total_issues,
        },
    }


@router.get("/stats")
async def stats(stats_uc: AssignmentStatsUseCase = Depends(get_stats_uc)):
    """Assignment coverage overall, per product type and per officer."""
    s = await stats_uc.execute()
    return {
        "total": s.total,
        "assigned": s.assigned,
        "unassigned": s.total - s.assigned,
        "assignment_rate": s.assignment_rate,
        "by_product_type": [
            {
                "product_type": p.product_type,
                "total": p.total,
                "assigned": p.assigned,
                "assignment_rate": p.assignment_rate,
            }
            for p in s.by_product_type
        ],
        "by_officer": [
            {
                "officer_id": o.officer_id,
                "username": o.username,
                "specialization": o.specialization,
                "owned_accounts": o.owned_accounts,
                "roster_size": o.roster_size,
                "external_load": o.external_load,
                "current_load": o.current_load,
                "max_caseload": o.max_caseload,
                "utilisation": o.utilisation,
            }
            for o in s.by_officer
        ],
    }
