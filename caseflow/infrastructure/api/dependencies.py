"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.adapters.persistence.database import get_session
from caseflow.adapters.persistence.repositories import (
    SqlCustomerRepository,
    SqlOfficerRepository,
    SqlTransactionManager,
)
from caseflow.application.use_cases.assignment_stats import AssignmentStatsUseCase
from caseflow.application.use_cases.audit_consistency import AuditConsistencyUseCase
from caseflow.application.use_cases.load_backlog import LoadBacklogUseCase
from caseflow.application.use_cases.load_officers import LoadAvailableOfficersUseCase
from caseflow.application.use_cases.persist_assignments import PersistAssignmentsUseCase
from caseflow.application.use_cases.reassign_customer import ReassignCustomerUseCase
from caseflow.application.use_cases.run_batch import RunAssignmentBatchUseCase
from caseflow.config import settings


def build_run_batch_uc(session: AsyncSession) -> RunAssignmentBatchUseCase:
    """Also used by the CLI, which manages its own session."""
    officers = SqlOfficerRepository(session)
    customers = SqlCustomerRepository(session)
    return RunAssignmentBatchUseCase(
        load_officers=LoadAvailableOfficersUseCase(officers),
        load_backlog=LoadBacklogUseCase(customers),
        persist=PersistAssignmentsUseCase(
            officer_repo=officers,
            customer_repo=customers,
            tx=SqlTransactionManager(session),
            increment_external_load=settings.assign_increments_external_load,
        ),
    )


def get_load_officers_uc(
    session: AsyncSession = Depends(get_session),
) -> LoadAvailableOfficersUseCase:
    return LoadAvailableOfficersUseCase(SqlOfficerRepository(session))


def get_run_batch_uc(
    session: AsyncSession = Depends(get_session),
) -> RunAssignmentBatchUseCase:
    return build_run_batch_uc(session)


def get_reassign_uc(
    session: AsyncSession = Depends(get_session),
) -> ReassignCustomerUseCase:
    return ReassignCustomerUseCase(
        officer_repo=SqlOfficerRepository(session),
        customer_repo=SqlCustomerRepository(session),
        tx=SqlTransactionManager(session),
        increment_external_load=settings.assign_increments_external_load,
    )


def get_audit_uc(
    session: AsyncSession = Depends(get_session),
) -> AuditConsistencyUseCase:
    return AuditConsistencyUseCase(SqlOfficerRepository(session), SqlCustomerRepository(session))


def get_stats_uc(
    session: AsyncSession = Depends(get_session),
) -> AssignmentStatsUseCase:
    return AssignmentStatsUseCase(SqlOfficerRepository(session), SqlCustomerRepository(session))
