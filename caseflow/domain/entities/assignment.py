"""Assignment value types — plans produced by the distributor and their outcomes."""

from dataclasses import dataclass
from datetime import datetime

from caseflow.domain.value_objects.enums import SkipReason


@dataclass(frozen=True)
class PlannedAssignment:
    """In-memory pairing of an account with an officer. Never persisted itself."""

    customer_id: int
    officer_id: int
    product_type: str
    requested_by: str | None
    planned_at: datetime


@dataclass(frozen=True)
class SkippedGroup:
    product_type: str
    reason: SkipReason
    unassigned_count: int = 0


@dataclass
class AssignmentOutcome:
    customer_id: int
    officer_id: int
    success: bool
    reason: str | None = None


@dataclass(frozen=True)
class ReassignmentOutcome:
    customer_id: int
    previous_officer_id: int | None
    new_officer_id: int
    changed: bool
    message: str
