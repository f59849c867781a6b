"""Customer account entity — a delinquent loan account awaiting collection."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class AssignmentHistoryEntry:
    """One ownership change. Entries are appended, never edited."""

    officer_id: int
    assigned_at: datetime
    assigned_by: str | None
    reason: str


@dataclass
class CustomerAccount:
    id: int | None
    account_number: str
    name: str
    product_type: str
    outstanding_balance: float = 0.0
    overdue_amount: float = 0.0
    is_active: bool = True
    owner_id: int | None = None
    assignment_history: list[AssignmentHistoryEntry] = field(default_factory=list)

    def is_assigned(self) -> bool:
        return self.owner_id is not None

    def is_collectable(self) -> bool:
        """Active account with money still outstanding."""
        return self.is_active and self.outstanding_balance > 0
