"""Port interface for customer account persistence."""

from abc import ABC, abstractmethod

from caseflow.domain.entities.customer import AssignmentHistoryEntry, CustomerAccount


class CustomerRepository(ABC):
    @abstractmethod
    async def save(self, customer: CustomerAccount) -> CustomerAccount:
        ...

    @abstractmethod
    async def get_by_id(self, customer_id: int) -> CustomerAccount | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[CustomerAccount]:
        ...

    @abstractmethod
    async def get_eligible(
        self,
        product_type: str | None,
        limit: int,
        unowned_only: bool = True,
    ) -> list[CustomerAccount]:
        """Active accounts with a positive balance, highest overdue first."""
        ...

    @abstractmethod
    async def assign_owner(
        self, customer_id: int, officer_id: int, entry: AssignmentHistoryEntry
    ) -> CustomerAccount:
        """Set the owner and append *entry* to the history in one write.

        Raises NotFoundError if the customer does not exist.
        """
        ...
