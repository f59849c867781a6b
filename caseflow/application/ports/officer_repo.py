"""Port interface for officer persistence."""

from abc import ABC, abstractmethod

from caseflow.domain.entities.officer import Officer


class OfficerRepository(ABC):
    @abstractmethod
    async def save(self, officer: Officer) -> Officer:
        ...

    @abstractmethod
    async def get_by_id(self, officer_id: int) -> Officer | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Officer]:
        ...

    @abstractmethod
    async def get_active(self, specialization: str | None = None) -> list[Officer]:
        """Active officers, optionally restricted to one specialization."""
        ...

    @abstractmethod
    async def add_to_roster(self, officer_id: int, customer_id: int) -> bool:
        """Add *customer_id* to the roster. Returns False if it was already there.

        Raises NotFoundError if the officer does not exist.
        """
        ...

    @abstractmethod
    async def remove_from_roster(self, officer_id: int, customer_id: int) -> bool:
        """Remove *customer_id* if present. Returns whether anything was removed.

        A missing officer is a no-op.
        """
        ...

    @abstractmethod
    async def adjust_load(self, officer_id: int, delta: int) -> int:
        """Shift external_load by *delta*, never below zero.

        Returns the delta actually applied (0 for a missing officer).
        """
        ...
