"""Port interface for scoping a group of writes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator


class TransactionManager(ABC):
    #: True when leaving a savepoint with an exception undoes every write in it.
    supports_rollback: bool = False

    @abstractmethod
    def savepoint(self):
        """Async context manager scoping the writes of one record."""
        ...


class NullTransactionManager(TransactionManager):
    """No-op scope for stores that apply each write immediately."""

    supports_rollback = False

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        yield
