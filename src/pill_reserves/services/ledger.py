"""Ledger persistence interface and transactional access."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Protocol

from pill_reserves.domain.ledger import Drug

_logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for ledger persistence faults."""


class StoreUnavailableError(LedgerError):
    """Raised when the backing store cannot be read or written."""


class CorruptLedgerError(LedgerError):
    """Raised when the backing store holds data that cannot be decoded."""


class LedgerRepository(Protocol):
    """Persistence interface for the whole ledger."""

    def load(self) -> list[Drug]:
        """Return every drug in ledger order."""

    def store(self, drugs: list[Drug]) -> None:
        """Replace the stored ledger with ``drugs``."""


@dataclass
class LedgerService:
    """Serializes read-modify-write cycles against the ledger."""

    repository: LedgerRepository
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def snapshot(self) -> list[Drug]:
        """Load the current ledger for read-only use."""
        return self.repository.load()

    @contextmanager
    def transaction(self) -> Iterator[list[Drug]]:
        """Yield the ledger for mutation and store it once the block succeeds.

        The lock is held from the load until the store has finished, so
        concurrent transactions never work on a stale copy. When the block
        raises, nothing is written.
        """
        with self._lock:
            drugs = self.repository.load()
            yield drugs
            self.repository.store(drugs)
            _logger.debug("Ledger stored", extra={"drug_count": len(drugs)})
