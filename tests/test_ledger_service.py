"""Tests for ledger transactions."""

import threading
import time
from dataclasses import dataclass

import pytest

from pill_reserves.domain.ledger import Drug
from pill_reserves.domain.rational import Rational
from pill_reserves.services.commands import CommandProcessor
from pill_reserves.services.ledger import LedgerService
from tests.conftest import InMemoryLedgerRepository, make_drug


@dataclass
class SlowLedgerRepository(InMemoryLedgerRepository):
    """Widens the window between load and store."""

    def load(self) -> list[Drug]:
        drugs = super().load()
        time.sleep(0.05)
        return drugs


def test_transaction_stores_once_on_success() -> None:
    repository = InMemoryLedgerRepository(drugs=[make_drug(remaining="1")])
    service = LedgerService(repository)

    with service.transaction() as drugs:
        drugs[0].replenish(Rational.create(1, 1))

    assert repository.loads == 1
    assert repository.stores == 1
    assert repository.drugs[0].remaining == Rational.create(2, 1)


def test_transaction_skips_store_when_block_fails() -> None:
    repository = InMemoryLedgerRepository(drugs=[make_drug(remaining="1")])
    service = LedgerService(repository)

    with pytest.raises(RuntimeError), service.transaction() as drugs:
        drugs[0].replenish(Rational.create(1, 1))
        raise RuntimeError("boom")

    assert repository.stores == 0
    assert repository.drugs[0].remaining == Rational.create(1, 1)


def test_transaction_releases_lock_after_failure() -> None:
    repository = InMemoryLedgerRepository(drugs=[make_drug()])
    service = LedgerService(repository)

    with pytest.raises(RuntimeError), service.transaction():
        raise RuntimeError("boom")
    with service.transaction():
        pass

    assert repository.stores == 1


def test_concurrent_replenish_does_not_lose_updates() -> None:
    repository = SlowLedgerRepository(drugs=[make_drug(remaining="0")])
    processor = CommandProcessor(LedgerService(repository))

    threads = [
        threading.Thread(target=processor.replenish, args=(0, "1")) for _ in range(2)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert repository.drugs[0].remaining == Rational.create(2, 1)
    assert repository.stores == 2
