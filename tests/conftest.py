"""Shared test fixtures."""

import copy
from dataclasses import dataclass, field

import pytest

from pill_reserves.config import Settings
from pill_reserves.containers import AppContainer, build_container
from pill_reserves.domain.ledger import Drug, DrugComponent
from pill_reserves.domain.rational import Rational
from pill_reserves.services.ledger import LedgerRepository, StoreUnavailableError


def make_drug(  # noqa: PLR0913
    trade_name: str = "Examplol",
    remaining: str = "14",
    morning: str = "1",
    noon: str = "0",
    evening: str = "1",
    night: str = "0",
    units_per_package: str = "28",
    packages_per_prescription: str = "2",
    show: bool = True,
) -> Drug:
    """Build a drug from canonical fraction strings."""
    return Drug(
        trade_name=trade_name,
        components=[
            DrugComponent(
                generic_name="examplium",
                amount=Rational.parse_ratio("5/2"),
                unit="mg",
            )
        ],
        description="with food\nnot with milk",
        remaining=Rational.parse_ratio(remaining),
        dosage_morning=Rational.parse_ratio(morning),
        dosage_noon=Rational.parse_ratio(noon),
        dosage_evening=Rational.parse_ratio(evening),
        dosage_night=Rational.parse_ratio(night),
        units_per_package=Rational.parse_ratio(units_per_package),
        packages_per_prescription=Rational.parse_ratio(packages_per_prescription),
        show=show,
    )


@dataclass
class InMemoryLedgerRepository(LedgerRepository):
    """In-memory ledger repository that hands out copies like a real store."""

    drugs: list[Drug] = field(default_factory=list)
    loads: int = 0
    stores: int = 0

    def load(self) -> list[Drug]:
        self.loads += 1
        return copy.deepcopy(self.drugs)

    def store(self, drugs: list[Drug]) -> None:
        self.stores += 1
        self.drugs = copy.deepcopy(drugs)


@dataclass
class FailingStoreLedgerRepository(InMemoryLedgerRepository):
    """Repository whose writes always fail."""

    def store(self, drugs: list[Drug]) -> None:
        raise StoreUnavailableError("disk full")


@dataclass
class FailingLoadLedgerRepository(InMemoryLedgerRepository):
    """Repository whose reads always fail."""

    def load(self) -> list[Drug]:
        raise StoreUnavailableError("no such file")


@pytest.fixture
def settings(tmp_path) -> Settings:
    images = tmp_path / "images"
    images.mkdir()
    (images / "front.png").write_bytes(b"\x89PNG fake")
    return Settings(
        base_url="https://pills.example.com/",
        data_path=str(tmp_path / "data.json"),
        images_path=str(images),
        auth_tokens=["secret-token", "other-token"],
        column_profiles={"compact": ["trade-name", "remaining"]},
    )


@pytest.fixture
def ledger_repository() -> InMemoryLedgerRepository:
    return InMemoryLedgerRepository(
        drugs=[
            make_drug("Examplol"),
            make_drug("Hiddenol", show=False),
            make_drug("Asneeded", remaining="3/2", morning="0", evening="0"),
        ]
    )


@pytest.fixture
def container(
    settings: Settings, ledger_repository: InMemoryLedgerRepository
) -> AppContainer:
    return build_container(settings, repository=ledger_repository)
