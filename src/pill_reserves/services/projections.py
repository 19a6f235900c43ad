"""Derived week counts for display."""

import copy
from dataclasses import dataclass

from pill_reserves.domain.ledger import Drug, DrugToDisplay
from pill_reserves.domain.rational import Rational
from pill_reserves.services.ledger import LedgerService


def remaining_weeks(drug: Drug) -> int | None:
    """Return how many full weeks the remaining stock lasts."""
    return _full_weeks(drug.remaining, drug.total_dosage_week())


def weeks_per_prescription(drug: Drug) -> int | None:
    """Return how many full weeks one prescription lasts."""
    return _full_weeks(drug.units_per_prescription(), drug.total_dosage_week())


def project(drugs: list[Drug]) -> list[DrugToDisplay]:
    """Build display snapshots for the visible drugs, keeping ledger indexes."""
    return [
        DrugToDisplay(
            index=index,
            drug=copy.deepcopy(drug),
            remaining_weeks=remaining_weeks(drug),
            weeks_per_prescription=weeks_per_prescription(drug),
        )
        for index, drug in enumerate(drugs)
        if drug.show
    ]


def _full_weeks(units: Rational, weekly_dose: Rational) -> int | None:
    if not weekly_dose.is_positive():
        return None
    return (units / weekly_dose).truncate()


@dataclass
class ProjectionService:
    """Read path producing display rows from a fresh ledger load."""

    ledger: LedgerService

    def list_visible(self) -> list[DrugToDisplay]:
        """Load the ledger and project every visible drug."""
        return project(self.ledger.snapshot())
