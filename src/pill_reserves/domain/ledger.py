"""Domain models for the medication ledger."""

from dataclasses import dataclass

from pill_reserves.domain.rational import Rational

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class DrugComponent:
    """Active ingredient of a drug and its strength per unit."""

    generic_name: str
    amount: Rational
    unit: str


@dataclass
class Drug:
    """A tracked medication with its dosage schedule and remaining stock."""

    trade_name: str
    components: list[DrugComponent]
    description: str
    remaining: Rational
    dosage_morning: Rational
    dosage_noon: Rational
    dosage_evening: Rational
    dosage_night: Rational
    units_per_package: Rational
    packages_per_prescription: Rational
    show: bool = True
    obverse_photo: str | None = None
    reverse_photo: str | None = None

    def total_dosage_day(self) -> Rational:
        """Return the units taken over a whole day."""
        return (
            self.dosage_morning
            + self.dosage_noon
            + self.dosage_evening
            + self.dosage_night
        )

    def total_dosage_week(self) -> Rational:
        """Return the units taken over a whole week."""
        return self.total_dosage_day() * DAYS_PER_WEEK

    def units_per_prescription(self) -> Rational:
        """Return the units handed out for one prescription."""
        return self.units_per_package * self.packages_per_prescription

    def reduce(self, amount: Rational) -> None:
        """Take ``amount`` units out of stock, never going below zero."""
        if not amount.is_positive():
            raise ValueError(f"reduction amount must be positive, got {amount}")
        self.remaining = max(Rational.zero(), self.remaining - amount)

    def replenish(self, amount: Rational) -> None:
        """Add ``amount`` units to stock."""
        if not amount.is_positive():
            raise ValueError(f"replenish amount must be positive, got {amount}")
        self.remaining = self.remaining + amount


@dataclass(frozen=True)
class DrugToDisplay:
    """Read-only snapshot of a drug with its derived week counts."""

    index: int
    drug: Drug
    remaining_weeks: int | None = None
    weeks_per_prescription: int | None = None
