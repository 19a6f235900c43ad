"""Mutation commands applied to the ledger."""

import logging
from dataclasses import dataclass

from pill_reserves.domain.rational import Rational, RationalError
from pill_reserves.services.ledger import LedgerService

REPLENISH = "replenish"
TAKE_WEEK = "take-week"

_logger = logging.getLogger(__name__)


class CommandValidationError(ValueError):
    """Raised when a command argument is missing, malformed or out of range."""

    reason = "invalid command"

    def __init__(self, reason: str | None = None) -> None:
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class UnknownCommandError(CommandValidationError):
    reason = 'unknown value for "do"'


class MissingArgumentError(CommandValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(f'missing value for "{name}"')


class InvalidIndexError(CommandValidationError):
    reason = 'value for "drug-index" out of range'


class InvalidAmountError(CommandValidationError):
    reason = 'invalid value for "amount"'


class ZeroAmountError(CommandValidationError):
    reason = '"amount" must not be 0'


@dataclass
class CommandProcessor:
    """Validate and apply ledger mutations inside a single transaction."""

    ledger: LedgerService

    def execute(
        self, command: str, index: int | None = None, amount_text: str | None = None
    ) -> None:
        """Dispatch a command by its form name."""
        if command == REPLENISH:
            if index is None:
                raise MissingArgumentError("drug-index")
            if amount_text is None:
                raise MissingArgumentError("amount")
            self.replenish(index, amount_text)
        elif command == TAKE_WEEK:
            self.take_week()
        else:
            raise UnknownCommandError

    def replenish(self, index: int, amount_text: str) -> None:
        """Add to (positive amount) or take from (negative amount) one drug."""
        try:
            amount = Rational.parse_decimal(amount_text)
        except RationalError as exc:
            raise InvalidAmountError from exc

        with self.ledger.transaction() as drugs:
            if not 0 <= index < len(drugs):
                raise InvalidIndexError
            if amount.is_zero():
                raise ZeroAmountError
            drug = drugs[index]
            try:
                if amount.is_positive():
                    drug.replenish(amount)
                else:
                    drug.reduce(abs(amount))
            except RationalError as exc:
                raise InvalidAmountError from exc
        _logger.info(
            "Replenished %s by %s, now %s", drug.trade_name, amount, drug.remaining
        )

    def take_week(self) -> None:
        """Consume one week's dose of every drug that has a dosage."""
        taken = 0
        with self.ledger.transaction() as drugs:
            for drug in drugs:
                weekly_dose = drug.total_dosage_week()
                if weekly_dose.is_positive():
                    drug.reduce(weekly_dose)
                    taken += 1
        _logger.info("Took a week's dose of %s drugs", taken)
