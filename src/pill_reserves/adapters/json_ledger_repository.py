"""JSON file-backed ledger repository."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pill_reserves.domain.ledger import Drug, DrugComponent
from pill_reserves.domain.rational import Rational, RationalError
from pill_reserves.services.ledger import (
    CorruptLedgerError,
    LedgerRepository,
    StoreUnavailableError,
)

_RATIONAL_FIELDS = (
    "remaining",
    "dosage_morning",
    "dosage_noon",
    "dosage_evening",
    "dosage_night",
    "units_per_package",
    "packages_per_prescription",
)
_LEGACY_PAIR_LENGTH = 2
_PHOTO_FIELDS = ("obverse_photo", "reverse_photo")

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileLedgerRepository(LedgerRepository):
    """Stores the ledger as a pretty-printed JSON array in a single file."""

    path: Path

    def load(self) -> list[Drug]:
        """Read and decode the whole ledger file."""
        try:
            with self.path.open(encoding="utf-8") as handle:
                payload = json.load(handle)
        except OSError as exc:
            _logger.exception("Failed to open ledger", extra={"path": str(self.path)})
            raise StoreUnavailableError(f"cannot read {self.path}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            _logger.exception("Failed to load ledger", extra={"path": str(self.path)})
            raise CorruptLedgerError(f"{self.path} is not valid JSON") from exc

        if not isinstance(payload, list):
            raise CorruptLedgerError(f"{self.path} does not hold a list of drugs")
        try:
            return [drug_from_dict(entry) for entry in payload]
        except (KeyError, TypeError, ValueError) as exc:
            _logger.exception("Failed to decode ledger", extra={"path": str(self.path)})
            raise CorruptLedgerError(f"{self.path} holds an invalid drug") from exc

    def store(self, drugs: list[Drug]) -> None:
        """Write the full ledger next to the target and swap it into place."""
        payload = [drug_to_dict(drug) for drug in drugs]
        directory = self.path.parent
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self.path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            _logger.exception("Failed to store ledger", extra={"path": str(self.path)})
            raise StoreUnavailableError(f"cannot write {self.path}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
                handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            _logger.exception("Failed to store ledger", extra={"path": str(self.path)})
            Path(tmp_name).unlink(missing_ok=True)
            raise StoreUnavailableError(f"cannot write {self.path}") from exc


def drug_to_dict(drug: Drug) -> dict[str, object]:
    """Serialize a drug with rationals in their canonical string form."""
    data: dict[str, object] = {
        "trade_name": drug.trade_name,
        "components": [
            {
                "generic_name": component.generic_name,
                "amount": component.amount.to_canonical_string(),
                "unit": component.unit,
            }
            for component in drug.components
        ],
        "description": drug.description,
    }
    for name in _RATIONAL_FIELDS:
        data[name] = getattr(drug, name).to_canonical_string()
    data["show"] = drug.show
    data["obverse_photo"] = drug.obverse_photo
    data["reverse_photo"] = drug.reverse_photo
    return data


def drug_from_dict(data: dict[str, object]) -> Drug:
    """Decode a drug entry written by :func:`drug_to_dict` or older ledgers."""
    if not isinstance(data, dict):
        raise TypeError("drug entry must be an object")
    components = [
        DrugComponent(
            generic_name=str(component["generic_name"]),
            amount=_parse_rational(component["amount"]),
            unit=str(component["unit"]),
        )
        for component in data.get("components", [])
    ]
    rationals = {name: _parse_rational(data[name]) for name in _RATIONAL_FIELDS}
    show = data.get("show", True)
    if not isinstance(show, bool):
        raise TypeError(f"show must be a boolean, not {show!r}")
    photos = {name: data.get(name) for name in _PHOTO_FIELDS}
    for name, photo in photos.items():
        if photo is not None and not isinstance(photo, str):
            raise TypeError(f"{name} must be a string, not {photo!r}")
    return Drug(
        trade_name=str(data["trade_name"]),
        components=components,
        description=str(data.get("description", "")),
        show=show,
        **photos,
        **rationals,
    )


def _parse_rational(value: object) -> Rational:
    """Accept ``"N/D"`` strings, plain integers and ``[N, D]`` pairs."""
    try:
        if isinstance(value, str):
            return Rational.parse_ratio(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return Rational.create(value, 1)
        if (
            isinstance(value, list)
            and len(value) == _LEGACY_PAIR_LENGTH
            and all(
                isinstance(part, int) and not isinstance(part, bool) for part in value
            )
        ):
            return Rational.create(value[0], value[1])
    except RationalError as exc:
        raise ValueError(f"invalid fraction {value!r}") from exc
    raise ValueError(f"unsupported fraction value {value!r}")
