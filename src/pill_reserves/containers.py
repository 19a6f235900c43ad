"""Dependency container wiring for the application."""

from dataclasses import dataclass
from pathlib import Path

from pill_reserves.adapters.json_ledger_repository import JsonFileLedgerRepository
from pill_reserves.config import Settings
from pill_reserves.services.commands import CommandProcessor
from pill_reserves.services.ledger import LedgerRepository, LedgerService
from pill_reserves.services.projections import ProjectionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ledger_service: LedgerService
    projection_service: ProjectionService
    command_processor: CommandProcessor


def build_container(
    settings: Settings, repository: LedgerRepository | None = None
) -> AppContainer:
    """Create the default dependency container."""
    ledger_service = LedgerService(
        repository or JsonFileLedgerRepository(Path(settings.data_path))
    )
    return AppContainer(
        settings=settings,
        ledger_service=ledger_service,
        projection_service=ProjectionService(ledger_service),
        command_processor=CommandProcessor(ledger_service),
    )
