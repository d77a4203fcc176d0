"""Mini README: Build a ledger wired to the configured storage.

Structure:
    * open_ledger - construct a ``Ledger`` backed by ``JsonFileStore`` in the
      configured data directory, using the configured key and opening amount,
      after applying the log level for the configured environment.
"""

from __future__ import annotations

from typing import Optional

from ..configuration import CashflowSettings, get_settings
from ..logging_utils import configure_root_logger, get_logger, level_for_environment
from ..storage import JsonFileStore
from .ledger import Ledger

LOGGER = get_logger(__name__)


def open_ledger(settings: Optional[CashflowSettings] = None) -> Ledger:
    """Load the ledger snapshot from disk once and return the owning object."""

    settings = settings or get_settings()
    configure_root_logger(level_for_environment(settings.environment))
    store = JsonFileStore(settings.data_directory)
    LOGGER.info(
        "Opening ledger '%s' in %s (%s environment)",
        settings.storage_key,
        settings.data_directory,
        settings.environment,
    )
    return Ledger(
        store,
        storage_key=settings.storage_key,
        initial_amount=settings.initial_amount,
    )
