"""Mini README: Centralised configuration for the cash flow tracker.

Structure:
    * CashflowSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Every value can be overridden with a ``CASHFLOW_`` prefixed environment
    variable or a ``.env`` file, e.g. ``CASHFLOW_INITIAL_AMOUNT=2500``.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class CashflowSettings(BaseSettings):
    """Runtime configuration for the tracker."""

    environment: str = Field(
        "development",
        description="Environment label selecting the root log level (development logs at DEBUG).",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the persisted ledger snapshot.",
    )
    storage_key: str = Field(
        "transactions",
        description="Key under which the whole ledger snapshot is stored.",
        min_length=1,
    )
    initial_amount: Decimal = Field(
        Decimal("100000"),
        description="Opening balance the ledger starts from before any entries.",
    )
    export_filename: str = Field(
        "transactions.csv",
        description="File name offered for CSV downloads and CLI exports.",
    )
    interface_host: str = Field(
        "127.0.0.1",
        description="Network interface for the web API to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the web API listens on.",
        ge=1,
        le=65535,
    )

    class Config:
        env_prefix = "CASHFLOW_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path


@lru_cache()
def get_settings() -> CashflowSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return CashflowSettings()
