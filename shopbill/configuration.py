"""Mini README: Centralised configuration for the shopbill backup tooling.

Structure:
    * ShopbillSettings - Pydantic settings model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to locate the key/value store file, the snapshot
    database and the metadata stamped into every backup. Values come from
    ``SHOPBILL_*`` environment variables or a local ``.env`` file and are
    validated once per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings

from .logging_utils import resolve_level


class ShopbillSettings(BaseSettings):
    """Runtime configuration for the billing backup subsystem."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the key/value store and the snapshot database.",
    )
    store_filename: str = Field(
        "storage.json",
        description="File name of the JSON key/value store inside the data directory.",
    )
    snapshot_database: str = Field(
        "billing-backups.sqlite3",
        description="File name of the SQLite snapshot database inside the data directory.",
    )
    app_name: str = Field(
        "Billing-App",
        description="Application label written to the ``meta.app`` field of snapshots.",
    )
    schema_version: int = Field(
        1,
        description="Snapshot document version written to ``meta.version``.",
        ge=1,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level used by the command line tooling.",
    )

    class Config:
        env_prefix = "SHOPBILL_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @validator("log_level")
    def _check_log_level(cls, value: str) -> str:
        """Reject level names the logging module does not know."""

        resolve_level(value)
        return value.strip().upper()

    @property
    def store_path(self) -> Path:
        """Absolute path of the JSON key/value store."""

        return self.data_directory / self.store_filename

    @property
    def snapshot_database_path(self) -> Path:
        """Absolute path of the SQLite snapshot database."""

        return self.data_directory / self.snapshot_database


@lru_cache()
def get_settings() -> ShopbillSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return ShopbillSettings()
