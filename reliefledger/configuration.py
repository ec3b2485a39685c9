"""Mini README: Centralised configuration for the relief ledger service.

Structure:
    * ReliefLedgerSettings - Pydantic settings describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read ``RELIEFLEDGER_*`` environment variables
    (or a local ``.env`` file). The owner identity configured here is fixed
    for the lifetime of the ledger created at startup.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class ReliefLedgerSettings(BaseSettings):
    """Runtime configuration for the relief ledger service."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    owner_identity: str = Field(
        "owner",
        description="Identity that initialises the ledger and may grant coordinator status.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP wrapper to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the HTTP wrapper exposes.",
        ge=1,
        le=65535,
    )
    event_history_limit: int = Field(
        10_000,
        description="Number of notifications retained in memory for monitoring.",
        ge=1,
    )
    log_level: str = Field("INFO", description="Root logging level name.")

    class Config:
        env_prefix = "RELIEFLEDGER_"
        env_file = ".env"
        case_sensitive = False

    @validator("owner_identity")
    def _strip_owner(cls, value: str) -> str:
        """Reject blank owner identities; the ledger cannot exist without one."""

        value = value.strip()
        if not value:
            raise ValueError("owner_identity must not be blank")
        return value


@lru_cache()
def get_settings() -> ReliefLedgerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return ReliefLedgerSettings()
