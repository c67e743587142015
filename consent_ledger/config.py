"""
Ledger configuration management
Toggles for the consent engine design, state backend and logging
"""

from enum import Enum
from pydantic_settings import BaseSettings
from pydantic import Field


class EngineDesign(str, Enum):
    """Consent engine storage/update designs"""
    MEMBERSHIP = "membership"   # One mutable membership record per scope
    TOMBSTONE = "tombstone"     # Additive grant record plus per-user revoke markers


class StateBackend(str, Enum):
    """Supported state store backends"""
    SQL = "sql"
    MEMORY = "memory"


class LedgerConfig(BaseSettings):
    """Consent ledger configuration settings"""

    # Engine settings
    engine_design: EngineDesign = Field(
        default=EngineDesign.TOMBSTONE,
        description="Design used by the checkAccess/updateConsent functions"
    )

    # State store settings
    state_backend: StateBackend = Field(default=StateBackend.SQL)
    database_url: str = Field(
        default="sqlite:///consent_ledger.db",
        description="SQLAlchemy URL of the key/value state table"
    )

    # Query settings
    query_enabled: bool = Field(default=True, description="Allow ad hoc rich queries")

    # Environment-specific overrides
    debug_mode: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    model_config = {"env_prefix": "CONSENT_LEDGER_", "case_sensitive": False}


# Global configuration instance
ledger_config = LedgerConfig()


def get_ledger_config() -> LedgerConfig:
    """Get the global ledger configuration instance"""
    return ledger_config


def update_ledger_config(**kwargs) -> LedgerConfig:
    """Update ledger configuration with new values"""
    global ledger_config
    for key, value in kwargs.items():
        if hasattr(ledger_config, key):
            setattr(ledger_config, key, value)
    return ledger_config
