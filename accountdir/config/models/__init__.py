"""Configuration section models."""

from accountdir.config.models.accounts import AccountsConfig
from accountdir.config.models.api import APIConfig
from accountdir.config.models.observability import ObservabilityConfig
from accountdir.config.models.storage import PostgresConfig, StorageConfig

__all__ = [
    "AccountsConfig",
    "APIConfig",
    "ObservabilityConfig",
    "PostgresConfig",
    "StorageConfig",
]
