"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "postgres"]


class PostgresConfig(BaseModel):
    """PostgreSQL connection pool configuration."""

    connection_url: str | None = Field(
        default=None,
        description="Connection URL (falls back to DATABASE_URL)",
    )
    min_pool_size: int = Field(
        default=1,
        gt=0,
        description="Minimum connections to keep open",
    )
    max_pool_size: int = Field(
        default=10,
        gt=0,
        description="Maximum connections in pool",
    )
    command_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Default timeout for queries (seconds)",
    )
    table_name: str = Field(
        default="accounts",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Table holding account documents",
    )


class StorageConfig(BaseModel):
    """Document store configuration."""

    backend: BackendType = Field(
        default="inmemory",
        description="Document store backend",
    )
    postgres: PostgresConfig = Field(
        default_factory=PostgresConfig,
        description="Settings used when backend is postgres",
    )
