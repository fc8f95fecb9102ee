"""Response models for account endpoints."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class InsertedIdResponse(BaseModel):
    """Result of an account creation."""

    model_config = ConfigDict(populate_by_name=True)

    inserted_id: UUID = Field(..., alias="insertedId")


class ModifiedCountResponse(BaseModel):
    """Result of an account update."""

    model_config = ConfigDict(populate_by_name=True)

    modified_count: int = Field(..., ge=0, alias="modifiedCount")


class HealthResponse(BaseModel):
    """Service health status."""

    status: Literal["healthy", "unhealthy"]
    version: str
    store_backend: str
    timestamp: datetime
