"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class DatabaseHealth(BaseModel):
    status: Literal["connected", "disconnected"]


class CacheHealth(BaseModel):
    status: Literal["connected", "error", "not_configured"]


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    success: bool = True
    status: Literal["healthy", "degraded"] = Field(description="healthy when the database is reachable")
    timestamp: str = Field(description="Check time (ISO-8601, UTC)")
    service: str
    version: str
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: DatabaseHealth
    redis: CacheHealth
    uptime: float = Field(description="Seconds since application startup")
