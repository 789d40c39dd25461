"""
ComfortMap Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract between frontend and backend.
Why:   Automatic serialization and OpenAPI doc generation.
How:   FastAPI uses these models to parse request bodies and serialize responses.
Who:   Used by route handlers and by the ReviewBoard presentation client.

Validation Note:
    The create endpoint promises no 4xx validation: whatever the form sends
    is handed to the store, and the store decides. ReviewCreate therefore
    accepts any JSON value for every field; casting happens in ReviewService.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ReviewCreate(BaseModel):
    """
    What:  Body of POST /api/notes.
    Why Any: Fields are passed through to the store as-is; a value the store
             can't cast makes the insert fail with a 500, never a 4xx.
    """
    text: Any = Field(default=None, description="Canonical encoded review string")
    restaurant: Any = Field(default=None, description="Restaurant name")
    location: Any = Field(default=None, description="Free-text location, as geocoded")
    scale: Any = Field(default=None, description="Comfort rating out of 10")
    review: Any = Field(default=None, description="Review body")
    lat: Any = Field(default=None, description="Latitude of the geocoded location")
    lon: Any = Field(default=None, description="Longitude of the geocoded location")

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_body(cls, body: Any) -> "ReviewCreate":
        """
        Build a payload from whatever JSON the client sent.

        A missing body or a JSON value that isn't an object carries no fields,
        so it becomes an empty payload and fails the required-text check in
        the service (500), like any other insert the store refuses.
        """
        if isinstance(body, dict):
            return cls.model_validate(body)
        return cls()


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ReviewResponse(BaseModel):
    """
    What:  A stored review, as returned by both endpoints.
    Who:   POST /api/notes (201) and GET /api/notes (array items).

    Numbers are rendered the way a JSON document store hands them back:
    integral values without a fractional part, so `9` round-trips as `9`.
    """
    id: uuid.UUID = Field(description="Store-assigned identifier")
    text: str = Field(description="Canonical encoded review string")
    restaurant: Optional[str] = None
    location: Optional[str] = None
    scale: Optional[float] = None
    review: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
        description="When the review was created (UTC ISO 8601)",
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """SQLite hands back naive datetimes; everything is stored in UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_serializer("scale", "lat", "lon")
    def integral_as_int(self, value: Optional[float]) -> Optional[Union[int, float]]:
        if value is not None and float(value).is_integer():
            return int(value)
        return value


class ErrorResponse(BaseModel):
    """Error body for 500 responses: a single static message."""
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and store status.
    Who:   Returned by GET /health for monitoring and load balancer checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
