"""
Eventgate shared data models.

These models define the structure of all data passed between the HTTP
layer, the event store and the access gate. JSON keys of the event
configuration keep the names used by the existing admin frontend.
"""

import re
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..clock import parse_rfc3339

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# Event configuration


class Fee(BaseModel):
    """A named registration fee."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(..., min_length=1, description="Fee label shown to registrants")
    amount: float = Field(
        ..., ge=0, strict=True, allow_inf_nan=False, alias="betrag",
        description="Fee amount, finite and never negative",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Reject names made only of whitespace."""
        if not v.strip():
            raise ValueError("fee name required")
        return v


class EventConfig(BaseModel):
    """The single event configuration record."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    year: int = Field(..., ge=2000, le=2100, strict=True, alias="jahr")
    event_date: str = Field(..., alias="datum", description="Event date, YYYY-MM-DD")
    start_time: str = Field(..., alias="startZeit", description="RFC 3339 start timestamp")
    fees: List[Fee] = Field(default_factory=list, alias="gebuehren")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @field_validator("event_date")
    @classmethod
    def validate_date(cls, v):
        """Ensure the date is a real calendar day in YYYY-MM-DD form."""
        if not _DATE_PATTERN.match(v):
            raise ValueError("date must be YYYY-MM-DD")
        date.fromisoformat(v)
        return v

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v):
        """Ensure the start time is a timezone-aware RFC 3339 datetime."""
        if not v:
            raise ValueError("startTime must be set")
        try:
            parse_rfc3339(v)
        except ValueError as e:
            raise ValueError(f"startTime must be RFC3339 datetime: {e}") from e
        return v

    def calendar_date(self) -> date:
        return date.fromisoformat(self.event_date)

    def to_json_dict(self) -> dict:
        """Serialize with the wire/file key names."""
        return self.model_dump(by_alias=True, exclude_none=True)


DEFAULT_EVENT_CONFIG = {
    "jahr": 2025,
    "datum": "2025-11-01",
    "startZeit": "2025-11-01T08:00:00Z",
    "gebuehren": [
        {"name": "Voranmeldung", "betrag": 12.0},
        {"name": "Nachmeldung", "betrag": 18.0},
    ],
}


# Request Models (API Input)


class AuthRequest(BaseModel):
    """Password submitted to obtain a registration access token."""

    password: str = Field(..., description="Registration password")


# Response Models (API Output)


class AuthResponse(BaseModel):
    """Issued access token."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")
    expires_at: str = Field(..., alias="expiresAt")


class AccessStatusResponse(BaseModel):
    """Registration window and token status."""

    model_config = ConfigDict(populate_by_name=True)

    is_registration_open: bool = Field(..., alias="isRegistrationOpen")
    cutoff_at: Optional[str] = Field(None, alias="cutoffAt")
    now: str
    event_date: str = Field(..., alias="eventDate")
    has_valid_token: bool = Field(False, alias="hasValidToken")
