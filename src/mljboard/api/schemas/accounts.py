"""API schemas for account setup."""

from pydantic import BaseModel, Field


class WebsiteRequest(BaseModel):
    """Request schema for storing a Maloja website."""

    website: str = Field(..., description="Maloja base URL, http:// or https://")


class LastfmUsernameRequest(BaseModel):
    """Request schema for storing a Last.fm username."""

    username: str = Field(..., description="Last.fm username")


class AccountRecordResponse(BaseModel):
    """Schema for a stored account record."""

    handle: str
    kind: str
    value: str


class PairingCodeResponse(BaseModel):
    """Schema for a freshly issued pairing code."""

    handle: str
    pairing_code: str = Field(..., description="Enter this code into the HOS client")


class ResetResponse(BaseModel):
    """Schema for the result of resetting an account."""

    handle: str
    websites_removed: int
    pairing_codes_removed: int


class IdentityResponse(BaseModel):
    """Schema describing the backend a handle resolves to (no secrets)."""

    handle: str
    kind: str = Field(..., description="maloja or lastfm")
    summary: str
