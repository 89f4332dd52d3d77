"""
Pydantic schemas for the tool API request/response contracts.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

PROFILE_NAME_REGEX = r"^[a-z0-9-]+$"


# Request schemas
class SwitchProfileRequest(BaseModel):
    """Request schema for POST /tools/switch-profile."""

    profile: str = Field(..., min_length=1, description="Name of the profile to activate")


class SaveProfileRequest(BaseModel):
    """Request schema for POST /tools/save-profile."""

    profile: str = Field(
        ...,
        pattern=PROFILE_NAME_REGEX,
        description="Profile name (lowercase letters, digits and hyphens)",
    )
    cookies_json: str = Field(
        ...,
        min_length=1,
        description="JSON array of cookies as exported by a browser cookie editor",
    )


class ConfirmProfileRequest(BaseModel):
    """Request schema for POST /tools/confirm-profile."""

    profile: Optional[str] = Field(
        default=None,
        description="Optional: profile to switch to and confirm in one step",
    )


class SearchProductsRequest(BaseModel):
    """Request schema for POST /tools/search-products."""

    search_term: str = Field(..., min_length=1, description="Search query")

    @field_validator("search_term", mode="before")
    @classmethod
    def strip_term(cls, v: str) -> str:
        return str(v).strip()


class AsinRequest(BaseModel):
    """Request schema for tools taking a single product identifier."""

    asin: str = Field(..., min_length=10, max_length=10, description="10-character ASIN")


# Response schemas
class ToolResponse(BaseModel):
    """Uniform result of every tool call; failures are results, not HTTP errors."""

    success: bool
    message: str
    profile: Optional[str] = None
    data: Optional[Any] = None
    confirmation: Optional[dict] = None
    error_kind: Optional[str] = None
