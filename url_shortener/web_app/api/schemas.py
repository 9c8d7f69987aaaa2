"""Pydantic schemas for API requests and responses.

JSON field names are camelCase; Python attributes stay snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(CamelModel):
    """Request to shorten a URL."""

    long_url: str = Field(..., description="The URL to shorten", min_length=1, max_length=2000)
    expires_at: Optional[datetime] = Field(None, description="Optional expiry, must be in the future")

    @field_validator("long_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"longUrl": "https://example.com/very/long/path/to/resource"},
                {"longUrl": "https://github.com/user/repo", "expiresAt": "2030-01-01T00:00:00Z"},
            ]
        },
    )


class UpdateUrlRequest(CamelModel):
    """Request to re-issue the short code of a URL and optionally move its expiry."""

    short_url_code: str = Field(..., description="Current short code", min_length=1, max_length=50)
    expires_at: Optional[datetime] = Field(None, description="New expiry; unchanged when omitted")


class UrlResponse(CamelModel):
    """A stored short URL."""

    short_url: str = Field(..., description="The complete short URL")
    short_url_code: str = Field(..., description="The short code")
    long_url: str = Field(..., description="The original long URL")
    visits: int = Field(..., description="Number of resolutions")
    created_at: datetime = Field(..., description="Creation timestamp")
    expires_at: Optional[datetime] = Field(None, description="Expiry timestamp, null if it never expires")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "shortUrl": "https://short.link/abc123",
                    "shortUrlCode": "abc123",
                    "longUrl": "https://example.com/very/long/path",
                    "visits": 0,
                    "createdAt": "2024-01-01T12:00:00Z",
                    "expiresAt": None,
                }
            ]
        },
    )


class LongUrlResponse(CamelModel):
    """Result of resolving a short code."""

    long_url: str


class StatsUrlResponse(UrlResponse):
    """A short URL with its active flag."""

    active: bool


class StatsListUrlResponse(CamelModel):
    """A user's URLs and their summed visits."""

    total_visits: int
    urls: List[StatsUrlResponse]


class StatsVisitsUrlResponse(CamelModel):
    """Visit count of one short URL."""

    short_url_code: str
    visits: int


class RegisterUserRequest(CamelModel):
    """Request to register a user."""

    login: str = Field(..., description="Unique login, 3-50 characters")
    email: str = Field(..., description="Unique email address")
    password: str = Field(..., description="At least 8 characters with a digit, a lowercase and an uppercase letter")


class RegisterUserResponse(CamelModel):
    """Registered user (never includes the password)."""

    id: int
    login: str
    email: str
    created_at: datetime


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error response."""

    status: int = Field(..., description="HTTP status code")
    error: str = Field(..., description="HTTP reason phrase")
    path: str = Field(..., description="Request path")
    message: str = Field(..., description="What went wrong")
