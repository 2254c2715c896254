"""
Claim models for taskclaim.

This module provides the Claim record and the ClaimDocument that is persisted
as the claim store.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a timestamp the way the store writes it: ``2026-10-18T09:30:00.000Z``."""
    return to_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Claim(BaseModel):
    """One agent's time-bounded ownership of one task."""

    model_config = ConfigDict(populate_by_name=True)

    agent_id: str = Field(..., alias="agentId", min_length=1)
    claimed_at: datetime = Field(..., alias="claimedAt")
    expires_at: datetime = Field(..., alias="expiresAt")
    pid: int = 0

    @field_validator("claimed_at", "expires_at")
    @classmethod
    def _normalize_timestamp(cls, v: datetime) -> datetime:
        return to_utc(v)

    @field_serializer("claimed_at", "expires_at")
    def _serialize_timestamp(self, v: datetime) -> str:
        return format_timestamp(v)

    @property
    def lease(self):
        return self.expires_at - self.claimed_at


class ClaimDocument(BaseModel):
    """The whole claim store: task id -> claim."""

    claims: dict[str, Claim] = Field(default_factory=dict)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
