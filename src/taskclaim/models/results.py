"""
Result models returned by the claim coordinator operations.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from .claim import Claim, format_timestamp


class ClaimState(str, Enum):
    """Classification of a task's claim."""

    AVAILABLE = "available"
    ACTIVE = "active"
    STALE = "stale"


class StaleReason(str, Enum):
    """Why a claim is stale; a claim can be stale for both reasons."""

    DEAD = "dead"
    EXPIRED = "expired"


class ClaimResult(BaseModel):
    """Outcome of a successful claim (fresh or takeover)."""

    task_id: str
    claim: Claim
    previous: Optional[Claim] = None
    warning: Optional[str] = None

    @property
    def took_over(self) -> bool:
        return self.previous is not None


class ReleaseResult(BaseModel):
    task_id: str
    released: bool
    previous: Optional[Claim] = None


class ClaimView(BaseModel):
    """A stored claim together with its evaluated liveness and expiry."""

    task_id: str
    claim: Claim
    alive: bool
    expired: bool

    @property
    def stale(self) -> bool:
        return not self.alive or self.expired

    @property
    def reasons(self) -> list[StaleReason]:
        reasons = []
        if not self.alive:
            reasons.append(StaleReason.DEAD)
        if self.expired:
            reasons.append(StaleReason.EXPIRED)
        return reasons


class ClaimStatusReport(BaseModel):
    task_id: str
    state: ClaimState
    claim: Optional[Claim] = None
    alive: Optional[bool] = None
    expired: Optional[bool] = None
    reasons: list[StaleReason] = Field(default_factory=list)
    checked_at: datetime

    @field_serializer("checked_at")
    def _serialize_checked_at(self, v: datetime) -> str:
        return format_timestamp(v)


class CleanResult(BaseModel):
    removed: list[str] = Field(default_factory=list)
    remaining: int = 0

    @property
    def removed_count(self) -> int:
        return len(self.removed)
