"""
Lease policy: how long a claim lasts and whether it has run out.

Leases are a generous multiple of the task's expected effort so that normal
work is never preempted while abandoned work eventually becomes reclaimable
without a heartbeat.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from .models import Claim, to_utc
from .registry import TaskRegistry

DEFAULT_EFFORT_MINUTES = 120
LEASE_MULTIPLIER = 2
# Keeps claimedAt + lease inside the datetime range
MAX_LEASE = timedelta(days=365 * 100)

logger = logging.getLogger(__name__)


class LeasePolicy:
    """Computes lease durations and checks expiry."""

    def __init__(
        self,
        registry: Optional[TaskRegistry] = None,
        default_effort_minutes: int = DEFAULT_EFFORT_MINUTES,
        multiplier: int = LEASE_MULTIPLIER,
    ):
        if default_effort_minutes <= 0:
            raise ValueError("default_effort_minutes must be positive")
        if multiplier <= 0:
            raise ValueError("multiplier must be positive")
        self.registry = registry
        self.default_effort_minutes = default_effort_minutes
        self.multiplier = multiplier
        if not self._fits(default_effort_minutes):
            raise ValueError(f"default lease must not exceed {MAX_LEASE.days} days")

    def _fits(self, effort_minutes: int) -> bool:
        return self.multiplier * effort_minutes * 60 <= MAX_LEASE.total_seconds()

    def effort_minutes(self, task_id: str) -> int:
        if self.registry is not None:
            effort = self.registry.effort_minutes(task_id)
            if effort is not None:
                if self._fits(effort):
                    return effort
                logger.warning(
                    f"Ignoring effort estimate of {effort} minutes for {task_id}, lease would be too long",
                    extra={"json_data": {"task_id": task_id, "effort_minutes": effort}},
                )
        return self.default_effort_minutes

    def lease_duration(self, effort_minutes: Optional[int] = None) -> timedelta:
        """Lease for ``effort_minutes``; raises ValueError when it exceeds MAX_LEASE."""
        if effort_minutes is None:
            effort_minutes = self.default_effort_minutes
        if not self._fits(effort_minutes):
            raise ValueError(f"lease for {effort_minutes} minutes exceeds {MAX_LEASE.days} days")
        return timedelta(minutes=self.multiplier * effort_minutes)

    def lease_for(self, task_id: str) -> timedelta:
        return self.lease_duration(self.effort_minutes(task_id))

    def is_expired(self, claim: Claim, now: datetime) -> bool:
        return to_utc(now) > claim.expires_at
