"""
Claim coordinator for taskclaim.

This module provides the claim, release, status, list and clean operations.
Each operation loads the store, makes one decision and, when it changed
something, writes the store back.
"""

import logging
import os
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from .errors import ClaimConflictError
from .lease import LeasePolicy
from .liveness import ProcessLivenessProbe, current_owner_pid, default_probe
from .models import (
    Claim,
    ClaimResult,
    ClaimState,
    ClaimStatusReport,
    ClaimView,
    CleanResult,
    ReleaseResult,
    format_timestamp,
)
from .store import ClaimStore

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_agent_id() -> str:
    """Human-readable agent id: ``agent-<pid>-<base36 ms timestamp>``."""
    return f"agent-{os.getpid()}-{_base36(int(time.time() * 1000))}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ClaimCoordinator:
    """Lease-based claims on task ids."""

    def __init__(
        self,
        store: ClaimStore,
        probe: Optional[ProcessLivenessProbe] = None,
        policy: Optional[LeasePolicy] = None,
        clock: Optional[Callable[[], datetime]] = None,
        agent_id_factory: Optional[Callable[[], str]] = None,
        pid_provider: Optional[Callable[[], int]] = None,
    ):
        self.store = store
        self.probe = probe or default_probe()
        self.policy = policy or LeasePolicy()
        self.clock = clock or utc_now
        self.agent_id_factory = agent_id_factory or generate_agent_id
        self.pid_provider = pid_provider or current_owner_pid
        self.logger = logging.getLogger(__name__)

    def _view(self, task_id: str, claim: Claim, now: datetime) -> ClaimView:
        return ClaimView(
            task_id=task_id,
            claim=claim,
            alive=self.probe.is_alive(claim.pid),
            expired=self.policy.is_expired(claim, now),
        )

    def claim(self, task_id: str, agent_id: Optional[str] = None) -> ClaimResult:
        """Claim ``task_id``, taking over a stale claim if there is one.

        Raises:
            ClaimConflictError: the task is held by a live process whose
                lease has not expired
        """
        if not task_id or not task_id.strip():
            raise ValueError("task_id must not be empty")

        document = self.store.load()
        now = self.clock()
        previous = document.claims.get(task_id)
        warning = None

        if previous is not None:
            view = self._view(task_id, previous, now)
            if view.alive and not view.expired:
                self.logger.info(
                    f"Claim on {task_id} refused, held by {previous.agent_id}",
                    extra={"json_data": {"task_id": task_id, "holder": previous.agent_id, "pid": previous.pid}},
                )
                raise ClaimConflictError(task_id, previous)
            if view.alive:
                warning = (
                    f"process {previous.pid} ({previous.agent_id}) still appears alive "
                    f"but its lease expired at {format_timestamp(previous.expires_at)}"
                )
                self.logger.warning(
                    f"Taking over expired claim on {task_id}: {warning}",
                    extra={"json_data": {"task_id": task_id, "previous": previous.agent_id, "pid": previous.pid}},
                )

        claim = Claim(
            agent_id=agent_id or self.agent_id_factory(),
            claimed_at=now,
            expires_at=now + self.policy.lease_for(task_id),
            pid=self.pid_provider(),
        )
        document.claims[task_id] = claim
        self.store.save(document)

        self.logger.info(
            f"Task {task_id} claimed by {claim.agent_id}",
            extra={
                "json_data": {
                    "task_id": task_id,
                    "agent_id": claim.agent_id,
                    "pid": claim.pid,
                    "expires_at": format_timestamp(claim.expires_at),
                    "takeover": previous is not None,
                }
            },
        )
        return ClaimResult(task_id=task_id, claim=claim, previous=previous, warning=warning)

    def release(self, task_id: str) -> ReleaseResult:
        """Remove the claim on ``task_id``; releasing an unclaimed task is a no-op.

        Any caller may release any claim, ownership is not checked.
        """
        document = self.store.load()
        previous = document.claims.pop(task_id, None)
        if previous is None:
            return ReleaseResult(task_id=task_id, released=False)

        self.store.save(document)
        self.logger.info(
            f"Task {task_id} released",
            extra={"json_data": {"task_id": task_id, "agent_id": previous.agent_id}},
        )
        return ReleaseResult(task_id=task_id, released=True, previous=previous)

    def status(self, task_id: str) -> ClaimStatusReport:
        now = self.clock()
        claim = self.store.load().claims.get(task_id)
        if claim is None:
            return ClaimStatusReport(task_id=task_id, state=ClaimState.AVAILABLE, checked_at=now)

        view = self._view(task_id, claim, now)
        return ClaimStatusReport(
            task_id=task_id,
            state=ClaimState.STALE if view.stale else ClaimState.ACTIVE,
            claim=claim,
            alive=view.alive,
            expired=view.expired,
            reasons=view.reasons,
            checked_at=now,
        )

    def list_claims(self) -> list[ClaimView]:
        now = self.clock()
        claims = self.store.load().claims
        return [self._view(task_id, claims[task_id], now) for task_id in sorted(claims)]

    def clean(self) -> CleanResult:
        """Remove every claim whose process is dead or whose lease expired."""
        document = self.store.load()
        now = self.clock()
        stale = [
            task_id
            for task_id, claim in document.claims.items()
            if self._view(task_id, claim, now).stale
        ]
        for task_id in stale:
            del document.claims[task_id]

        if stale:
            self.store.save(document)
            self.logger.info(
                f"Removed {len(stale)} stale claims",
                extra={"json_data": {"removed": stale, "remaining": len(document.claims)}},
            )
        return CleanResult(removed=sorted(stale), remaining=len(document.claims))
