"""
taskclaim: lease-based claims on task ids for cooperating agent processes.

Agents sharing a filesystem claim a task before working on it. A claim is
tied to the owning process and to a lease derived from the task's effort
estimate; claims whose process died or whose lease ran out can be taken over
or cleaned up.
"""

import logging

from .coordinator import ClaimCoordinator, generate_agent_id
from .errors import ClaimConflictError, ClaimError, StoreError
from .lease import DEFAULT_EFFORT_MINUTES, LEASE_MULTIPLIER, LeasePolicy
from .liveness import (
    ProcessLivenessProbe,
    ProcessTableProbe,
    SignalProbe,
    current_owner_pid,
    default_probe,
)
from .models import Claim, ClaimDocument, ClaimState, StaleReason
from .registry import JsonTaskRegistry, StaticTaskRegistry, TaskRegistry
from .store import ClaimStore

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ClaimCoordinator",
    "generate_agent_id",
    "ClaimConflictError",
    "ClaimError",
    "StoreError",
    "DEFAULT_EFFORT_MINUTES",
    "LEASE_MULTIPLIER",
    "LeasePolicy",
    "ProcessLivenessProbe",
    "ProcessTableProbe",
    "SignalProbe",
    "current_owner_pid",
    "default_probe",
    "Claim",
    "ClaimDocument",
    "ClaimState",
    "StaleReason",
    "JsonTaskRegistry",
    "StaticTaskRegistry",
    "TaskRegistry",
    "ClaimStore",
]
