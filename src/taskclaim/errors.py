"""
Exceptions raised by taskclaim.
"""

from pathlib import Path

from .models import Claim, format_timestamp


class ClaimError(Exception):
    """Base class for taskclaim errors."""


class ClaimConflictError(ClaimError):
    """The task is held by a live process whose lease has not expired.

    This is an expected, recoverable condition: the caller can wait or pick
    different work.
    """

    def __init__(self, task_id: str, holder: Claim):
        self.task_id = task_id
        self.holder = holder
        super().__init__(
            f"Task {task_id} is claimed by {holder.agent_id} "
            f"(pid {holder.pid}) until {format_timestamp(holder.expires_at)}"
        )


class StoreError(ClaimError):
    """The claim store could not be read or written."""

    def __init__(self, path: Path, action: str, cause: OSError):
        self.path = path
        self.action = action
        self.cause = cause
        super().__init__(f"Failed to {action} claim store {path}: {cause}")
