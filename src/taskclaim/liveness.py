"""
Process liveness probes.

A probe answers whether a process id is currently alive on the local host.
Probing is best effort: a recycled pid reads as alive, and a pid we are not
permitted to inspect reads as dead so that it can never block a task forever.
"""

import os
from abc import ABC, abstractmethod
from typing import Optional

import psutil


class ProcessLivenessProbe(ABC):
    """Capability interface for checking whether a pid is alive."""

    def is_alive(self, pid: Optional[int]) -> bool:
        if not pid or pid < 0:
            return False
        return self._probe(pid)

    @abstractmethod
    def _probe(self, pid: int) -> bool:
        """Probe a positive pid. Must not raise."""


class SignalProbe(ProcessLivenessProbe):
    """POSIX probe: deliver signal 0 to the pid."""

    def _probe(self, pid: int) -> bool:
        try:
            os.kill(pid, 0)
            return True
        except (OSError, OverflowError):
            return False


class ProcessTableProbe(ProcessLivenessProbe):
    """Probe that looks the pid up in the process table."""

    def _probe(self, pid: int) -> bool:
        try:
            return psutil.Process(pid).is_running()
        except (psutil.Error, OverflowError, ValueError):
            return False


def default_probe() -> ProcessLivenessProbe:
    """Return the probe for the current platform."""
    if os.name == "posix":
        return SignalProbe()
    return ProcessTableProbe()


def current_owner_pid() -> int:
    """Pid to record as a claim's owner.

    The invoking process is usually a short-lived front end for a longer-lived
    agent, so the parent pid is recorded when the platform reports one.
    """
    return os.getppid() or os.getpid()
