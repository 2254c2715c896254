"""
Pytest configuration and shared fixtures.
"""

import logging
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

import pytest

from taskclaim import ClaimCoordinator, ClaimStore, LeasePolicy, StaticTaskRegistry
from taskclaim.liveness import ProcessLivenessProbe

START = datetime(2026, 10, 18, 9, 0, 0, tzinfo=timezone.utc)


class FakeProbe(ProcessLivenessProbe):
    """Probe whose answers are set by the test."""

    def __init__(self, alive: Optional[set[int]] = None):
        self.alive = set(alive or ())

    def _probe(self, pid: int) -> bool:
        return pid in self.alive

    def kill(self, pid: int) -> None:
        self.alive.discard(pid)


class FakeClock:
    """Controllable clock."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def reset_taskclaim_logger() -> Iterator[None]:
    """Drop handlers the CLI attaches so they do not leak between tests."""
    logger = logging.getLogger("taskclaim")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "claims" / "task-claims.json"


@pytest.fixture
def store(store_path: Path) -> ClaimStore:
    return ClaimStore(store_path)


@pytest.fixture
def probe() -> FakeProbe:
    return FakeProbe(alive={4242})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> StaticTaskRegistry:
    return StaticTaskRegistry({"T1": 30, "T2": {"effortMinutes": 1}, "T3": 90})


@pytest.fixture
def coordinator(store, probe, clock, registry) -> ClaimCoordinator:
    """Coordinator with deterministic pid, agent ids, clock and liveness."""
    counter: Iterator[int] = iter(range(1, 10_000))
    return ClaimCoordinator(
        store,
        probe=probe,
        policy=LeasePolicy(registry=registry),
        clock=clock,
        agent_id_factory=lambda: f"agent-test-{next(counter)}",
        pid_provider=lambda: 4242,
    )


# Pytest configuration
def pytest_configure(config: Any) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "cli: mark test as CLI test")
    config.addinivalue_line(
        "markers", "functional: mark test as functional test (spawns processes)"
    )


def pytest_collection_modifyitems(config: Any, items: list[Any]) -> None:
    """Add markers based on file location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "cli" in path:
            item.add_marker(pytest.mark.cli)
        elif "functional" in path:
            item.add_marker(pytest.mark.functional)
