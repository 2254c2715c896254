"""
Task registries supplying effort estimates.

The registry is an external, read-only source of truth keyed by task id. The
lease policy only needs one number from it: the task's effort in minutes.
"""

import json
import logging
import math
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)


def _coerce_effort(value: Any) -> Optional[int]:
    """Return a positive integer effort, or None for anything else."""
    if isinstance(value, dict):
        value = value.get("effortMinutes", value.get("effort_minutes"))
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value <= 0 or int(value) != value:
        return None
    return int(value)


class TaskRegistry(ABC):
    """Read-only lookup of effort estimates by task id."""

    @abstractmethod
    def effort_minutes(self, task_id: str) -> Optional[int]:
        """Effort estimate for ``task_id`` in minutes, or None when unknown."""


class StaticTaskRegistry(TaskRegistry):
    """Registry backed by an in-memory mapping."""

    def __init__(self, efforts: Optional[Mapping[str, Any]] = None):
        self._efforts = dict(efforts or {})

    def effort_minutes(self, task_id: str) -> Optional[int]:
        return _coerce_effort(self._efforts.get(task_id))


class JsonTaskRegistry(TaskRegistry):
    """Registry read from a JSON file.

    Accepted layouts (optionally nested under a top-level ``"tasks"`` key)::

        {"T1": {"effortMinutes": 30}}
        {"T1": 30}
        [{"id": "T1", "effortMinutes": 30}]

    The file is loaded once, on first lookup. A missing or unreadable file
    means no task has an estimate.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._efforts: Optional[dict[str, Any]] = None

    def _load(self) -> dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info(f"Task registry {self.path} not found, using default estimates")
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(
                f"Task registry {self.path} could not be read, using default estimates",
                extra={"json_data": {"path": str(self.path), "error": str(e)}},
            )
            return {}

        if isinstance(data, dict) and "tasks" in data:
            data = data["tasks"]

        if isinstance(data, list):
            return {
                str(entry["id"]): entry
                for entry in data
                if isinstance(entry, dict) and "id" in entry
            }
        if isinstance(data, dict):
            return data

        logger.warning(f"Task registry {self.path} has an unsupported layout")
        return {}

    def effort_minutes(self, task_id: str) -> Optional[int]:
        if self._efforts is None:
            self._efforts = self._load()
        return _coerce_effort(self._efforts.get(task_id))
