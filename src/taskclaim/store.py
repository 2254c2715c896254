"""
Claim store for taskclaim.

The store is a single JSON document mapping task id -> claim. It is read
fully into memory, mutated and written back in full. There is no
inter-process lock: two processes doing read-modify-write at the same time
can lose one of the updates. Callers that need stronger guarantees must
serialize access themselves.
"""

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from .errors import StoreError
from .models import ClaimDocument

logger = logging.getLogger(__name__)


def atomic_write_json(file_path: Path, payload: str) -> None:
    """Write ``payload`` to ``file_path`` via a temp file and ``os.replace``."""
    temp_file = file_path.with_name(f"{file_path.name}.tmp.{uuid.uuid4().hex}")
    try:
        with open(temp_file, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_file, file_path)
    finally:
        if temp_file.exists():
            temp_file.unlink()


class ClaimStore:
    """Whole-document JSON persistence for claims."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> ClaimDocument:
        """Load the store; a missing or unparsable file is an empty store."""
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return ClaimDocument()
        except OSError as e:
            raise StoreError(self.path, "read", e) from e

        if not raw.strip():
            return ClaimDocument()

        try:
            return ClaimDocument.model_validate(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                f"Claim store {self.path} is not valid, treating it as empty",
                extra={"json_data": {"path": str(self.path), "error": str(e)}},
            )
            return ClaimDocument()

    def save(self, document: ClaimDocument) -> None:
        """Replace the store with ``document``."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            atomic_write_json(self.path, document.to_json() + "\n")
        except OSError as e:
            raise StoreError(self.path, "write", e) from e
        logger.debug(
            "Claim store written",
            extra={"json_data": {"path": str(self.path), "claims": len(document.claims)}},
        )
