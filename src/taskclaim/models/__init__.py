"""
Claim models for taskclaim.

This module provides the persisted claim records and the operation results.
"""

from .claim import Claim, ClaimDocument, format_timestamp, to_utc
from .results import (
    ClaimResult,
    ClaimState,
    ClaimStatusReport,
    ClaimView,
    CleanResult,
    ReleaseResult,
    StaleReason,
)

__all__ = [
    "Claim",
    "ClaimDocument",
    "format_timestamp",
    "to_utc",
    "ClaimResult",
    "ClaimState",
    "ClaimStatusReport",
    "ClaimView",
    "CleanResult",
    "ReleaseResult",
    "StaleReason",
]
