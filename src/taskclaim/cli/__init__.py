"""
CLI commands for taskclaim.
"""

from .main import app

__all__ = ["app"]
