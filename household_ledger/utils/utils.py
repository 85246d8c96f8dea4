"""Generic project helpers."""

from datetime import datetime, timezone
from pathlib import Path


def get_project_root() -> Path:
    """Return the repository root directory."""
    return Path(__file__).resolve().parents[2]


def utc_now() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(timezone.utc)


__all__ = ["get_project_root", "utc_now"]
