# File: site_drift/errors.py
"""site_drift.errors: exception hierarchy shared by the engines, the store and the CLI."""

from __future__ import annotations

__all__ = (
    "SiteDriftError",
    "FetchError",
    "ConfigError",
    "SnapshotError",
    "SnapshotNotFoundError",
    "SnapshotParseError",
)


class SiteDriftError(Exception):
    """Base class for all SiteDrift errors."""


class FetchError(SiteDriftError):
    """A single page could not be retrieved (transport error, timeout, browser failure)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ConfigError(SiteDriftError, ValueError):
    """Configuration file is unreadable or has the wrong shape."""


class SnapshotError(SiteDriftError):
    """Base class for snapshot store failures."""


class SnapshotNotFoundError(SnapshotError, FileNotFoundError):
    """Snapshot file does not exist."""


class SnapshotParseError(SnapshotError, ValueError):
    """Snapshot file is not well-formed JSON or does not describe a site tree."""
