# File: site_drift/utils.py
"""site_drift.utils: URL normalisation and snapshot identifiers."""

from __future__ import annotations

import re
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence, Union
from urllib.parse import urldefrag, urlparse, urlunparse

from site_drift.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "url_id",
    "revision_marker",
    "snapshot_identifier",
)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]")


def normalize_url(url: str) -> str:
    """Drop the fragment, lower-case scheme and host, turn an empty path into ``/``.

    Raises ValueError for URLs ``urllib`` cannot parse (e.g. a broken IPv6 host).
    """
    joined, _ = urldefrag(url)
    parsed = urlparse(joined)
    path = parsed.path or "/"
    return urlunparse(
        (parsed.scheme.lower(), parsed.netloc.lower(), path, parsed.params, parsed.query, "")
    )


def url_id(url: str) -> str:
    """Filesystem-safe token for *url*: ``https://docs.trunk.io/cli/`` → ``docs.trunk.io_cli``."""
    token = _SCHEME_RE.sub("", url.strip()).strip("/")
    token = token.replace("/", "_")
    return _UNSAFE_RE.sub("_", token)


def revision_marker(cwd: Union[str, Path, None] = None) -> str:
    """Short git hash of the working tree, or a UTC timestamp outside a repository."""
    try:
        proc = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.debug("git revision unavailable (%s), using timestamp", exc)
        return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return proc.stdout.strip()


def snapshot_identifier(url: str, revision: Optional[str] = None) -> str:
    """Identifier of a snapshot file: ``<url_id>-<revision>``.

    Raises ValueError for a revision containing ``-``, which would make the
    name ambiguous with the snapshots of another site.
    """
    revision = revision or revision_marker()
    if "-" in revision:
        raise ValueError(f"revision must not contain '-': {revision!r}")
    return f"{url_id(url)}-{revision}"
