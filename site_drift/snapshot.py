# File: site_drift/snapshot.py
"""site_drift.snapshot: durable JSON storage of site trees.

A snapshot file holds ``{url, title, children, depth}`` recursively and
round-trips exactly through :meth:`SnapshotStore.save` / :meth:`SnapshotStore.load`.
"""

from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from site_drift.crawler.models import SiteNode
from site_drift.errors import SnapshotNotFoundError, SnapshotParseError
from site_drift.logger import logger

__all__ = ["SnapshotStore", "SNAPSHOT_SUFFIX"]

SNAPSHOT_SUFFIX = ".json"


def _fill_depths(node: SiteNode, depth: int) -> None:
    """Give nodes without a stored depth their position in the tree.

    A stored depth must equal the position (root 0, child = parent + 1).
    """
    stack = [(node, depth)]
    while stack:
        current, expected = stack.pop()
        if "depth" not in current.model_fields_set:
            current.depth = expected
        elif current.depth != expected:
            raise SnapshotParseError(
                f"{current.url} is stored at depth {current.depth} but sits at depth {expected}"
            )
        stack.extend((child, expected + 1) for child in current.children)


class SnapshotStore:
    """Reads and writes snapshot files inside one directory."""

    def __init__(self, directory: Union[str, Path] = "snapshots") -> None:
        self.directory = Path(directory)

    def path_for(self, identifier: str) -> Path:
        return self.directory / f"{identifier}{SNAPSHOT_SUFFIX}"

    def save(self, tree: SiteNode, identifier: str) -> Path:
        """Write *tree* as indented UTF-8 JSON and return the file path."""
        path = self.path_for(identifier)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = tree.model_dump()
        with path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.info("Snapshot saved: %s (%d pages)", path, tree.count())
        return path

    def load(self, path: Union[str, Path]) -> SiteNode:
        """Read a snapshot file.

        Raises SnapshotNotFoundError for a missing file and SnapshotParseError
        when the content is not JSON, not a site tree, or has stored depths
        that disagree with the tree shape.
        """
        p = Path(path)
        if not p.is_file():
            raise SnapshotNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(p))
        try:
            data: Any = json.loads(p.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SnapshotParseError(f"Invalid JSON in {p}: {exc}") from exc
        if not isinstance(data, dict):
            raise SnapshotParseError(f"Top level of snapshot must be an object, got {type(data).__name__}")
        try:
            tree = SiteNode.model_validate(data)
        except ValidationError as exc:
            raise SnapshotParseError(f"{p} is not a site tree: {exc}") from exc
        _fill_depths(tree, 0)
        logger.debug("Snapshot loaded: %s (%d pages)", p, tree.count())
        return tree

    def list(self) -> List[Path]:
        """Snapshot files of the directory, newest first."""
        if not self.directory.is_dir():
            return []
        files = [p for p in self.directory.glob(f"*{SNAPSHOT_SUFFIX}") if p.is_file()]
        return sorted(files, key=lambda p: p.stat().st_mtime, reverse=True)

    def latest(self, url_token: str) -> Optional[Path]:
        """Newest snapshot named ``<url_token>-<revision>.json``.

        Revisions (git short hashes, UTC timestamps) never contain ``-``, so
        ``docs.example-foo-abc1234.json`` belongs to another site and is not a
        match for ``docs.example``.
        """
        prefix = f"{url_token}-"
        for path in self.list():
            if not path.stem.startswith(prefix):
                continue
            revision = path.stem[len(prefix):]
            if revision and "-" not in revision:
                return path
        return None
