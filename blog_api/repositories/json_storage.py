"""
JSON snapshot adapter.

The whole store is serialized into one document with the keys ``posts``,
``comments`` and ``profile``. Every write overwrites the previous content.
"""

from __future__ import annotations

from pathlib import Path
import json
import logging
import os

from blog_api.domain.errors import PersistenceError

logger = logging.getLogger(__name__)

SNAPSHOT_KEYS = ("posts", "comments", "profile")


class SnapshotWriter:
    """Writes and reads the full-state snapshot file."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def save(self, state: dict) -> None:
        """Replace the snapshot file with ``state``.

        The document goes to a temporary sibling first and is then moved over
        the target, so readers never see a half-written file. Failures are
        logged and re-raised as PersistenceError; callers decide whether to
        swallow them.
        """
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps({key: state[key] for key in SNAPSHOT_KEYS}, ensure_ascii=False, indent=4)
            tmp.write_text(payload + "\n", encoding="utf-8")
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError, KeyError) as exc:
            logger.error("Error writing snapshot %s: %s", self.path, exc)
            try:
                tmp.unlink()
            except OSError:
                pass
            raise PersistenceError(f"could not write {self.path}: {exc}") from exc

    def load(self) -> dict | None:
        """Return the stored document, or None when no snapshot exists yet."""
        if not self.path.exists():
            return None
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.error("Error reading snapshot %s: %s", self.path, exc)
            raise PersistenceError(f"could not read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.path} does not hold a snapshot object")
        return snapshot_defaults(data)


def snapshot_defaults(data: dict) -> dict:
    data.setdefault("posts", [])
    data.setdefault("comments", [])
    data.setdefault("profile", {})
    return data
