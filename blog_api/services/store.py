"""In-memory store for posts, comments and the profile, mirrored to disk."""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from blog_api.domain.errors import PersistenceError, RecordNotFoundError
from blog_api.domain.records import RECORD_TYPES, Comment, Post, Profile, RecordKind
from blog_api.repositories.json_storage import SnapshotWriter

logger = logging.getLogger(__name__)


def _payload_dict(payload: BaseModel | Mapping[str, Any] | None) -> dict:
    if payload is None:
        return {}
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True)
    return dict(payload)


def _record_list(state: Mapping[str, Any], key: str) -> list:
    records = state.get(key) or []
    if not isinstance(records, list):
        raise PersistenceError(f"invalid snapshot: {key} is not a list")
    return records


class _Collection:
    """Ordered records of one kind plus the counter that hands out ids."""

    def __init__(self, record_type: type[BaseModel]) -> None:
        self.record_type = record_type
        self.records: list = []
        self.next_id = 1

    def build(self, record_id: int, payload: BaseModel | Mapping[str, Any] | None):
        data = _payload_dict(payload)
        data["id"] = record_id
        return self.record_type.model_validate(data)

    def index_of(self, record_id: int) -> int | None:
        for index, item in enumerate(self.records):
            if item.id == record_id:
                return index
        return None

    def reset(self, records: list) -> None:
        self.records = list(records)
        self.next_id = max((item.id for item in self.records), default=0) + 1


class Store:
    """Holds every collection behind one lock and snapshots after each call.

    Reads also trigger a snapshot, so the file on disk is fresh after any
    request. The snapshot is written before the lock is released and therefore
    always matches the in-memory state of the call that produced it.
    """

    def __init__(
        self,
        writer: SnapshotWriter | None = None,
        *,
        cascade_post_delete: bool = False,
        strict_persistence: bool = False,
    ) -> None:
        self._lock = threading.RLock()
        self._writer = writer
        self.cascade_post_delete = cascade_post_delete
        self.strict_persistence = strict_persistence
        self._collections = {kind: _Collection(model) for kind, model in RECORD_TYPES.items()}
        self._profile = Profile()

    # -------------------------- persistence --------------------------
    def _persist(self) -> None:
        if self._writer is None:
            return
        try:
            self._writer.save(self.snapshot())
        except PersistenceError:
            if self.strict_persistence:
                raise

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "posts": [item.model_dump(by_alias=True) for item in self._collections[RecordKind.POSTS].records],
                "comments": [item.model_dump(by_alias=True) for item in self._collections[RecordKind.COMMENTS].records],
                "profile": self._profile.model_dump(by_alias=True),
            }

    def flush(self) -> None:
        """Write the current state regardless of pending operations."""
        with self._lock:
            self._persist()

    def restore(self, state: Mapping[str, Any]) -> None:
        """Replace all state with a snapshot document; counters resume after the highest id.

        Raises PersistenceError when the document does not hold valid records.
        """
        try:
            posts = [Post.model_validate(item) for item in _record_list(state, "posts")]
            comments = [Comment.model_validate(item) for item in _record_list(state, "comments")]
            profile = Profile.model_validate(state.get("profile") or {})
        except (ValidationError, AttributeError) as exc:
            raise PersistenceError(f"invalid snapshot: {exc}") from exc
        with self._lock:
            self._collections[RecordKind.POSTS].reset(posts)
            self._collections[RecordKind.COMMENTS].reset(comments)
            self._profile = profile
        logger.info("Restored %d posts and %d comments", len(posts), len(comments))

    def reload(self) -> bool:
        """Load the snapshot file into memory. Returns False when there is none."""
        if self._writer is None:
            return False
        state = self._writer.load()
        if state is None:
            return False
        self.restore(state)
        return True

    # -------------------------- records --------------------------
    def list_all(self, kind: RecordKind) -> list:
        with self._lock:
            records = list(self._collections[kind].records)
            self._persist()
            return records

    def get(self, kind: RecordKind, record_id: int):
        with self._lock:
            collection = self._collections[kind]
            index = collection.index_of(record_id)
            if index is None:
                raise RecordNotFoundError(kind.value, record_id)
            record = collection.records[index]
            self._persist()
            return record

    def create(self, kind: RecordKind, payload: BaseModel | Mapping[str, Any] | None = None):
        with self._lock:
            collection = self._collections[kind]
            record = collection.build(collection.next_id, payload)
            collection.next_id += 1
            collection.records.append(record)
            self._persist()
            return record

    def update(self, kind: RecordKind, record_id: int, payload: BaseModel | Mapping[str, Any] | None = None):
        """Replace the whole record; fields missing from ``payload`` fall back to zero values."""
        with self._lock:
            collection = self._collections[kind]
            index = collection.index_of(record_id)
            if index is None:
                raise RecordNotFoundError(kind.value, record_id)
            record = collection.build(record_id, payload)
            collection.records[index] = record
            self._persist()
            return record

    def delete(self, kind: RecordKind, record_id: int) -> list:
        """Remove the record and return what is left of its collection."""
        with self._lock:
            collection = self._collections[kind]
            index = collection.index_of(record_id)
            if index is None:
                raise RecordNotFoundError(kind.value, record_id)
            del collection.records[index]
            if kind is RecordKind.POSTS and self.cascade_post_delete:
                removed = self._remove_comments_for(record_id)
                if removed:
                    logger.info("Removed %d comments of deleted post %s", len(removed), record_id)
            remaining = list(collection.records)
            self._persist()
            return remaining

    # -------------------------- posts / comments --------------------------
    def posts_by_author(self, author: str) -> list[Post]:
        with self._lock:
            matches = [post for post in self._collections[RecordKind.POSTS].records if post.author == author]
            self._persist()
            return matches

    def comments_for_post(self, post_id: int) -> list[Comment]:
        with self._lock:
            matches = [item for item in self._collections[RecordKind.COMMENTS].records if item.post_id == post_id]
            self._persist()
            return matches

    def delete_comments_by_post_id(self, post_id: int) -> list[Comment]:
        """Remove every comment pointing at ``post_id`` and return the removed ones."""
        with self._lock:
            removed = self._remove_comments_for(post_id)
            self._persist()
            return removed

    def _remove_comments_for(self, post_id: int) -> list[Comment]:
        collection = self._collections[RecordKind.COMMENTS]
        removed = [item for item in collection.records if item.post_id == post_id]
        collection.records = [item for item in collection.records if item.post_id != post_id]
        return removed

    # -------------------------- profile --------------------------
    def get_profile(self) -> Profile:
        with self._lock:
            profile = self._profile
            self._persist()
            return profile

    def set_profile(self, payload: BaseModel | Mapping[str, Any] | None = None) -> Profile:
        with self._lock:
            self._profile = Profile.model_validate(_payload_dict(payload))
            self._persist()
            return self._profile

    def clear_profile(self) -> Profile:
        with self._lock:
            self._profile = Profile()
            self._persist()
            return self._profile
