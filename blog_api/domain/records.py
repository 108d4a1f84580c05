"""Record types stored by the API and the payloads used to write them."""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecordKind(str, Enum):
    POSTS = "posts"
    COMMENTS = "comments"


class _Record(BaseModel):
    # Stored records are shared between threads and never mutated in place.
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Post(_Record):
    id: int = 0
    title: str = ""
    author: str = ""


class Comment(_Record):
    id: int = 0
    body: str = ""
    post_id: int = Field(0, alias="postID")


class Profile(_Record):
    name: str = ""


class PostIn(BaseModel):
    """Body of POST/PUT /posts. Any id sent by the client is ignored."""

    title: str = ""
    author: str = ""


class CommentIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    body: str = ""
    post_id: int = Field(0, alias="postID")


class ProfileIn(BaseModel):
    name: str = ""


RECORD_TYPES: dict[RecordKind, type[_Record]] = {
    RecordKind.POSTS: Post,
    RecordKind.COMMENTS: Comment,
}
