from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from blog_api.domain.errors import RecordNotFoundError
from blog_api.domain.records import Comment, CommentIn, RecordKind
from blog_api.routers import get_store, json_body

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("", response_model=list[Comment])
def list_comments(request: Request):
    return get_store(request).list_all(RecordKind.COMMENTS)


@router.post("", response_model=Comment)
def create_comment(request: Request, payload: CommentIn = Depends(json_body(CommentIn))):
    return get_store(request).create(RecordKind.COMMENTS, payload)


@router.get("/post/{post_id}", response_model=list[Comment])
def list_comments_for_post(post_id: int, request: Request):
    return get_store(request).comments_for_post(post_id)


@router.delete("/post/{post_id}", response_model=list[Comment])
def delete_comments_for_post(post_id: int, request: Request):
    """Remove every comment of a post. Returns the removed comments."""
    return get_store(request).delete_comments_by_post_id(post_id)


@router.get("/{comment_id}", response_model=Comment)
def get_comment(comment_id: int, request: Request):
    try:
        return get_store(request).get(RecordKind.COMMENTS, comment_id)
    except RecordNotFoundError as exc:
        raise HTTPException(404, str(exc))


@router.put("/{comment_id}", response_model=Comment)
def update_comment(comment_id: int, request: Request, payload: CommentIn = Depends(json_body(CommentIn))):
    try:
        return get_store(request).update(RecordKind.COMMENTS, comment_id, payload)
    except RecordNotFoundError as exc:
        raise HTTPException(404, str(exc))


@router.delete("/{comment_id}", response_model=list[Comment])
def delete_comment(comment_id: int, request: Request):
    try:
        return get_store(request).delete(RecordKind.COMMENTS, comment_id)
    except RecordNotFoundError as exc:
        raise HTTPException(404, str(exc))
