from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from blog_api.domain.errors import RecordNotFoundError
from blog_api.domain.records import Comment, Post, PostIn, RecordKind
from blog_api.routers import get_store, json_body

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=list[Post])
def list_posts(request: Request):
    return get_store(request).list_all(RecordKind.POSTS)


@router.post("", response_model=Post)
def create_post(request: Request, payload: PostIn = Depends(json_body(PostIn))):
    return get_store(request).create(RecordKind.POSTS, payload)


# Registered before /{post_id}/comments so /posts/author/comments means author "comments".
@router.get("/author/{author}", response_model=list[Post])
def list_author_posts(author: str, request: Request):
    return get_store(request).posts_by_author(author)


@router.get("/{post_id}", response_model=Post)
def get_post(post_id: int, request: Request):
    try:
        return get_store(request).get(RecordKind.POSTS, post_id)
    except RecordNotFoundError as exc:
        raise HTTPException(404, str(exc))


@router.put("/{post_id}", response_model=Post)
def update_post(post_id: int, request: Request, payload: PostIn = Depends(json_body(PostIn))):
    try:
        return get_store(request).update(RecordKind.POSTS, post_id, payload)
    except RecordNotFoundError as exc:
        raise HTTPException(404, str(exc))


@router.delete("/{post_id}", response_model=list[Post])
def delete_post(post_id: int, request: Request):
    try:
        return get_store(request).delete(RecordKind.POSTS, post_id)
    except RecordNotFoundError as exc:
        raise HTTPException(404, str(exc))


@router.get("/{post_id}/comments", response_model=list[Comment])
def list_post_comments(post_id: int, request: Request):
    return get_store(request).comments_for_post(post_id)
