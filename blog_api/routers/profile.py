from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from blog_api.domain.records import Profile, ProfileIn
from blog_api.routers import get_store, json_body

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=Profile)
def get_profile(request: Request):
    return get_store(request).get_profile()


@router.post("", response_model=Profile)
def create_profile(request: Request, payload: ProfileIn = Depends(json_body(ProfileIn))):
    return get_store(request).set_profile(payload)


@router.put("", response_model=Profile)
def update_profile(request: Request, payload: ProfileIn = Depends(json_body(ProfileIn))):
    return get_store(request).set_profile(payload)


@router.delete("", response_model=Profile)
def delete_profile(request: Request):
    """Reset the profile to its empty value."""
    return get_store(request).clear_profile()
