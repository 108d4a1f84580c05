"""
FastAPI routers grouped by resource (posts, comments, profile).

Each file inside this package exposes an APIRouter that is included in the
application built by ``blog_api.app.create_app``.
"""

import json

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError

from blog_api.services.store import Store


def get_store(request: Request) -> Store:
    store = getattr(getattr(request.app, "state", None), "store", None)
    if store is None:
        raise RuntimeError("Store is not configured")
    return store


def json_body(model: type[BaseModel]):
    """Dependency that decodes the body as JSON whatever its content type.

    An empty body yields the zero-valued model.
    """

    async def _parse(request: Request) -> BaseModel:
        raw = await request.body()
        if not raw.strip():
            return model()
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise HTTPException(400, f"Malformed JSON body: {exc}")
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise HTTPException(400, jsonable_encoder(exc.errors(include_url=False)))

    return _parse
