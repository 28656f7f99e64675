"""Model Listing Routes — public catalog reads and owner-gated writes.

Invariants:
    - Reads are public; POST/PATCH/DELETE require a verified caller
    - /models/latest is registered before /models/{model_id} so it is not
      captured as an id
    - Path ids are taken as raw strings and parsed by the catalog, so a malformed
      id is always 400 INVALID_ID, never 404
    - PATCH takes the raw JSON body and validates it against ModelUpdate only
      after the ownership check: a non-owner is 403 whatever the payload
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from modelmart.api.dependencies import get_catalog, get_current_caller
from modelmart.config import get_settings
from modelmart.core.domain_types import Caller
from modelmart.core.listing_query import build_listing_query
from modelmart.schemas.ai_model import (
    DeleteResponse, ModelCreate, ModelResponse, ModelUpdate,
)
from modelmart.services.model_catalog import ModelCatalog

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/models", tags=["models"])


@router.get("", response_model=list[ModelResponse])
async def list_models(
    email: str | None = Query(None, max_length=320),
    category: str | None = Query(None, max_length=100),
    latest: bool = False,
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1, le=100),
    catalog: ModelCatalog = Depends(get_catalog),
):
    """List listings newest first, optionally filtered by developer email and category."""
    query = build_listing_query(
        email=email, category=category, latest=latest, skip=skip, limit=limit,
        latest_limit=get_settings().latest_models_limit,
    )
    return await catalog.list_models(query)


@router.get("/latest", response_model=list[ModelResponse])
async def list_latest_models(
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1, le=100),
    catalog: ModelCatalog = Depends(get_catalog),
):
    """Newest listings page (home page carousel)."""
    page_size = limit or get_settings().latest_models_limit
    return await catalog.list_latest(skip=skip, limit=page_size)


@router.get("/{model_id}", response_model=ModelResponse)
async def get_model(model_id: str, catalog: ModelCatalog = Depends(get_catalog)):
    return await catalog.get_model(model_id)


@router.post(
    "", response_model=ModelResponse, status_code=status.HTTP_201_CREATED,
)
async def create_model(
    body: ModelCreate,
    caller: Caller = Depends(get_current_caller),
    catalog: ModelCatalog = Depends(get_catalog),
):
    """Create a listing owned by the caller."""
    return await catalog.create_model(body.model_dump(), caller)


@router.patch("/{model_id}", response_model=ModelResponse)
async def update_model(
    model_id: str,
    body: Any = Body(None),
    caller: Caller = Depends(get_current_caller),
    catalog: ModelCatalog = Depends(get_catalog),
):
    """Owner-only partial update of descriptive fields."""
    return await catalog.update_model(
        model_id, body, caller, validate=_validate_update,
    )


@router.delete("/{model_id}", response_model=DeleteResponse)
async def delete_model(
    model_id: str,
    caller: Caller = Depends(get_current_caller),
    catalog: ModelCatalog = Depends(get_catalog),
):
    """Owner-only delete."""
    deleted = await catalog.delete_model(model_id, caller)
    return DeleteResponse(deleted_count=deleted)


def _validate_update(body: Any) -> dict[str, Any]:
    """ModelUpdate validation, reported like any other request body error."""
    try:
        changes = ModelUpdate.model_validate({} if body is None else body)
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in e.errors()],
        )
    return changes.model_dump(exclude_unset=True)
