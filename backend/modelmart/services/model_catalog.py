"""Model Catalog — create, read, list, update and delete listings with ownership gating.

Invariants:
    - Every raw id goes through parse_model_id first (400 before any lookup)
    - Create: submitted developerEmail must equal the caller's verified email;
      developer_uid is always the caller's uid, never taken from the body
    - Update/delete: 404 when missing, then ownership; a legacy email-owned
      record gets developer_uid persisted BEFORE the requested mutation
    - purchased, created_at and owner fields are untouched by update
    - Update payload validation runs only after the ownership check, so a
      non-owner gets 403 even for a malformed body
"""

import logging
from typing import Any, Callable, Sequence

from modelmart.core.domain_types import Caller, ModelId, parse_model_id
from modelmart.core.errors import ErrorContext, ResourceNotFoundError
from modelmart.core.listing_query import LATEST_LIMIT, ListingQuery
from modelmart.core.model_fields import apply_create_defaults, build_update_patch
from modelmart.core.ownership import require_listing_email, require_owner
from modelmart.core.repository_protocols import ModelRecordLike, ModelStore

logger = logging.getLogger(__name__)


class ModelCatalog:
    """Listing operations over a ModelStore."""

    def __init__(self, models: ModelStore):
        self._models = models

    async def create_model(
        self, data: dict[str, Any], caller: Caller,
    ) -> ModelRecordLike:
        require_listing_email(data["developer_email"], caller)
        fields = apply_create_defaults(data)
        fields["developer_uid"] = caller.uid
        record = await self._models.add(fields)
        logger.info(
            "Model listed", extra={"model_id": str(record.id), "caller_id": caller.uid},
        )
        return record

    async def get_model(self, raw_id: str) -> ModelRecordLike:
        return await self._get_or_404(parse_model_id(raw_id))

    async def list_models(self, query: ListingQuery) -> Sequence[ModelRecordLike]:
        return await self._models.list(query)

    async def list_latest(
        self, skip: int = 0, limit: int = LATEST_LIMIT,
    ) -> Sequence[ModelRecordLike]:
        return await self._models.list(ListingQuery(skip=max(skip, 0), limit=limit))

    async def update_model(
        self,
        raw_id: str,
        changes: Any,
        caller: Caller,
        validate: Callable[[Any], dict[str, Any]] | None = None,
    ) -> ModelRecordLike:
        """Owner-only partial update.

        validate runs after the ownership check so a non-owner is refused
        whatever the payload holds.
        """
        model_id = parse_model_id(raw_id)
        record = await self._get_or_404(model_id)
        decision = require_owner(record, caller, "update", str(model_id))
        if validate is not None:
            changes = validate(changes)
        if decision.migration_needed:
            await self._migrate_owner(model_id, caller)

        updated = await self._models.update_fields(
            model_id, build_update_patch(changes),
        )
        if updated is None:
            raise ResourceNotFoundError("Model", str(model_id))
        return updated

    async def delete_model(self, raw_id: str, caller: Caller) -> int:
        model_id = parse_model_id(raw_id)
        record = await self._get_or_404(model_id)
        decision = require_owner(record, caller, "delete", str(model_id))
        if decision.migration_needed:
            await self._migrate_owner(model_id, caller)

        deleted = await self._models.delete_by_id(model_id)
        if deleted == 0:
            raise ResourceNotFoundError("Model", str(model_id))
        logger.info(
            "Model deleted", extra={"model_id": str(model_id), "caller_id": caller.uid},
        )
        return deleted

    async def _get_or_404(self, model_id: ModelId) -> ModelRecordLike:
        record = await self._models.find_by_id(model_id)
        if record is None:
            raise ResourceNotFoundError(
                "Model", str(model_id), ErrorContext(model_id=str(model_id)),
            )
        return record

    async def _migrate_owner(self, model_id: ModelId, caller: Caller) -> None:
        """One-time email → uid ownership migration for a legacy listing."""
        await self._models.update_fields(model_id, {"developer_uid": caller.uid})
        logger.info(
            "Legacy listing migrated to uid ownership",
            extra={"model_id": str(model_id), "caller_id": caller.uid},
        )
