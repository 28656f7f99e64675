"""SQL Model Store — record store adapter for AIModel listings.

Invariants:
    - Every operation runs in its own session and commits before returning
    - increment_counter is a single UPDATE ... SET purchased = purchased + delta
      RETURNING purchased, guarded by the id: the row-level atomicity of the
      store is the only isolation, and the value returned is this call's own
    - Returned AIModel instances are detached (expire_on_commit=False)
"""

import logging
from typing import Any, Sequence

from sqlalchemy import delete, select, update

from modelmart.core.domain_types import ModelId
from modelmart.core.listing_query import ListingQuery
from modelmart.infrastructure.database import DatabaseSessionManager
from modelmart.models.ai_model import AIModel

logger = logging.getLogger(__name__)

_COUNTER_FIELDS = frozenset({"purchased"})


class SqlModelStore:
    """ModelStore implementation over SQLAlchemy async sessions."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def add(self, data: dict[str, Any]) -> AIModel:
        async with self._manager.session() as db:
            record = AIModel(**data)
            db.add(record)
            await db.commit()
            await db.refresh(record)
            return record

    async def find_by_id(self, model_id: ModelId) -> AIModel | None:
        async with self._manager.session() as db:
            result = await db.execute(
                select(AIModel).where(AIModel.id == model_id),
            )
            return result.scalar_one_or_none()

    async def list(self, query: ListingQuery) -> Sequence[AIModel]:
        stmt = select(AIModel).order_by(AIModel.created_at.desc())
        if query.developer_email:
            stmt = stmt.where(AIModel.developer_email == query.developer_email)
        if query.category:
            stmt = stmt.where(AIModel.category == query.category)
        if query.skip:
            stmt = stmt.offset(query.skip)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        async with self._manager.session() as db:
            result = await db.execute(stmt)
            return result.scalars().all()

    async def increment_counter(
        self, model_id: ModelId, field: str = "purchased", delta: int = 1,
    ) -> int | None:
        """Conditional increment; returns the new value, or None if no row matched."""
        if field not in _COUNTER_FIELDS:
            raise ValueError(f"{field} is not a counter column")
        column = getattr(AIModel, field)
        async with self._manager.session() as db:
            result = await db.execute(
                update(AIModel)
                .where(AIModel.id == model_id)
                .values({field: column + delta})
                .returning(column),
            )
            new_value = result.scalar_one_or_none()
            await db.commit()
            return new_value

    async def update_fields(
        self, model_id: ModelId, patch: dict[str, Any],
    ) -> AIModel | None:
        """Apply patch in one UPDATE and return the fresh row (None if gone)."""
        async with self._manager.session() as db:
            if patch:
                await db.execute(
                    update(AIModel).where(AIModel.id == model_id).values(**patch),
                )
                await db.commit()
            result = await db.execute(
                select(AIModel).where(AIModel.id == model_id),
            )
            return result.scalar_one_or_none()

    async def delete_by_id(self, model_id: ModelId) -> int:
        async with self._manager.session() as db:
            result = await db.execute(
                delete(AIModel).where(AIModel.id == model_id),
            )
            await db.commit()
            return result.rowcount
