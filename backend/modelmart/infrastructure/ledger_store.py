"""SQL Ledger Store — purchase-history adapter on the secondary store.

Invariants:
    - Append-only: no update or delete operation exists on this adapter
    - insert maps the (buyer_uid, model_id) unique violation to DuplicateEntryError
      so callers can tell a lost race from an unavailable store
    - Rows are converted to core LedgerEntry values before leaving the adapter
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from modelmart.core.domain_types import LedgerEntryId, ModelId
from modelmart.core.errors import DuplicateEntryError, ErrorContext
from modelmart.core.purchase_ledger import LedgerEntry
from modelmart.infrastructure.database import DatabaseSessionManager
from modelmart.models.purchase_record import PurchaseRecord

logger = logging.getLogger(__name__)


def _to_entry(row: PurchaseRecord) -> LedgerEntry:
    return LedgerEntry(
        id=LedgerEntryId(row.id),
        model_id=ModelId(row.model_id),
        buyer_uid=row.buyer_uid,
        purchase_date=row.purchase_date,
        metadata=dict(row.purchase_metadata or {}),
    )


class SqlLedgerStore:
    """LedgerStore implementation over SQLAlchemy async sessions."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def find_by_buyer_and_model(
        self, buyer_uid: str, model_id: ModelId,
    ) -> LedgerEntry | None:
        async with self._manager.session() as db:
            result = await db.execute(
                select(PurchaseRecord).where(
                    PurchaseRecord.buyer_uid == buyer_uid,
                    PurchaseRecord.model_id == model_id,
                ).limit(1),
            )
            row = result.scalar_one_or_none()
            return _to_entry(row) if row else None

    async def insert(self, entry: LedgerEntry) -> None:
        async with self._manager.session() as db:
            db.add(PurchaseRecord(
                id=entry.id,
                model_id=entry.model_id,
                buyer_uid=entry.buyer_uid,
                purchase_metadata=entry.metadata,
                purchase_date=entry.purchase_date,
            ))
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise DuplicateEntryError(
                    "purchase already recorded for buyer and model",
                    ErrorContext(model_id=str(entry.model_id), caller_id=entry.buyer_uid),
                ) from None

    async def list_by_buyer(self, buyer_uid: str) -> list[LedgerEntry]:
        async with self._manager.session() as db:
            result = await db.execute(
                select(PurchaseRecord)
                .where(PurchaseRecord.buyer_uid == buyer_uid)
                .order_by(PurchaseRecord.purchase_date.desc()),
            )
            return [_to_entry(row) for row in result.scalars().all()]
