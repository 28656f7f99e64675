"""PurchaseRecord ORM — one row per purchase in the ledger store.

Invariants:
    - Append-only: rows are inserted by the purchase flow and never updated or deleted
    - At most one row per (buyer_uid, model_id): uq_purchase_history_buyer_model
    - model_id is a plain UUID column, not a foreign key (different store)

Design Decisions:
    - purchase_date kept as the ISO-8601 string returned to clients: lexical order
      equals chronological order because every value is UTC with the same offset
    - purchase_metadata as JSON: caller extras are opaque to the marketplace
"""

import uuid

from sqlalchemy import JSON, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from modelmart.db.base import LedgerBase


class PurchaseRecord(LedgerBase):
    """Ledger entry — buyer bought model at purchase_date."""
    __tablename__ = "purchase_history"
    __table_args__ = (
        UniqueConstraint(
            "buyer_uid", "model_id", name="uq_purchase_history_buyer_model",
        ),
        Index("ix_purchase_history_buyer_uid", "buyer_uid"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    model_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    buyer_uid: Mapped[str] = mapped_column(String(128), nullable=False)
    purchase_metadata: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=dict,
    )
    purchase_date: Mapped[str] = mapped_column(String(40), nullable=False)
