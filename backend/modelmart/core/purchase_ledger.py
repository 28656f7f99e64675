"""Purchase Ledger Entry — pure construction of the record written to the ledger store.

Invariants:
    - build_ledger_entry is PURE: id and timestamp are passed in by the shell
    - Server-owned keys (id, modelId, buyerUid, purchaseDate) always win over
      caller metadata with the same name
    - purchase_date is ISO-8601 UTC

Design Decisions:
    - Metadata stored separately from server fields and merged only on the wire:
      the ledger columns stay queryable, the caller's extras stay opaque
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from modelmart.core.domain_types import LedgerEntryId, ModelId


RESERVED_KEYS: frozenset[str] = frozenset(
    {"id", "modelId", "buyerUid", "purchaseDate"},
)


@dataclass(frozen=True)
class LedgerEntry:
    """One purchase, as persisted in the ledger store."""
    id: LedgerEntryId
    model_id: ModelId
    buyer_uid: str
    purchase_date: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        """Flattened wire shape: caller metadata plus server-owned fields."""
        return {
            **self.metadata,
            "id": str(self.id),
            "modelId": str(self.model_id),
            "buyerUid": self.buyer_uid,
            "purchaseDate": self.purchase_date,
        }


def build_ledger_entry(
    model_id: ModelId,
    buyer_uid: str,
    metadata: dict[str, Any] | None,
    entry_id: LedgerEntryId,
    now: datetime,
) -> LedgerEntry:
    """Step 3 of a purchase: fresh id, copied metadata, buyer, server timestamp."""
    extras = {
        k: v for k, v in (metadata or {}).items() if k not in RESERVED_KEYS
    }
    return LedgerEntry(
        id=entry_id,
        model_id=model_id,
        buyer_uid=buyer_uid,
        purchase_date=now.astimezone(timezone.utc).isoformat(),
        metadata=extras,
    )
