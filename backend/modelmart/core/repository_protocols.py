"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All store and identity IO accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - Store operations are atomic per row/document only; no cross-store transaction

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; core decisions that USE these
      results stay synchronous and pure
"""

from datetime import datetime
from typing import Any, Protocol, Sequence

from modelmart.core.domain_types import Caller, ModelId
from modelmart.core.listing_query import ListingQuery
from modelmart.core.purchase_ledger import LedgerEntry


class ModelRecordLike(Protocol):
    """Structural contract for model records handed back by the record store."""
    id: Any
    model_name: str
    category: str
    price: float
    developer_email: str
    developer_uid: str | None
    purchased: int
    created_at: datetime


class ModelStore(Protocol):
    """Contract for the primary record store — implemented by shell."""
    async def add(self, data: dict[str, Any]) -> ModelRecordLike: ...
    async def find_by_id(self, model_id: ModelId) -> ModelRecordLike | None: ...
    async def list(self, query: ListingQuery) -> Sequence[ModelRecordLike]: ...
    async def increment_counter(
        self, model_id: ModelId, field: str, delta: int,
    ) -> int | None: ...
    async def update_fields(
        self, model_id: ModelId, patch: dict[str, Any],
    ) -> ModelRecordLike | None: ...
    async def delete_by_id(self, model_id: ModelId) -> int: ...


class LedgerStore(Protocol):
    """Contract for the secondary purchase-history store — implemented by shell."""
    async def find_by_buyer_and_model(
        self, buyer_uid: str, model_id: ModelId,
    ) -> LedgerEntry | None: ...
    async def insert(self, entry: LedgerEntry) -> None: ...
    async def list_by_buyer(self, buyer_uid: str) -> list[LedgerEntry]: ...


class IdentityVerifier(Protocol):
    """Contract for bearer credential verification — implemented by shell."""
    async def verify(self, token: str) -> Caller: ...
