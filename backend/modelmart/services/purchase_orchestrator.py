"""Purchase Orchestrator — sequences one purchase across the record and ledger stores.

Invariants:
    - Order within one execution is fixed: ledger duplicate check → conditional
      counter increment → ledger insert
    - Malformed id, prior purchase and missing model fail BEFORE any write
    - buyer_uid always comes from the verified caller, never the request body
    - A failed ledger write after a successful increment is surfaced as
      PurchasePartialFailureError; it is never reported as success
    - The counter is never decremented: no compensating write exists

Design Decisions:
    - No lock around check-then-increment: concurrent purchases by the same buyer
      for the same model can both pass the check. The ledger's unique constraint
      makes the loser fail with AlreadyPurchasedError; its increment is logged
      as an orphan for reconciliation (ADR: best-effort sequential writes)
    - The counter reported is the value returned by this request's own
      increment, never a later read that could include other buyers
    - clock and id factory injected so tests can pin timestamps
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from modelmart.core.domain_types import LedgerEntryId, parse_model_id
from modelmart.core.errors import (
    AlreadyPurchasedError, DuplicateEntryError, ErrorContext,
    MarketplaceError, PurchasePartialFailureError, ResourceNotFoundError,
)
from modelmart.core.purchase_ledger import LedgerEntry, build_ledger_entry
from modelmart.core.repository_protocols import LedgerStore, ModelStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseResult:
    entry: LedgerEntry
    purchased: int


class PurchaseOrchestrator:
    """Runs the check → increment → record sequence for a single purchase."""

    def __init__(
        self,
        models: ModelStore,
        ledger: LedgerStore,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    ):
        self._models = models
        self._ledger = ledger
        self._clock = clock
        self._id_factory = id_factory

    async def purchase(
        self, raw_model_id: str, buyer_uid: str, metadata: dict[str, Any] | None,
    ) -> PurchaseResult:
        model_id = parse_model_id(raw_model_id)
        log_extra = {"model_id": str(model_id), "caller_id": buyer_uid}

        existing = await self._ledger.find_by_buyer_and_model(buyer_uid, model_id)
        if existing is not None:
            logger.info("Duplicate purchase rejected", extra=log_extra)
            raise AlreadyPurchasedError(str(model_id))

        purchased = await self._models.increment_counter(model_id, "purchased", 1)
        if purchased is None:
            raise ResourceNotFoundError(
                "Model", str(model_id),
                ErrorContext(model_id=str(model_id), caller_id=buyer_uid),
            )

        entry = build_ledger_entry(
            model_id, buyer_uid, metadata,
            LedgerEntryId(self._id_factory()), self._clock(),
        )

        try:
            await self._ledger.insert(entry)
        except DuplicateEntryError:
            # Concurrent purchase by the same buyer committed its entry first
            logger.warning(
                "Orphaned counter increment after concurrent duplicate purchase",
                extra={**log_extra, "purchased": purchased},
            )
            raise AlreadyPurchasedError(str(model_id))
        except Exception as e:
            logger.critical(
                f"Ledger write failed after counter increment: {e}",
                extra={**log_extra, "purchased": purchased},
                exc_info=not isinstance(e, MarketplaceError),
            )
            raise PurchasePartialFailureError(
                str(model_id), purchased,
                ErrorContext(caller_id=buyer_uid),
            ) from e

        logger.info("Purchase recorded", extra={**log_extra, "purchased": purchased})
        return PurchaseResult(entry=entry, purchased=purchased)

