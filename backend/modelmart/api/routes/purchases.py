"""Purchase Routes — buy a model and read the caller's purchase history.

Invariants:
    - Buyer uid comes from get_current_caller, never from the body
    - Body keys other than modelId are stored as opaque purchase metadata
    - Only a fully recorded purchase answers acknowledged=true; every failure
      goes through the global MarketplaceError handler
"""

from fastapi import APIRouter, Depends

from modelmart.api.dependencies import (
    get_current_caller, get_ledger_store, get_orchestrator,
)
from modelmart.core.domain_types import Caller
from modelmart.core.repository_protocols import LedgerStore
from modelmart.schemas.purchase import (
    PurchaseHistoryResponse, PurchaseRequest, PurchaseResponse,
)
from modelmart.services.purchase_orchestrator import PurchaseOrchestrator

router = APIRouter(tags=["purchases"])


@router.post("/purchase-model", response_model=PurchaseResponse)
async def purchase_model(
    body: PurchaseRequest,
    caller: Caller = Depends(get_current_caller),
    orchestrator: PurchaseOrchestrator = Depends(get_orchestrator),
):
    result = await orchestrator.purchase(
        body.model_id, caller.uid, body.purchase_metadata,
    )
    return PurchaseResponse(
        message=(
            f"Purchase successful. Model count updated: {result.purchased}. "
            "Transaction logged."
        ),
        purchased=result.purchased,
        purchase_record=result.entry.to_record(),
    )


@router.get("/purchases", response_model=PurchaseHistoryResponse)
async def list_my_purchases(
    caller: Caller = Depends(get_current_caller),
    ledger: LedgerStore = Depends(get_ledger_store),
):
    """The caller's own purchase history, newest first."""
    entries = await ledger.list_by_buyer(caller.uid)
    return PurchaseHistoryResponse(
        buyer_uid=caller.uid,
        purchases=[e.to_record() for e in entries],
    )
