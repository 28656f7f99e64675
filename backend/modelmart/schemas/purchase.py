"""Purchase Schemas — request/response contracts for the purchase endpoints.

Invariants:
    - PurchaseRequest requires modelId; every other body key is caller metadata
    - buyer identity is never read from the body (it comes from the bearer token)
    - purchaseRecord is the flattened ledger entry (metadata + server fields)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PurchaseRequest(BaseModel):
    """Purchase body — modelId plus arbitrary extra metadata."""
    model_config = ConfigDict(
        extra="allow", populate_by_name=True, protected_namespaces=(),
    )

    model_id: str = Field(alias="modelId", min_length=1, max_length=100)

    @property
    def purchase_metadata(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class PurchaseResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    acknowledged: bool = True
    message: str
    purchased: int | None = None
    purchase_record: dict[str, Any]


class PurchaseHistoryResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    buyer_uid: str
    purchases: list[dict[str, Any]]
