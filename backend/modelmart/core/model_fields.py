"""Model Record Fields — defaults on create and the mutable subset on update.

Invariants:
    - Owner fields, purchased and created_at are never produced by build_update_patch
    - name mirrors model_name and framework mirrors category unless given explicitly
    - price is a non-negative float; absent on create means 0

Design Decisions:
    - Patch computed as a plain dict: the record store applies it in a single
      UPDATE, the service layer never touches ORM attributes directly
    - use_case/dataset keep their current value when the patch sends an empty string
      (ADR: the listing form submits blanks for untouched optional inputs)
"""

from typing import Any


DEFAULT_USE_CASE = "General AI"
DEFAULT_DATASET = "Proprietary Data"

MUTABLE_FIELDS: tuple[str, ...] = (
    "model_name", "name", "category", "framework", "description",
    "image_url", "price", "use_case", "dataset", "developer_name",
)


def apply_create_defaults(data: dict[str, Any]) -> dict[str, Any]:
    """Fill derived and default fields for a new listing."""
    out = dict(data)
    out["name"] = out.get("name") or out["model_name"]
    out["framework"] = out.get("framework") or out["category"]
    out["use_case"] = out.get("use_case") or DEFAULT_USE_CASE
    out["dataset"] = out.get("dataset") or DEFAULT_DATASET
    price = out.get("price")
    out["price"] = float(price) if price is not None else 0.0
    return out


def build_update_patch(changes: dict[str, Any]) -> dict[str, Any]:
    """Reduce a partial update to mutable columns. Pure, no record access."""
    patch: dict[str, Any] = {}
    if changes.get("model_name") is not None:
        patch["model_name"] = changes["model_name"]
        patch["name"] = changes["model_name"]
    if changes.get("category") is not None:
        patch["category"] = changes["category"]
        patch["framework"] = changes["category"]
    if changes.get("price") is not None:
        patch["price"] = float(changes["price"])
    for key in ("use_case", "dataset"):
        if changes.get(key):
            patch[key] = changes[key]
    for key in ("description", "image_url", "developer_name"):
        if changes.get(key) is not None:
            patch[key] = changes[key]
    return patch
