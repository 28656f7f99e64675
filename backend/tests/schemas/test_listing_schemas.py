"""Listing and purchase schemas — camelCase wire names, price bounds, metadata capture.

Invariants:
    - Both camelCase and snake_case names populate the same field
    - price is non-negative; numeric strings are coerced
    - ModelUpdate has no owner or counter fields to set and cannot blank listing text
    - PurchaseRequest keeps every key except modelId as metadata
"""

import pytest
from pydantic import ValidationError

from modelmart.schemas.ai_model import ModelCreate, ModelUpdate
from modelmart.schemas.purchase import PurchaseRequest


def _create(**overrides):
    body = {
        "modelName": "X", "category": "NLP", "description": "d",
        "imageUrl": "i", "developerEmail": "a@x.com",
    }
    body.update(overrides)
    return ModelCreate(**body)


# --- ModelCreate --------------------------------------------------------------

def test_create_accepts_camel_case():
    m = _create()
    assert m.model_name == "X"
    assert m.image_url == "i"


def test_create_accepts_snake_case():
    m = ModelCreate(
        model_name="X", category="NLP", description="d",
        image_url="i", developer_email="a@x.com",
    )
    assert m.developer_email == "a@x.com"


def test_create_price_string_coerced():
    assert _create(price="12.5").price == 12.5


def test_create_negative_price_rejected():
    with pytest.raises(ValidationError):
        _create(price=-0.01)


def test_create_blank_required_field_rejected():
    with pytest.raises(ValidationError):
        _create(modelName="   ")


def test_create_strips_whitespace():
    assert _create(category="  NLP ").category == "NLP"


# --- ModelUpdate --------------------------------------------------------------

def test_update_has_no_protected_fields():
    u = ModelUpdate(purchased=9, developerUid="u2", developerEmail="b@x.com")
    assert u.model_dump(exclude_unset=True) == {}


def test_update_partial_dump():
    u = ModelUpdate(price=3)
    assert u.model_dump(exclude_unset=True) == {"price": 3.0}


@pytest.mark.parametrize("field", ["modelName", "category", "description", "imageUrl"])
def test_update_blank_listing_text_rejected(field):
    with pytest.raises(ValidationError):
        ModelUpdate(**{field: "   "})


def test_update_strips_whitespace():
    u = ModelUpdate(description="  d  ", imageUrl=" i ")
    assert u.model_dump(exclude_unset=True) == {"description": "d", "image_url": "i"}


# --- PurchaseRequest ----------------------------------------------------------

def test_purchase_request_collects_metadata():
    req = PurchaseRequest(modelId="abc", modelName="X", price=10)
    assert req.model_id == "abc"
    assert req.purchase_metadata == {"modelName": "X", "price": 10}


def test_purchase_request_requires_model_id():
    with pytest.raises(ValidationError):
        PurchaseRequest(price=10)


def test_purchase_request_empty_model_id_rejected():
    with pytest.raises(ValidationError):
        PurchaseRequest(modelId="")
