"""Model Catalog — ownership gating and email → uid migration against a real store.

Invariants:
    - Legacy listing mutated by its email owner gets developer_uid persisted
    - After migration the listing is uid-gated (email alone no longer suffices)
    - Non-owners are forbidden and the record is unchanged
"""

import pytest

from modelmart.core.domain_types import Caller, CallerId
from modelmart.core.errors import (
    ForbiddenError, InvalidIdError, ResourceNotFoundError,
)
from modelmart.core.listing_query import ListingQuery
from modelmart.services.model_catalog import ModelCatalog

from tests.services.callers import ALICE, BOB


async def test_create_sets_owner_uid_from_caller(model_store):
    catalog = ModelCatalog(model_store)
    record = await catalog.create_model({
        "model_name": "X", "category": "NLP", "description": "d",
        "image_url": "i", "developer_email": ALICE.email, "price": None,
    }, ALICE)
    assert record.developer_uid == ALICE.uid
    assert record.price == 0.0
    assert record.purchased == 0
    assert record.name == "X"


async def test_create_with_foreign_email_forbidden(model_store):
    catalog = ModelCatalog(model_store)
    with pytest.raises(ForbiddenError):
        await catalog.create_model({
            "model_name": "X", "category": "NLP", "description": "d",
            "image_url": "i", "developer_email": ALICE.email,
        }, BOB)
    assert await model_store.list(ListingQuery()) == []


async def test_legacy_update_migrates_owner_uid(model_store, legacy_model):
    catalog = ModelCatalog(model_store)
    updated = await catalog.update_model(str(legacy_model.id), {"price": 5}, ALICE)

    assert updated.developer_uid == ALICE.uid
    assert updated.price == 5.0


async def test_migrated_listing_is_uid_gated(model_store, legacy_model):
    catalog = ModelCatalog(model_store)
    await catalog.update_model(str(legacy_model.id), {"price": 5}, ALICE)

    # same email, different uid: email fallback no longer applies
    impostor = Caller(uid=CallerId("u9"), email=ALICE.email)
    with pytest.raises(ForbiddenError):
        await catalog.update_model(str(legacy_model.id), {"price": 1}, impostor)


async def test_legacy_delete_by_email_owner(model_store, legacy_model):
    catalog = ModelCatalog(model_store)
    assert await catalog.delete_model(str(legacy_model.id), ALICE) == 1
    assert await model_store.find_by_id(legacy_model.id) is None


async def test_non_owner_update_leaves_record_unchanged(model_store, seed_model):
    catalog = ModelCatalog(model_store)
    with pytest.raises(ForbiddenError):
        await catalog.update_model(str(seed_model.id), {"price": 99}, BOB)

    record = await model_store.find_by_id(seed_model.id)
    assert record.price == 10.0


async def test_non_owner_legacy_update_does_not_migrate(model_store, legacy_model):
    catalog = ModelCatalog(model_store)
    with pytest.raises(ForbiddenError):
        await catalog.update_model(str(legacy_model.id), {"price": 99}, BOB)

    record = await model_store.find_by_id(legacy_model.id)
    assert record.developer_uid is None


async def test_update_validates_payload_only_for_owner(model_store, seed_model):
    seen = []

    def validate(body):
        seen.append(body)
        raise ValueError("bad payload")

    catalog = ModelCatalog(model_store)
    with pytest.raises(ForbiddenError):
        await catalog.update_model(str(seed_model.id), {"price": -1}, BOB, validate)
    assert seen == []

    with pytest.raises(ValueError):
        await catalog.update_model(str(seed_model.id), {"price": -1}, ALICE, validate)
    assert seen == [{"price": -1}]


async def test_update_ignores_protected_fields(model_store, seed_model):
    catalog = ModelCatalog(model_store)
    updated = await catalog.update_model(str(seed_model.id), {
        "purchased": 500, "developer_uid": "u2", "description": "new",
    }, ALICE)
    assert updated.purchased == 0
    assert updated.developer_uid == ALICE.uid
    assert updated.description == "new"


async def test_get_invalid_id_is_invalid_not_missing(model_store):
    catalog = ModelCatalog(model_store)
    with pytest.raises(InvalidIdError):
        await catalog.get_model("zzz")


async def test_delete_missing_is_not_found(model_store):
    catalog = ModelCatalog(model_store)
    with pytest.raises(ResourceNotFoundError):
        await catalog.delete_model("00000000-0000-0000-0000-000000000000", ALICE)


async def test_list_latest_defaults_to_six_newest(model_store):
    catalog = ModelCatalog(model_store)
    for i in range(8):
        await catalog.create_model({
            "model_name": f"M{i}", "category": "NLP", "description": "d",
            "image_url": "i", "developer_email": ALICE.email,
        }, ALICE)

    latest = await catalog.list_latest()
    assert len(latest) == 6
    assert latest[0].created_at >= latest[-1].created_at
