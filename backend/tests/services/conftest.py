"""Service test fixtures — two in-memory stores, fake identity, FastAPI test client.

Invariants:
    - Every test gets fresh in-memory SQLite databases for BOTH stores
    - Store and identity dependencies overridden on the app
    - records_db/ledger_db singletons patched so readiness probes see the test stores
    - Bearer tokens map to fixed callers: token-alice → u1, token-bob → u2

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Fake verifier instead of signed tokens: token verification has its own tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

import modelmart.infrastructure.database as db_module
from modelmart.api.dependencies import (
    get_identity_verifier, get_ledger_store, get_model_store,
)
from modelmart.db.base import Base, LedgerBase
from modelmart.infrastructure.database import DatabaseSessionManager
from modelmart.infrastructure.ledger_store import SqlLedgerStore
from modelmart.infrastructure.model_store import SqlModelStore
import modelmart.models  # noqa: F401
from modelmart.main import app

from tests.services.callers import ALICE, BOB, FakeVerifier


@pytest.fixture
async def records_manager():
    manager = DatabaseSessionManager(
        "sqlite+aiosqlite:///:memory:", Base.metadata, name="records",
    )
    await manager.ensure_connected()
    yield manager
    await manager.dispose()


@pytest.fixture
async def ledger_manager():
    manager = DatabaseSessionManager(
        "sqlite+aiosqlite:///:memory:", LedgerBase.metadata, name="ledger",
    )
    await manager.ensure_connected()
    yield manager
    await manager.dispose()


@pytest.fixture
def model_store(records_manager):
    return SqlModelStore(records_manager)


@pytest.fixture
def ledger_store(ledger_manager):
    return SqlLedgerStore(ledger_manager)


@pytest.fixture
def verifier():
    return FakeVerifier({"token-alice": ALICE, "token-bob": BOB})


@pytest.fixture
async def client(records_manager, ledger_manager, model_store, ledger_store, verifier):
    """FastAPI test client with store and identity dependencies overridden."""
    app.dependency_overrides[get_model_store] = lambda: model_store
    app.dependency_overrides[get_ledger_store] = lambda: ledger_store
    app.dependency_overrides[get_identity_verifier] = lambda: verifier

    original = (db_module.records_db, db_module.ledger_db)
    db_module.records_db, db_module.ledger_db = records_manager, ledger_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.records_db, db_module.ledger_db = original


@pytest.fixture
async def seed_model(model_store):
    """Insert a listing owned by Alice (uid-tracked)."""
    return await model_store.add({
        "model_name": "X",
        "name": "X",
        "category": "NLP",
        "framework": "NLP",
        "description": "A language model",
        "image_url": "https://img.example/x.png",
        "price": 10.0,
        "developer_email": ALICE.email,
        "developer_uid": ALICE.uid,
    })


@pytest.fixture
async def legacy_model(model_store):
    """Insert a pre-uid listing owned by Alice's email only."""
    return await model_store.add({
        "model_name": "Legacy",
        "name": "Legacy",
        "category": "Vision",
        "framework": "Vision",
        "description": "Listed before uid tracking",
        "image_url": "https://img.example/legacy.png",
        "developer_email": ALICE.email,
        "developer_uid": None,
    })
