"""Request Dependencies — store adapters, identity verification and service wiring.

Invariants:
    - Each store dependency calls ensure_connected() before handing out an adapter
    - get_current_caller is the ONLY source of caller identity for routes
    - Missing/malformed Authorization header → 401; no verifier configured → 500

Design Decisions:
    - Module-level verifier singleton set by main's lifespan (init_identity):
      the cert cache must outlive single requests
    - Tests replace get_model_store / get_ledger_store / get_identity_verifier
      through app.dependency_overrides
"""

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

import modelmart.infrastructure.database as db_module
from modelmart.core.domain_types import Caller
from modelmart.core.errors import IdentityNotConfiguredError, UnauthorizedError
from modelmart.core.repository_protocols import (
    IdentityVerifier, LedgerStore, ModelStore,
)
from modelmart.infrastructure.identity import FirebaseTokenVerifier
from modelmart.infrastructure.ledger_store import SqlLedgerStore
from modelmart.infrastructure.model_store import SqlModelStore
from modelmart.services.model_catalog import ModelCatalog
from modelmart.services.purchase_orchestrator import PurchaseOrchestrator

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)

# Singleton (initialized on startup; None means verification not configured)
identity_verifier: IdentityVerifier | None = None


def init_identity(
    project_id: str, certs_url: str, timeout_seconds: float = 10.0,
) -> None:
    global identity_verifier
    if not project_id:
        logger.warning("Identity verifier not configured: FIREBASE_PROJECT_ID is empty")
        identity_verifier = None
        return
    identity_verifier = FirebaseTokenVerifier(
        project_id, certs_url=certs_url, timeout_seconds=timeout_seconds,
    )
    logger.info("Identity verifier initialized")


async def close_identity() -> None:
    if isinstance(identity_verifier, FirebaseTokenVerifier):
        await identity_verifier.aclose()


async def get_model_store() -> ModelStore:
    if not db_module.records_db:
        raise RuntimeError("Record store not initialized")
    await db_module.records_db.ensure_connected()
    return SqlModelStore(db_module.records_db)


async def get_ledger_store() -> LedgerStore:
    if not db_module.ledger_db:
        raise RuntimeError("Ledger store not initialized")
    await db_module.ledger_db.ensure_connected()
    return SqlLedgerStore(db_module.ledger_db)


def get_identity_verifier() -> IdentityVerifier | None:
    return identity_verifier


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    verifier: IdentityVerifier | None = Depends(get_identity_verifier),
) -> Caller:
    """Authenticate the request from its bearer credential."""
    if verifier is None:
        raise IdentityNotConfiguredError()
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Token missing")
    return await verifier.verify(credentials.credentials)


def get_catalog(models: ModelStore = Depends(get_model_store)) -> ModelCatalog:
    return ModelCatalog(models)


def get_orchestrator(
    models: ModelStore = Depends(get_model_store),
    ledger: LedgerStore = Depends(get_ledger_store),
) -> PurchaseOrchestrator:
    return PurchaseOrchestrator(models, ledger)
