"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ModelId wraps UUID; never a bare string in domain logic after parse_model_id
    - CallerId is the verified identity uid, never client-supplied
    - Caller is immutable once produced by the identity verifier

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - parse_model_id is the single gate from raw text to ModelId, so "malformed id"
      is always InvalidIdError and never a not-found
"""

from dataclasses import dataclass
from typing import NewType
from uuid import UUID

from modelmart.core.errors import InvalidIdError


# ─── Identity Types ──────────────────────────────────────────────

ModelId = NewType("ModelId", UUID)
LedgerEntryId = NewType("LedgerEntryId", UUID)
CallerId = NewType("CallerId", str)


@dataclass(frozen=True)
class Caller:
    """Verified identity attached to an authenticated request."""
    uid: CallerId
    email: str | None = None


def parse_model_id(raw: object) -> ModelId:
    """Parse raw path/body text into a ModelId or raise InvalidIdError."""
    if isinstance(raw, UUID):
        return ModelId(raw)
    if not isinstance(raw, str):
        raise InvalidIdError(repr(raw))
    text = raw.strip()
    # UUID() also accepts braces and urn: prefixes; only canonical forms are ids
    if len(text) not in (32, 36):
        raise InvalidIdError(raw)
    try:
        return ModelId(UUID(text))
    except ValueError:
        raise InvalidIdError(raw) from None
