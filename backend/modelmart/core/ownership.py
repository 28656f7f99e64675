"""Ownership Policy — decides whether a caller may mutate a model record.

Invariants:
    - check_ownership is PURE: returns a decision, does NOT persist the migration
    - developer_uid, when present, is the only thing compared (email is ignored)
    - Email fallback applies only to legacy records with no developer_uid
    - No match on either path → denied, never an implicit grant

Design Decisions:
    - Migration signalled, not applied: the shell writes developer_uid before the
      requested mutation so a record is uid-gated from then on
      (ADR: no one-off data migration job for pre-uid listings)
"""

from dataclasses import dataclass
from typing import Protocol

from modelmart.core.domain_types import Caller
from modelmart.core.errors import ErrorContext, ForbiddenError


class OwnedRecord(Protocol):
    """Structural contract for anything with listing-owner fields."""
    developer_uid: str | None
    developer_email: str


@dataclass(frozen=True)
class OwnershipDecision:
    is_owner: bool
    migration_needed: bool = False


def check_ownership(
    record: OwnedRecord, caller_id: str, caller_email: str | None,
) -> OwnershipDecision:
    """Rule: uid match wins; legacy records fall back to email and need migration."""
    if record.developer_uid:
        return OwnershipDecision(is_owner=record.developer_uid == caller_id)
    if caller_email and record.developer_email == caller_email:
        return OwnershipDecision(is_owner=True, migration_needed=True)
    return OwnershipDecision(is_owner=False)


def require_owner(
    record: OwnedRecord, caller: Caller, action: str, model_id: str | None = None,
) -> OwnershipDecision:
    """Raise ForbiddenError unless caller owns the record."""
    decision = check_ownership(record, caller.uid, caller.email)
    if not decision.is_owner:
        raise ForbiddenError(
            f"Only the model owner can {action} it.",
            ErrorContext(model_id=model_id, caller_id=caller.uid),
        )
    return decision


def require_listing_email(submitted_email: str, caller: Caller) -> None:
    """Create rule: the listing's developer email must be the caller's own."""
    if not caller.email or submitted_email != caller.email:
        raise ForbiddenError(
            "Developer email mismatch.",
            ErrorContext(caller_id=caller.uid),
        )
