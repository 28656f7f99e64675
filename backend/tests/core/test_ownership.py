"""Ownership Policy — tests for the pure uid/email ownership decision.

Tests cover:
    - uid-tracked records compare uid only (email ignored)
    - legacy records fall back to email and request migration
    - no match on either path is denied without migration
    - require_owner / require_listing_email raise ForbiddenError
"""

from dataclasses import dataclass

import pytest

from modelmart.core.domain_types import Caller, CallerId
from modelmart.core.errors import ForbiddenError
from modelmart.core.ownership import (
    OwnershipDecision, check_ownership, require_listing_email, require_owner,
)


@dataclass
class _Record:
    developer_email: str
    developer_uid: str | None = None


# ─── check_ownership ─────────────────────────────────────────────

def test_uid_match_is_owner_without_migration():
    decision = check_ownership(_Record("a@x.com", "u1"), "u1", "a@x.com")
    assert decision == OwnershipDecision(is_owner=True, migration_needed=False)


def test_uid_mismatch_denied_even_when_email_matches():
    decision = check_ownership(_Record("a@x.com", "u1"), "u9", "a@x.com")
    assert decision.is_owner is False
    assert decision.migration_needed is False


def test_uid_match_ignores_changed_email():
    decision = check_ownership(_Record("old@x.com", "u1"), "u1", "new@x.com")
    assert decision.is_owner is True


def test_legacy_record_email_match_needs_migration():
    decision = check_ownership(_Record("a@x.com", None), "u1", "a@x.com")
    assert decision == OwnershipDecision(is_owner=True, migration_needed=True)


def test_legacy_record_empty_uid_treated_as_missing():
    decision = check_ownership(_Record("a@x.com", ""), "u1", "a@x.com")
    assert decision.migration_needed is True


def test_legacy_record_email_mismatch_denied():
    decision = check_ownership(_Record("a@x.com", None), "u2", "b@x.com")
    assert decision == OwnershipDecision(is_owner=False, migration_needed=False)


def test_legacy_record_caller_without_email_denied():
    decision = check_ownership(_Record("a@x.com", None), "u1", None)
    assert decision.is_owner is False


# ─── require_owner ───────────────────────────────────────────────

def test_require_owner_raises_forbidden_for_non_owner():
    bob = Caller(uid=CallerId("u2"), email="b@x.com")
    with pytest.raises(ForbiddenError) as exc_info:
        require_owner(_Record("a@x.com", "u1"), bob, "update", "m1")
    assert exc_info.value.http_status == 403
    assert "update" in exc_info.value.message
    assert exc_info.value.context.model_id == "m1"


def test_require_owner_returns_decision_for_owner():
    alice = Caller(uid=CallerId("u1"), email="a@x.com")
    decision = require_owner(_Record("a@x.com", None), alice, "delete")
    assert decision.migration_needed is True


# ─── require_listing_email ───────────────────────────────────────

def test_listing_email_must_match_caller():
    alice = Caller(uid=CallerId("u1"), email="a@x.com")
    with pytest.raises(ForbiddenError):
        require_listing_email("b@x.com", alice)


def test_listing_email_caller_without_email_is_forbidden():
    anonymous = Caller(uid=CallerId("u3"), email=None)
    with pytest.raises(ForbiddenError):
        require_listing_email("a@x.com", anonymous)


def test_listing_email_match_passes():
    alice = Caller(uid=CallerId("u1"), email="a@x.com")
    require_listing_email("a@x.com", alice)
