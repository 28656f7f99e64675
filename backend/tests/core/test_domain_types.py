"""Domain Types — verifies id parsing and the Caller value type."""

from dataclasses import FrozenInstanceError
from uuid import UUID, uuid4

import pytest

from modelmart.core.domain_types import Caller, CallerId, parse_model_id
from modelmart.core.errors import InvalidIdError


def test_parse_canonical_uuid():
    uid = uuid4()
    assert parse_model_id(str(uid)) == uid


def test_parse_hex_uuid_without_dashes():
    uid = uuid4()
    assert parse_model_id(uid.hex) == uid


def test_parse_accepts_uuid_instance():
    uid = uuid4()
    assert parse_model_id(uid) is uid


def test_parse_strips_whitespace():
    uid = uuid4()
    assert parse_model_id(f"  {uid} ") == uid


@pytest.mark.parametrize("raw", [
    "", "abc", "12345", "not-a-valid-id-at-all-but-36-chars!",
    "507f1f77bcf86cd799439011",  # legacy 24-hex object id
    "{12345678-1234-5678-1234-567812345678}",
    "urn:uuid:12345678-1234-5678-1234-567812345678",
])
def test_parse_rejects_malformed_ids(raw):
    with pytest.raises(InvalidIdError) as exc_info:
        parse_model_id(raw)
    assert exc_info.value.http_status == 400
    assert exc_info.value.code == "INVALID_ID"


def test_parse_rejects_non_string():
    with pytest.raises(InvalidIdError):
        parse_model_id(12345)


def test_caller_is_immutable():
    caller = Caller(uid=CallerId("u1"), email="a@x.com")
    with pytest.raises(FrozenInstanceError):
        caller.uid = CallerId("u2")


def test_parsed_id_is_uuid():
    assert isinstance(parse_model_id(str(uuid4())), UUID)
