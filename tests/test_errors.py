from __future__ import annotations

import json

import pytest

from movecall.errors import (
    ArgumentCountError,
    EncodingError,
    InvalidConfigError,
    MalformedObjectIdError,
    MoveCallError,
    ObjectNotFoundError,
    ResolverError,
    RpcError,
    TransientResolverError,
    TypeTagParseError,
    UnsupportedTypeError,
)


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (ObjectNotFoundError("0x5"), -33001),
        (TransientResolverError("0x5", "timeout"), -33002),
        (MalformedObjectIdError("five"), -33003),
        (RpcError("sui_getObject", "status 500"), -33010),
        (UnsupportedTypeError("Signer", "not an input"), -33020),
        (TypeTagParseError("u64!", "bad"), -33021),
        (EncodingError("U8", "too big"), -33030),
        (ArgumentCountError("argument(s)", 2, 3), -33040),
        (InvalidConfigError("network", "unknown"), -32602),
    ],
)
def test_codes_are_stable_and_serializable(error: MoveCallError, code: int) -> None:
    assert error.code == code
    d = error.to_dict()
    assert d["code"] == code
    assert d["message"] == str(error)
    json.dumps(d)


def test_resolver_errors_carry_their_kind() -> None:
    for error, kind in (
        (ObjectNotFoundError("0x5"), "not_found"),
        (TransientResolverError("0x5", "timeout"), "transient"),
        (MalformedObjectIdError("five"), "malformed"),
    ):
        assert isinstance(error, ResolverError)
        assert error.data["kind"] == kind
        assert error.data["objectId"] == error.object_id


def test_argument_count_message() -> None:
    assert ArgumentCountError("argument(s)", 2, 3).message == "Expected 2 argument(s), got 3"
