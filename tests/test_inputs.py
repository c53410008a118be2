from __future__ import annotations

import pytest
from conftest import COIN_SUI, MOVE_STRING

from movecall.inputs import parse_cli_value, split_hex_vector
from movecall.types import Reference, Scalar, ScalarWidth, Vector

U8 = Scalar(ScalarWidth.U8)
U16 = Scalar(ScalarWidth.U16)


def test_split_hex_vector_by_width() -> None:
    assert split_hex_vector("0x0aff", 8) == ["10", "255"]
    assert split_hex_vector("0x0a ff", 8) == ["10", "255"]
    assert split_hex_vector("0x00010002", 16) == ["1", "2"]
    assert split_hex_vector("0xabc", 8) == ["171", "12"]
    assert split_hex_vector("0x", 8) == []


def test_non_vector_slots_pass_text_through() -> None:
    assert parse_cli_value(" 42 ", U8) == " 42 "
    assert parse_cli_value("a,b", MOVE_STRING) == "a,b"
    assert parse_cli_value("0x5", Reference(COIN_SUI)) == "0x5"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("", []),
        ("1, 2,3", ["1", "2", "3"]),
        ('["1", 2, true]', ["1", "2", "true"]),
        ("[]", []),
        ("0x0102", ["1", "2"]),
    ],
)
def test_vector_slots(text: str, expected: list[str]) -> None:
    assert parse_cli_value(text, Vector(U8)) == expected


def test_hex_blob_only_for_integer_vectors() -> None:
    assert parse_cli_value("0x1,0x2", Vector(COIN_SUI)) == ["0x1", "0x2"]
    assert parse_cli_value("0x0001", Vector(U16)) == ["1"]


def test_vector_behind_reference() -> None:
    assert parse_cli_value("1,2", Reference(Vector(U8))) == ["1", "2"]


def test_json_must_be_flat() -> None:
    with pytest.raises(ValueError):
        parse_cli_value('[{"a": 1}]', Vector(U8))
