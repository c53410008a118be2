from __future__ import annotations

import pytest

from movecall.errors import TypeTagParseError, UnsupportedTypeError
from movecall.types import (
    FunctionSignature,
    MutableReference,
    Reference,
    Scalar,
    ScalarWidth,
    Struct,
    TypeParameter,
    Vector,
    normalize_address,
    normalize_type_string,
    parse_normalized_type,
    parse_type_tag,
    substitute_type_parameters,
)

SUI = Struct("0x2", "sui", "SUI")


def test_parse_normalized_type_primitives() -> None:
    for width in ScalarWidth:
        assert parse_normalized_type(width.value) == Scalar(width)


def test_parse_normalized_type_nested() -> None:
    obj = {
        "MutableReference": {
            "Struct": {
                "address": "0x2",
                "module": "coin",
                "name": "Coin",
                "typeArguments": [{"Struct": {"address": "0x2", "module": "sui", "name": "SUI", "typeArguments": []}}],
            }
        }
    }
    assert parse_normalized_type(obj) == MutableReference(Struct("0x2", "coin", "Coin", (SUI,)))
    assert parse_normalized_type({"Vector": {"Vector": "U8"}}) == Vector(Vector(Scalar(ScalarWidth.U8)))
    assert parse_normalized_type({"Reference": {"TypeParameter": 1}}) == Reference(TypeParameter(1))


@pytest.mark.parametrize(
    "obj",
    [
        "Signer",
        {"Unknown": 1},
        {"Vector": "U8", "Struct": {}},
        {"Struct": {"module": "m", "name": "S"}},
        {"TypeParameter": -1},
        {"TypeParameter": True},
        42,
    ],
)
def test_parse_normalized_type_rejects_unsupported(obj: object) -> None:
    with pytest.raises(UnsupportedTypeError):
        parse_normalized_type(obj)


def test_function_signature_from_json() -> None:
    sig = FunctionSignature.from_json(
        "transfer",
        {
            "visibility": "Public",
            "isEntry": True,
            "typeParameters": [{"abilities": ["Store"]}],
            "parameters": [
                {"Struct": {"address": "0x2", "module": "coin", "name": "Coin", "typeArguments": [{"TypeParameter": 0}]}},
                "Address",
                {"MutableReference": {"Struct": {"address": "0x2", "module": "tx_context", "name": "TxContext", "typeArguments": []}}},
            ],
            "return": [],
        },
    )
    assert sig.name == "transfer"
    assert sig.is_entry is True
    assert sig.type_parameter_count == 1
    assert len(sig.parameters) == 3
    assert sig.parameters[1] == Scalar(ScalarWidth.ADDRESS)
    assert sig.returns == ()


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("u64", Scalar(ScalarWidth.U64)),
        ("bool", Scalar(ScalarWidth.BOOL)),
        ("address", Scalar(ScalarWidth.ADDRESS)),
        ("vector<u8>", Vector(Scalar(ScalarWidth.U8))),
        ("vector<vector<u16>>", Vector(Vector(Scalar(ScalarWidth.U16)))),
        ("0x2::sui::SUI", SUI),
        ("0x2::coin::Coin<0x2::sui::SUI>", Struct("0x2", "coin", "Coin", (SUI,))),
        (
            " 0xabc::pool::Pool< 0x2::sui::SUI , u64 > ",
            Struct("0xabc", "pool", "Pool", (SUI, Scalar(ScalarWidth.U64))),
        ),
    ],
)
def test_parse_type_tag(text: str, expected: object) -> None:
    assert parse_type_tag(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "   ", "vector<u8", "0x2::sui", "coin::Coin", "0x2::coin::Coin<>", "u64 u8", "0x2::m::S<u8,>", "0x2::1x::S", "u64!"],
)
def test_parse_type_tag_rejects_malformed(text: str) -> None:
    with pytest.raises(TypeTagParseError):
        parse_type_tag(text)


def test_substitute_type_parameters_recurses() -> None:
    t = Reference(Struct("0x2", "coin", "Coin", (TypeParameter(0),)))
    assert substitute_type_parameters(t, [SUI]) == Reference(Struct("0x2", "coin", "Coin", (SUI,)))
    assert substitute_type_parameters(Vector(TypeParameter(1)), [SUI, Scalar(ScalarWidth.U8)]) == Vector(
        Scalar(ScalarWidth.U8)
    )
    assert substitute_type_parameters(Scalar(ScalarWidth.U8), []) == Scalar(ScalarWidth.U8)


def test_substitute_type_parameters_out_of_range() -> None:
    with pytest.raises(UnsupportedTypeError):
        substitute_type_parameters(TypeParameter(2), [SUI])


def test_normalize_address_pads_and_lowercases() -> None:
    assert normalize_address("0x2") == "0x" + "0" * 63 + "2"
    assert normalize_address("0xABC") == "0x" + "0" * 61 + "abc"
    assert normalize_address("not-an-address") == "not-an-address"


def test_normalize_type_string_short_and_long_forms_match() -> None:
    long_two = "0x" + "0" * 63 + "2"
    assert normalize_type_string("0x2::coin::Coin<0x2::sui::SUI>") == normalize_type_string(
        f"{long_two}::coin::Coin<{long_two}::sui::SUI>"
    )
