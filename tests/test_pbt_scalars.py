"""Property-based tests for scalar validation and encoding.

Uses Hypothesis to check that whatever the validator accepts, the encoder
can allocate, and that the allocated bytes decode back to the same integer.
"""

from __future__ import annotations

import asyncio

import hypothesis.strategies as st
from conftest import TESTNET, StubResolver
from hypothesis import given

from movecall.bcs import decode_pure
from movecall.encoder import encode_argument
from movecall.transaction import Transaction
from movecall.types import Scalar, ScalarWidth, Vector, normalize_address
from movecall.validator import check_scalar, validate

INTEGER_WIDTHS = [w for w in ScalarWidth if w.is_integer]


@st.composite
def width_and_value(draw):
    """An integer width and a value that fits it."""
    width = draw(st.sampled_from(INTEGER_WIDTHS))
    value = draw(st.integers(min_value=0, max_value=(1 << width.bits) - 1))
    return width, value


def _validate(raw, t) -> bool:
    return asyncio.run(validate(raw, t, StubResolver(), TESTNET))


@given(width_and_value())
def test_in_range_integers_validate_and_round_trip(case) -> None:
    """Invariant: a value that validates is encoded exactly, with no precision loss."""
    width, value = case
    t = Scalar(width)
    assert _validate(str(value), t)

    tx = Transaction()
    encode_argument(tx, str(value), t)
    assert decode_pure(width.pure_name, tx.inputs[0].bcs) == value


@given(st.sampled_from(INTEGER_WIDTHS), st.integers(min_value=0, max_value=2**300))
def test_validator_agrees_with_width(width: ScalarWidth, value: int) -> None:
    """Invariant: an integer validates iff it fits in the declared width."""
    assert check_scalar(str(value), width) == (value < (1 << width.bits))


@given(st.integers(max_value=-1))
def test_negative_integers_never_validate(value: int) -> None:
    for width in INTEGER_WIDTHS:
        assert not check_scalar(str(value), width)


def test_u64_max_round_trips_exactly() -> None:
    tx = Transaction()
    encode_argument(tx, "18446744073709551615", Scalar(ScalarWidth.U64))
    assert decode_pure("u64", tx.inputs[0].bcs) == 18446744073709551615
    assert tx.to_dict()["inputs"][0]["value"] == "18446744073709551615"


@given(st.lists(st.integers(min_value=0, max_value=255), max_size=20))
def test_u8_vectors_round_trip(values: list[int]) -> None:
    t = Vector(Scalar(ScalarWidth.U8))
    raw = [str(v) for v in values]
    assert _validate(raw, t)

    tx = Transaction()
    encode_argument(tx, raw, t)
    assert len(tx.inputs) == 1
    assert decode_pure("vector<u8>", tx.inputs[0].bcs) == values


@given(st.text(alphabet="0123456789abcdefABCDEF", min_size=64, max_size=64))
def test_full_length_addresses_validate(hex_part: str) -> None:
    addr = f"0x{hex_part}"
    assert check_scalar(addr, ScalarWidth.ADDRESS)

    tx = Transaction()
    encode_argument(tx, addr, Scalar(ScalarWidth.ADDRESS))
    assert decode_pure("address", tx.inputs[0].bcs) == normalize_address(addr)


@given(st.text(alphabet="0123456789abcdef", min_size=1, max_size=63))
def test_short_addresses_do_not_validate(hex_part: str) -> None:
    """Invariant: the address scalar grammar never pads; 63 digits or fewer fail."""
    assert not check_scalar(f"0x{hex_part}", ScalarWidth.ADDRESS)
