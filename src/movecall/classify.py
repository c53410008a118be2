"""
Type classification and naming.

``classify`` buckets a parameter type into the input widget the UI renders
for it; ``type_name`` renders a canonical fully-qualified string used both for
placeholders and for comparing an object's on-chain type against the
declared type.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from movecall.constants import MOVE_STRING_TYPES, SUI_FRAMEWORK_ADDRESS, TX_CONTEXT_MODULE, TX_CONTEXT_STRUCT
from movecall.types import (
    MutableReference,
    NormalizedType,
    Reference,
    Scalar,
    Struct,
    TypeParameter,
    Vector,
    normalize_address,
)


class InputKind(str, Enum):
    """How a parameter is entered: a list of fields, an object id, or one text field."""

    VECTOR = "vector"
    COMPLEX = "complex"
    SCALAR = "scalar"
    STRING = "string"


def unwrap_references(t: NormalizedType) -> NormalizedType:
    while isinstance(t, (Reference, MutableReference)):
        t = t.inner
    return t


def is_move_string(t: NormalizedType) -> bool:
    """True for ``0x1::string::String`` and ``0x1::ascii::String``."""
    if not isinstance(t, Struct) or t.type_arguments:
        return False
    return (normalize_address(t.address), t.module, t.name) in MOVE_STRING_TYPES


def classify(t: NormalizedType) -> InputKind:
    if isinstance(t, Vector):
        return InputKind.VECTOR
    if isinstance(t, (Reference, MutableReference)):
        return classify(t.inner)
    if isinstance(t, Struct):
        return InputKind.STRING if is_move_string(t) else InputKind.COMPLEX
    if isinstance(t, (Scalar, TypeParameter)):
        return InputKind.SCALAR
    raise TypeError(f"unknown normalized type: {t!r}")


def type_name(t: NormalizedType) -> str:
    """
    Render a type the way the fullnode renders object types.

    Examples:
      - Scalar(U64) -> "U64"
      - Struct(0x2, coin, Coin, [Struct(0x2, sui, SUI)]) -> "0x2::coin::Coin<0x2::sui::SUI>"
      - Vector(Scalar(U8)) -> "Vector<U8>"
      - Reference(x) -> type_name(x)
    """
    if isinstance(t, Scalar):
        return t.width.value
    if isinstance(t, Struct):
        base = f"{t.address}::{t.module}::{t.name}"
        if t.type_arguments:
            return f"{base}<{', '.join(type_name(a) for a in t.type_arguments)}>"
        return base
    if isinstance(t, Vector):
        return f"Vector<{type_name(t.element)}>"
    if isinstance(t, (Reference, MutableReference)):
        return type_name(t.inner)
    if isinstance(t, TypeParameter):
        return f"T{t.index}"
    raise TypeError(f"unknown normalized type: {t!r}")


def type_tag(t: NormalizedType) -> str:
    """Render a value type in Move type-tag syntax (``u64``, ``vector<u8>``, ``0x2::sui::SUI``)."""
    t = unwrap_references(t)
    if isinstance(t, Scalar):
        return t.width.pure_name
    if isinstance(t, Vector):
        return f"vector<{type_tag(t.element)}>"
    if isinstance(t, Struct):
        base = f"{t.address}::{t.module}::{t.name}"
        if t.type_arguments:
            return f"{base}<{', '.join(type_tag(a) for a in t.type_arguments)}>"
        return base
    if isinstance(t, TypeParameter):
        return f"T{t.index}"
    raise TypeError(f"unknown normalized type: {t!r}")


def is_tx_context(t: NormalizedType) -> bool:
    """True if ``t`` is ``TxContext``, ``&TxContext`` or ``&mut TxContext`` from the Sui framework."""
    inner = unwrap_references(t)
    if not isinstance(inner, Struct):
        return False
    if inner.module != TX_CONTEXT_MODULE or inner.name != TX_CONTEXT_STRUCT:
        return False
    return normalize_address(inner.address) == SUI_FRAMEWORK_ADDRESS


def strip_tx_context(parameters: Sequence[NormalizedType]) -> list[NormalizedType]:
    """Drop the trailing execution-context parameter, if and only if it is last."""
    if parameters and is_tx_context(parameters[-1]):
        return list(parameters[:-1])
    return list(parameters)
