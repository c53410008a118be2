"""
Argument encoding for validated input.

``encode_value`` turns a raw value into a tagged ``EncodedArgument``;
``allocate`` hands that to a ``TransactionBuilder``. The encoder trusts its
input: it is only correct to call it after ``validate`` returned True for
every parameter, which is what ``MoveCallOrchestrator`` guarantees.

Encoding rules:
- scalars become one pure input of the declared width (integers parsed exactly)
- Move strings become a pure ``string`` input
- vectors of scalars/strings become ONE pure ``vector<w>`` input
- vectors of objects become one object input per element grouped by MakeMoveVec
- structs and references become object inputs; owned vs. borrowed is left to the builder
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from movecall.classify import is_move_string, type_name, type_tag
from movecall.errors import EncodingError, UnsupportedTypeError
from movecall.transaction import Argument, TransactionBuilder
from movecall.types import (
    MutableReference,
    NormalizedType,
    RawInput,
    Reference,
    Scalar,
    ScalarWidth,
    Struct,
    TypeParameter,
    Vector,
)


@dataclass(frozen=True)
class Pure:
    type_name: str
    raw: str
    value: int | bool | str


@dataclass(frozen=True)
class PureVector:
    # None when elements are objects: each is allocated on its own
    element_type: str | None
    elements: tuple[EncodedArgument, ...]
    # Move type of object elements, needed to build an empty vector
    object_type: str | None = None


@dataclass(frozen=True)
class ObjectRef:
    object_id: str


EncodedArgument = Union[Pure, PureVector, ObjectRef]


def parse_scalar(raw: str, width: ScalarWidth) -> int | bool | str:
    if width is ScalarWidth.BOOL:
        return raw.lower() == "true"
    if width is ScalarWidth.ADDRESS:
        return raw
    try:
        return int(raw, 10)
    except ValueError as e:
        raise EncodingError(width.value, f"'{raw}' is not a decimal integer") from e


def _require_str(raw: RawInput, t: NormalizedType) -> str:
    if not isinstance(raw, str):
        raise EncodingError(type_name(t), "expected a single value, got a list")
    return raw


def encode_value(raw: RawInput, t: NormalizedType) -> EncodedArgument:
    if isinstance(t, Scalar):
        s = _require_str(raw, t)
        return Pure(t.width.pure_name, s, parse_scalar(s, t.width))

    if isinstance(t, Struct):
        s = _require_str(raw, t)
        if is_move_string(t):
            return Pure("string", s, s)
        return ObjectRef(s)

    if isinstance(t, (Reference, MutableReference)):
        return ObjectRef(_require_str(raw, t))

    if isinstance(t, Vector):
        if not isinstance(raw, list):
            raise EncodingError(type_name(t), "expected a list of values")
        elements = tuple(encode_value(item, t.element) for item in raw)
        element = t.element
        if isinstance(element, Scalar):
            return PureVector(element.width.pure_name, elements)
        if isinstance(element, Struct) and is_move_string(element):
            return PureVector("string", elements)
        if isinstance(element, (Struct, Reference, MutableReference)):
            return PureVector(None, elements, object_type=type_tag(element))
        if isinstance(element, TypeParameter):
            raise UnsupportedTypeError(type_name(t), "substitute concrete type arguments before encoding")
        raise EncodingError(type_name(t), "nested vectors cannot be entered as raw input")

    if isinstance(t, TypeParameter):
        raise UnsupportedTypeError(type_name(t), "substitute concrete type arguments before encoding")

    raise TypeError(f"unknown normalized type: {t!r}")


def allocate(builder: TransactionBuilder, encoded: EncodedArgument) -> Argument:
    """Allocate `encoded` on `builder`, returning the argument handle for a move call."""
    if isinstance(encoded, Pure):
        try:
            return builder.pure(encoded.type_name, encoded.value)
        except ValueError as e:
            raise EncodingError(encoded.type_name, str(e)) from e

    if isinstance(encoded, PureVector):
        if encoded.element_type is not None:
            vector_type = f"vector<{encoded.element_type}>"
            values = []
            for item in encoded.elements:
                if not isinstance(item, Pure):
                    raise EncodingError(vector_type, "pure vector holds a non-pure element")
                values.append(item.value)
            try:
                return builder.pure(vector_type, values)
            except ValueError as e:
                raise EncodingError(vector_type, str(e)) from e
        handles = [allocate(builder, e) for e in encoded.elements]
        return builder.make_move_vec(None if handles else encoded.object_type, handles)

    if isinstance(encoded, ObjectRef):
        return builder.object(encoded.object_id)

    raise TypeError(f"unknown encoded argument: {encoded!r}")


def encode_argument(builder: TransactionBuilder, raw: RawInput, t: NormalizedType) -> Argument:
    return allocate(builder, encode_value(raw, t))
