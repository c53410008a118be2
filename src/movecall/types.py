"""
Normalized Move types.

A function parameter's type arrives from the fullnode as a recursive JSON
value (``"U64"``, ``{"Vector": ...}``, ``{"Struct": {...}}``, ...). This module
turns that JSON into a closed set of frozen dataclasses so that every consumer
(classifier, namer, validator, encoder) dispatches on the same variants.

It also parses user-supplied type arguments (``0x2::coin::Coin<0x2::sui::SUI>``)
and substitutes them for ``TypeParameter`` slots.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from movecall.errors import TypeTagParseError, UnsupportedTypeError


class ScalarWidth(str, Enum):
    """Primitive Move types, named as the fullnode spells them."""

    U8 = "U8"
    U16 = "U16"
    U32 = "U32"
    U64 = "U64"
    U128 = "U128"
    U256 = "U256"
    BOOL = "Bool"
    ADDRESS = "Address"

    @property
    def pure_name(self) -> str:
        """Name used for pure arguments and type tags (``u64``, ``bool``, ``address``)."""
        return self.value.lower()

    @property
    def is_integer(self) -> bool:
        return self not in (ScalarWidth.BOOL, ScalarWidth.ADDRESS)

    @property
    def bits(self) -> int:
        if not self.is_integer:
            raise ValueError(f"{self.value} has no integer width")
        return int(self.value[1:])


@dataclass(frozen=True)
class Scalar:
    width: ScalarWidth


@dataclass(frozen=True)
class Vector:
    element: NormalizedType


@dataclass(frozen=True)
class Struct:
    address: str
    module: str
    name: str
    type_arguments: tuple[NormalizedType, ...] = ()


@dataclass(frozen=True)
class Reference:
    inner: NormalizedType


@dataclass(frozen=True)
class MutableReference:
    inner: NormalizedType


@dataclass(frozen=True)
class TypeParameter:
    index: int


NormalizedType = Union[Scalar, Vector, Struct, Reference, MutableReference, TypeParameter]

# One string for scalar/struct/reference slots, a list of strings for vectors
RawInput = Union[str, list[str]]


_SCALARS_BY_NAME = {w.value: w for w in ScalarWidth}


def parse_normalized_type(obj: Any) -> NormalizedType:
    """
    Parse a fullnode normalized type (``SuiMoveNormalizedType`` JSON).

    Raises:
        UnsupportedTypeError: For ``Signer`` and shapes this engine cannot represent.
    """
    if isinstance(obj, str):
        width = _SCALARS_BY_NAME.get(obj)
        if width is None:
            raise UnsupportedTypeError(obj, "not a pure primitive")
        return Scalar(width)

    if not isinstance(obj, dict) or len(obj) != 1:
        raise UnsupportedTypeError(repr(obj), "expected a single-key variant object")

    (kind, body), = obj.items()
    if kind == "Vector":
        return Vector(parse_normalized_type(body))
    if kind == "Reference":
        return Reference(parse_normalized_type(body))
    if kind == "MutableReference":
        return MutableReference(parse_normalized_type(body))
    if kind == "TypeParameter":
        if not isinstance(body, int) or isinstance(body, bool) or body < 0:
            raise UnsupportedTypeError(repr(obj), "type parameter index must be a non-negative integer")
        return TypeParameter(body)
    if kind == "Struct":
        if not isinstance(body, dict):
            raise UnsupportedTypeError(repr(obj), "struct body must be an object")
        try:
            address, module, name = body["address"], body["module"], body["name"]
        except KeyError as e:
            raise UnsupportedTypeError(repr(obj), f"struct is missing {e.args[0]}") from e
        args = body.get("typeArguments") or []
        return Struct(address, module, name, tuple(parse_normalized_type(a) for a in args))

    raise UnsupportedTypeError(repr(obj), f"unknown variant {kind}")


@dataclass(frozen=True)
class FunctionSignature:
    """Declared shape of one Move function, as returned by the fullnode."""

    name: str
    parameters: tuple[NormalizedType, ...]
    type_parameter_count: int = 0
    visibility: str = "Public"
    is_entry: bool = False
    returns: tuple[NormalizedType, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, name: str, obj: dict[str, Any]) -> FunctionSignature:
        """Build from a ``SuiMoveNormalizedFunction`` JSON object."""
        return cls(
            name=name,
            parameters=tuple(parse_normalized_type(p) for p in obj.get("parameters", [])),
            type_parameter_count=len(obj.get("typeParameters", [])),
            visibility=obj.get("visibility", "Public"),
            is_entry=bool(obj.get("isEntry", False)),
            returns=tuple(parse_normalized_type(r) for r in obj.get("return", [])),
        )


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------


def normalize_address(addr: str) -> str:
    """
    Canonicalize an address as 32-byte (64 hex) lowercase with 0x prefix.

    Non-address strings are returned unchanged.
    """
    s = addr.strip().lower()
    if not s.startswith("0x"):
        return addr
    h = s[2:]
    if not h:
        return "0x" + "0" * 64
    if len(h) > 64:
        return s
    return "0x" + h.rjust(64, "0")


_ADDR_RE = re.compile(r"0x[0-9a-fA-F]{1,64}")


def normalize_type_string(type_str: str) -> str:
    """
    Pad every ``0x...`` literal inside a type string to 32 bytes.

    ``0x2::coin::Coin<0x2::sui::SUI>`` and the fully padded spelling of the
    same type normalize to the same string.
    """
    return _ADDR_RE.sub(lambda m: normalize_address(m.group(0)), type_str.strip())


# ---------------------------------------------------------------------------
# Type tags
# ---------------------------------------------------------------------------


_TOKEN_RE = re.compile(r"\s*(::|<|>|,|[A-Za-z0-9_]+)")
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_ADDRESS_TOKEN_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        m = _TOKEN_RE.match(stripped, pos)
        if m is None:
            raise TypeTagParseError(text, f"unexpected character at offset {pos}")
        tokens.append(m.group(1))
        pos = m.end()
    return tokens


class _TypeTagParser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> str:
        tok = self._peek()
        if tok is None:
            raise TypeTagParseError(self.text, "unexpected end of input")
        self.pos += 1
        return tok

    def _expect(self, tok: str) -> None:
        got = self._next()
        if got != tok:
            raise TypeTagParseError(self.text, f"expected '{tok}', got '{got}'")

    def parse(self) -> NormalizedType:
        t = self._type()
        if self._peek() is not None:
            raise TypeTagParseError(self.text, f"trailing input at '{self._peek()}'")
        return t

    def _type(self) -> NormalizedType:
        tok = self._next()
        lowered = tok.lower()
        if lowered == "vector":
            self._expect("<")
            inner = self._type()
            self._expect(">")
            return Vector(inner)
        for width in ScalarWidth:
            if lowered == width.pure_name:
                return Scalar(width)
        if not _ADDRESS_TOKEN_RE.match(tok):
            raise TypeTagParseError(self.text, f"'{tok}' is neither a primitive nor an address")
        self._expect("::")
        module = self._ident()
        self._expect("::")
        name = self._ident()
        args: list[NormalizedType] = []
        if self._peek() == "<":
            self._next()
            args.append(self._type())
            while self._peek() == ",":
                self._next()
                args.append(self._type())
            self._expect(">")
        return Struct(tok, module, name, tuple(args))

    def _ident(self) -> str:
        tok = self._next()
        if not _IDENT_RE.match(tok):
            raise TypeTagParseError(self.text, f"'{tok}' is not an identifier")
        return tok


def parse_type_tag(text: str) -> NormalizedType:
    """
    Parse a Move type tag such as ``u64``, ``vector<u8>`` or
    ``0x2::coin::Coin<0x2::sui::SUI>``.

    Raises:
        TypeTagParseError: If the text is not a well-formed type tag.
    """
    if not text or not text.strip():
        raise TypeTagParseError(text, "empty type tag")
    return _TypeTagParser(text).parse()


def substitute_type_parameters(t: NormalizedType, type_arguments: Sequence[NormalizedType]) -> NormalizedType:
    """Replace every ``TypeParameter(i)`` in ``t`` with ``type_arguments[i]``."""
    if isinstance(t, TypeParameter):
        if t.index >= len(type_arguments):
            raise UnsupportedTypeError(f"T{t.index}", f"only {len(type_arguments)} type argument(s) supplied")
        return type_arguments[t.index]
    if isinstance(t, Vector):
        return Vector(substitute_type_parameters(t.element, type_arguments))
    if isinstance(t, Reference):
        return Reference(substitute_type_parameters(t.inner, type_arguments))
    if isinstance(t, MutableReference):
        return MutableReference(substitute_type_parameters(t.inner, type_arguments))
    if isinstance(t, Struct):
        if not t.type_arguments:
            return t
        return Struct(
            t.address,
            t.module,
            t.name,
            tuple(substitute_type_parameters(a, type_arguments) for a in t.type_arguments),
        )
    return t
