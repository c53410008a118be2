"""
Type-directed validation of raw form input.

``validate`` never raises for bad input or failed lookups: every failure
(shape, grammar, range, object identity, resolver error) collapses to
``False``. ``validate_detailed`` additionally reports which resolver error,
if any, caused the failure so a caller can show "could not check" instead of
"wrong type".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from movecall.classify import is_move_string, type_name, type_tag, unwrap_references
from movecall.config import NetworkContext
from movecall.errors import ResolverError
from movecall.resolver import ObjectTypeResolver
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
    normalize_type_string,
)

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[0-9]+")
_BOOL_RE = re.compile(r"true|false", re.IGNORECASE)
_ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{64}")


def check_scalar(value: str, width: ScalarWidth) -> bool:
    """
    Check a string against a primitive's grammar.

    Integers are decimal digits only (no sign, no hex) and must fit the width.
    Bools are `true`/`false` in any case. Addresses are 0x + exactly 64 hex digits.
    """
    if width is ScalarWidth.BOOL:
        return _BOOL_RE.fullmatch(value) is not None
    if width is ScalarWidth.ADDRESS:
        return _ADDRESS_RE.fullmatch(value) is not None
    if _INTEGER_RE.fullmatch(value) is None:
        return False
    return int(value) < (1 << width.bits)


def same_object_type(resolved: str, expected: str) -> bool:
    """Exact nominal match, modulo short/padded address spelling and whitespace."""
    return _canonical(resolved) == _canonical(expected)


def _canonical(type_str: str) -> str:
    return "".join(normalize_type_string(type_str).split())


def is_object_of_type(resolved: str, t: NormalizedType) -> bool:
    """
    True if a resolved object type names `t`.

    The fullnode spells primitive type arguments in Move syntax
    (`Table<address, u64>`), so both that spelling and `type_name(t)` match.
    """
    return same_object_type(resolved, type_name(t)) or same_object_type(resolved, type_tag(t))


@dataclass(frozen=True)
class ValidationDetail:
    valid: bool
    resolver_error: ResolverError | None = None

    @property
    def unknown(self) -> bool:
        """True when the verdict is False only because the object could not be looked up."""
        return self.resolver_error is not None


async def _check(raw: RawInput, t: NormalizedType, resolver: ObjectTypeResolver, context: NetworkContext) -> bool:
    if isinstance(t, Scalar):
        return isinstance(raw, str) and check_scalar(raw, t.width)

    if isinstance(t, Vector):
        if not isinstance(raw, list):
            return False
        for item in raw:
            if not await _check(item, t.element, resolver, context):
                return False
        return True

    if isinstance(t, Struct):
        if not isinstance(raw, str):
            return False
        if is_move_string(t):
            return True
        resolved = await resolver.resolve(raw, context)
        return is_object_of_type(resolved, t)

    if isinstance(t, (Reference, MutableReference)):
        if not isinstance(raw, str):
            return False
        if isinstance(unwrap_references(t), TypeParameter):
            return False
        resolved = await resolver.resolve(raw, context)
        return is_object_of_type(resolved, t.inner)

    if isinstance(t, TypeParameter):
        # Unbound generic slot: callers substitute concrete type arguments first.
        logger.debug(f"Rejecting value for unbound type parameter T{t.index}")
        return False

    raise TypeError(f"unknown normalized type: {t!r}")


async def validate_detailed(
    raw: RawInput,
    t: NormalizedType,
    resolver: ObjectTypeResolver,
    context: NetworkContext,
) -> ValidationDetail:
    try:
        return ValidationDetail(valid=await _check(raw, t, resolver, context))
    except ResolverError as e:
        logger.warning(f"Object lookup failed while validating {type_name(t)}: {e.message}")
        return ValidationDetail(valid=False, resolver_error=e)


async def validate(
    raw: RawInput,
    t: NormalizedType,
    resolver: ObjectTypeResolver,
    context: NetworkContext,
) -> bool:
    """Return True iff `raw` is an acceptable value for a parameter of type `t`."""
    detail = await validate_detailed(raw, t, resolver, context)
    return detail.valid
