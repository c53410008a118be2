"""movecall error type definitions.

Every error carries a stable numeric code, a human-readable message and a
structured ``data`` payload so callers (the CLI, a webview bridge) can report
failures consistently.
"""

from __future__ import annotations

from typing import Any


class MoveCallError(Exception):
    """Base class for movecall errors."""

    def __init__(self, code: int, message: str, data: dict[str, Any] | None = None):
        self.code = code
        self.message = message
        self.data = data or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a JSON-serializable dictionary."""
        return {
            "code": self.code,
            "message": self.message,
            "data": self.data,
        }


class ResolverError(MoveCallError):
    """An object type lookup failed. Subclasses name the failure kind."""

    kind = "unknown"

    def __init__(self, object_id: str, reason: str, code: int = -33000):
        super().__init__(
            code=code,
            message=f"Cannot resolve object {object_id}: {reason}",
            data={"objectId": object_id, "kind": self.kind, "reason": reason},
        )
        self.object_id = object_id


class ObjectNotFoundError(ResolverError):
    """The identifier does not name a live object."""

    kind = "not_found"

    def __init__(self, object_id: str, reason: str = "object does not exist"):
        super().__init__(object_id, reason, code=-33001)


class TransientResolverError(ResolverError):
    """Network, timeout or server-side failure; the lookup may succeed later."""

    kind = "transient"

    def __init__(self, object_id: str, reason: str):
        super().__init__(object_id, reason, code=-33002)


class MalformedObjectIdError(ResolverError):
    """The identifier is not 0x followed by 1-64 hex digits."""

    kind = "malformed"

    def __init__(self, object_id: str):
        super().__init__(object_id, "not a well-formed object id", code=-33003)


class RpcError(MoveCallError):
    """A JSON-RPC call failed outside of an object lookup."""

    def __init__(self, method: str, reason: str):
        super().__init__(
            code=-33010,
            message=f"RPC {method} failed: {reason}",
            data={"method": method, "reason": reason},
        )


class UnsupportedTypeError(MoveCallError):
    """A normalized type cannot be handled (e.g. signer, unbound type parameter)."""

    def __init__(self, type_repr: str, reason: str):
        super().__init__(
            code=-33020,
            message=f"Unsupported type {type_repr}: {reason}",
            data={"type": type_repr, "reason": reason},
        )


class TypeTagParseError(MoveCallError):
    """A type argument string is not a valid Move type tag."""

    def __init__(self, text: str, reason: str):
        super().__init__(
            code=-33021,
            message=f"Invalid type tag '{text}': {reason}",
            data={"text": text, "reason": reason},
        )


class EncodingError(MoveCallError):
    """The encoder was handed input that does not match the declared type."""

    def __init__(self, type_repr: str, reason: str):
        super().__init__(
            code=-33030,
            message=f"Cannot encode value for {type_repr}: {reason}",
            data={"type": type_repr, "reason": reason},
        )


class ArgumentCountError(MoveCallError):
    """Raw inputs or type arguments do not line up with the signature."""

    def __init__(self, what: str, expected: int, got: int):
        super().__init__(
            code=-33040,
            message=f"Expected {expected} {what}, got {got}",
            data={"what": what, "expected": expected, "got": got},
        )


class InvalidConfigError(MoveCallError):
    """Invalid configuration provided."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            code=-32602,
            message=f"Invalid config: {field} - {reason}",
            data={"field": field, "reason": reason},
        )
