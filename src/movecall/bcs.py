"""
BCS (Binary Canonical Serialization) for pure Move values.

Byte-level work is done by ``aptos_sdk.bcs``; Sui and Aptos share the format.
This module maps pure type names in Move syntax (``u8`` .. ``u256``,
``bool``, ``address``, ``string`` and ``vector<...>``) onto its
``Serializer`` / ``Deserializer`` methods and checks values against the
declared width before writing.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from aptos_sdk.bcs import Deserializer, Serializer

__all__ = ["Deserializer", "Serializer", "decode_pure", "encode_pure"]

_ADDRESS_LENGTH = 32

_INT_WIDTHS = {"u8": 8, "u16": 16, "u32": 32, "u64": 64, "u128": 128, "u256": 256}

_INT_ENCODERS: dict[str, Callable[[Serializer, int], None]] = {
    "u8": Serializer.u8,
    "u16": Serializer.u16,
    "u32": Serializer.u32,
    "u64": Serializer.u64,
    "u128": Serializer.u128,
    "u256": Serializer.u256,
}

_INT_DECODERS: dict[str, Callable[[Deserializer], int]] = {
    "u8": Deserializer.u8,
    "u16": Deserializer.u16,
    "u32": Deserializer.u32,
    "u64": Deserializer.u64,
    "u128": Deserializer.u128,
    "u256": Deserializer.u256,
}


def _vector_element(type_name: str) -> str | None:
    if type_name.startswith("vector<") and type_name.endswith(">"):
        return type_name[len("vector<") : -1]
    return None


def address_bytes(value: str) -> bytes:
    """32-byte form of a hex address; short forms are left-padded with zeros."""
    h = value[2:] if value.lower().startswith("0x") else value
    if not h or len(h) > 2 * _ADDRESS_LENGTH:
        raise ValueError(f"invalid address {value!r}")
    return bytes.fromhex(h.rjust(2 * _ADDRESS_LENGTH, "0"))


def _encoder(type_name: str) -> Callable[[Serializer, Any], None]:
    if type_name in _INT_WIDTHS:
        bits = _INT_WIDTHS[type_name]
        write_int = _INT_ENCODERS[type_name]

        def encode_int(serializer: Serializer, value: int) -> None:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{value!r} is not an integer")
            if value < 0 or value >= (1 << bits):
                raise ValueError(f"{value} does not fit in {type_name}")
            write_int(serializer, value)

        return encode_int
    if type_name == "bool":
        return Serializer.bool
    if type_name == "address":
        return lambda serializer, value: serializer.fixed_bytes(address_bytes(value))
    if type_name == "string":
        return Serializer.str

    element = _vector_element(type_name)
    if element is None:
        raise ValueError(f"unsupported pure type {type_name!r}")
    write_element = _encoder(element)
    return lambda serializer, values: serializer.sequence(list(values), write_element)


def _decoder(type_name: str) -> Callable[[Deserializer], Any]:
    if type_name in _INT_DECODERS:
        return _INT_DECODERS[type_name]
    if type_name == "bool":
        return Deserializer.bool
    if type_name == "address":
        return lambda deserializer: "0x" + deserializer.fixed_bytes(_ADDRESS_LENGTH).hex()
    if type_name == "string":
        return Deserializer.str

    element = _vector_element(type_name)
    if element is None:
        raise ValueError(f"unsupported pure type {type_name!r}")
    read_element = _decoder(element)
    return lambda deserializer: deserializer.sequence(read_element)


def encode_pure(type_name: str, value: Any) -> bytes:
    """
    Serialize `value` as the pure Move type `type_name`.

    Raises:
        ValueError: If the type is not a pure type or the value does not fit it.
    """
    serializer = Serializer()
    _encoder(type_name)(serializer, value)
    return serializer.output()


def decode_pure(type_name: str, data: bytes) -> Any:
    """
    Inverse of ``encode_pure``.

    Raises:
        ValueError: If `data` is truncated, malformed or has trailing bytes.
    """
    read = _decoder(type_name)
    deserializer = Deserializer(data)
    try:
        out = read(deserializer)
    except ValueError:
        raise
    except Exception as e:
        # aptos_sdk reports short input and bad bool bytes as plain Exception
        raise ValueError(f"cannot decode {type_name}: {e}") from e
    if deserializer.remaining():
        raise ValueError(f"{deserializer.remaining()} trailing byte(s) after {type_name}")
    return out
