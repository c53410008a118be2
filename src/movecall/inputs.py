"""Turn command-line text into raw form input (one string, or a list for vector slots)."""

from __future__ import annotations

import json
import re

from movecall.classify import InputKind, classify, unwrap_references
from movecall.types import NormalizedType, RawInput, Scalar, Vector

_NON_HEX_RE = re.compile(r"[^0-9a-fA-F]")


def split_hex_vector(text: str, bits: int) -> list[str]:
    """
    Split a hex blob into width-sized chunks, returned as decimal strings.

    ``split_hex_vector("0x0a ff", 8) == ["10", "255"]``. Whitespace and other
    separators are ignored; a trailing short chunk is kept.
    """
    s = text.strip()
    if s[:2].lower() == "0x":
        s = s[2:]
    digits = _NON_HEX_RE.sub("", s)
    size = bits // 4
    return [str(int(digits[i : i + size], 16)) for i in range(0, len(digits), size)]


def _json_item(item: object) -> str:
    if isinstance(item, bool):
        return "true" if item else "false"
    if isinstance(item, (int, str)):
        return str(item)
    raise ValueError(f"vector items must be strings, numbers or bools, got {type(item).__name__}")


def parse_cli_value(text: str, t: NormalizedType) -> RawInput:
    """
    Vector slots accept a JSON array (``["1","2"]``), a comma-separated list
    (``1,2``) or, for integer vectors, a ``0x`` hex blob split by width.
    Every other slot takes the text as-is.
    """
    if classify(t) is not InputKind.VECTOR:
        return text

    vec = unwrap_references(t)
    assert isinstance(vec, Vector)
    s = text.strip()
    if not s:
        return []
    if s.startswith("["):
        parsed = json.loads(s)
        if not isinstance(parsed, list):
            raise ValueError("expected a JSON array")
        return [_json_item(item) for item in parsed]
    element = vec.element
    if isinstance(element, Scalar) and element.width.is_integer and s[:2].lower() == "0x":
        return split_hex_vector(s, element.width.bits)
    return [part.strip() for part in s.split(",")]
