from __future__ import annotations

import json
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any


def _now_unix() -> int:
    return int(time.time())


def _safe_filename(s: str) -> str:
    out = []
    for ch in s:
        if ch.isalnum() or ch in ("-", "_", "."):
            out.append(ch)
        else:
            out.append("_")
    return "".join(out)[:120]


def default_session_id(*, prefix: str = "movecall") -> str:
    """Unique session id: UTC timestamp, PID and a random suffix."""
    ts = time.strftime("%Y%m%d_%H%M%S", time.gmtime())
    return f"{prefix}_{ts}_pid{os.getpid()}_{secrets.token_hex(3)}"


@dataclass(frozen=True)
class JsonlPaths:
    root: Path
    session_metadata: Path
    events: Path
    invocations: Path


class JsonlLogger:
    """
    Per-session call log:
    - session_metadata.json: one JSON object (network, target, ...)
    - events.jsonl: status events (validation started, gate decision, submission)
    - invocations.jsonl: one row per finished invocation attempt
    """

    def __init__(self, *, base_dir: Path, session_id: str) -> None:
        root = base_dir / _safe_filename(session_id)
        root.mkdir(parents=True, exist_ok=True)
        self.paths = JsonlPaths(
            root=root,
            session_metadata=root / "session_metadata.json",
            events=root / "events.jsonl",
            invocations=root / "invocations.jsonl",
        )

    def write_session_metadata(self, obj: dict[str, Any]) -> None:
        self.paths.session_metadata.write_text(json.dumps(obj, indent=2, sort_keys=True) + "\n")

    def event(self, name: str, **fields: object) -> None:
        """Append an event row. Every row carries `t` (unix seconds) and `event`."""
        row = {"t": _now_unix(), "event": name, **fields}
        with self.paths.events.open("a", encoding="utf-8") as f:
            f.write(json.dumps(row, sort_keys=True) + "\n")

    def invocation_row(self, row: dict[str, Any]) -> None:
        with self.paths.invocations.open("a", encoding="utf-8") as f:
            f.write(json.dumps(row, sort_keys=True) + "\n")
