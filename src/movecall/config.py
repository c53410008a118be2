from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from movecall.constants import DEFAULT_NETWORK, FULLNODE_URLS
from movecall.errors import InvalidConfigError


def load_dotenv(path: Path) -> dict[str, str]:
    """
    Minimal .env loader:
    - supports KEY=VALUE
    - strips surrounding quotes
    - ignores blank lines and `#` comments
    - does not expand variables
    """
    out: dict[str, str] = {}
    if not path.exists():
        return out

    for raw in path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, v = line.split("=", 1)
        k = k.strip()
        v = v.strip()
        if not k:
            continue
        if len(v) >= 2 and ((v[0] == v[-1] == '"') or (v[0] == v[-1] == "'")):
            v = v[1:-1]
        out[k] = v
    return out


@dataclass(frozen=True)
class NetworkContext:
    """Which network object lookups go to. Passed explicitly into every resolve call."""

    network: str
    rpc_url: str


def resolve_network_context(
    *,
    network: str | None = None,
    rpc_url: str | None = None,
    env: Mapping[str, str] | None = None,
) -> NetworkContext:
    """
    Build a NetworkContext.

    Precedence: explicit arguments, then MOVECALL_NETWORK / MOVECALL_RPC_URL in
    `env` (defaults to os.environ), then module defaults. An explicitly named
    network uses its own fullnode URL; MOVECALL_RPC_URL only fills in for
    networks without a known URL.

    Raises:
        InvalidConfigError: If the network is unknown and no RPC URL was given.
    """
    env = os.environ if env is None else env
    net = (network or env.get("MOVECALL_NETWORK") or DEFAULT_NETWORK).strip().lower()
    if rpc_url:
        url = rpc_url
    elif network:
        url = FULLNODE_URLS.get(net) or env.get("MOVECALL_RPC_URL")
    else:
        url = env.get("MOVECALL_RPC_URL") or FULLNODE_URLS.get(net)
    if not url:
        raise InvalidConfigError("network", f"unknown network '{net}' and no RPC URL given")
    if not url.startswith(("http://", "https://")):
        raise InvalidConfigError("rpc_url", f"'{url}' is not an http(s) URL")
    return NetworkContext(network=net, rpc_url=url)
