"""
Centralized constants for movecall configuration.

This module provides single-source-of-truth defaults for values that are used
across the resolver, validator and CLI. Prefer these constants over
hardcoded literals so configuration changes happen in one place.

Environment variables read by movecall.config.resolve_network_context:
- MOVECALL_NETWORK: Default network name (mainnet, testnet, devnet, localnet)
- MOVECALL_RPC_URL: Explicit fullnode URL (wins over the network's default
  unless a network is named explicitly)
"""

from __future__ import annotations

# =============================================================================
# Networks
# =============================================================================

# Public fullnode endpoints, keyed by network name
FULLNODE_URLS = {
    "mainnet": "https://fullnode.mainnet.sui.io:443",
    "testnet": "https://fullnode.testnet.sui.io:443",
    "devnet": "https://fullnode.devnet.sui.io:443",
    "localnet": "http://127.0.0.1:9000",
}

DEFAULT_NETWORK = "testnet"

# RPC request timeout (seconds)
RPC_REQUEST_TIMEOUT_SECONDS = 30.0

# =============================================================================
# Retry Configuration
# =============================================================================

# Object lookups retry transient failures once (two attempts total)
RESOLVER_RETRY_MAX_ATTEMPTS = 2
RESOLVER_RETRY_BASE_DELAY = 0.5  # seconds
RESOLVER_RETRY_MAX_DELAY = 2.0  # seconds

# =============================================================================
# Framework Addresses
# =============================================================================

STDLIB_ADDRESS = "0x" + ("0" * 63) + "1"
SUI_FRAMEWORK_ADDRESS = "0x" + ("0" * 63) + "2"

# Implicit trailing execution-context parameter
TX_CONTEXT_MODULE = "tx_context"
TX_CONTEXT_STRUCT = "TxContext"

# Move string structs that travel as pure arguments
MOVE_STRING_TYPES = frozenset(
    {
        (STDLIB_ADDRESS, "string", "String"),
        (STDLIB_ADDRESS, "ascii", "String"),
    }
)

# Object IDs are 32-byte addresses; RPC accepts the short form as well
OBJECT_ID_MAX_HEX_DIGITS = 64
