"""
Shared pytest fixtures for movecall tests.

This module provides:
- A stub object type resolver with per-object failures and release gates
- A fixed network context
- Common normalized types (Coin<SUI>, TxContext, ...)
"""

from __future__ import annotations

import asyncio

import pytest

from movecall.config import NetworkContext
from movecall.errors import ObjectNotFoundError, ResolverError
from movecall.types import MutableReference, Reference, Struct

TESTNET = NetworkContext(network="testnet", rpc_url="https://fullnode.testnet.sui.io:443")

SUI = Struct("0x2", "sui", "SUI")
COIN_SUI = Struct("0x2", "coin", "Coin", (SUI,))
TX_CONTEXT = MutableReference(Struct("0x2", "tx_context", "TxContext"))
CLOCK_REF = Reference(Struct("0x2", "clock", "Clock"))
MOVE_STRING = Struct("0x1", "string", "String")


class StubResolver:
    """
    In-memory resolver.

    - `types`: object id -> type string
    - `failures`: object id -> ResolverError to raise
    - `gates`: object id -> asyncio.Event the lookup waits on before answering
    """

    def __init__(
        self,
        types: dict[str, str] | None = None,
        *,
        failures: dict[str, ResolverError] | None = None,
        gates: dict[str, asyncio.Event] | None = None,
    ) -> None:
        self.types = dict(types or {})
        self.failures = dict(failures or {})
        self.gates = dict(gates or {})
        self.calls: list[tuple[str, NetworkContext]] = []

    async def resolve(self, object_id: str, context: NetworkContext) -> str:
        self.calls.append((object_id, context))
        gate = self.gates.get(object_id)
        if gate is not None:
            await gate.wait()
        if object_id in self.failures:
            raise self.failures[object_id]
        if object_id not in self.types:
            raise ObjectNotFoundError(object_id)
        return self.types[object_id]


@pytest.fixture
def context() -> NetworkContext:
    return TESTNET


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
