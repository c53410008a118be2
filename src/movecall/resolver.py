"""
Object type resolution over the Sui JSON-RPC API.

The validator needs to know what concrete type an on-chain object currently
has. ``ObjectTypeResolver`` is the seam; ``RpcObjectTypeResolver`` talks to a
fullnode through ``SuiRpcClient`` and ``StaticObjectTypeResolver`` serves a
fixed table (offline runs, tests).

Failure kinds:
- MalformedObjectIdError: the id is not 0x + 1..64 hex digits (no request is made)
- ObjectNotFoundError: the fullnode says the object does not exist or has no type
- TransientResolverError: transport error, timeout, non-200 status or JSON-RPC error
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import httpx

from movecall.config import NetworkContext
from movecall.constants import (
    OBJECT_ID_MAX_HEX_DIGITS,
    RESOLVER_RETRY_BASE_DELAY,
    RESOLVER_RETRY_MAX_ATTEMPTS,
    RESOLVER_RETRY_MAX_DELAY,
    RPC_REQUEST_TIMEOUT_SECONDS,
)
from movecall.errors import (
    MalformedObjectIdError,
    ObjectNotFoundError,
    RpcError,
    TransientResolverError,
)
from movecall.types import FunctionSignature, normalize_address
from movecall.utils import async_retry_with_backoff

logger = logging.getLogger(__name__)

_OBJECT_ID_RE = re.compile(rf"^0x[0-9a-fA-F]{{1,{OBJECT_ID_MAX_HEX_DIGITS}}}$")


def check_object_id(object_id: str) -> None:
    if not isinstance(object_id, str) or not _OBJECT_ID_RE.fullmatch(object_id):
        raise MalformedObjectIdError(str(object_id))


class ObjectTypeResolver(Protocol):
    async def resolve(self, object_id: str, context: NetworkContext) -> str:
        """Return the fully-qualified type of a live object, or raise ResolverError."""
        ...


class SuiRpcClient:
    """Thin async JSON-RPC client for the read-only fullnode calls this package needs."""

    def __init__(
        self,
        rpc_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_s: float = RPC_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.rpc_url = rpc_url
        self._client = client or httpx.AsyncClient(timeout=timeout_s)
        self._request_id = 0

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> SuiRpcClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, params: list[Any]) -> Any:
        self._request_id += 1
        payload = {"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params}
        try:
            resp = await self._client.post(self.rpc_url, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"RPC timeout: method={method}, url={self.rpc_url}, error={e}")
            raise RpcError(method, f"timeout: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"RPC request error: method={method}, url={self.rpc_url}, error={e}")
            raise RpcError(method, f"request failed: {e}") from e

        if resp.status_code != 200:
            logger.error(f"RPC request failed: status={resp.status_code}, method={method}, url={self.rpc_url}")
            raise RpcError(method, f"status {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as e:
            raise RpcError(method, f"invalid JSON response: {e}") from e

        if not isinstance(body, dict):
            raise RpcError(method, "response is not a JSON object")

        if "error" in body:
            err = body["error"]
            msg = err.get("message", err) if isinstance(err, dict) else err
            logger.error(f"RPC error response: method={method}, error={msg}")
            raise RpcError(method, str(msg))
        return body.get("result")

    async def get_object(self, object_id: str) -> dict[str, Any]:
        """Raw ``sui_getObject`` response (``{"data": ...}`` or ``{"error": ...}``)."""
        result = await self._request("sui_getObject", [object_id, {"showType": True, "showOwner": True}])
        return result if isinstance(result, dict) else {}

    async def get_object_type(self, object_id: str) -> str:
        check_object_id(object_id)
        try:
            result = await self.get_object(object_id)
        except RpcError as e:
            raise TransientResolverError(object_id, e.message) from e

        if result.get("error"):
            err = result["error"]
            code = err.get("code", err) if isinstance(err, dict) else err
            raise ObjectNotFoundError(object_id, f"fullnode reported {code}")
        data = result.get("data")
        obj_type = data.get("type") if isinstance(data, dict) else None
        if not isinstance(obj_type, str) or not obj_type:
            raise ObjectNotFoundError(object_id, "object has no type")
        return obj_type

    async def get_normalized_modules(self, package_id: str) -> dict[str, Any]:
        """``sui_getNormalizedMoveModulesByPackage``: module name -> normalized module JSON."""
        result = await self._request("sui_getNormalizedMoveModulesByPackage", [package_id])
        if not isinstance(result, dict):
            raise RpcError("sui_getNormalizedMoveModulesByPackage", "result is not an object")
        return result

    async def get_normalized_function(self, package_id: str, module: str, function: str) -> FunctionSignature:
        result = await self._request("sui_getNormalizedMoveFunction", [package_id, module, function])
        if not isinstance(result, dict):
            raise RpcError("sui_getNormalizedMoveFunction", "result is not an object")
        return FunctionSignature.from_json(function, result)


class RpcObjectTypeResolver:
    """
    Resolve object types against the fullnode named by each call's context.

    Transient failures are retried a bounded number of times; not-found and
    malformed ids fail at once.
    """

    def __init__(
        self,
        *,
        client_factory: Callable[[str], SuiRpcClient] = SuiRpcClient,
        max_attempts: int = RESOLVER_RETRY_MAX_ATTEMPTS,
        base_delay: float = RESOLVER_RETRY_BASE_DELAY,
        max_delay: float = RESOLVER_RETRY_MAX_DELAY,
    ) -> None:
        self._client_factory = client_factory
        self._clients: dict[str, SuiRpcClient] = {}
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay

    def _client_for(self, context: NetworkContext) -> SuiRpcClient:
        client = self._clients.get(context.rpc_url)
        if client is None:
            client = self._client_factory(context.rpc_url)
            self._clients[context.rpc_url] = client
        return client

    async def resolve(self, object_id: str, context: NetworkContext) -> str:
        check_object_id(object_id)
        client = self._client_for(context)
        return await async_retry_with_backoff(
            lambda: client.get_object_type(object_id),
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            retryable_exceptions=(TransientResolverError,),
        )

    async def aclose(self) -> None:
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.aclose()


class StaticObjectTypeResolver:
    """Resolver backed by a fixed ``object id -> type`` table. Ignores the network context."""

    def __init__(self, types: Mapping[str, str]) -> None:
        self._types = {normalize_address(k): v for k, v in types.items()}

    async def resolve(self, object_id: str, context: NetworkContext) -> str:
        check_object_id(object_id)
        obj_type = self._types.get(normalize_address(object_id))
        if obj_type is None:
            raise ObjectNotFoundError(object_id)
        return obj_type
