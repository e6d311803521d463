"""TRON full-node HTTP client.

Thin async wrapper over the node's ``/wallet/*`` HTTP API. Only read-only
endpoints are used: chain parameters, unsigned transaction builders,
dry-run energy estimation and constant calls.
"""

from __future__ import annotations

import re
from types import TracebackType
from typing import Any

import httpx

from ._version import __version__
from .abi import encode_parameters
from .config import NodeConfig
from .exceptions import (
    RemoteAuthenticationError,
    RemoteServiceError,
    RemoteTimeoutError,
)
from .logger import get_logger
from .types import ContractInvocation

__all__ = ["TronNodeClient", "DEFAULT_FEE_LIMIT"]

logger = get_logger(__name__)

DEFAULT_FEE_LIMIT = 1_000_000_000

_API_KEY_RE = re.compile(r"api ?key", re.IGNORECASE)


class TronNodeClient:
    """Async client for a TRON full node.

    The client should be used as an async context manager:

        async with TronNodeClient(NodeConfig.from_env()) as client:
            params = await client.get_chain_parameters()

    Every call is a single POST bounded by ``config.timeout``; there are
    no retries.
    """

    def __init__(
        self,
        config: NodeConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the node client.

        Args:
            config: Endpoint, provider credentials and timeout.
            transport: Optional httpx transport (tests).
        """
        self._config = config
        self._base_url = config.full_node.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(config.timeout),
            transport=transport,
            headers={
                **config.auth_headers(),
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": f"tron-fee-estimator/{__version__}",
            },
        )

    @property
    def config(self) -> NodeConfig:
        return self._config

    async def __aenter__(self) -> TronNodeClient:
        """Enter async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def _request(self, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        """POST to a wallet endpoint and return the decoded body.

        Raises:
            RemoteServiceError: On transport failure or node error.
            RemoteTimeoutError: When the call exceeds the timeout.
            RemoteAuthenticationError: When the provider rejects the API key.
        """
        logger.debug("POST %s %s", path, payload)
        try:
            response = await self._client.post(path, json=payload or {})
        except httpx.TimeoutException as e:
            raise RemoteTimeoutError(f"Request to {path} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise self._error(f"Connection failed: {e}") from e
        return self._handle_response(response)

    def _error(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> RemoteServiceError:
        """Build the error for a failure, tagging API-key problems with a hint."""
        if status_code in (401, 403) or _API_KEY_RE.search(message):
            return RemoteAuthenticationError(
                message,
                status_code=status_code,
                provider=self._config.provider_label,
                hint=self._config.api_key_hint(),
            )
        return RemoteServiceError(message, status_code=status_code, details=details)

    def _handle_response(self, response: httpx.Response) -> dict[str, Any]:
        """Decode the response and raise on node errors.

        Args:
            response: The HTTP response.

        Returns:
            Parsed JSON response body.

        Raises:
            RemoteServiceError: On error response.
        """
        if not response.is_success:
            try:
                details = response.json()
            except ValueError:
                details = None
            message = response.text or f"HTTP {response.status_code}"
            raise self._error(message, status_code=response.status_code, details=details)

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteServiceError(
                f"Invalid JSON from node: {response.text[:200]}",
                status_code=response.status_code,
            ) from e

        if not isinstance(body, dict):
            raise RemoteServiceError(f"Unexpected response from node: {body!r}")
        # The node reports most failures as 200 + {"Error": "..."}
        if "Error" in body:
            raise self._error(str(body["Error"]), details=body)
        return body

    # =========================================================================
    # Chain state
    # =========================================================================

    async def get_chain_parameters(self) -> dict[str, int]:
        """Return chain parameters as a ``{key: value}`` mapping.

        Parameters whose value is zero are reported without a ``value``
        field by the node; they map to 0.
        """
        body = await self._request("/wallet/getchainparameters")
        return {
            p["key"]: p.get("value", 0)
            for p in body.get("chainParameter", [])
            if isinstance(p, dict) and "key" in p
        }

    async def get_now_block(self) -> dict[str, Any]:
        """Return the latest block."""
        return await self._request("/wallet/getnowblock")

    async def health_check(self) -> bool:
        """Check that the node answers and accepts our credentials.

        Returns:
            True if the node returned the current block.

        Raises:
            RemoteServiceError: If the node cannot be queried.
        """
        block = await self.get_now_block()
        number = block.get("block_header", {}).get("raw_data", {}).get("number")
        logger.debug("Node %s is at block %s", self._base_url, number)
        return True

    # =========================================================================
    # Transaction builders (unsigned)
    # =========================================================================

    async def create_transaction(
        self,
        owner_hex: str,
        to_hex: str,
        amount_sun: int,
    ) -> dict[str, Any]:
        """Build an unsigned TRX transfer."""
        return await self._request(
            "/wallet/createtransaction",
            {"owner_address": owner_hex, "to_address": to_hex, "amount": amount_sun},
        )

    def _contract_payload(
        self,
        invocation: ContractInvocation,
        *,
        visible: bool = False,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "owner_address": invocation.owner_base58 if visible else invocation.owner_hex,
            "contract_address": (
                invocation.contract_base58 if visible else invocation.contract_hex
            ),
            "function_selector": invocation.selector,
            "parameter": encode_parameters(list(invocation.parameters)),
            "call_value": invocation.call_value_sun,
        }
        if visible:
            payload["visible"] = True
        return payload

    async def trigger_smart_contract(
        self,
        invocation: ContractInvocation,
        *,
        fee_limit: int = DEFAULT_FEE_LIMIT,
    ) -> dict[str, Any]:
        """Build an unsigned contract call; the transaction is under ``transaction``."""
        payload = self._contract_payload(invocation, visible=True)
        payload["fee_limit"] = fee_limit
        return await self._request("/wallet/triggersmartcontract", payload)

    # =========================================================================
    # Energy
    # =========================================================================

    async def estimate_energy(
        self,
        invocation: ContractInvocation,
        *,
        visible: bool = False,
    ) -> dict[str, Any]:
        """Dry-run a call; returns ``{"result": {"result": bool}, "energy_required": n}``."""
        return await self._request(
            "/wallet/estimateenergy",
            self._contract_payload(invocation, visible=visible),
        )

    async def trigger_constant_contract(
        self,
        invocation: ContractInvocation,
        *,
        fee_limit: int = DEFAULT_FEE_LIMIT,
    ) -> dict[str, Any]:
        """Run a call as a constant (non-mutating) call."""
        payload = self._contract_payload(invocation, visible=True)
        payload["fee_limit"] = fee_limit
        return await self._request("/wallet/triggerconstantcontract", payload)
