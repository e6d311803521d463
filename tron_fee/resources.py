"""Resource estimation: energy cascade and approximate transaction size.

Node providers implement different, mutually incompatible simulation
endpoints and address-form expectations, so energy is estimated by an
ordered list of strategies. The first one that yields a number wins; a
strategy that fails for any remote reason yields ``None`` and the next one
is tried. When none succeeds the energy is 0.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from .exceptions import RemoteServiceError
from .logger import get_logger
from .types import ContractInvocation

if TYPE_CHECKING:
    from .client import TronNodeClient

__all__ = [
    "FALLBACK_TX_BYTES",
    "SIGNATURE_OVERHEAD_BYTES",
    "approximate_byte_size",
    "EnergyStrategy",
    "DryRunStrategy",
    "ConstantCallStrategy",
    "ResourceEstimator",
]

logger = get_logger(__name__)

FALLBACK_TX_BYTES = 270
# Signature and envelope bytes missing from the unsigned skeleton
SIGNATURE_OVERHEAD_BYTES = 100


def approximate_byte_size(wrapper: dict[str, Any] | None) -> int:
    """Approximate the signed size of a built transaction.

    Looks for ``raw_data_hex`` on the wrapper itself or on its
    ``transaction`` member.
    """
    wrapper = wrapper or {}
    hex_payload = wrapper.get("raw_data_hex")
    if not hex_payload and isinstance(wrapper.get("transaction"), dict):
        hex_payload = wrapper["transaction"].get("raw_data_hex")
    if not hex_payload:
        return FALLBACK_TX_BYTES
    return round(len(hex_payload) / 2) + SIGNATURE_OVERHEAD_BYTES


def _energy_value(value: Any) -> int | None:
    """Accept finite, non-negative numbers only."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return int(value)


# =============================================================================
# Strategies
# =============================================================================


class EnergyStrategy(ABC):
    """One way of asking the node for the energy a call consumes."""

    name = "strategy"

    def __init__(self, client: TronNodeClient) -> None:
        self._client = client

    async def try_estimate(self, invocation: ContractInvocation) -> int | None:
        """Return energy units, or None if this strategy has no answer."""
        try:
            energy = await self._estimate(invocation)
        except RemoteServiceError as e:
            logger.debug("%s failed: %s", self.name, e)
            return None
        logger.debug("%s -> %s", self.name, energy)
        return energy

    @abstractmethod
    async def _estimate(self, invocation: ContractInvocation) -> int | None:
        """Ask the node; RemoteServiceError means no answer."""


class DryRunStrategy(EnergyStrategy):
    """``wallet/estimateenergy`` with the issuer in hex or base58 form."""

    def __init__(self, client: TronNodeClient, *, visible: bool = False) -> None:
        super().__init__(client)
        self.visible = visible
        self.name = "estimateenergy(base58)" if visible else "estimateenergy(hex)"

    async def _estimate(self, invocation: ContractInvocation) -> int | None:
        r = await self._client.estimate_energy(invocation, visible=self.visible)
        result = r.get("result")
        if not isinstance(result, dict) or result.get("result") is not True:
            return None
        return _energy_value(r.get("energy_required"))


class ConstantCallStrategy(EnergyStrategy):
    """``wallet/triggerconstantcontract`` reading the energy actually used."""

    name = "triggerconstantcontract"

    async def _estimate(self, invocation: ContractInvocation) -> int | None:
        r = await self._client.trigger_constant_contract(invocation)
        used = r.get("energy_used")
        if used is None:
            used = r.get("energy_used_total")
        return _energy_value(used)


# =============================================================================
# Estimator
# =============================================================================


class ResourceEstimator:
    """Energy cascade plus skeleton builders for size estimation.

    Args:
        client: Node client.
        supports_dry_run: Whether the node serves ``wallet/estimateenergy``.
            When False only the constant-call strategy is used.
        strategies: Explicit strategy list, overriding the default order.
    """

    def __init__(
        self,
        client: TronNodeClient,
        *,
        supports_dry_run: bool = True,
        strategies: Sequence[EnergyStrategy] | None = None,
    ) -> None:
        self._client = client
        if strategies is None:
            strategies = []
            if supports_dry_run:
                strategies += [
                    DryRunStrategy(client, visible=False),
                    DryRunStrategy(client, visible=True),
                ]
            strategies.append(ConstantCallStrategy(client))
        self.strategies = list(strategies)

    async def estimate_energy(self, invocation: ContractInvocation) -> int:
        """Run the cascade; 0 when no strategy produced a number."""
        for strategy in self.strategies:
            energy = await strategy.try_estimate(invocation)
            if energy is not None:
                return energy
        logger.info("No energy estimate for %s; using 0", invocation.selector)
        return 0

    async def probe_native_transfer(
        self,
        owner_hex: str,
        to_hex: str,
        amount_sun: int,
    ) -> int:
        """Approximate size of a TRX transfer."""
        tx = await self._client.create_transaction(owner_hex, to_hex, amount_sun)
        return approximate_byte_size(tx)

    async def probe_contract_call(self, invocation: ContractInvocation) -> int:
        """Approximate size of a contract call."""
        wrapper = await self._client.trigger_smart_contract(invocation)
        return approximate_byte_size(wrapper)
