"""Fee estimation per transaction kind.

Provides the FeeEstimator class: one method per transaction kind, each
validating its addresses, estimating resources and pricing them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

from . import address
from .abi import encode_parameters, normalize_parameters, parse_parameters
from .costs import build_fee_estimate
from .logger import get_logger
from .prices import to_sun
from .resources import ResourceEstimator
from .types import (
    CallParameter,
    ChainPrices,
    ContractCallIntent,
    ContractInvocation,
    FeeEstimate,
    NativeTransferIntent,
    ResourceEstimate,
    TokenTransferIntent,
    TransactionKind,
)

if TYPE_CHECKING:
    from .client import TronNodeClient
    from .types import TransactionIntent

__all__ = ["FeeEstimator", "TRC20_TRANSFER_SELECTOR"]

logger = get_logger(__name__)

TRC20_TRANSFER_SELECTOR = "transfer(address,uint256)"


def _invocation(
    contract: str,
    sender: str,
    selector: str,
    parameters: list[CallParameter],
    call_value_sun: int = 0,
) -> ContractInvocation:
    contract_hex = address.to_canonical_form(contract)
    owner_hex = address.to_canonical_form(sender)
    # Fail fast on arguments that cannot be encoded
    encode_parameters(parameters)
    return ContractInvocation(
        contract_hex=contract_hex,
        contract_base58=address.to_base58(contract_hex),
        owner_hex=owner_hex,
        owner_base58=address.to_base58(owner_hex),
        selector=selector,
        parameters=tuple(parameters),
        call_value_sun=call_value_sun,
    )


class FeeEstimator:
    """Estimates TRX fees for transfers and contract calls.

    Example::

        async with TronNodeClient(config) as client:
            prices = await fetch_prices(client)
            estimator = FeeEstimator(client)
            fee = await estimator.estimate_trc20_transfer(
                token=USDT, sender="T...", recipient="T...", amount="1000000",
                prices=prices,
            )
            print(f"Total: {fee.trx_total} TRX")
    """

    def __init__(
        self,
        client: TronNodeClient,
        resources: ResourceEstimator | None = None,
    ) -> None:
        self._client = client
        self.resources = resources or ResourceEstimator(
            client, supports_dry_run=client.config.supports_dry_run
        )

    async def estimate(self, intent: TransactionIntent, prices: ChainPrices) -> FeeEstimate:
        """Dispatch on the intent's kind."""
        if isinstance(intent, NativeTransferIntent):
            return await self.estimate_trx_transfer(
                intent.sender, intent.recipient, intent.amount_trx, prices
            )
        if isinstance(intent, TokenTransferIntent):
            return await self.estimate_trc20_transfer(
                intent.token, intent.sender, intent.recipient, intent.amount, prices
            )
        if isinstance(intent, ContractCallIntent):
            return await self.estimate_contract_call(
                intent.contract,
                intent.sender,
                intent.selector,
                intent.parameters,
                intent.call_value_trx,
                prices,
            )
        raise TypeError(f"Unsupported intent: {intent!r}")

    async def estimate_trx_transfer(
        self,
        sender: str,
        recipient: str,
        amount_trx: Decimal | float | str,
        prices: ChainPrices,
    ) -> FeeEstimate:
        """Estimate a plain TRX transfer.

        TRX transfers burn no energy; only bandwidth is priced.

        Raises:
            InvalidAddressError: If either address is malformed.
            InvalidParameterError: If the amount is not a valid TRX amount.
        """
        address.validate(sender, "from")
        address.validate(recipient, "to")

        bandwidth_bytes = await self.resources.probe_native_transfer(
            address.to_canonical_form(sender),
            address.to_canonical_form(recipient),
            to_sun(amount_trx),
        )
        return build_fee_estimate(
            TransactionKind.TRX_TRANSFER,
            ResourceEstimate(energy=0, bandwidth_bytes=bandwidth_bytes),
            prices,
        )

    async def estimate_trc20_transfer(
        self,
        token: str,
        sender: str,
        recipient: str,
        amount: str | int,
        prices: ChainPrices,
    ) -> FeeEstimate:
        """Estimate a TRC20 ``transfer(address,uint256)``.

        ``amount`` is passed through as given, in the token's smallest unit.

        Raises:
            InvalidAddressError: If any address is malformed.
        """
        address.validate(token, "token")
        address.validate(sender, "from")
        address.validate(recipient, "to")

        parameters = [
            CallParameter(type="address", value=address.to_canonical_form(recipient)),
            CallParameter(type="uint256", value=str(amount)),
        ]
        invocation = _invocation(token, sender, TRC20_TRANSFER_SELECTOR, parameters)
        return await self._estimate_call(TransactionKind.TRC20_TRANSFER, invocation, prices)

    async def estimate_contract_call(
        self,
        contract: str,
        sender: str,
        selector: str,
        params: str | list[Any] | None,
        call_value_trx: Decimal | float | str | None,
        prices: ChainPrices,
    ) -> FeeEstimate:
        """Estimate an arbitrary contract call.

        Args:
            contract: Contract address.
            sender: Issuer address.
            selector: Function signature, e.g. ``approve(address,uint256)``.
            params: JSON array (or list) of ``{"type", "value"}`` items.
            call_value_trx: TRX attached to the call.
            prices: Chain prices.

        Raises:
            InvalidAddressError: If an address is malformed.
            InvalidParameterError: If ``params`` is malformed.
        """
        address.validate(contract, "contract")
        address.validate(sender, "from")

        parameters = normalize_parameters(parse_parameters(params))
        invocation = _invocation(
            contract,
            sender,
            selector,
            parameters,
            call_value_sun=to_sun(call_value_trx or 0),
        )
        return await self._estimate_call(TransactionKind.CONTRACT_CALL, invocation, prices)

    async def _estimate_call(
        self,
        kind: TransactionKind,
        invocation: ContractInvocation,
        prices: ChainPrices,
    ) -> FeeEstimate:
        energy = await self.resources.estimate_energy(invocation)
        logger.debug("Estimated energy (%s): %s", kind.value, energy)
        bandwidth_bytes = await self.resources.probe_contract_call(invocation)
        return build_fee_estimate(
            kind,
            ResourceEstimate(energy=energy, bandwidth_bytes=bandwidth_bytes),
            prices,
        )
