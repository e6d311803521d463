"""Tests for the per-kind fee drivers."""

from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest
import respx

from conftest import TEST_NODE
from tron_fee import (
    ChainPrices,
    ContractCallIntent,
    FeeEstimator,
    InvalidAddressError,
    InvalidParameterError,
    NativeTransferIntent,
    NodeConfig,
    TokenTransferIntent,
    TronNodeClient,
    estimate_fee,
)

ESTIMATE_URL = f"{TEST_NODE}/wallet/estimateenergy"
CONSTANT_URL = f"{TEST_NODE}/wallet/triggerconstantcontract"
TRIGGER_URL = f"{TEST_NODE}/wallet/triggersmartcontract"
CREATE_URL = f"{TEST_NODE}/wallet/createtransaction"


def _skeleton(hex_chars: int) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "result": {"result": True},
            "transaction": {"txID": "ab" * 32, "raw_data_hex": "0a" * (hex_chars // 2)},
        },
    )


class TestTrxTransfer:
    """Tests for TRX transfer estimates."""

    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_bandwidth_only(
        self,
        respx_mock: respx.MockRouter,
        config: NodeConfig,
        prices: ChainPrices,
        addresses: SimpleNamespace,
    ) -> None:
        """TRX transfers use no energy and skip the cascade."""
        create = respx_mock.post(CREATE_URL).mock(
            return_value=httpx.Response(200, json={"txID": "cd" * 32, "raw_data_hex": "0a" * 168})
        )
        estimate = respx_mock.post(ESTIMATE_URL)
        constant = respx_mock.post(CONSTANT_URL)

        async with TronNodeClient(config) as client:
            fee = await FeeEstimator(client).estimate_trx_transfer(
                addresses.sender, addresses.recipient, "1.5", prices
            )

        assert fee.kind == "TRX_TRANSFER"
        assert fee.energy == 0
        assert fee.trx_energy == 0
        assert fee.bandwidth_bytes == 268
        assert fee.trx_total == fee.trx_bandwidth == pytest.approx(0.268)
        assert not estimate.called
        assert not constant.called
        sent = json.loads(create.calls[0].request.content)
        assert sent == {
            "owner_address": addresses.sender_hex,
            "to_address": addresses.recipient_hex,
            "amount": 1_500_000,
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_recipient(
        self, config: NodeConfig, prices: ChainPrices, addresses: SimpleNamespace
    ) -> None:
        """A bad address fails before any remote call."""
        async with TronNodeClient(config) as client:
            with pytest.raises(InvalidAddressError) as exc_info:
                await FeeEstimator(client).estimate_trx_transfer(
                    addresses.sender, "T123", 1, prices
                )

        assert exc_info.value.label == "to"


class TestTrc20Transfer:
    """Tests for TRC20 transfer estimates."""

    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_end_to_end(
        self,
        respx_mock: respx.MockRouter,
        config: NodeConfig,
        prices: ChainPrices,
        addresses: SimpleNamespace,
    ) -> None:
        """13000 energy and a 300-byte skeleton at 0.00042 TRX/energy, 0.001 TRX/byte."""
        estimate = respx_mock.post(ESTIMATE_URL).mock(
            return_value=httpx.Response(
                200, json={"result": {"result": True}, "energy_required": 13000}
            )
        )
        constant = respx_mock.post(CONSTANT_URL)
        trigger = respx_mock.post(TRIGGER_URL).mock(return_value=_skeleton(400))

        async with TronNodeClient(config) as client:
            fee = await FeeEstimator(client).estimate_trc20_transfer(
                addresses.usdt, addresses.sender, addresses.recipient, "1000000", prices
            )

        assert fee.kind == "TRC20_TRANSFER"
        assert fee.energy == 13000
        assert fee.bandwidth_bytes == 300
        assert fee.trx_energy == pytest.approx(5.46)
        assert fee.trx_bandwidth == pytest.approx(0.3)
        assert fee.trx_total == pytest.approx(5.76)
        assert fee.trx_total == fee.trx_energy + fee.trx_bandwidth
        assert estimate.call_count == 1
        assert not constant.called

        sent = json.loads(trigger.calls[0].request.content)
        assert sent["function_selector"] == "transfer(address,uint256)"
        assert sent["parameter"] == "0" * 24 + "22" * 20 + format(1_000_000, "064x")
        assert sent["contract_address"] == addresses.usdt
        assert sent["owner_address"] == addresses.sender

    @pytest.mark.asyncio
    @respx.mock
    async def test_amount_is_not_scaled(
        self, config: NodeConfig, prices: ChainPrices, addresses: SimpleNamespace
    ) -> None:
        """The amount is passed through in the token's smallest unit."""
        estimate = respx.post(ESTIMATE_URL).mock(
            return_value=httpx.Response(
                200, json={"result": {"result": True}, "energy_required": 29650}
            )
        )
        respx.post(TRIGGER_URL).mock(return_value=_skeleton(400))

        async with TronNodeClient(config) as client:
            await FeeEstimator(client).estimate_trc20_transfer(
                addresses.usdt_hex, addresses.sender, addresses.recipient, "7", prices
            )

        sent = json.loads(estimate.calls[0].request.content)
        assert sent["parameter"].endswith(format(7, "064x"))
        assert sent["contract_address"] == addresses.usdt_hex

    @pytest.mark.asyncio
    @respx.mock
    async def test_energy_zero_when_cascade_fails(
        self, config: NodeConfig, prices: ChainPrices, addresses: SimpleNamespace
    ) -> None:
        """Only the bandwidth is priced when no strategy answers."""
        respx.post(ESTIMATE_URL).mock(return_value=httpx.Response(404))
        respx.post(CONSTANT_URL).mock(return_value=httpx.Response(503))
        respx.post(TRIGGER_URL).mock(return_value=_skeleton(540))

        async with TronNodeClient(config) as client:
            fee = await FeeEstimator(client).estimate_trc20_transfer(
                addresses.usdt, addresses.sender, addresses.recipient, "1000000", prices
            )

        assert fee.energy == 0
        assert fee.trx_energy == 0
        assert fee.bandwidth_bytes == 370
        assert fee.trx_total == fee.trx_bandwidth

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_token(
        self, config: NodeConfig, prices: ChainPrices, addresses: SimpleNamespace
    ) -> None:
        async with TronNodeClient(config) as client:
            with pytest.raises(InvalidAddressError) as exc_info:
                await FeeEstimator(client).estimate_trc20_transfer(
                    "0xdeadbeef", addresses.sender, addresses.recipient, "1", prices
                )

        assert exc_info.value.label == "token"


class TestContractCall:
    """Tests for arbitrary contract call estimates."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_params_and_call_value(
        self, config: NodeConfig, prices: ChainPrices, addresses: SimpleNamespace
    ) -> None:
        """T-address parameters are sent as hex; call value is in sun."""
        estimate = respx.post(ESTIMATE_URL).mock(
            return_value=httpx.Response(
                200, json={"result": {"result": True}, "energy_required": 21000}
            )
        )
        respx.post(TRIGGER_URL).mock(return_value=_skeleton(500))
        params = json.dumps(
            [
                {"type": "address", "value": addresses.recipient},
                {"type": "uint256", "value": "1000000"},
            ]
        )

        async with TronNodeClient(config) as client:
            fee = await FeeEstimator(client).estimate_contract_call(
                addresses.usdt, addresses.sender, "approve(address,uint256)", params, "2", prices
            )

        assert fee.kind == "CONTRACT_CALL"
        assert fee.energy == 21000
        assert fee.bandwidth_bytes == 350
        sent = json.loads(estimate.calls[0].request.content)
        assert sent["function_selector"] == "approve(address,uint256)"
        assert sent["call_value"] == 2_000_000
        assert sent["parameter"].startswith("0" * 24 + "22" * 20)

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_params(
        self, config: NodeConfig, prices: ChainPrices, addresses: SimpleNamespace
    ) -> None:
        respx.post(ESTIMATE_URL).mock(
            return_value=httpx.Response(
                200, json={"result": {"result": True}, "energy_required": 500}
            )
        )
        trigger = respx.post(TRIGGER_URL).mock(return_value=_skeleton(400))

        async with TronNodeClient(config) as client:
            fee = await FeeEstimator(client).estimate_contract_call(
                addresses.usdt, addresses.sender, "totalSupply()", "[]", None, prices
            )

        assert fee.energy == 500
        sent = json.loads(trigger.calls[0].request.content)
        assert sent["parameter"] == ""
        assert sent["call_value"] == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_params(
        self, config: NodeConfig, prices: ChainPrices, addresses: SimpleNamespace
    ) -> None:
        """Malformed JSON fails before any remote call."""
        async with TronNodeClient(config) as client:
            with pytest.raises(InvalidParameterError):
                await FeeEstimator(client).estimate_contract_call(
                    addresses.usdt, addresses.sender, "f(uint256)", "[{oops", 0, prices
                )

    @pytest.mark.asyncio
    @respx.mock
    async def test_estimate_dispatches_on_intent(
        self, config: NodeConfig, prices: ChainPrices, addresses: SimpleNamespace
    ) -> None:
        """estimate() routes every intent kind to its driver."""
        respx.post(CREATE_URL).mock(
            return_value=httpx.Response(200, json={"raw_data_hex": "0a" * 170})
        )
        respx.post(ESTIMATE_URL).mock(
            return_value=httpx.Response(
                200, json={"result": {"result": True}, "energy_required": 100}
            )
        )
        respx.post(TRIGGER_URL).mock(return_value=_skeleton(400))

        intents = [
            NativeTransferIntent(
                sender=addresses.sender, recipient=addresses.recipient, amount_trx="1"
            ),
            TokenTransferIntent(
                token=addresses.usdt,
                sender=addresses.sender,
                recipient=addresses.recipient,
                amount="1",
            ),
            ContractCallIntent(
                contract=addresses.usdt, sender=addresses.sender, selector="totalSupply()"
            ),
        ]

        async with TronNodeClient(config) as client:
            estimator = FeeEstimator(client)
            kinds = [(await estimator.estimate(i, prices)).kind for i in intents]

        assert kinds == ["TRX_TRANSFER", "TRC20_TRANSFER", "CONTRACT_CALL"]


class TestEstimateFeeHelper:
    """Tests for the module-level estimate_fee helper."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_estimate_fee(
        self,
        config: NodeConfig,
        addresses: SimpleNamespace,
        chain_parameters: dict,
    ) -> None:
        """Fetches prices and estimates with a temporary client."""
        respx.post(f"{TEST_NODE}/wallet/getchainparameters").mock(
            return_value=httpx.Response(200, json=chain_parameters)
        )
        respx.post(CREATE_URL).mock(
            return_value=httpx.Response(200, json={"raw_data_hex": "0a" * 170})
        )

        fee = await estimate_fee(
            NativeTransferIntent(
                sender=addresses.sender, recipient=addresses.recipient, amount_trx="3"
            ),
            config,
        )

        assert fee.bandwidth_bytes == 270
        assert fee.trx_total == pytest.approx(0.27)
