"""Shared fixtures for the fee estimator tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import base58
import pytest

from tron_fee import ChainPrices, NodeConfig, ProviderKind

TEST_NODE = "https://node.test.tron"

USDT_BASE58 = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
USDT_HEX = "41a614f803b6fd780986a42c78ec9c7f77e6ded13c"


def _b58(hex_address: str) -> str:
    return base58.b58encode_check(bytes.fromhex(hex_address)).decode("ascii")


@pytest.fixture
def addresses() -> SimpleNamespace:
    """A sender, a recipient and the USDT contract, in both forms."""
    sender_hex = "41" + "11" * 20
    recipient_hex = "41" + "22" * 20
    return SimpleNamespace(
        sender_hex=sender_hex,
        sender=_b58(sender_hex),
        recipient_hex=recipient_hex,
        recipient=_b58(recipient_hex),
        usdt=USDT_BASE58,
        usdt_hex=USDT_HEX,
    )


@pytest.fixture
def config() -> NodeConfig:
    """Config pointing at the mocked node, without the connectivity probe."""
    return NodeConfig(
        full_node=TEST_NODE,
        provider=ProviderKind.GENERIC,
        probe=False,
        timeout=5.0,
    )


@pytest.fixture
def prices() -> ChainPrices:
    return ChainPrices(
        energy_sun_per_unit=420,
        trx_per_energy=0.00042,
        trx_per_byte=0.001,
    )


@pytest.fixture
def chain_parameters() -> dict[str, Any]:
    """A wallet/getchainparameters body (420 sun/energy, 1000 sun/byte)."""
    return {
        "chainParameter": [
            {"key": "getMaintenanceTimeInterval", "value": 21600000},
            {"key": "getTransactionFee", "value": 1000},
            {"key": "getAssetIssueFee", "value": 1024000000},
            {"key": "getEnergyFee", "value": 420},
            {"key": "getAllowCreationOfContracts"},
        ]
    }
