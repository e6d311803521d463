"""TRON Fee Estimator Data Types.

Pydantic models for chain prices, transaction intents and fee estimates.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

# =============================================================================
# Enums
# =============================================================================


class TransactionKind(str, Enum):
    """Transaction kinds the estimator can price."""

    TRX_TRANSFER = "TRX_TRANSFER"
    TRC20_TRANSFER = "TRC20_TRANSFER"
    CONTRACT_CALL = "CONTRACT_CALL"


class ProviderKind(str, Enum):
    """Node providers with their own API-key header."""

    TRONQL = "tronql"
    TRONGRID = "trongrid"
    GENERIC = "generic"


# =============================================================================
# Base model
# =============================================================================


class TronFeeModel(BaseModel):
    """Base model with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        use_enum_values=True,
    )


# =============================================================================
# Prices
# =============================================================================


class ChainPrices(TronFeeModel):
    """Resource prices fetched once per run from the node."""

    model_config = ConfigDict(frozen=True)

    energy_sun_per_unit: int = Field(
        ..., alias="energySunPerUnit", description="Energy price in sun per unit"
    )
    trx_per_energy: float = Field(
        ..., alias="trxPerEnergy", description="Energy price in TRX per unit"
    )
    trx_per_byte: float = Field(
        ..., alias="trxPerByte", description="Bandwidth price in TRX per byte"
    )


# =============================================================================
# Call parameters
# =============================================================================


class CallParameter(TronFeeModel):
    """A typed ABI argument as supplied by the caller."""

    type: str = Field(..., min_length=1, description="ABI type, e.g. 'uint256'")
    value: Any = Field(None, description="Argument value")


class ContractInvocation(TronFeeModel):
    """A contract call with every address already in canonical hex form.

    This is the shape every remote contract endpoint (dry-run, constant
    call, skeleton builder) is fed with.
    """

    model_config = ConfigDict(frozen=True)

    contract_hex: str = Field(..., description="Contract address, 41.. hex")
    contract_base58: str = Field(..., description="Contract address, T-address")
    owner_hex: str = Field(..., description="Issuer address, 41.. hex")
    owner_base58: str = Field(..., description="Issuer address, T-address")
    selector: str = Field(..., description="Function signature, e.g. 'transfer(address,uint256)'")
    parameters: tuple[CallParameter, ...] = Field((), description="Normalized arguments")
    call_value_sun: int = Field(0, ge=0, description="Attached TRX in sun")


# =============================================================================
# Intents
# =============================================================================


class NativeTransferIntent(TronFeeModel):
    """Plain TRX transfer."""

    kind: Literal["TRX_TRANSFER"] = "TRX_TRANSFER"
    sender: str = Field(..., description="Sender address")
    recipient: str = Field(..., description="Recipient address")
    amount_trx: Decimal = Field(..., description="Amount in whole TRX")


class TokenTransferIntent(TronFeeModel):
    """TRC20 ``transfer(address,uint256)`` call."""

    kind: Literal["TRC20_TRANSFER"] = "TRC20_TRANSFER"
    token: str = Field(..., description="Token contract address")
    sender: str = Field(..., description="Sender address")
    recipient: str = Field(..., description="Recipient address")
    amount: str = Field(..., description="Amount in the token's smallest unit")


class ContractCallIntent(TronFeeModel):
    """Arbitrary smart-contract call."""

    kind: Literal["CONTRACT_CALL"] = "CONTRACT_CALL"
    contract: str = Field(..., description="Contract address")
    sender: str = Field(..., description="Issuer address")
    selector: str = Field(..., description="Function signature")
    parameters: list[CallParameter] = Field(default_factory=list)
    call_value_trx: Decimal = Field(Decimal(0), description="Attached TRX")


TransactionIntent = Annotated[
    Union[NativeTransferIntent, TokenTransferIntent, ContractCallIntent],
    Field(discriminator="kind"),
]


# =============================================================================
# Estimates
# =============================================================================


class ResourceEstimate(TronFeeModel):
    """Energy and approximate serialized size of one transaction."""

    energy: int = Field(0, ge=0, description="Energy units, 0 if unknown")
    bandwidth_bytes: int = Field(..., gt=0, description="Approximate size in bytes")


class FeeEstimate(TronFeeModel):
    """Fee breakdown for one transaction, in TRX."""

    model_config = ConfigDict(frozen=True)

    kind: TransactionKind = Field(..., description="Transaction kind")
    energy: int = Field(..., ge=0, description="Energy units")
    bandwidth_bytes: int = Field(..., alias="bandwidthBytes", description="Approximate size")
    trx_energy: float = Field(..., alias="trxEnergy", description="Energy cost in TRX")
    trx_bandwidth: float = Field(..., alias="trxBandwidth", description="Bandwidth cost in TRX")

    @computed_field(alias="trxTotal")  # type: ignore[prop-decorator]
    @property
    def trx_total(self) -> float:
        """Energy plus bandwidth cost."""
        return self.trx_energy + self.trx_bandwidth


class EstimateReport(TronFeeModel):
    """Document printed by the CLI."""

    node: str
    prices: ChainPrices
    estimate: FeeEstimate

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
