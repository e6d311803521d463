"""TRON Fee Estimator.

Estimates the energy + bandwidth cost, in TRX, of a TRX transfer, a TRC20
transfer or an arbitrary smart-contract call, by building unsigned
transaction skeletons and dry-running calls against a full node.
Nothing is ever signed or broadcast.

Quick Start:
    >>> from tron_fee import FeeEstimator, NodeConfig, TronNodeClient, fetch_prices
    >>> async with TronNodeClient(NodeConfig.from_env()) as client:
    ...     prices = await fetch_prices(client)
    ...     fee = await FeeEstimator(client).estimate_trc20_transfer(
    ...         "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t", "T...", "T...", "1000000", prices
    ...     )
    ...     print(f"{fee.trx_total} TRX")
"""

from ._version import __version__
from .client import TronNodeClient
from .config import NodeConfig
from .estimator import FeeEstimator
from .exceptions import (
    ConfigurationError,
    InvalidAddressError,
    InvalidParameterError,
    InvalidPriceValueError,
    MissingArgumentError,
    MissingChainParameterError,
    RemoteAuthenticationError,
    RemoteServiceError,
    RemoteTimeoutError,
    TronFeeError,
    UnknownCommandError,
)
from .prices import fetch_prices, normalize_trx_per_byte
from .resources import ResourceEstimator, approximate_byte_size
from .types import (
    CallParameter,
    ChainPrices,
    ContractCallIntent,
    ContractInvocation,
    EstimateReport,
    FeeEstimate,
    NativeTransferIntent,
    ProviderKind,
    ResourceEstimate,
    TokenTransferIntent,
    TransactionIntent,
    TransactionKind,
)

__all__ = [
    # Client
    "TronNodeClient",
    "NodeConfig",
    # Estimation
    "FeeEstimator",
    "ResourceEstimator",
    "fetch_prices",
    "normalize_trx_per_byte",
    "approximate_byte_size",
    "estimate_fee",
    # Types - Enums
    "TransactionKind",
    "ProviderKind",
    # Types - Intents
    "NativeTransferIntent",
    "TokenTransferIntent",
    "ContractCallIntent",
    "TransactionIntent",
    "CallParameter",
    "ContractInvocation",
    # Types - Results
    "ChainPrices",
    "ResourceEstimate",
    "FeeEstimate",
    "EstimateReport",
    # Exceptions
    "TronFeeError",
    "ConfigurationError",
    "InvalidAddressError",
    "MissingChainParameterError",
    "InvalidPriceValueError",
    "InvalidParameterError",
    "MissingArgumentError",
    "UnknownCommandError",
    "RemoteServiceError",
    "RemoteAuthenticationError",
    "RemoteTimeoutError",
    # Version
    "__version__",
]


async def estimate_fee(
    intent: TransactionIntent,
    config: NodeConfig | None = None,
) -> FeeEstimate:
    """Quick helper to estimate one transaction.

    Creates a temporary client and closes it after use.
    For several estimates, use TronNodeClient as a context manager instead.

    Args:
        intent: What to estimate.
        config: Node configuration (default: from the environment).

    Returns:
        FeeEstimate with energy, size and TRX costs.
    """
    async with TronNodeClient(config or NodeConfig.from_env()) as client:
        prices = await fetch_prices(client)
        return await FeeEstimator(client).estimate(intent, prices)
