"""Chain resource prices.

``getEnergyFee`` is always reported in sun per energy unit.
``getTransactionFee`` is ambiguous: some nodes report TRX/byte (< 1), others
sun/byte (>= 1). Values >= 1, including exactly 1, are read as sun/byte.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from .exceptions import (
    InvalidParameterError,
    InvalidPriceValueError,
    MissingChainParameterError,
)
from .logger import get_logger
from .types import ChainPrices

if TYPE_CHECKING:
    from .client import TronNodeClient

__all__ = [
    "SUN_PER_TRX",
    "ENERGY_FEE_KEY",
    "TRANSACTION_FEE_KEY",
    "fetch_prices",
    "normalize_trx_per_byte",
    "sun_to_trx",
    "to_sun",
]

logger = get_logger(__name__)

SUN_PER_TRX = 1_000_000
ENERGY_FEE_KEY = "getEnergyFee"
TRANSACTION_FEE_KEY = "getTransactionFee"


def _finite(raw: Any, source: str) -> float:
    if isinstance(raw, bool):
        raise InvalidPriceValueError(raw, source)
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise InvalidPriceValueError(raw, source) from e
    if not math.isfinite(value):
        raise InvalidPriceValueError(raw, source)
    return value


def sun_to_trx(sun: float) -> float:
    return sun / SUN_PER_TRX


def to_sun(amount_trx: Decimal | float | int | str) -> int:
    """Convert whole TRX to sun.

    Raises:
        InvalidParameterError: For negative, non-numeric or sub-sun amounts.
    """
    try:
        sun = Decimal(str(amount_trx)) * SUN_PER_TRX
    except InvalidOperation as e:
        raise InvalidParameterError(f"Bad TRX amount: {amount_trx!r}") from e
    if not sun.is_finite() or sun < 0 or sun != sun.to_integral_value():
        raise InvalidParameterError(f"Bad TRX amount: {amount_trx!r}")
    return int(sun)


def normalize_trx_per_byte(raw: Any) -> float:
    """Normalize the bandwidth price to TRX per byte.

    Raises:
        InvalidPriceValueError: If ``raw`` is not a finite number.
    """
    value = _finite(raw, TRANSACTION_FEE_KEY)
    return value / SUN_PER_TRX if value >= 1 else value


async def fetch_prices(client: TronNodeClient) -> ChainPrices:
    """Fetch and normalize energy and bandwidth prices.

    Raises:
        MissingChainParameterError: If either fee parameter is absent.
        InvalidPriceValueError: If a fee value is not a finite number.
    """
    params = await client.get_chain_parameters()
    for key in (ENERGY_FEE_KEY, TRANSACTION_FEE_KEY):
        if key not in params:
            raise MissingChainParameterError(key)

    energy_fee = _finite(params[ENERGY_FEE_KEY], ENERGY_FEE_KEY)
    # Chain parameters are whole sun
    if not energy_fee.is_integer() or energy_fee < 0:
        raise InvalidPriceValueError(params[ENERGY_FEE_KEY], ENERGY_FEE_KEY)
    energy_sun_per_unit = int(energy_fee)
    prices = ChainPrices(
        energy_sun_per_unit=energy_sun_per_unit,
        trx_per_energy=sun_to_trx(energy_sun_per_unit),
        trx_per_byte=normalize_trx_per_byte(params[TRANSACTION_FEE_KEY]),
    )
    logger.debug(
        "Chain prices: %s sun/energy, %s TRX/byte (raw %s=%r)",
        prices.energy_sun_per_unit,
        prices.trx_per_byte,
        TRANSACTION_FEE_KEY,
        params[TRANSACTION_FEE_KEY],
    )
    return prices
