"""Resource usage to TRX conversion."""

from __future__ import annotations

import math

from .exceptions import InvalidPriceValueError
from .types import ChainPrices, FeeEstimate, ResourceEstimate, TransactionKind

__all__ = ["calc_energy_trx", "calc_bandwidth_trx", "build_fee_estimate"]


def _checked(value: float, source: str) -> float:
    if not math.isfinite(value):
        raise InvalidPriceValueError(value, source)
    return value


def calc_energy_trx(energy: int, trx_per_energy: float) -> float:
    return _checked(energy * trx_per_energy, "energy cost")


def calc_bandwidth_trx(bandwidth_bytes: int, trx_per_byte: float) -> float:
    return _checked(bandwidth_bytes * trx_per_byte, "bandwidth cost")


def build_fee_estimate(
    kind: TransactionKind,
    resources: ResourceEstimate,
    prices: ChainPrices,
) -> FeeEstimate:
    """Price a resource estimate; ``trx_total`` is the sum of both parts."""
    return FeeEstimate(
        kind=kind,
        energy=resources.energy,
        bandwidth_bytes=resources.bandwidth_bytes,
        trx_energy=calc_energy_trx(resources.energy, prices.trx_per_energy),
        trx_bandwidth=calc_bandwidth_trx(resources.bandwidth_bytes, prices.trx_per_byte),
    )
