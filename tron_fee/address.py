"""Address conversion between T-address (base58check) and 41.. hex forms."""

from __future__ import annotations

import re
from typing import Any

import base58

from .exceptions import InvalidAddressError

__all__ = [
    "is_prefixed_form",
    "is_base58_address",
    "to_canonical_form",
    "to_base58",
    "to_abi_address",
    "validate",
]

ADDRESS_PREFIX = "T"
ADDRESS_VERSION = 0x41
HEX_ADDRESS_RE = re.compile(r"^41[0-9a-fA-F]{40}$")


def is_prefixed_form(address: Any) -> bool:
    """Return True for the human-readable base58check form (``T...``)."""
    return isinstance(address, str) and address.startswith(ADDRESS_PREFIX)


def _decode(address: str) -> bytes:
    raw = base58.b58decode_check(address)
    if len(raw) != 21 or raw[0] != ADDRESS_VERSION:
        raise ValueError(f"not a TRON address payload: {raw.hex()}")
    return raw


def is_base58_address(address: Any) -> bool:
    """Check a T-address, including its 4-byte checksum."""
    if not is_prefixed_form(address):
        return False
    try:
        _decode(address)
    except ValueError:
        return False
    return True


def to_canonical_form(address: str) -> str:
    """Convert to 41.. hex; hex input is passed through unchanged.

    Raises:
        InvalidAddressError: If a T-address fails to decode.
    """
    if not is_prefixed_form(address):
        return address
    try:
        return _decode(address).hex()
    except ValueError as e:
        raise InvalidAddressError("base58", address) from e


def to_base58(address: str) -> str:
    """Convert 41.. hex to a T-address; T-addresses are passed through."""
    if is_prefixed_form(address):
        return address
    if not HEX_ADDRESS_RE.match(address):
        raise InvalidAddressError("hex", address)
    return base58.b58encode_check(bytes.fromhex(address)).decode("ascii")


def to_abi_address(address: str) -> str:
    """Return the 20-byte ``0x`` form used inside ABI-encoded arguments."""
    return "0x" + to_canonical_form(address)[2:].lower()


def validate(address: Any, label: str) -> None:
    """Fail unless the address is a valid T-address or 41.. hex.

    Raises:
        InvalidAddressError: Carrying ``label`` and the rejected value.
    """
    if isinstance(address, str) and (
        is_base58_address(address) or HEX_ADDRESS_RE.match(address)
    ):
        return
    raise InvalidAddressError(label, address)
