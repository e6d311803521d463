"""Caller-supplied contract call parameters.

Parameters arrive as ``[{"type": ..., "value": ...}]`` JSON. Addresses are
rewritten to 41.. hex (the node expects hex, not T-addresses, inside
ABI-encoded arguments) and the list is ABI-encoded for the node's
``parameter`` field.
"""

from __future__ import annotations

import json
import re
from typing import Any

from eth_abi import encode
from eth_abi.exceptions import EncodingError, ParseError
from pydantic import ValidationError

from .address import to_abi_address, to_canonical_form
from .exceptions import InvalidAddressError, InvalidParameterError
from .types import CallParameter

__all__ = ["parse_parameters", "normalize_parameters", "encode_parameters"]

_INT_RE = re.compile(r"^u?int\d*$")
_BYTES_RE = re.compile(r"^bytes\d*$")


def parse_parameters(raw: str | list[Any] | None) -> list[CallParameter]:
    """Parse a JSON array (or already-decoded list) of typed parameters.

    Raises:
        InvalidParameterError: On malformed JSON or items without a type.
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidParameterError(f"Bad --params JSON: {e.msg}") from e
    if not isinstance(raw, list):
        raise InvalidParameterError("--params must be a JSON array")
    try:
        return [
            p if isinstance(p, CallParameter) else CallParameter.model_validate(p)
            for p in raw
        ]
    except ValidationError as e:
        raise InvalidParameterError(f"Bad call parameter: {e}") from e


def normalize_parameters(params: list[CallParameter]) -> list[CallParameter]:
    """Rewrite ``address`` and ``address[]`` values to 41.. hex."""
    out: list[CallParameter] = []
    for p in params:
        if p.type == "address" and isinstance(p.value, str):
            p = p.model_copy(update={"value": to_canonical_form(p.value)})
        elif p.type == "address[]" and isinstance(p.value, list):
            p = p.model_copy(
                update={
                    "value": [
                        to_canonical_form(v) if isinstance(v, str) else v
                        for v in p.value
                    ]
                }
            )
        out.append(p)
    return out


def _coerce(abi_type: str, value: Any) -> Any:
    if abi_type.endswith("[]"):
        if not isinstance(value, list):
            raise InvalidParameterError(f"{abi_type} expects a list, got {value!r}")
        return [_coerce(abi_type[:-2], v) for v in value]
    if abi_type == "address":
        return to_abi_address(value)
    if _INT_RE.match(abi_type) and isinstance(value, str):
        value = value.strip()
        return int(value, 16) if value.lower().startswith("0x") else int(value)
    if abi_type == "bool" and isinstance(value, str):
        return value.strip().lower() in {"1", "true"}
    if _BYTES_RE.match(abi_type) and isinstance(value, str):
        return bytes.fromhex(value.removeprefix("0x"))
    return value


def encode_parameters(params: list[CallParameter]) -> str:
    """ABI-encode arguments to the hex string the node expects.

    Raises:
        InvalidParameterError: If a value does not fit its declared type.
    """
    if not params:
        return ""
    types = [p.type for p in params]
    try:
        values = [_coerce(p.type, p.value) for p in params]
        return encode(types, values).hex()
    except (EncodingError, ParseError, InvalidAddressError, ValueError, TypeError) as e:
        raise InvalidParameterError(f"Cannot encode parameters {types}: {e}") from e
