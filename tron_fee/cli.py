"""Command line entry point: ``tron-fee <command> [options]``."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable

from pydantic import ValidationError

from .abi import parse_parameters
from .client import TronNodeClient
from .config import NodeConfig
from .estimator import FeeEstimator
from .exceptions import (
    InvalidParameterError,
    MissingArgumentError,
    TronFeeError,
    UnknownCommandError,
)
from .logger import get_logger, init_logging
from .prices import fetch_prices
from .types import (
    ContractCallIntent,
    EstimateReport,
    NativeTransferIntent,
    TokenTransferIntent,
    TransactionIntent,
)

logger = get_logger(__name__)

HELP_WORDS = {"-h", "--help", "help"}


def _usage(config: NodeConfig) -> str:
    def _set(value: object) -> str:
        return "<set>" if value else ""

    return f"""
TRON Fee Estimator (estimates only; never signs or broadcasts)

ENV (.env):
  TRON_FULL_NODE={config.full_node}
  TRON_PROVIDER={config.provider.value}
  TRONQL_API_KEY={_set(config.tronql_api_key)}
  TRON_API_KEY={_set(config.trongrid_api_key)}
  PRIVATE_KEY={_set(config.private_key)}
  DEFAULT_USDT={config.default_token}
  TRON_DRY_RUN={str(config.supports_dry_run).lower()}

USAGE:
  tron-fee trx-transfer --from T... --to T... --amount-trx 1.5

  tron-fee trc20-transfer --from T... --to T... --amount 1000000 [--token {config.default_token}]

  tron-fee contract-call --contract T... --selector 'approve(address,uint256)' \\
    --params '[{{"type":"address","value":"T..."}},{{"type":"uint256","value":"1000000"}}]' \\
    --from T... --callValue 0
"""


def _parser(command: str, options: list[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=f"tron-fee {command}")
    for option in options:
        parser.add_argument(f"--{option}", dest=option.replace("-", "_"), default=None)
    return parser


def _require(args: argparse.Namespace, names: list[str]) -> None:
    missing = [n for n in names if not getattr(args, n.replace("-", "_"))]
    if missing:
        raise MissingArgumentError(missing)


def _trx_transfer(argv: list[str], config: NodeConfig) -> TransactionIntent:
    args = _parser("trx-transfer", ["from", "to", "amount-trx"]).parse_args(argv)
    _require(args, ["from", "to", "amount-trx"])
    return NativeTransferIntent(
        sender=getattr(args, "from"), recipient=args.to, amount_trx=args.amount_trx
    )


def _trc20_transfer(argv: list[str], config: NodeConfig) -> TransactionIntent:
    args = _parser("trc20-transfer", ["from", "to", "amount", "token"]).parse_args(argv)
    _require(args, ["from", "to", "amount"])
    return TokenTransferIntent(
        token=args.token or config.default_token,
        sender=getattr(args, "from"),
        recipient=args.to,
        amount=args.amount,
    )


def _contract_call(argv: list[str], config: NodeConfig) -> TransactionIntent:
    parser = _parser("contract-call", ["contract", "selector", "from", "params"])
    parser.add_argument("--callValue", "--call-value", dest="call_value", default="0")
    args = parser.parse_args(argv)
    _require(args, ["contract", "selector", "from"])
    return ContractCallIntent(
        contract=args.contract,
        sender=getattr(args, "from"),
        selector=args.selector,
        parameters=parse_parameters(args.params),
        call_value_trx=args.call_value,
    )


COMMANDS: dict[str, Callable[[list[str], NodeConfig], TransactionIntent]] = {
    "trx-transfer": _trx_transfer,
    "trc20-transfer": _trc20_transfer,
    "contract-call": _contract_call,
}


def parse_command(argv: list[str], config: NodeConfig) -> TransactionIntent:
    """Turn command line arguments into an intent, without any remote call.

    Raises:
        UnknownCommandError: For an unknown command.
        MissingArgumentError: When a required option is absent.
        InvalidParameterError: When an option value has the wrong shape.
    """
    command, rest = argv[0], argv[1:]
    build = COMMANDS.get(command)
    if build is None:
        raise UnknownCommandError(command)
    try:
        return build(rest, config)
    except ValidationError as e:
        raise InvalidParameterError(f"Bad {command} arguments: {e}") from e


async def run(config: NodeConfig, intent: TransactionIntent) -> EstimateReport:
    """Probe the node, fetch prices and estimate one transaction."""
    async with TronNodeClient(config) as client:
        if config.probe:
            await client.health_check()
        prices = await fetch_prices(client)
        estimate = await FeeEstimator(client).estimate(intent, prices)
    return EstimateReport(node=config.full_node, prices=prices, estimate=estimate)


def main(argv: list[str] | None = None, *, config: NodeConfig | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    try:
        config = config or NodeConfig.from_env()
    except TronFeeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    init_logging(config.log_level)

    if not argv or argv[0] in HELP_WORDS:
        print(_usage(config))
        return 0

    try:
        intent = parse_command(argv, config)
        report = asyncio.run(run(config, intent))
    except TronFeeError as e:
        logger.debug("Estimation failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(report.to_json())
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
