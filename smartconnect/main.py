"""
SmartConnect command line - pair a register and run transactions.

Configuration comes from ``SMARTCONNECT_*`` environment variables
(see ``infrastructure.settings``).

Usage:
    # Pair with the code displayed on the device:
    smartconnect pair 4F7K2Q

    # Charge $1.99 and wait for the outcome:
    smartconnect transaction --amount 199 --type Card.Purchase

    # Resume polling a transaction, forwarding events to the POS frontend:
    smartconnect poll https://.../poll/abc123 --ws-url ws://localhost:8005/ws
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Optional

from .application.api_facade import SmartConnectFacade
from .infrastructure.settings import Settings
from .loggers import logger
from .notifications import EVENT_TRANSACTION_OUTCOME, delayed_notifier, send_to_ws


async def _poll(
    api: SmartConnectFacade,
    polling_url: str,
    ws_url: Optional[str],
) -> dict[str, Any]:
    on_delayed = delayed_notifier(polling_url, ws_url) if ws_url else None
    response = await api.poll_for_outcome(polling_url, on_delayed=on_delayed)
    if ws_url:
        await send_to_ws(EVENT_TRANSACTION_OUTCOME, response, ws_url=ws_url)
    return response


async def run_command(
    args: argparse.Namespace,
    settings: Optional[Settings] = None,
) -> dict[str, Any]:
    """
    Execute a parsed command.

    Args:
        args: Parsed command line.
        settings: Settings to use instead of reading the environment.

    Returns:
        The facade response dictionary.
    """
    if settings is None:
        try:
            settings = Settings.from_env()
        except ValueError as e:
            logger.error(f"Invalid configuration: {e}")
            return {"success": False, "message": str(e), "error": "ConfigurationError"}

    async with SmartConnectFacade(settings) as api:
        if args.command == "pair":
            return await api.pair(args.pairing_code)

        if args.command == "transaction":
            created = await api.create_transaction(args.amount, args.type, args.amount_cash)
            if not created["success"]:
                return created
            return await _poll(api, created["data"]["polling_url"], args.ws_url)

        return await _poll(api, args.polling_url, args.ws_url)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartconnect",
        description="Pair a POS register and run SmartConnect card transactions",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    pair = commands.add_parser("pair", help="Pair the register with a device")
    pair.add_argument("pairing_code", help="Code displayed on the device")

    transaction = commands.add_parser("transaction", help="Create a transaction and wait for its outcome")
    transaction.add_argument("--amount", required=True, help="Amount in cents, e.g. 199 for $1.99")
    transaction.add_argument("--type", required=True, help="Device function, e.g. Card.Purchase")
    transaction.add_argument("--amount-cash", default=None, help="Cash-out amount in cents")
    transaction.add_argument("--ws-url", default=None, help="Forward delayed/outcome events to this WebSocket")

    poll = commands.add_parser("poll", help="Poll an existing transaction for its outcome")
    poll.add_argument("polling_url", help="Polling URL returned when the transaction was created")
    poll.add_argument("--ws-url", default=None, help="Forward delayed/outcome events to this WebSocket")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    response = asyncio.run(run_command(args))
    print(json.dumps(response, indent=2))
    return 0 if response["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
