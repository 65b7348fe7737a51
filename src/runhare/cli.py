"""Command line interface for signing payloads and sending events."""

import argparse
import asyncio
import json
import sys
from typing import Optional

from loguru import logger

from . import __version__
from .client import RunHareClient
from .config import Config
from .errors import MessageFailedError
from .models import EventPriority
from .signing import sign_payload


def configure_logging(verbose: bool = False) -> None:
    """Route loguru output to stderr with the standard console format."""
    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> | <level>{message}</level>",
        level="DEBUG" if verbose else "WARNING",
    )


def _load_json(text: str):
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SystemExit(f"Invalid JSON payload: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runhare",
        description="Sign and send events to a RunHare namespace.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sign = subparsers.add_parser("sign", help="Print signed headers and body for a payload")
    sign.add_argument("payload", help="JSON payload")
    sign.add_argument("--secret", default=Config.SECRET, help="Shared secret")
    sign.add_argument("--ttl", type=int, default=Config.TTL_MS, help="TTL in milliseconds")

    send = subparsers.add_parser("send", help="Send an event")
    send.add_argument("event", help="Event name")
    send.add_argument("data", help="JSON event data")
    send.add_argument("--namespace", default=Config.NAMESPACE, help="Target namespace")
    send.add_argument("--secret", default=Config.SECRET, help="Shared secret")
    send.add_argument("--origin", default=Config.ORIGIN or None, help="Origin tag")
    send.add_argument(
        "--priority",
        choices=[p.value for p in EventPriority],
        default=EventPriority.NORMAL.value,
    )
    send.add_argument("--signal", action="store_true", default=None, help="Set the signal flag")
    send.add_argument("--ttl", type=int, default=Config.TTL_MS, help="TTL in milliseconds")
    send.add_argument("--base-url", default=Config.BASE_URL, help="Service root URL")

    return parser


def _cmd_sign(args: argparse.Namespace) -> int:
    signed = sign_payload(_load_json(args.payload), args.secret, args.ttl)
    print(json.dumps({"headers": signed.headers, "payload": signed.payload}, indent=2))
    return 0


def _cmd_send(args: argparse.Namespace, transport=None) -> int:
    if not args.namespace:
        print("error: --namespace (or RUNHARE_NAMESPACE) is required", file=sys.stderr)
        return 2

    client = RunHareClient(
        args.namespace,
        secret=args.secret,
        origin=args.origin,
        ttl=args.ttl,
        base_url=args.base_url,
        transport=transport,
    )
    try:
        response = asyncio.run(
            client.send_event(args.event, _load_json(args.data), args.priority, args.signal)
        )
    except MessageFailedError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(json.dumps(response))
    return 0


def main(argv: Optional[list[str]] = None, transport=None) -> int:
    """CLI entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "sign":
        return _cmd_sign(args)
    return _cmd_send(args, transport=transport)
