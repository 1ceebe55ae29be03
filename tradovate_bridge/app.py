from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict

from .config import load_config
from .errors import ConfigError
from .logging import configure_logging
from .registry import OperationRegistry, build_registry
from .server import INVALID_REQUEST, StdioServer, failure
from .tradovate import TradovateClient


def _print_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, default=str) + "\n")


def _read_payload(args: argparse.Namespace) -> str:
    if args.json:
        return args.json
    if args.json_file:
        with open(args.json_file, "r", encoding="utf-8") as fh:
            return fh.read()
    return "{}"


def _build(args: argparse.Namespace) -> tuple[TradovateClient, OperationRegistry] | None:
    try:
        config = load_config(args.env_file)
    except ConfigError as exc:
        sys.stderr.write(f"configuration error: {exc.message}\n")
        return None

    logger = configure_logging(config.log_level)
    client = TradovateClient(base_url=config.base_url, timeout=config.timeout, logger=logger)
    return client, build_registry(client, config.credentials, logger=logger)


def cmd_serve(args: argparse.Namespace) -> int:
    built = _build(args)
    if built is None:
        return 2

    client, registry = built
    with client:
        return StdioServer(registry).serve()


def cmd_call(args: argparse.Namespace) -> int:
    built = _build(args)
    if built is None:
        return 2

    try:
        params: Dict[str, Any] = json.loads(_read_payload(args))
    except json.JSONDecodeError as exc:
        _print_json(failure(None, INVALID_REQUEST, f"Invalid params: {exc}"))
        return 1

    client, registry = built
    with client:
        response = StdioServer(registry).handle(None, args.method, params)
    _print_json(response)
    return 1 if "error" in response else 0


def cmd_operations(args: argparse.Namespace) -> int:
    # Descriptions need no credentials or network.
    with TradovateClient() as client:
        _print_json(build_registry(client).describe())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tradovate-bridge")
    parser.add_argument("--env-file", type=str, default=None, help="Path to a .env file")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Serve line-delimited JSON requests on stdin/stdout")
    serve.set_defaults(func=cmd_serve)

    call = sub.add_parser("call", help="Dispatch a single operation and print the response")
    call.add_argument("method", type=str, help="Operation name, e.g. placeOrder")
    call_input = call.add_mutually_exclusive_group()
    call_input.add_argument("--json", type=str, help="Inline JSON params")
    call_input.add_argument("--json-file", type=str, help="Path to JSON params file")
    call.set_defaults(func=cmd_call)

    operations = sub.add_parser("operations", help="List available operations and their parameters")
    operations.set_defaults(func=cmd_operations)

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
