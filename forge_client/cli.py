"""Command-line interface for browsing Forge resources.

WHY: Checking which engines, app bundles or activities an app can see,
or inspecting a translated model, should not require writing a script.

HOW: argparse subcommands, each mapped to one client coroutine, run via
asyncio.run(). Results are printed to stdout as JSON; status messages
go to stderr so the output can be piped into jq.

RULES:
- Credentials come from .env / environment (see config.load_credentials)
- --first-page uses the lazy iterate_* form and stops after one page
- Exit code 1 on any ForgeError, with the message on stderr
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, List, Optional

from forge_client.api.auth import AuthenticationClient
from forge_client.api.design_automation import DesignAutomationClient
from forge_client.api.model_derivative import ModelDerivativeClient
from forge_client.api.transport import Transport
from forge_client.config import FORGE_HOST
from forge_client.errors import ForgeError

_LISTINGS = {
    "engines": ("iterate_engines", "list_engines"),
    "appbundles": ("iterate_app_bundles", "list_app_bundles"),
    "activities": ("iterate_activities", "list_activities"),
}


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


async def _listing(client: DesignAutomationClient, command: str, first_page: bool) -> List[Any]:
    iterate_name, list_name = _LISTINGS[command]
    if not first_page:
        return await getattr(client, list_name)()

    async for page in getattr(client, iterate_name)():
        return page
    return []


async def _run(args: argparse.Namespace) -> Any:
    async with Transport() as transport:
        auth = AuthenticationClient(transport, host=args.host)

        if args.command in _LISTINGS:
            client = DesignAutomationClient(auth, transport, host=args.host)
            _status("Fetching {}...".format(args.command))
            return await _listing(client, args.command, args.first_page)

        derivatives = ModelDerivativeClient(auth, transport, host=args.host)
        if args.command == "formats":
            return await derivatives.formats()
        if args.command == "manifest":
            return await derivatives.get_manifest(args.urn)
        if args.command == "metadata":
            return await derivatives.get_metadata(args.urn)
        raise ValueError("Unknown command: {}".format(args.command))


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (exposed for testing)."""
    parser = argparse.ArgumentParser(
        prog="forge_client",
        description="Browse Forge Design Automation and Model Derivative resources.",
    )
    parser.add_argument(
        "--host",
        default=FORGE_HOST,
        help="Forge API host (default: %(default)s).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every request (DEBUG level).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    for name in _LISTINGS:
        sub = subparsers.add_parser(name, help="List Design Automation {}.".format(name))
        sub.add_argument(
            "--first-page",
            action="store_true",
            help="Only fetch the first page of results.",
        )

    subparsers.add_parser("formats", help="List supported translation formats.")
    for name in ("manifest", "metadata"):
        sub = subparsers.add_parser(name, help="Show the {} of a derivative.".format(name))
        sub.add_argument("urn", help="Base64-encoded document URN.")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        result = asyncio.run(_run(args))
    except (ForgeError, ValueError) as exc:
        _status("Error: {}".format(exc))
        sys.exit(1)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
