"""Entry point for fleet_facts.

Usage:
    python -m fleet_facts            # serve over the configured transport
    python -m fleet_facts collect    # run one job and print the JSON table
"""

import argparse
import asyncio
import json
import logging
import sys

from fleet_facts.config import Settings
from fleet_facts.errors import FleetFactsError
from fleet_facts.server import mcp, run_collection  # This import also configures logging

logger = logging.getLogger(__name__)


def run_server() -> None:
    """Run the MCP server with configured transport.

    Only transport settings are read here. Credentials, facts and the
    inventory are checked by the server lifespan.
    """
    settings = Settings.from_env()

    if settings.transport == "stdio":
        logger.info("Starting fleet_facts server (transport=stdio)")
        mcp.run(transport="stdio")
    else:
        logger.info(
            "Starting fleet_facts server (transport=http, host=%s, port=%d)",
            settings.http_host,
            settings.http_port,
        )
        mcp.run(
            transport="http",
            host=settings.http_host,
            port=settings.http_port,
        )


def run_once() -> int:
    """Collect facts once and print the table to stdout.

    Returns:
        Process exit code
    """
    try:
        rows = asyncio.run(run_collection())
    except FleetFactsError as e:
        logger.error("%s", e)
        return 1
    json.dump(rows, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="fleet_facts")
    parser.add_argument(
        "command",
        nargs="?",
        choices=["serve", "collect"],
        default="serve",
        help="serve the MCP/HTTP endpoints (default) or collect once",
    )
    args = parser.parse_args(argv)

    if args.command == "collect":
        return run_once()

    run_server()
    return 0


if __name__ == "__main__":
    sys.exit(main())
