"""fleet_facts FastMCP server.

Thin wrapper exposing one collection job as an MCP tool and as a plain
HTTP endpoint. All collection logic lives in services/.
"""

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse

from fleet_facts.config import Settings
from fleet_facts.errors import ConfigError, FleetFactsError
from fleet_facts.middleware import ErrorHandlingMiddleware
from fleet_facts.services import collect_facts, get_dependencies
from fleet_facts.utils.console import ColorfulFormatter


def _configure_logging() -> None:
    """Configure colorful logging for the fleet_facts package.

    Called at module load time so logging is configured before any
    loggers are used, regardless of how the server is started.
    """
    log_level = Settings.from_env().log_level
    use_colors = os.getenv("FLEET_LOG_COLORS", "true").lower() != "false"

    # Disable colors if not a TTY
    if not sys.stderr.isatty():
        use_colors = False

    fleet_logger = logging.getLogger("fleet_facts")
    fleet_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Only add a stream handler once
    if not any(isinstance(h, logging.StreamHandler) for h in fleet_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        fleet_logger.addHandler(handler)
        fleet_logger.propagate = False

    # Suppress noisy third-party loggers
    for noisy_logger in [
        "asyncssh",
        "boto3",
        "botocore",
        "uvicorn",
        "uvicorn.access",
        "fastmcp",
        "starlette",
    ]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


# Configure logging at module load time
_configure_logging()

logger = logging.getLogger(__name__)


async def run_collection() -> list[dict[str, Any]]:
    """Run one job with the configured dependencies and return row dicts.

    Raises:
        ConfigError: If the environment is misconfigured
        InventoryError: If the targets can't be listed
    """
    report = await collect_facts(get_dependencies())
    return [row.to_dict() for row in report.rows]


async def collect_facts_tool() -> dict[str, Any]:
    """Run the configured commands on every host in the inventory.

    Returns one row per host with its id, name, addresses, a value for
    every command label (empty when it could not be collected) and an
    error description when something failed on that host.
    """
    report = await collect_facts(get_dependencies())
    return report.to_dict()


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Validate configuration at startup.

    A misconfigured environment is logged but does not stop the server,
    so /health keeps answering; collection requests then report the error.
    """
    logger.info("fleet_facts server starting up")
    try:
        deps = get_dependencies()
    except ConfigError as e:
        logger.error("Configuration error, collection disabled: %s", e)
        commands: list[str] = []
    else:
        commands = list(deps.commands)
        logger.info(
            "Configured %d fact(s) (%s) for %d user(s), max_sessions=%d",
            len(commands),
            ", ".join(commands),
            len(deps.credentials),
            deps.settings.max_sessions,
        )
    logger.info("fleet_facts server ready to accept connections")

    try:
        yield {"facts": commands}
    finally:
        logger.info("fleet_facts server shutdown complete")


def create_server() -> FastMCP:
    """Create and configure the MCP server with middleware and routes.

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP("fleet_facts", lifespan=app_lifespan)

    include_traceback = os.getenv("FLEET_INCLUDE_TRACEBACK", "").lower() == "true"
    server.add_middleware(ErrorHandlingMiddleware(include_traceback=include_traceback))

    server.tool(name="collect_facts")(collect_facts_tool)

    @server.custom_route("/", methods=["GET"])
    async def collect_route(request: Request) -> JSONResponse:
        """Run one collection job and return the result table."""
        try:
            rows = await run_collection()
        except FleetFactsError as e:
            logger.error("Collection failed: %s", e)
            return JSONResponse({"error": str(e)}, status_code=500)
        return JSONResponse(rows)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    return server


# Default server instance
mcp = create_server()
