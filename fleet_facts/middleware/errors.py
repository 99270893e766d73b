"""Error handling middleware for MCP requests."""

import logging
from collections import Counter
from typing import Any

from fastmcp.server.middleware import Middleware, MiddlewareContext

from fleet_facts.errors import FleetFactsError


class ErrorHandlingMiddleware(Middleware):
    """Log and count failed MCP requests, then re-raise.

    Configuration and inventory errors are expected operational failures
    and log at WARNING; anything else logs at ERROR.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_traceback: bool = False,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            logger: Optional custom logger. Defaults to module logger.
            include_traceback: Whether to log the traceback of unexpected errors.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.include_traceback = include_traceback
        self._error_counts: Counter[str] = Counter()

    def get_error_stats(self) -> dict[str, int]:
        """Return error counts by exception type name."""
        return dict(self._error_counts)

    def reset_stats(self) -> None:
        self._error_counts.clear()

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        try:
            return await call_next(context)
        except FleetFactsError as e:
            self._error_counts[type(e).__name__] += 1
            self.logger.warning("%s failed: %s: %s", context.method, type(e).__name__, e)
            raise
        except Exception as e:
            self._error_counts[type(e).__name__] += 1
            self.logger.error(
                "Error in %s: %s: %s",
                context.method,
                type(e).__name__,
                e,
                exc_info=self.include_traceback,
            )
            raise
