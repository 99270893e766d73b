"""fleet_facts middleware components."""

from fleet_facts.middleware.errors import ErrorHandlingMiddleware

__all__ = ["ErrorHandlingMiddleware"]
