"""Global state management for fleet_facts."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fleet_facts.dependencies import Dependencies

# Global state (initialized on first access)
_deps: "Dependencies | None" = None


def get_dependencies() -> "Dependencies":
    """Get or create dependencies from the environment.

    Raises:
        ConfigError: If the environment is misconfigured
    """
    global _deps
    if _deps is None:
        from fleet_facts.dependencies import Dependencies

        _deps = Dependencies.from_env()
    return _deps


def reset_state() -> None:
    """Reset global state for testing.

    This function clears the singleton instance, allowing tests
    to start with fresh state. Should only be used in test fixtures.
    """
    global _deps
    _deps = None


def set_dependencies(deps: "Dependencies") -> None:
    """Set the global dependencies instance.

    Allows tests to inject stub credentials, commands and inventory.

    Args:
        deps: Dependencies instance to use globally.
    """
    global _deps
    _deps = deps
