"""Protocol interfaces for dependency inversion.

Defines the seams the collection core depends on, so that tests and
alternative backends can stand in for asyncssh and AWS.

Usage Example:

    from fleet_facts.services import ConnectionNegotiator

    async def fake_connect(host, **options):
        return FakeConnection()

    negotiator = ConnectionNegotiator(connector=fake_connect)
"""

from typing import Any, Protocol, runtime_checkable

from fleet_facts.models import Target


@runtime_checkable
class Connector(Protocol):
    """Protocol for opening one SSH connection.

    ``asyncssh.connect`` satisfies it.
    """

    async def __call__(self, host: str, **options: Any) -> Any:
        """Open a connection to host.

        Args:
            host: Address to connect to
            **options: port, known_hosts, username and auth options

        Returns:
            Connection supporting ``create_process``, ``close`` and
            ``wait_closed``

        Raises:
            OSError: On network failures
            asyncssh.Error: On protocol or authentication failures
        """
        ...


@runtime_checkable
class InventoryProvider(Protocol):
    """Protocol for listing the targets of a job.

    Example implementation:
        class StaticInventory:
            def list_targets(self) -> list[Target]:
                return [Target(id="web-1", addresses=("10.0.0.5",))]
    """

    def list_targets(self) -> list[Target]:
        """Return the targets to collect from, in a stable order.

        Raises:
            InventoryError: If the inventory cannot be read
        """
        ...
