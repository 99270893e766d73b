"""Find a working (credential, address) pair for one target.

Credentials form the outer loop and addresses the inner loop: most hosts
share one working user, so every address is tried under a credential
before falling back to the next one. Attempts are sequential.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import asyncssh

from fleet_facts.errors import ConnectionAttempt, ConnectionError, DeadlineExceededError
from fleet_facts.utils.deadline import Deadline

if TYPE_CHECKING:
    from fleet_facts.models import Credential
    from fleet_facts.protocols import Connector

logger = logging.getLogger(__name__)


@dataclass
class NegotiatedConnection:
    """A live connection and the ``user@address`` it was opened as."""

    connection: Any
    identity: str


class ConnectionNegotiator:
    """Open SSH connections by trying credentials and addresses in order."""

    def __init__(
        self,
        port: int = 22,
        known_hosts: str | None = None,
        connector: "Connector | None" = None,
    ) -> None:
        """Initialize negotiator.

        Args:
            port: SSH port used for every address
            known_hosts: Path to known_hosts file, or None to skip verification
            connector: Coroutine function opening a connection.
                Defaults to ``asyncssh.connect``.
        """
        self.port = port
        self.known_hosts = known_hosts
        self._connector = connector or asyncssh.connect

    async def negotiate(
        self,
        addresses: tuple[str, ...] | list[str],
        credentials: list["Credential"],
        deadline: Deadline | None = None,
    ) -> NegotiatedConnection:
        """Return the first connection that succeeds.

        Raises:
            ConnectionError: If every pair failed, or there was nothing to try
            DeadlineExceededError: If the job deadline passed first
        """
        if not addresses:
            raise ConnectionError(addresses, reason="no addresses to connect to")
        if not credentials:
            raise ConnectionError(addresses, reason="no credentials configured")

        deadline = deadline or Deadline(None)
        attempts: list[ConnectionAttempt] = []

        for credential in credentials:
            for address in addresses:
                if deadline.expired:
                    raise DeadlineExceededError(deadline.seconds or 0.0)

                identity = f"{credential.username}@{address}"
                logger.debug("Trying %s:%d...", identity, self.port)
                try:
                    conn = await asyncio.wait_for(
                        self._connector(
                            address,
                            port=self.port,
                            known_hosts=self.known_hosts,
                            **credential.connect_options(),
                        ),
                        timeout=deadline.clamp(credential.timeout),
                    )
                except TimeoutError:
                    reason = "timed out"
                except (OSError, asyncssh.Error) as e:
                    reason = str(e) or type(e).__name__
                else:
                    logger.debug("Connected as %s", identity)
                    return NegotiatedConnection(connection=conn, identity=identity)

                logger.debug("Failed to connect %s: %s", identity, reason)
                attempts.append(
                    ConnectionAttempt(
                        username=credential.username,
                        address=address,
                        reason=reason,
                    )
                )

        raise ConnectionError(addresses, attempts)
