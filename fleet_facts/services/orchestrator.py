"""Bounded-concurrency fan-out of per-target collection pipelines.

Admission:
- One task is created per target up front
- A semaphore of ``max_concurrency`` slots bounds how many of them are
  negotiating or executing at once
- The slot is released when the pipeline finishes, whatever the outcome

Ownership:
- Each task is the only writer of its target's ``facts`` and ``error``
- Credentials and commands are shared read-only
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from fleet_facts.errors import FleetFactsError
from fleet_facts.services.batch import CommandBatchExecutor
from fleet_facts.services.negotiator import ConnectionNegotiator
from fleet_facts.utils.deadline import Deadline

if TYPE_CHECKING:
    from fleet_facts.models import Credential, Target


class JobOrchestrator:
    """Drive negotiate-then-execute pipelines for a list of targets."""

    def __init__(
        self,
        credentials: list["Credential"],
        commands: dict[str, str],
        max_concurrency: int = 10,
        negotiator: ConnectionNegotiator | None = None,
        executor: CommandBatchExecutor | None = None,
        deadline: Deadline | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            credentials: Credentials to try, in preference order
            commands: Mapping of label to command text
            max_concurrency: Maximum targets processed at once (must be > 0)
            negotiator: Connection negotiator, defaults to port 22 asyncssh
            executor: Command batch executor
            deadline: Overall deadline shared by every pipeline
            logger: Logger for progress and failures. Defaults to module logger.

        Raises:
            ValueError: If max_concurrency is not positive
        """
        if max_concurrency <= 0:
            raise ValueError(f"max_concurrency must be > 0, got {max_concurrency}")

        self.credentials = list(credentials)
        self.commands = dict(commands)
        self.max_concurrency = max_concurrency
        self.negotiator = negotiator or ConnectionNegotiator()
        self.executor = executor or CommandBatchExecutor()
        self.deadline = deadline or Deadline(None)
        self.logger = logger or logging.getLogger(__name__)

    async def run(self, targets: list["Target"]) -> None:
        """Process every target and return once all of them have finished."""
        gate = asyncio.Semaphore(self.max_concurrency)
        self.logger.info(
            "Collecting facts (%s) for %d instance(s)...",
            ", ".join(self.commands),
            len(targets),
        )
        await asyncio.gather(*(self._process(gate, target) for target in targets))

    async def _process(self, gate: asyncio.Semaphore, target: "Target") -> None:
        """Run one pipeline under an admission slot."""
        async with gate:
            try:
                await self._pipeline(target)
            except Exception as e:
                self.logger.exception("Unexpected failure collecting %s", target.id)
                target.error = FleetFactsError(f"{type(e).__name__}: {e}")

        if target.error is not None:
            self.logger.warning("%s: %s", target.id, target.error)

    async def _pipeline(self, target: "Target") -> None:
        try:
            negotiated = await self.negotiator.negotiate(
                target.addresses, self.credentials, self.deadline
            )
        except FleetFactsError as e:
            target.error = e
            return

        outcome = await self.executor.execute_batch(
            negotiated.connection,
            self.commands,
            identity=negotiated.identity,
            deadline=self.deadline,
        )
        target.facts = outcome.facts
        target.error = outcome.error
