"""Run a batch of labelled commands over one SSH connection.

Every command gets its own channel on the shared connection and all of
them run at the same time. Each process keeps its own output buffers
until its result is merged into the facts mapping.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import asyncssh

from fleet_facts.errors import AggregateCommandError, SessionAllocationError
from fleet_facts.models import BatchOutcome, CommandFailure
from fleet_facts.utils.deadline import Deadline

logger = logging.getLogger(__name__)


@dataclass
class PendingCommand:
    """A started remote process and the label it reports under."""

    label: str
    command: str
    process: Any


def _as_text(value: str | bytes | None) -> str:
    """Normalize process output to text."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _failure_reason(result: Any) -> str:
    if result.exit_signal:
        return f"killed by signal {result.exit_signal[0]}"
    if result.exit_status is None:
        return "no exit status"
    return f"exit status {result.exit_status}"


class CommandBatchExecutor:
    """Start every command, then wait for each one independently."""

    async def execute_batch(
        self,
        connection: Any,
        commands: dict[str, str],
        identity: str = "",
        deadline: Deadline | None = None,
    ) -> BatchOutcome:
        """Run all commands and close the connection.

        Args:
            connection: Live SSH connection owned by the caller's pipeline
            commands: Mapping of label to command text
            identity: ``user@address`` used for the connection
            deadline: Optional job deadline bounding the waits

        Returns:
            BatchOutcome with the facts collected and, if anything failed,
            a SessionAllocationError or AggregateCommandError.
        """
        try:
            pending: list[PendingCommand] = []
            for label, command in commands.items():
                try:
                    # Raw bytes, decoded leniently by _as_text
                    process = await connection.create_process(command, encoding=None)
                except (OSError, asyncssh.Error) as e:
                    # The connection itself is suspect: stop allocating
                    logger.warning(
                        "Can't allocate session for %s (label '%s'): %s",
                        identity,
                        label,
                        e,
                    )
                    for started in pending:
                        started.process.close()
                    return BatchOutcome(
                        error=SessionAllocationError(identity, label, e)
                    )
                pending.append(PendingCommand(label, command, process))

            return await self._collect(pending, identity, deadline or Deadline(None))
        finally:
            connection.close()
            await connection.wait_closed()

    async def _collect(
        self,
        pending: list[PendingCommand],
        identity: str,
        deadline: Deadline,
    ) -> BatchOutcome:
        """Wait for every started process and merge the results."""
        facts: dict[str, str] = {}
        failures: list[CommandFailure] = []

        waits = [asyncio.create_task(p.process.wait(check=False)) for p in pending]
        unfinished: set[asyncio.Task[Any]] = set()
        if waits:
            _, unfinished = await asyncio.wait(waits, timeout=deadline.remaining())
            for task in unfinished:
                task.cancel()
            await asyncio.gather(*unfinished, return_exceptions=True)

        for item, task in zip(pending, waits):
            if task in unfinished:
                item.process.close()
                failures.append(
                    CommandFailure(
                        label=item.label,
                        command=item.command,
                        reason="deadline exceeded",
                    )
                )
                continue

            error = task.exception()
            if error is not None:
                failures.append(
                    CommandFailure(
                        label=item.label,
                        command=item.command,
                        reason=str(error) or type(error).__name__,
                    )
                )
                continue

            result = task.result()
            if result.returncode == 0:
                facts[item.label] = _as_text(result.stdout).strip()
            else:
                failures.append(
                    CommandFailure(
                        label=item.label,
                        command=item.command,
                        reason=_failure_reason(result),
                        exit_status=result.exit_status,
                        stderr=_as_text(result.stderr).strip(),
                    )
                )

        logger.debug("...[%s] found facts: %s", identity, facts)

        if failures:
            return BatchOutcome(
                facts=facts, error=AggregateCommandError(identity, failures)
            )
        return BatchOutcome(facts=facts)
