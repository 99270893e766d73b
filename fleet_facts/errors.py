"""Exceptions raised and recorded by fleet_facts.

Only ConfigError and InventoryError abort a job. Every other error is
recorded on the target it belongs to and reported next to that target's
partial facts.
"""

from dataclasses import dataclass
from typing import Any

from fleet_facts.models.command import CommandFailure


class FleetFactsError(Exception):
    """Base class for all fleet_facts errors."""

    def to_dict(self) -> dict[str, Any]:
        """Structured description for the result table."""
        return {"type": type(self).__name__, "message": str(self)}


class ConfigError(FleetFactsError):
    """Configuration is malformed or credential material is missing."""


class InventoryError(FleetFactsError):
    """The target inventory could not be listed."""


@dataclass(frozen=True)
class ConnectionAttempt:
    """One failed (credential, address) connection attempt."""

    username: str
    address: str
    reason: str

    @property
    def identity(self) -> str:
        return f"{self.username}@{self.address}"


class ConnectionError(FleetFactsError):
    """No (credential, address) pair yielded a live connection."""

    def __init__(
        self,
        addresses: tuple[str, ...] | list[str],
        attempts: list[ConnectionAttempt] | None = None,
        reason: str | None = None,
    ):
        """Initialize connection error.

        Args:
            addresses: Candidate addresses of the target
            attempts: Every failed attempt, in the order it was made
            reason: Why negotiation stopped without trying, if it did
        """
        self.addresses = tuple(addresses)
        self.attempts = list(attempts or [])
        self.reason = reason
        message = f"Can't connect to host with addresses: {list(self.addresses)}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["attempts"] = [
            {"identity": a.identity, "reason": a.reason} for a in self.attempts
        ]
        return data


class SessionAllocationError(FleetFactsError):
    """The remote side refused a new channel on a live connection."""

    def __init__(self, identity: str, label: str, original_error: Exception):
        self.identity = identity
        self.label = label
        self.original_error = original_error
        super().__init__(
            f"Can't allocate session for {identity} (label '{label}'): "
            f"{original_error}"
        )


class AggregateCommandError(FleetFactsError):
    """One or more commands failed on a target."""

    def __init__(self, identity: str, failures: list[CommandFailure]):
        self.identity = identity
        self.failures = list(failures)
        labels = ", ".join(f.label for f in self.failures)
        super().__init__(f"Can't collect all facts for {identity}: {labels}")

    @property
    def labels(self) -> list[str]:
        return [f.label for f in self.failures]

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["failures"] = [f.to_dict() for f in self.failures]
        return data


class DeadlineExceededError(FleetFactsError):
    """The overall job deadline passed before a target could connect."""

    def __init__(self, seconds: float, stage: str = "negotiation"):
        self.seconds = seconds
        self.stage = stage
        super().__init__(f"Job deadline of {seconds:g}s exceeded during {stage}")
