"""Command execution data models."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fleet_facts.errors import FleetFactsError


@dataclass(frozen=True)
class CommandFailure:
    """Why a single labelled command produced no fact."""

    label: str
    command: str
    reason: str
    exit_status: int | None = None
    stderr: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "command": self.command,
            "reason": self.reason,
            "exit_status": self.exit_status,
            "stderr": self.stderr,
        }


@dataclass
class BatchOutcome:
    """Facts collected over one connection plus an optional error.

    A set ``error`` does not mean ``facts`` is empty: it reports the labels
    that failed next to the ones that succeeded.
    """

    facts: dict[str, str] = field(default_factory=dict)
    error: "FleetFactsError | None" = None
