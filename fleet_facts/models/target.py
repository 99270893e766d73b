"""Target host data models."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fleet_facts.errors import FleetFactsError


@dataclass
class Target:
    """A remote host with candidate addresses and a collection outcome.

    The outcome slot (``facts`` and ``error``) is written only by the
    pipeline that owns the target.
    """

    id: str
    name: str = ""
    addresses: tuple[str, ...] = ()
    tags: dict[str, str] = field(default_factory=dict)
    facts: dict[str, str] = field(default_factory=dict)
    error: "FleetFactsError | None" = None

    def __post_init__(self) -> None:
        self.addresses = tuple(self.addresses)

    @property
    def failed(self) -> bool:
        """Whether any error was recorded for this target."""
        return self.error is not None
