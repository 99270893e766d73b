"""Result table data models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ResultRow:
    """One row of the result table, covering every command label."""

    id: str
    name: str
    addresses: list[str]
    facts: dict[str, str]
    error: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "addresses": list(self.addresses),
            "facts": dict(self.facts),
            "error": self.error,
        }


@dataclass
class JobReport:
    """Result of a complete collection job."""

    rows: list[ResultRow] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def failed_count(self) -> int:
        """Number of rows with a recorded error."""
        return sum(1 for row in self.rows if row.error is not None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows": [row.to_dict() for row in self.rows],
            "total": len(self.rows),
            "failed": self.failed_count,
            "duration_seconds": round(self.duration_seconds, 3),
        }
