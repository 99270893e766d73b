"""Credential data models."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import asyncssh


@dataclass(frozen=True)
class Credential:
    """A login identity, its authentication method and dial timeout.

    Exactly one of ``client_key`` or ``agent_path`` is expected to be set.
    """

    username: str
    client_key: "asyncssh.SSHKey | None" = None
    agent_path: str | None = None
    timeout: float = 5.0

    @property
    def method(self) -> str:
        """Short name of the authentication method."""
        if self.client_key is not None:
            return "key"
        if self.agent_path is not None:
            return "agent"
        return "none"

    def connect_options(self) -> dict[str, Any]:
        """Keyword arguments for ``asyncssh.connect``."""
        options: dict[str, Any] = {"username": self.username}
        if self.client_key is not None:
            options["client_keys"] = [self.client_key]
            options["agent_path"] = None
        elif self.agent_path is not None:
            options["agent_path"] = self.agent_path
        return options
