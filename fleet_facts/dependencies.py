"""Dependency injection container for fleet_facts."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fleet_facts.config import Settings, load_credentials, parse_commands
from fleet_facts.inventory import build_inventory
from fleet_facts.services.negotiator import ConnectionNegotiator
from fleet_facts.services.orchestrator import JobOrchestrator
from fleet_facts.utils.deadline import Deadline

if TYPE_CHECKING:
    from fleet_facts.models import Credential
    from fleet_facts.protocols import Connector, InventoryProvider

logger = logging.getLogger(__name__)


@dataclass
class Dependencies:
    """Container for everything a collection job needs.

    Example:
        deps = Dependencies.from_env()
        report = await collect_facts(deps)
    """

    settings: Settings
    credentials: list["Credential"]
    commands: dict[str, str]
    inventory: "InventoryProvider"
    connector: "Connector | None" = None

    @classmethod
    def from_env(cls) -> "Dependencies":
        """Create dependencies from environment variables.

        Raises:
            ConfigError: If facts, credentials or inventory are misconfigured
        """
        return cls.from_settings(Settings.from_env())

    @classmethod
    def from_settings(cls, settings: Settings) -> "Dependencies":
        """Create dependencies from explicit settings.

        Raises:
            ConfigError: If facts, credentials or inventory are misconfigured
        """
        commands = parse_commands(settings.facts)
        credentials = load_credentials(settings)
        inventory = build_inventory(settings)

        if settings.known_hosts is None:
            logger.warning(
                "SSH host key verification DISABLED - vulnerable to MITM attacks. "
                "Set FLEET_KNOWN_HOSTS to a valid known_hosts file path."
            )

        return cls(
            settings=settings,
            credentials=credentials,
            commands=commands,
            inventory=inventory,
        )

    def create_orchestrator(self) -> JobOrchestrator:
        """Build an orchestrator with a fresh deadline for one job."""
        return JobOrchestrator(
            credentials=self.credentials,
            commands=self.commands,
            max_concurrency=self.settings.max_sessions,
            negotiator=ConnectionNegotiator(
                port=self.settings.ssh_port,
                known_hosts=self.settings.known_hosts,
                connector=self.connector,
            ),
            deadline=Deadline(self.settings.deadline),
        )
