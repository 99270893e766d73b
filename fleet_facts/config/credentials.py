"""Credential loading from key material or an ssh-agent."""

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

import asyncssh

from fleet_facts.errors import ConfigError
from fleet_facts.models import Credential

if TYPE_CHECKING:
    from fleet_facts.config.settings import Settings

logger = logging.getLogger(__name__)


def _read_key(settings: "Settings") -> str | None:
    """Return private key text, preferring inline key over key path."""
    if settings.ssh_key:
        return settings.ssh_key
    if not settings.ssh_key_path:
        return None

    path = Path(os.path.expanduser(settings.ssh_key_path))
    try:
        return path.read_text()
    except OSError as e:
        raise ConfigError(f"Can't open ssh key file {path}: {e}") from e


def load_credentials(settings: "Settings") -> list[Credential]:
    """Build one credential per configured user, in order.

    Every user shares the same authentication method and timeout. Key
    material wins over the agent when both are configured.

    Raises:
        ConfigError: If no key or agent is configured, the key can't be
            read or parsed, the agent socket is missing, or no users are set
    """
    if not (settings.ssh_key or settings.ssh_key_path or settings.ssh_auth_sock):
        raise ConfigError("You should provide ssh key or launch SSH agent")

    if not settings.users:
        raise ConfigError("At least one SSH user must be configured")

    client_key = None
    agent_path = None

    key_text = _read_key(settings)
    if key_text is not None:
        try:
            client_key = asyncssh.import_private_key(key_text)
        except (asyncssh.KeyImportError, ValueError) as e:
            raise ConfigError(f"Can't parse ssh key: {e}") from e
        logger.debug("Using private key authentication")
    else:
        agent_path = settings.ssh_auth_sock
        if not os.path.exists(agent_path):
            raise ConfigError(
                f"Can't open connection to SSH agent: {agent_path} does not exist"
            )
        logger.debug("Using SSH agent at %s", agent_path)

    return [
        Credential(
            username=user,
            client_key=client_key,
            agent_path=agent_path,
            timeout=settings.timeout,
        )
        for user in settings.users
    ]
