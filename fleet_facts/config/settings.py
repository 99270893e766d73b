"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_USERS = ["centos", "ec2-user"]
DEFAULT_FACTS = (
    '{"kernel": "uname -rs",'
    ' "release": "cat /etc/redhat-release || cat /etc/*-release"}'
)


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Credentials
    users: list[str] = field(default_factory=lambda: list(DEFAULT_USERS))
    timeout: float = field(default=5.0)
    ssh_key: str | None = field(default=None)
    ssh_key_path: str | None = field(default=None)
    ssh_auth_sock: str | None = field(default=None)
    ssh_port: int = field(default=22)
    known_hosts: str | None = field(default=None)

    # Job
    facts: str = field(default=DEFAULT_FACTS)
    max_sessions: int = field(default=10)
    deadline: float | None = field(default=None)

    # Inventory
    inventory: str = field(default="ec2")
    inventory_file: str | None = field(default=None)
    aws_region: str | None = field(default=None)

    # Transport
    transport: str = field(default="http")
    http_host: str = field(default="0.0.0.0")
    http_port: int = field(default=8000)

    # Logging
    log_level: str = field(default="INFO")

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables.

        Supports both FLEET_* (preferred) and the bare names used by the
        original serverless deployment (USERS, FACTS, SSH_KEY, ...).
        FLEET_* takes precedence if both are set.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            users=cls._get_list("FLEET_USERS", "USERS", DEFAULT_USERS),
            timeout=cls._get_float("FLEET_TIMEOUT", "TIMEOUT", 5.0),
            ssh_key=cls._get_str("FLEET_SSH_KEY", "SSH_KEY"),
            ssh_key_path=cls._get_str("FLEET_SSH_KEY_PATH", "SSH_KEY_PATH"),
            ssh_auth_sock=cls._get_str("FLEET_SSH_AUTH_SOCK", "SSH_AUTH_SOCK"),
            ssh_port=cls._get_int("FLEET_SSH_PORT", "", 22),
            known_hosts=cls._get_known_hosts(),
            facts=cls._get_str("FLEET_FACTS", "FACTS") or DEFAULT_FACTS,
            max_sessions=cls._get_max_sessions(),
            deadline=cls._get_deadline(),
            inventory=os.getenv("FLEET_INVENTORY", "ec2").strip().lower() or "ec2",
            inventory_file=cls._get_str("FLEET_INVENTORY_FILE", ""),
            aws_region=cls._get_str("FLEET_AWS_REGION", "AWS_REGION"),
            transport=cls._get_transport(),
            http_host=os.getenv("FLEET_HTTP_HOST", "0.0.0.0"),
            http_port=cls._get_int("FLEET_HTTP_PORT", "", 8000),
            log_level=cls._get_log_level(),
        )

    @staticmethod
    def _get_str(key: str, legacy_key: str) -> str | None:
        """Get non-empty string from environment with legacy fallback."""
        value = os.getenv(key)
        if not value and legacy_key:
            value = os.getenv(legacy_key)
        return value or None

    @staticmethod
    def _get_int(key: str, legacy_key: str, default: int) -> int:
        """Get integer from environment with legacy fallback.

        Args:
            key: Primary environment variable key
            legacy_key: Legacy bare key (empty string to skip)
            default: Default value if not set

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None and legacy_key:
            value = os.getenv(legacy_key)

        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_float(key: str, legacy_key: str, default: float) -> float:
        """Get float from environment with legacy fallback."""
        value = os.getenv(key)
        if value is None and legacy_key:
            value = os.getenv(legacy_key)

        if value is None:
            return default

        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid number for %s: %s, using default %s", key, value, default)
            return default

    @staticmethod
    def _get_list(key: str, legacy_key: str, default: list[str]) -> list[str]:
        """Get comma separated list, trimmed, with empty items dropped."""
        value = os.getenv(key)
        if value is None and legacy_key:
            value = os.getenv(legacy_key)
        if value is None:
            return list(default)
        return [item.strip() for item in value.split(",") if item.strip()]

    @classmethod
    def _get_max_sessions(cls) -> int:
        value = cls._get_int("FLEET_MAX_SESSIONS", "MAX_SESSIONS", 10)
        if value <= 0:
            logger.warning("MAX_SESSIONS must be > 0, got %d. Using default: 10", value)
            return 10
        return value

    @classmethod
    def _get_deadline(cls) -> float | None:
        """Get overall job deadline; unset or non-positive means unbounded."""
        if os.getenv("FLEET_DEADLINE") is None:
            return None
        value = cls._get_float("FLEET_DEADLINE", "", 0.0)
        return value if value > 0 else None

    @staticmethod
    def _get_known_hosts() -> str | None:
        """Get known_hosts path; unset or 'none' disables verification."""
        value = os.getenv("FLEET_KNOWN_HOSTS", "").strip()
        if not value or value.lower() == "none":
            return None
        return os.path.expanduser(value)

    @staticmethod
    def _get_transport() -> str:
        """Get transport from environment with validation.

        Returns:
            Transport type ("http" or "stdio")
        """
        transport = os.getenv("FLEET_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "http"

    @staticmethod
    def _get_log_level() -> str:
        """FLEET_LOG_LEVEL wins; a bare DEBUG variable means DEBUG."""
        if level := os.getenv("FLEET_LOG_LEVEL"):
            return level.upper()
        if "DEBUG" in os.environ:
            return "DEBUG"
        return "INFO"
