"""Configuration module for fleet_facts.

Provides focused pieces for different configuration concerns:
- Settings: Environment variable configuration
- parse_commands: Label to command mapping
- load_credentials: Users plus key or agent authentication
"""

from fleet_facts.config.commands import parse_commands
from fleet_facts.config.credentials import load_credentials
from fleet_facts.config.settings import Settings

__all__ = ["Settings", "load_credentials", "parse_commands"]
