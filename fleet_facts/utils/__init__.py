"""Utilities for fleet_facts."""

from fleet_facts.utils.console import ColorfulFormatter
from fleet_facts.utils.deadline import Deadline

__all__ = ["ColorfulFormatter", "Deadline"]
