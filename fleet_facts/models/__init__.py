"""Data models for fleet_facts."""

from fleet_facts.models.command import BatchOutcome, CommandFailure
from fleet_facts.models.credential import Credential
from fleet_facts.models.result import JobReport, ResultRow
from fleet_facts.models.target import Target

__all__ = [
    "BatchOutcome",
    "CommandFailure",
    "Credential",
    "JobReport",
    "ResultRow",
    "Target",
]
