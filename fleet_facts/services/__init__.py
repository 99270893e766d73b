"""Services for fleet_facts."""

from fleet_facts.services.aggregator import DEFAULT_FACT, aggregate
from fleet_facts.services.batch import CommandBatchExecutor
from fleet_facts.services.job import collect_facts
from fleet_facts.services.negotiator import ConnectionNegotiator, NegotiatedConnection
from fleet_facts.services.orchestrator import JobOrchestrator
from fleet_facts.services.state import (
    get_dependencies,
    reset_state,
    set_dependencies,
)

__all__ = [
    "DEFAULT_FACT",
    "CommandBatchExecutor",
    "ConnectionNegotiator",
    "JobOrchestrator",
    "NegotiatedConnection",
    "aggregate",
    "collect_facts",
    "get_dependencies",
    "reset_state",
    "set_dependencies",
]
