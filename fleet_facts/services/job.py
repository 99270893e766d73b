"""One complete collection job: inventory, fan-out, aggregation."""

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from fleet_facts.models import JobReport
from fleet_facts.services.aggregator import aggregate

if TYPE_CHECKING:
    from fleet_facts.dependencies import Dependencies

logger = logging.getLogger(__name__)


async def collect_facts(deps: "Dependencies") -> JobReport:
    """List targets, collect facts from all of them, and build the table.

    Raises:
        InventoryError: If the targets can't be listed
    """
    start = time.monotonic()

    # boto3 is blocking
    targets = await asyncio.to_thread(deps.inventory.list_targets)

    await deps.create_orchestrator().run(targets)
    rows = aggregate(targets, deps.commands)

    report = JobReport(rows=rows, duration_seconds=time.monotonic() - start)
    logger.info(
        "Processed %d instance(s) for %.2f seconds (%d failed)",
        len(rows),
        report.duration_seconds,
        report.failed_count,
    )
    return report
