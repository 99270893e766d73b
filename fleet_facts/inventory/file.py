"""Target inventory from a JSON file."""

import json
import logging
from pathlib import Path

from fleet_facts.errors import InventoryError
from fleet_facts.models import Target

logger = logging.getLogger(__name__)


class FileInventory:
    """Read targets from a JSON list.

    Each entry looks like::

        {"id": "web-1", "name": "web", "addresses": ["10.0.0.5"], "tags": {}}
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def list_targets(self) -> list[Target]:
        """Load targets in file order.

        Raises:
            InventoryError: If the file is unreadable or malformed
        """
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise InventoryError(f"Can't read inventory file {self.path}: {e}") from e

        if not isinstance(data, list):
            raise InventoryError(f"Inventory file {self.path} must contain a JSON list")

        targets = []
        for index, entry in enumerate(data):
            if not isinstance(entry, dict) or not entry.get("id"):
                raise InventoryError(
                    f"Inventory entry {index} in {self.path} needs an 'id'"
                )
            addresses = entry.get("addresses") or []
            if isinstance(addresses, str):
                addresses = [addresses]
            targets.append(
                Target(
                    id=str(entry["id"]),
                    name=str(entry.get("name", "")),
                    addresses=tuple(str(a) for a in addresses),
                    tags=dict(entry.get("tags") or {}),
                )
            )

        logger.info("Loaded %d target(s) from %s", len(targets), self.path)
        return targets
