"""Target inventory providers."""

from typing import TYPE_CHECKING

from fleet_facts.errors import ConfigError
from fleet_facts.inventory.ec2 import EC2Inventory, target_from_instance
from fleet_facts.inventory.file import FileInventory

if TYPE_CHECKING:
    from fleet_facts.config import Settings
    from fleet_facts.protocols import InventoryProvider


def build_inventory(settings: "Settings") -> "InventoryProvider":
    """Select the inventory provider named in settings.

    Raises:
        ConfigError: If the source is unknown or the file path is missing
    """
    if settings.inventory == "ec2":
        return EC2Inventory(region=settings.aws_region)
    if settings.inventory == "file":
        if not settings.inventory_file:
            raise ConfigError("FLEET_INVENTORY=file requires FLEET_INVENTORY_FILE")
        return FileInventory(settings.inventory_file)
    raise ConfigError(f"Unknown inventory source: {settings.inventory}")


__all__ = ["EC2Inventory", "FileInventory", "build_inventory", "target_from_instance"]
