"""
Activation domain events.

Domain events represent something that happened in the activation domain.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class MachineActivated(DomainEvent):
    """Event raised when a machine is newly bound to a license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        machine_id: str,
        active_devices: int,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize MachineActivated event.

        Args:
            license_id: License UUID
            machine_id: Machine identifier
            active_devices: Bound machine count after activation
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=str(license_id), occurred_at=occurred_at)
        self.license_id = license_id
        self.machine_id = machine_id
        self.active_devices = active_devices

    def payload(self) -> Dict[str, Any]:
        return {"machine_id": self.machine_id, "active_devices": self.active_devices}


class MachineDeactivated(DomainEvent):
    """Event raised when a machine binding is removed."""

    def __init__(
        self,
        license_id: uuid.UUID,
        machine_id: str,
        active_devices: int,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize MachineDeactivated event.

        Args:
            license_id: License UUID
            machine_id: Machine identifier
            active_devices: Bound machine count after deactivation
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=str(license_id), occurred_at=occurred_at)
        self.license_id = license_id
        self.machine_id = machine_id
        self.active_devices = active_devices

    def payload(self) -> Dict[str, Any]:
        return {"machine_id": self.machine_id, "active_devices": self.active_devices}
