"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class LicenseIssued(DomainEvent):
    """Event raised when a license record is created."""

    def __init__(
        self,
        license_id: uuid.UUID,
        platform: str,
        sale_id: str,
        email: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseIssued event.

        Args:
            license_id: License UUID
            platform: Sales channel
            sale_id: External sale identifier
            email: Buyer email
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=str(license_id), occurred_at=occurred_at)
        self.license_id = license_id
        self.platform = platform
        self.sale_id = sale_id
        self.email = email

    def payload(self) -> Dict[str, Any]:
        return {"platform": self.platform, "sale_id": self.sale_id}


class LicenseStatusChanged(DomainEvent):
    """Event raised when an admin enables or disables a license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        is_active: bool,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=str(license_id), occurred_at=occurred_at)
        self.license_id = license_id
        self.is_active = is_active

    def payload(self) -> Dict[str, Any]:
        return {"is_active": self.is_active}
