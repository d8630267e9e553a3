"""
Purchase event domain entity.

A purchase event is the channel-neutral description of a sale that
should result in a license.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from core.domain.value_objects import Email, Platform, normalize_metadata
from licenses.domain.license import DEFAULT_MAX_ACTIVATIONS


@dataclass(frozen=True)
class PurchaseEvent:
    """
    Normalized purchase from any sales channel.

    ``(platform, sale_id)`` identifies the sale; at most one license is
    ever issued for it.
    """

    platform: Platform
    sale_id: str
    email: str
    product_id: str
    name: Optional[str] = None
    expires_at: Optional[datetime] = None
    max_activations: int = DEFAULT_MAX_ACTIVATIONS
    notes: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate purchase event."""
        if not self.sale_id or not str(self.sale_id).strip():
            raise ValueError("Sale ID is required")
        Email(self.email)
        if self.max_activations < 1:
            raise ValueError("Max activations must be at least 1")
        object.__setattr__(self, "metadata", normalize_metadata(self.metadata))
