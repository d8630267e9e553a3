"""
CreateManualLicenseCommand.

Command for an administrator to issue a license outside any sales channel.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from licenses.domain.license import DEFAULT_MAX_ACTIVATIONS


@dataclass
class CreateManualLicenseCommand:
    """Command to create a manual license."""

    email: str
    name: Optional[str] = None
    product_id: Optional[str] = None
    expires_at: Optional[datetime] = None
    notes: Optional[str] = None
    max_activations: int = DEFAULT_MAX_ACTIVATIONS
    metadata: Dict[str, str] = field(default_factory=dict)
