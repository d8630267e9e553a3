"""
SetLicenseActiveCommand.

Command for the admin activate/deactivate operations.
"""
import uuid
from dataclasses import dataclass


@dataclass
class SetLicenseActiveCommand:
    """Command to enable or disable a license."""

    license_id: uuid.UUID
    is_active: bool
