"""
DeactivateMachineCommand.

Command to unbind a machine from a license.
"""
from dataclasses import dataclass


@dataclass
class DeactivateMachineCommand:
    """Command to deactivate a machine for a license key."""

    license_key: str
    machine_id: str
