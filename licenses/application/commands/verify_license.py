"""
VerifyLicenseCommand.

Command to verify a license key and, optionally, bind a machine to it.
"""

from dataclasses import dataclass, field
from typing import Optional

from activations.domain.activation import ClientInfo


@dataclass
class VerifyLicenseCommand:
    """
    Command to verify a license key.

    Without ``machine_id`` only validity is checked; with it, the
    machine is bound if not already bound.
    """

    license_key: str
    machine_id: Optional[str] = None
    client: ClientInfo = field(default_factory=ClientInfo)
