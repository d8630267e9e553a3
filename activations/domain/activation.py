"""
Activation history entry.

An entry records that a machine was bound to a license. Entries are
immutable and only ever appended; unbinding a machine leaves its
entries in place.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import MachineId


@dataclass(frozen=True)
class ClientInfo:
    """Client metadata supplied alongside a verification request."""

    ip: Optional[str] = None
    os: Optional[str] = None
    app: Optional[str] = None


@dataclass(frozen=True)
class ActivationEntry:
    """
    Activation history entry.

    Represents one binding of a machine to a license.
    """

    id: uuid.UUID
    machine_id: str
    timestamp: datetime
    ip: Optional[str] = None
    os: Optional[str] = None
    app: Optional[str] = None

    def __post_init__(self):
        """Validate activation entry."""
        MachineId(self.machine_id)

    @classmethod
    def create(
        cls,
        machine_id: str,
        client: Optional[ClientInfo] = None,
        timestamp: Optional[datetime] = None,
    ) -> "ActivationEntry":
        """
        Create a new ActivationEntry.

        Args:
            machine_id: Machine identifier being bound
            client: Optional client metadata (ip, os, app)
            timestamp: Binding time (defaults to now, UTC)

        Returns:
            ActivationEntry instance
        """
        client = client or ClientInfo()
        return cls(
            id=uuid.uuid4(),
            machine_id=machine_id,
            timestamp=timestamp or datetime.now(timezone.utc),
            ip=client.ip,
            os=client.os,
            app=client.app,
        )
