"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from licenses.domain.license import LicenseRecord


@dataclass
class ActivationEntryDTO:
    """DTO for one activation history entry."""

    machine_id: str
    timestamp: datetime
    ip: Optional[str]
    os: Optional[str]
    app: Optional[str]


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: uuid.UUID
    license_key: str
    email: str
    name: Optional[str]
    product_id: Optional[str]
    platform: str
    sale_id: str
    is_active: bool
    max_activations: int
    active_devices: int
    remaining_activations: int
    machine_ids: List[str]
    expires_at: Optional[datetime]
    created_at: datetime
    notes: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    activations: List[ActivationEntryDTO] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: LicenseRecord) -> "LicenseDTO":
        """
        Build a DTO from a license record.

        Args:
            record: LicenseRecord entity

        Returns:
            LicenseDTO
        """
        return cls(
            id=record.id,
            license_key=record.license_key,
            email=str(record.email),
            name=record.name,
            product_id=record.product_id,
            platform=record.platform.value,
            sale_id=record.sale_id,
            is_active=record.is_active,
            max_activations=record.max_activations,
            active_devices=record.active_device_count,
            remaining_activations=record.remaining_activations,
            machine_ids=list(record.bound_machine_ids),
            expires_at=record.expires_at,
            created_at=record.created_at,
            notes=record.notes,
            metadata=dict(record.metadata),
            activations=[
                ActivationEntryDTO(
                    machine_id=entry.machine_id,
                    timestamp=entry.timestamp,
                    ip=entry.ip,
                    os=entry.os,
                    app=entry.app,
                )
                for entry in record.activations
            ],
        )


@dataclass
class VerificationResultDTO:
    """DTO for a successful license verification."""

    valid: bool
    email: str
    name: Optional[str]
    expires_at: Optional[datetime]
    active_devices: int
    max_activations: int
    remaining_activations: int
    newly_bound: bool = False


@dataclass
class DeactivationResultDTO:
    """DTO for a machine deactivation."""

    license_id: uuid.UUID
    machine_id: str
    was_bound: bool
    active_devices: int
    message: str
