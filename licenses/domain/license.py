"""
License domain entity.

This is the core domain entity representing a license record.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from activations.domain.activation import ActivationEntry
from core.domain.value_objects import Email, Platform, normalize_metadata

DEFAULT_MAX_ACTIVATIONS = 3


@dataclass(frozen=True)
class LicenseRecord:
    """
    License domain entity.

    The durable source of truth for a license. The signed token handed
    to the buyer is stored as ``license_key``; activation state lives
    here, never in the token.

    ``activations`` is the append-only binding history and
    ``bound_machine_ids`` is the live binding set. Both are maintained
    together by the activation ledger.
    """

    id: uuid.UUID
    license_key: str
    email: Email
    platform: Platform
    sale_id: str
    max_activations: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    expires_at: Optional[datetime] = None
    name: Optional[str] = None
    product_id: Optional[str] = None
    notes: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    token_payload: Dict[str, Any] = field(default_factory=dict)
    bound_machine_ids: Tuple[str, ...] = ()
    activations: Tuple[ActivationEntry, ...] = ()

    def __post_init__(self):
        """Validate license entity."""
        if not self.license_key or len(self.license_key.strip()) == 0:
            raise ValueError("License key cannot be empty")
        if not self.sale_id:
            raise ValueError("Sale ID is required")
        if self.max_activations < 1:
            raise ValueError("Max activations must be at least 1")
        if len(set(self.bound_machine_ids)) != len(self.bound_machine_ids):
            raise ValueError("Bound machine IDs must be unique")

    @classmethod
    def create(
        cls,
        license_key: str,
        email: str,
        platform: Platform,
        sale_id: str,
        token_payload: Dict[str, Any],
        max_activations: int = DEFAULT_MAX_ACTIVATIONS,
        expires_at: Optional[datetime] = None,
        name: Optional[str] = None,
        product_id: Optional[str] = None,
        notes: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        license_id: Optional[uuid.UUID] = None,
    ) -> "LicenseRecord":
        """
        Create a new LicenseRecord entity.

        Args:
            license_key: Encoded signed token
            email: Buyer email address
            platform: Sales channel
            sale_id: External sale identifier, unique per platform
            token_payload: Payload embedded in the token
            max_activations: Maximum number of bound machines
            expires_at: Optional expiration datetime (None = lifetime)
            name: Optional buyer display name
            product_id: Optional product or plan identifier
            notes: Optional admin notes
            metadata: Optional opaque metadata
            license_id: Optional UUID (generated if not provided)

        Returns:
            LicenseRecord entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=license_id or uuid.uuid4(),
            license_key=license_key,
            email=Email(email),
            platform=platform,
            sale_id=sale_id,
            max_activations=max_activations,
            is_active=True,
            created_at=now,
            updated_at=now,
            expires_at=expires_at,
            name=name,
            product_id=product_id,
            notes=notes,
            metadata=normalize_metadata(metadata),
            token_payload=dict(token_payload),
        )

    @property
    def active_device_count(self) -> int:
        """Number of machines currently bound."""
        return len(self.bound_machine_ids)

    @property
    def remaining_activations(self) -> int:
        """Number of machines that can still be bound."""
        return max(0, self.max_activations - self.active_device_count)

    def is_bound(self, machine_id: str) -> bool:
        """Check whether a machine is currently bound."""
        return machine_id in self.bound_machine_ids

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check if the license is past its expiration.

        Args:
            current_time: Current time (defaults to now, UTC)

        Returns:
            True if an expiration is set and has passed
        """
        if not self.expires_at:
            return False
        check_time = current_time or datetime.now(timezone.utc)
        return check_time > self.expires_at

    def bind(self, entry: ActivationEntry) -> "LicenseRecord":
        """
        Create a new LicenseRecord with ``entry`` bound and recorded.

        The caller is responsible for quota and idempotence checks.
        """
        return replace(
            self,
            bound_machine_ids=self.bound_machine_ids + (entry.machine_id,),
            activations=self.activations + (entry,),
            updated_at=datetime.now(timezone.utc),
        )

    def unbind(self, machine_id: str) -> "LicenseRecord":
        """Create a new LicenseRecord without ``machine_id`` in the live set."""
        return replace(
            self,
            bound_machine_ids=tuple(m for m in self.bound_machine_ids if m != machine_id),
            updated_at=datetime.now(timezone.utc),
        )

    def mark_active(self) -> "LicenseRecord":
        """Create a new LicenseRecord with ``is_active`` set."""
        return replace(self, is_active=True, updated_at=datetime.now(timezone.utc))

    def mark_inactive(self) -> "LicenseRecord":
        """Create a new LicenseRecord with ``is_active`` cleared."""
        return replace(self, is_active=False, updated_at=datetime.now(timezone.utc))
