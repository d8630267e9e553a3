"""
License repository port (interface).

This defines the contract for license record persistence.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

from core.domain.value_objects import Platform
from licenses.domain.license import LicenseRecord

LicenseMutation = Callable[[LicenseRecord], LicenseRecord]


class LicenseRepository(ABC):
    """
    Abstract repository for LicenseRecord entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def create(self, record: LicenseRecord) -> LicenseRecord:
        """
        Atomically insert a new license record.

        Args:
            record: LicenseRecord entity to insert

        Returns:
            Saved license record

        Raises:
            DuplicateLicenseError: If the license key or the
                (platform, sale_id) pair already exists
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[LicenseRecord]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            LicenseRecord or None if not found
        """
        pass

    @abstractmethod
    async def find_by_key(self, license_key: str) -> Optional[LicenseRecord]:
        """
        Find a license by its key string.

        Args:
            license_key: Encoded license token

        Returns:
            LicenseRecord or None if not found
        """
        pass

    @abstractmethod
    async def find_by_sale(self, platform: Platform, sale_id: str) -> Optional[LicenseRecord]:
        """
        Find a license by its external sale.

        Args:
            platform: Sales channel
            sale_id: External sale identifier

        Returns:
            LicenseRecord or None if not found
        """
        pass

    @abstractmethod
    async def list_all(self, email: Optional[str] = None) -> List[LicenseRecord]:
        """
        List all licenses, newest first.

        Args:
            email: Only licenses for this buyer (case-insensitive)

        Returns:
            List of LicenseRecord entities
        """
        pass

    @abstractmethod
    async def set_active(self, license_id: uuid.UUID, is_active: bool) -> LicenseRecord:
        """
        Atomically set the ``is_active`` flag.

        Args:
            license_id: License UUID
            is_active: New flag value

        Returns:
            Updated license record

        Raises:
            LicenseNotFoundError: If the license does not exist
        """
        pass

    @abstractmethod
    async def mutate(
        self, license_key: str, mutation: LicenseMutation
    ) -> Tuple[LicenseRecord, LicenseRecord]:
        """
        Apply ``mutation`` to a record atomically.

        The record is read under an exclusive per-license lock, passed to
        ``mutation`` and the result persisted before the lock is released.
        If ``mutation`` raises, nothing is written.

        Args:
            license_key: Encoded license token
            mutation: Function returning the new record

        Returns:
            Tuple of (record before, record after)

        Raises:
            LicenseNotFoundError: If the license does not exist
        """
        pass
