"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from core.domain.exceptions import LicenseExpiredError, LicenseInactiveError
from licenses.domain.license import LicenseRecord
from licenses.domain.license_token import format_instant, token_expired


class LicenseVerifier:
    """
    Domain service for the record-level part of license verification.

    The full decision sequence is: token format and signature, record
    lookup, active flag, expiry, then (optionally) machine binding.
    Each step short-circuits; the first failure is the reported reason.
    """

    @staticmethod
    def ensure_usable(
        record: LicenseRecord,
        payload: Optional[Mapping[str, Any]] = None,
        current_time: Optional[datetime] = None,
    ) -> LicenseRecord:
        """
        Check the active flag, then expiry of both record and token.

        Args:
            record: License record found for the presented key
            payload: Decoded token payload, if available
            current_time: Check time (defaults to now, UTC)

        Returns:
            The same record, for chaining

        Raises:
            LicenseInactiveError: If the record is disabled
            LicenseExpiredError: If the record or token has expired
        """
        if not record.is_active:
            raise LicenseInactiveError()
        if record.is_expired(current_time):
            raise LicenseExpiredError()
        if payload is not None and token_expired(payload, current_time):
            raise LicenseExpiredError()
        return record


class LicensePayloadBuilder:
    """Domain service building token attributes from license data."""

    @staticmethod
    def build(
        email: str,
        name: Optional[str] = None,
        product_id: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Build the attribute map signed into a license token.

        Args:
            email: Buyer email
            name: Optional display name
            product_id: Optional product or plan identifier
            expires_at: Optional expiration (None = lifetime)
            metadata: Optional opaque metadata

        Returns:
            Attribute map; absent values are omitted when signing
        """
        return {
            "email": email,
            "name": name,
            "productId": product_id,
            "expiresAt": format_instant(expires_at) if expires_at else None,
            "metadata": dict(metadata) if metadata else None,
        }
