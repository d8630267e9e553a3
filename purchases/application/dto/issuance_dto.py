"""
Purchase DTOs for API responses.
"""
from dataclasses import dataclass
from typing import Optional

from licenses.application.dto.license_dto import LicenseDTO


@dataclass
class IssuanceResultDTO:
    """DTO for an issuance; ``created`` is False when the sale already had a license."""

    license: LicenseDTO
    created: bool


@dataclass
class WebhookResultDTO:
    """DTO for a processed webhook delivery."""

    platform: str
    outcome: str
    license: Optional[LicenseDTO] = None
    created: bool = False
