"""
IssueLicenseFromPurchaseHandler.

Handler turning a purchase into exactly one license record.
"""

import logging

from core.domain.exceptions import DuplicateLicenseError
from core.infrastructure.events import event_bus
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.events import LicenseIssued
from licenses.domain.license import LicenseRecord
from licenses.domain.license_token import LicenseSigner
from licenses.domain.services import LicensePayloadBuilder
from licenses.ports.license_repository import LicenseRepository
from purchases.application.dto.issuance_dto import IssuanceResultDTO
from purchases.domain.purchase import PurchaseEvent

logger = logging.getLogger(__name__)


class IssueLicenseFromPurchaseHandler:
    """Handler issuing a license for a PurchaseEvent."""

    def __init__(self, license_repository: LicenseRepository, signer: LicenseSigner):
        """Initialize handler with repository and signer."""
        self.license_repository = license_repository
        self.signer = signer

    async def handle(self, event: PurchaseEvent) -> IssuanceResultDTO:
        """
        Issue a license for a purchase, at most once per sale.

        Replayed deliveries of the same sale return the license issued
        the first time. When two deliveries race, the store's uniqueness
        constraint picks the winner and the loser returns it.

        Args:
            event: Normalized purchase

        Returns:
            IssuanceResultDTO; ``created`` tells whether a new record was made
        """
        existing = await self.license_repository.find_by_sale(event.platform, event.sale_id)
        if existing:
            logger.info(
                "License already issued for %s sale %s", event.platform.value, event.sale_id
            )
            return IssuanceResultDTO(license=LicenseDTO.from_record(existing), created=False)

        attributes = LicensePayloadBuilder.build(
            email=event.email,
            name=event.name,
            product_id=event.product_id,
            expires_at=event.expires_at,
            metadata=event.metadata,
        )
        issued = self.signer.issue(attributes)

        record = LicenseRecord.create(
            license_key=issued.token,
            email=event.email,
            platform=event.platform,
            sale_id=event.sale_id,
            token_payload=issued.payload,
            max_activations=event.max_activations,
            expires_at=event.expires_at,
            name=event.name,
            product_id=event.product_id,
            notes=event.notes,
            metadata=event.metadata,
        )

        try:
            saved = await self.license_repository.create(record)
        except DuplicateLicenseError:
            winner = await self.license_repository.find_by_sale(event.platform, event.sale_id)
            if winner is None:
                raise
            logger.info(
                "Concurrent issuance for %s sale %s resolved to license %s",
                event.platform.value,
                event.sale_id,
                winner.id,
            )
            return IssuanceResultDTO(license=LicenseDTO.from_record(winner), created=False)

        await event_bus.publish(
            LicenseIssued(
                license_id=saved.id,
                platform=saved.platform.value,
                sale_id=saved.sale_id,
                email=str(saved.email),
            )
        )
        logger.info(
            "Issued license %s for %s sale %s",
            saved.id,
            saved.platform.value,
            saved.sale_id,
        )
        return IssuanceResultDTO(license=LicenseDTO.from_record(saved), created=True)
