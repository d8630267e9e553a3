"""
CreateManualLicenseHandler.
"""
import uuid

from core.domain.exceptions import InvalidPurchaseEventError
from core.domain.value_objects import Platform
from purchases.application.commands.create_manual_license import CreateManualLicenseCommand
from purchases.application.dto.issuance_dto import IssuanceResultDTO
from purchases.application.handlers.issue_license_handler import IssueLicenseFromPurchaseHandler
from purchases.domain.purchase import PurchaseEvent


class CreateManualLicenseHandler:
    """Handler for CreateManualLicenseCommand."""

    def __init__(self, issue_handler: IssueLicenseFromPurchaseHandler):
        """Initialize handler with the issuance handler."""
        self.issue_handler = issue_handler

    async def handle(self, command: CreateManualLicenseCommand) -> IssuanceResultDTO:
        """
        Handle create manual license command.

        Each manual license gets a fresh ``manual-<uuid>`` sale ID.

        Args:
            command: CreateManualLicenseCommand

        Returns:
            IssuanceResultDTO for the new license

        Raises:
            InvalidPurchaseEventError: If the email or limits are invalid
        """
        try:
            event = PurchaseEvent(
                platform=Platform.MANUAL,
                sale_id=f"manual-{uuid.uuid4()}",
                email=command.email,
                product_id=command.product_id or "manual",
                name=command.name,
                expires_at=command.expires_at,
                max_activations=command.max_activations,
                notes=command.notes,
                metadata=command.metadata,
            )
        except ValueError as e:
            raise InvalidPurchaseEventError(str(e)) from e

        return await self.issue_handler.handle(event)
