"""
ProcessWebhookHandler.

Handler running one webhook delivery through its channel adapter.
"""

import logging

from core.domain.exceptions import (
    AuthenticationException,
    DomainException,
    InvalidPurchaseEventError,
)
from core.infrastructure.events import event_bus
from core.metrics import webhook_requests_total
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.events import LicenseStatusChanged
from licenses.ports.license_repository import LicenseRepository
from purchases.application.commands.process_webhook import ProcessWebhookCommand
from purchases.application.dto.issuance_dto import WebhookResultDTO
from purchases.application.handlers.issue_license_handler import IssueLicenseFromPurchaseHandler
from purchases.ports.purchase_adapter import PurchaseAdapter

logger = logging.getLogger(__name__)


class ProcessWebhookHandler:
    """Handler for ProcessWebhookCommand."""

    def __init__(
        self,
        adapter: PurchaseAdapter,
        license_repository: LicenseRepository,
        issue_handler: IssueLicenseFromPurchaseHandler,
    ):
        """Initialize handler with adapter, repository and issuance handler."""
        self.adapter = adapter
        self.license_repository = license_repository
        self.issue_handler = issue_handler

    async def handle(self, command: ProcessWebhookCommand) -> WebhookResultDTO:
        """
        Handle a webhook delivery.

        The delivery is authenticated first; nothing in an unauthenticated
        payload is acted on.

        Args:
            command: ProcessWebhookCommand

        Returns:
            WebhookResultDTO with outcome ``issued``, ``duplicate``,
            ``revoked`` or ``ignored``

        Raises:
            WebhookAuthenticationError: If the delivery is not authentic
            InvalidPurchaseEventError: If the payload is unusable
        """
        platform = command.platform.value
        try:
            result = await self._process(command)
        except AuthenticationException:
            webhook_requests_total.labels(platform=platform, outcome="rejected").inc()
            logger.warning("Rejected unauthenticated %s webhook", platform)
            raise
        except DomainException as e:
            webhook_requests_total.labels(platform=platform, outcome="invalid").inc()
            logger.warning("Invalid %s webhook: %s", platform, e.message)
            raise

        webhook_requests_total.labels(platform=platform, outcome=result.outcome).inc()
        return result

    async def _process(self, command: ProcessWebhookCommand) -> WebhookResultDTO:
        platform = command.platform.value
        self.adapter.authenticate(command.body, command.headers, command.payload)
        if command.payload is None:
            raise InvalidPurchaseEventError("Webhook body could not be parsed")

        revoked_sale_id = self.adapter.revoked_sale_id(command.payload)
        if revoked_sale_id:
            return await self._revoke(command, revoked_sale_id)

        event = self.adapter.normalize(command.payload)
        if event is None:
            logger.info("Acknowledged %s webhook without issuing", platform)
            return WebhookResultDTO(platform=platform, outcome="ignored")

        issuance = await self.issue_handler.handle(event)
        return WebhookResultDTO(
            platform=platform,
            outcome="issued" if issuance.created else "duplicate",
            license=issuance.license,
            created=issuance.created,
        )

    async def _revoke(self, command: ProcessWebhookCommand, sale_id: str) -> WebhookResultDTO:
        platform = command.platform.value
        record = await self.license_repository.find_by_sale(command.platform, sale_id)
        if record is None:
            logger.info("No %s license for revoked sale %s", platform, sale_id)
            return WebhookResultDTO(platform=platform, outcome="ignored")

        if record.is_active:
            record = await self.license_repository.set_active(record.id, False)
            await event_bus.publish(LicenseStatusChanged(license_id=record.id, is_active=False))
            logger.info("Revoked license %s for %s sale %s", record.id, platform, sale_id)

        return WebhookResultDTO(
            platform=platform, outcome="revoked", license=LicenseDTO.from_record(record)
        )
