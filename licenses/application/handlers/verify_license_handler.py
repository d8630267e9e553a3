"""
VerifyLicenseHandler.

Handler for verifying a license key and binding a machine to it.
"""

import logging
from datetime import datetime, timezone

from activations.domain.events import MachineActivated
from activations.domain.services import ActivationLedger
from core.domain.exceptions import LicenseNotFoundError, LicenseVerificationError
from core.infrastructure.events import event_bus
from core.metrics import license_verifications_total
from licenses.application.commands.verify_license import VerifyLicenseCommand
from licenses.application.dto.license_dto import VerificationResultDTO
from licenses.domain.license import LicenseRecord
from licenses.domain.license_token import LicenseSigner
from licenses.domain.services import LicenseVerifier
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class VerifyLicenseHandler:
    """Handler for VerifyLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, signer: LicenseSigner):
        """Initialize handler with repository and signer."""
        self.license_repository = license_repository
        self.signer = signer

    async def handle(self, command: VerifyLicenseCommand) -> VerificationResultDTO:
        """
        Handle verify license command.

        The checks run in order: token format and signature, record
        lookup, active flag, expiry, then machine binding. The first
        failure is raised.

        Args:
            command: VerifyLicenseCommand

        Returns:
            VerificationResultDTO for a valid license

        Raises:
            LicenseVerificationError: Subclass naming the first failed check
        """
        try:
            result = await self._verify(command)
        except LicenseVerificationError as e:
            license_verifications_total.labels(result=e.reason).inc()
            logger.info(
                "License verification failed: %s",
                e.reason,
                extra={"license_key_prefix": command.license_key[:8]},
            )
            raise

        license_verifications_total.labels(result="valid").inc()
        return result

    async def _verify(self, command: VerifyLicenseCommand) -> VerificationResultDTO:
        now = datetime.now(timezone.utc)
        payload = self.signer.decode(command.license_key)

        record = await self.license_repository.find_by_key(command.license_key)
        if record is None:
            raise LicenseNotFoundError()
        LicenseVerifier.ensure_usable(record, payload, now)

        newly_bound = False
        if command.machine_id:

            def bind(current: LicenseRecord) -> LicenseRecord:
                LicenseVerifier.ensure_usable(current, payload, now)
                return ActivationLedger.activate(
                    current, command.machine_id, client=command.client, current_time=now
                )

            before, record = await self.license_repository.mutate(command.license_key, bind)
            newly_bound = record is not before

            if newly_bound:
                await event_bus.publish(
                    MachineActivated(
                        license_id=record.id,
                        machine_id=command.machine_id,
                        active_devices=record.active_device_count,
                    )
                )

        return VerificationResultDTO(
            valid=True,
            email=str(record.email),
            name=record.name,
            expires_at=record.expires_at,
            active_devices=record.active_device_count,
            max_activations=record.max_activations,
            remaining_activations=record.remaining_activations,
            newly_bound=newly_bound,
        )
