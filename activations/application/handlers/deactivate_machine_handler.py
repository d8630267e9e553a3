"""
DeactivateMachineHandler.

Handler for unbinding a machine from a license.
"""

from activations.application.commands.deactivate_machine import DeactivateMachineCommand
from activations.domain.events import MachineDeactivated
from activations.domain.services import ActivationLedger
from core.infrastructure.events import event_bus
from licenses.application.dto.license_dto import DeactivationResultDTO
from licenses.domain.license_token import LicenseSigner
from licenses.ports.license_repository import LicenseRepository


class DeactivateMachineHandler:
    """Handler for DeactivateMachineCommand."""

    def __init__(self, license_repository: LicenseRepository, signer: LicenseSigner):
        """Initialize handler with repository and signer."""
        self.license_repository = license_repository
        self.signer = signer

    async def handle(self, command: DeactivateMachineCommand) -> DeactivationResultDTO:
        """
        Handle deactivate machine command.

        Deactivating a machine that is not bound is a no-op.

        Args:
            command: DeactivateMachineCommand

        Returns:
            DeactivationResultDTO

        Raises:
            InvalidTokenFormatError: If the key cannot be decoded
            InvalidSignatureError: If the key was not issued by this service
            LicenseNotFoundError: If no record exists for the key
        """
        self.signer.decode(command.license_key)

        before, after = await self.license_repository.mutate(
            command.license_key,
            lambda record: ActivationLedger.deactivate(record, command.machine_id),
        )
        was_bound = after is not before

        if was_bound:
            await event_bus.publish(
                MachineDeactivated(
                    license_id=after.id,
                    machine_id=command.machine_id,
                    active_devices=after.active_device_count,
                )
            )

        return DeactivationResultDTO(
            license_id=after.id,
            machine_id=command.machine_id,
            was_bound=was_bound,
            active_devices=after.active_device_count,
            message=(
                "Machine deactivated successfully" if was_bound else "Machine was not activated"
            ),
        )
