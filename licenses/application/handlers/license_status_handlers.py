"""
License status handlers.

Handlers for the admin activate/deactivate and list operations.
"""
import logging
from typing import List

from core.infrastructure.events import event_bus
from licenses.application.commands.set_license_active import SetLicenseActiveCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.domain.events import LicenseStatusChanged
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class SetLicenseActiveHandler:
    """Handler for SetLicenseActiveCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, command: SetLicenseActiveCommand) -> LicenseDTO:
        """
        Handle set license active command.

        Args:
            command: SetLicenseActiveCommand

        Returns:
            LicenseDTO of the updated license

        Raises:
            LicenseNotFoundError: If license not found
        """
        record = await self.license_repository.set_active(command.license_id, command.is_active)

        await event_bus.publish(
            LicenseStatusChanged(license_id=record.id, is_active=record.is_active)
        )
        logger.info(
            "License %s %s",
            record.id,
            "activated" if record.is_active else "deactivated",
        )
        return LicenseDTO.from_record(record)


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, query: ListLicensesQuery) -> List[LicenseDTO]:
        """
        Handle list licenses query.

        Args:
            query: ListLicensesQuery

        Returns:
            List of LicenseDTO, newest first
        """
        records = await self.license_repository.list_all(email=query.email)
        return [LicenseDTO.from_record(record) for record in records]
