"""
Activation domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""

from datetime import datetime
from typing import Optional

from activations.domain.activation import ActivationEntry, ClientInfo
from core.domain.exceptions import QuotaExceededError
from core.domain.value_objects import MachineId
from licenses.domain.license import LicenseRecord


class ActivationLedger:
    """
    Domain service for machine bindings.

    Per (license, machine) the state is Unbound or Bound:

    - activate on Unbound binds the machine if a slot is free, otherwise
      raises QuotaExceededError and leaves the record untouched
    - activate on Bound is a no-op
    - deactivate on Bound unbinds; on Unbound it is a no-op

    Methods are pure: they return the new record (or the same instance
    when nothing changes). Atomicity per license is the store's job.
    """

    @staticmethod
    def can_activate(record: LicenseRecord, machine_id: str) -> bool:
        """
        Check if ``machine_id`` could be activated on ``record``.

        Args:
            record: License record
            machine_id: Machine identifier

        Returns:
            True if already bound or a slot is free
        """
        if record.is_bound(machine_id):
            return True
        return record.active_device_count < record.max_activations

    @staticmethod
    def activate(
        record: LicenseRecord,
        machine_id: str,
        client: Optional[ClientInfo] = None,
        current_time: Optional[datetime] = None,
    ) -> LicenseRecord:
        """
        Bind a machine to a license.

        Args:
            record: License record
            machine_id: Machine identifier
            client: Optional client metadata recorded in history
            current_time: Binding time (defaults to now, UTC)

        Returns:
            Updated record, or ``record`` itself if already bound

        Raises:
            QuotaExceededError: If all activation slots are in use
        """
        machine_id = str(MachineId(machine_id))
        if record.is_bound(machine_id):
            return record
        if not ActivationLedger.can_activate(record, machine_id):
            raise QuotaExceededError()

        entry = ActivationEntry.create(machine_id, client=client, timestamp=current_time)
        return record.bind(entry)

    @staticmethod
    def deactivate(record: LicenseRecord, machine_id: str) -> LicenseRecord:
        """
        Unbind a machine from a license.

        History entries are kept; only the live binding is removed.

        Args:
            record: License record
            machine_id: Machine identifier

        Returns:
            Updated record, or ``record`` itself if not bound
        """
        if not record.is_bound(machine_id):
            return record
        return record.unbind(machine_id)
