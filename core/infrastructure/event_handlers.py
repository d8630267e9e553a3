"""
Event handlers for domain events.

These handlers process domain events for side effects
like audit logging and metrics.
"""

import logging

from activations.domain.events import MachineActivated, MachineDeactivated
from core.domain.events import DomainEvent, EventHandler
from core.infrastructure.events import event_bus
from core.metrics import license_activations_total, licenses_issued_total
from licenses.domain.events import LicenseIssued, LicenseStatusChanged

logger = logging.getLogger(__name__)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every domain event as a structured log line.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra=event.to_dict(),
        )


class LicenseMetricsEventHandler(EventHandler):
    """Event handler updating Prometheus counters."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for metrics.

        Args:
            event: Domain event
        """
        if isinstance(event, LicenseIssued):
            licenses_issued_total.labels(platform=event.platform).inc()
        elif isinstance(event, MachineActivated):
            license_activations_total.labels(result="bound").inc()
        elif isinstance(event, MachineDeactivated):
            license_activations_total.labels(result="unbound").inc()


def register_event_handlers() -> None:
    """Subscribe the audit and metrics handlers to every domain event."""
    audit_handler = AuditLogEventHandler()
    metrics_handler = LicenseMetricsEventHandler()

    for event_type in (LicenseIssued, LicenseStatusChanged, MachineActivated, MachineDeactivated):
        event_bus.subscribe(event_type, audit_handler)

    for event_type in (LicenseIssued, MachineActivated, MachineDeactivated):
        event_bus.subscribe(event_type, metrics_handler)

    logger.debug("Event handlers registered")
