"""
App configuration for the core app.
"""
import logging
import os

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    """App configuration for core."""

    name = "core"
    verbose_name = "Core"

    def ready(self):
        """Register event handlers and, when enabled, observability."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()

        if os.environ.get("OTEL_ENABLED", "false").lower() == "true":
            from core.instrumentation import setup_opentelemetry

            setup_opentelemetry()
