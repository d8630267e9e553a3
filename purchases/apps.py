"""
App configuration for the purchases app.
"""
from django.apps import AppConfig


class PurchasesConfig(AppConfig):
    """App configuration for purchases."""

    name = "purchases"
    verbose_name = "Purchases"
