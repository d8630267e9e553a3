"""
App configuration for the api app.
"""
from django.apps import AppConfig


class ApiConfig(AppConfig):
    """App configuration for the REST API."""

    name = "api"
    verbose_name = "API"
