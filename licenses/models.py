"""
Model registry for the licenses app.

Django discovers models through ``<app>.models``; the ORM models live
in the infrastructure layer.
"""
from licenses.infrastructure.models import License  # noqa: F401
