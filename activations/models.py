"""
Model registry for the activations app.

Django discovers models through ``<app>.models``; the ORM models live
in the infrastructure layer.
"""
from activations.infrastructure.models import ActivationEntry  # noqa: F401
