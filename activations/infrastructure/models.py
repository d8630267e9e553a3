"""
Activation history Django ORM model.

This is the infrastructure layer model for activation history.
Domain entities are in activations.domain.activation.
"""
import uuid

from django.db import models


class ActivationEntry(models.Model):
    """
    Append-only record of a machine being bound to a license.

    Rows are never updated or deleted by the application.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.PROTECT,
        related_name="activation_history",
    )
    machine_id = models.CharField(max_length=255, help_text="Client machine identifier")
    ip = models.GenericIPAddressField(null=True, blank=True)
    os = models.CharField(max_length=255, blank=True, null=True)
    app = models.CharField(max_length=255, blank=True, null=True)
    activated_at = models.DateTimeField()

    class Meta:
        db_table = "license_activations"
        ordering = ["activated_at"]
        indexes = [
            models.Index(fields=["license", "activated_at"]),
            models.Index(fields=["license", "machine_id"]),
        ]

    def __str__(self):
        return f"{self.machine_id} @ {self.activated_at:%Y-%m-%d %H:%M:%S}"
