"""
License Django ORM model.

This is the infrastructure layer model for license records.
Domain entities are in licenses.domain.license.
"""
import hashlib
import uuid

from django.db import models
from django.utils import timezone


def hash_license_key(license_key: str) -> str:
    """
    Hash a license key for indexed lookup.

    Args:
        license_key: Encoded license token

    Returns:
        SHA-256 hex digest
    """
    return hashlib.sha256(license_key.strip().encode()).hexdigest()


class License(models.Model):
    """
    A signed license sold through one sales channel.

    ``machine_ids`` is the live binding set; the binding history is
    kept in ``activations.ActivationEntry`` rows.
    """

    PLATFORM_CHOICES = [
        ("manual", "Manual"),
        ("gumroad", "Gumroad"),
        ("appsumo", "AppSumo"),
        ("stripe", "Stripe"),
        ("other", "Other"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license_key = models.TextField(help_text="Signed license token handed to the buyer")
    key_hash = models.CharField(
        max_length=64, unique=True, help_text="SHA-256 of the license key for lookup"
    )
    token_payload = models.JSONField(default=dict, help_text="Payload signed into the key")
    email = models.EmailField(db_index=True)
    name = models.CharField(max_length=255, blank=True, null=True)
    product_id = models.CharField(max_length=255, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    metadata = models.JSONField(default=dict, blank=True)
    platform = models.CharField(max_length=20, choices=PLATFORM_CHOICES)
    sale_id = models.CharField(max_length=255)
    max_activations = models.PositiveIntegerField(default=3)
    machine_ids = models.JSONField(default=list, blank=True, help_text="Currently bound machines")
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["platform", "sale_id"], name="unique_license_platform_sale"
            ),
        ]
        indexes = [
            models.Index(fields=["platform", "sale_id"]),
            models.Index(fields=["email", "platform"]),
        ]

    def __str__(self):
        return f"{self.email} ({self.platform}:{self.sale_id})"

    def save(self, *args, **kwargs):
        """Keep the lookup hash in sync with the key."""
        self.key_hash = hash_license_key(self.license_key)
        super().save(*args, **kwargs)

    @property
    def active_devices(self) -> int:
        """
        Count currently bound machines.

        Returns:
            Number of bound machines
        """
        return len(self.machine_ids or [])
