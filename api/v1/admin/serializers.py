"""
Serializers for Admin API endpoints.
"""

from django.conf import settings
from rest_framework import serializers

from licenses.domain.license import DEFAULT_MAX_ACTIVATIONS


class CreateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for create license request."""

    email = serializers.EmailField(required=True)
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    productId = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )
    expiresAt = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    metadata = serializers.DictField(required=False, allow_empty=True, default=dict)
    maxActivations = serializers.IntegerField(required=False, min_value=1)

    def validate(self, attrs):
        """Fill in the configured default activation limit."""
        attrs.setdefault(
            "maxActivations",
            getattr(settings, "LICENSE_DEFAULT_MAX_ACTIVATIONS", DEFAULT_MAX_ACTIVATIONS),
        )
        return attrs


class LicenseListQuerySerializer(serializers.Serializer):
    """Serializer for list licenses query parameters."""

    email = serializers.EmailField(required=False)
