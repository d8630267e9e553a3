"""
Serializers for License API endpoints.

Wire field names are camelCase; DTO attributes are snake_case.
"""

from rest_framework import serializers

# Length of the stored os/app columns; longer client values are cut to fit.
CLIENT_FIELD_MAX_LENGTH = 255


class VerifyLicenseRequestSerializer(serializers.Serializer):
    """Serializer for verify license request."""

    licenseKey = serializers.CharField(required=True, trim_whitespace=True)
    machineId = serializers.CharField(required=False, allow_blank=True, max_length=255)
    os = serializers.CharField(required=False, allow_blank=True)
    app = serializers.CharField(required=False, allow_blank=True)

    def validate_os(self, value):
        return value[:CLIENT_FIELD_MAX_LENGTH]

    def validate_app(self, value):
        return value[:CLIENT_FIELD_MAX_LENGTH]


class VerifyLicenseResponseSerializer(serializers.Serializer):
    """Serializer for VerificationResultDTO."""

    valid = serializers.BooleanField()
    email = serializers.EmailField()
    name = serializers.CharField(allow_null=True)
    expiresAt = serializers.DateTimeField(source="expires_at", allow_null=True)
    activeDevices = serializers.IntegerField(source="active_devices")
    maxActivations = serializers.IntegerField(source="max_activations")
    remainingActivations = serializers.IntegerField(source="remaining_activations")
    newlyBound = serializers.BooleanField(source="newly_bound")


class VerificationFailureSerializer(serializers.Serializer):
    """Serializer for a failed verification."""

    valid = serializers.BooleanField(default=False)
    reason = serializers.ChoiceField(
        choices=[
            "InvalidFormat",
            "InvalidSignature",
            "Expired",
            "Inactive",
            "NotFound",
            "QuotaExceeded",
        ]
    )
    message = serializers.CharField()


class DeactivateMachineRequestSerializer(serializers.Serializer):
    """Serializer for deactivate machine request."""

    licenseKey = serializers.CharField(required=True, trim_whitespace=True)
    machineId = serializers.CharField(required=True, max_length=255)


class DeactivateMachineResponseSerializer(serializers.Serializer):
    """Serializer for DeactivationResultDTO."""

    success = serializers.BooleanField(default=True)
    message = serializers.CharField()
    machineId = serializers.CharField(source="machine_id")
    wasBound = serializers.BooleanField(source="was_bound")
    activeDevices = serializers.IntegerField(source="active_devices")


class ActivationEntrySerializer(serializers.Serializer):
    """Serializer for ActivationEntryDTO."""

    machineId = serializers.CharField(source="machine_id")
    timestamp = serializers.DateTimeField()
    ip = serializers.CharField(allow_null=True)
    os = serializers.CharField(allow_null=True)
    app = serializers.CharField(allow_null=True)


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO (shared with admin and webhook APIs)."""

    id = serializers.UUIDField()
    licenseKey = serializers.CharField(source="license_key")
    email = serializers.EmailField()
    name = serializers.CharField(allow_null=True)
    productId = serializers.CharField(source="product_id", allow_null=True)
    platform = serializers.CharField()
    saleId = serializers.CharField(source="sale_id")
    isActive = serializers.BooleanField(source="is_active")
    maxActivations = serializers.IntegerField(source="max_activations")
    activeDevices = serializers.IntegerField(source="active_devices")
    remainingActivations = serializers.IntegerField(source="remaining_activations")
    machineIds = serializers.ListField(source="machine_ids", child=serializers.CharField())
    expiresAt = serializers.DateTimeField(source="expires_at", allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")
    notes = serializers.CharField(allow_null=True)
    metadata = serializers.DictField(child=serializers.CharField())
    activations = ActivationEntrySerializer(many=True)
