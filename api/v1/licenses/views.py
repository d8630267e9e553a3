"""
License API views.

These endpoints are used by client applications to:
- Verify a license key and bind the current machine
- Release a machine binding
"""

import ipaddress
from typing import Optional

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.deactivate_machine import DeactivateMachineCommand
from activations.application.handlers.deactivate_machine_handler import DeactivateMachineHandler
from activations.domain.activation import ClientInfo
from api.exceptions import verification_failure_response
from api.v1.licenses.serializers import (
    DeactivateMachineRequestSerializer,
    DeactivateMachineResponseSerializer,
    VerificationFailureSerializer,
    VerifyLicenseRequestSerializer,
    VerifyLicenseResponseSerializer,
)
from core.domain.exceptions import InvalidTokenFormatError, LicenseVerificationError
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.verify_license import VerifyLicenseCommand
from licenses.application.handlers.verify_license_handler import VerifyLicenseHandler
from licenses.application.services.signing import get_license_signer
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

_license_repo = DjangoLicenseRepository()

tracer = get_tracer(__name__)


def get_client_ip(request: Request) -> Optional[str]:
    """
    Client IP: first X-Forwarded-For hop, else REMOTE_ADDR.

    Returns None when the value is not a valid IP address.
    """
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    candidate = forwarded.split(",")[0].strip() if forwarded else request.META.get("REMOTE_ADDR")
    if not candidate:
        return None
    try:
        return str(ipaddress.ip_address(candidate))
    except ValueError:
        return None


class VerifyLicenseView(APIView):
    """View for verifying a license key."""

    @extend_schema(
        operation_id="verify_license",
        summary="Verify License",
        description=(
            "Check a license key's signature, status and expiry. When machineId is "
            "given the machine is bound to the license if a slot is free."
        ),
        tags=["License API"],
        request=VerifyLicenseRequestSerializer,
        responses={
            200: VerifyLicenseResponseSerializer,
            400: VerificationFailureSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Verify a license key."""
        return async_to_sync(self._handle_verify_license)(request)

    async def _handle_verify_license(self, request: Request) -> Response:
        """Async handler for verify license."""
        with tracer.start_as_current_span("verify_license") as span:
            span.set_attribute("operation", "verify_license")

            serializer = VerifyLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                if "licenseKey" not in serializer.errors:
                    return Response(
                        {"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST
                    )
                response = verification_failure_response(
                    InvalidTokenFormatError("License key is required")
                )
                response.data["errors"] = serializer.errors
                return response

            data = serializer.validated_data
            machine_id = data.get("machineId") or None
            span.set_attribute("machine_bound", machine_id is not None)

            handler = VerifyLicenseHandler(
                license_repository=_license_repo, signer=get_license_signer()
            )
            command = VerifyLicenseCommand(
                license_key=data["licenseKey"],
                machine_id=machine_id,
                client=ClientInfo(
                    ip=get_client_ip(request),
                    os=data.get("os") or None,
                    app=data.get("app") or None,
                ),
            )

            try:
                result = await handler.handle(command)
            except LicenseVerificationError as e:
                span.set_attribute("verification.reason", e.reason)
                span.set_status(Status(StatusCode.ERROR, e.reason))
                return verification_failure_response(e)

            span.set_attribute("license.active_devices", result.active_devices)
            span.set_status(Status(StatusCode.OK))
            return Response(VerifyLicenseResponseSerializer(result).data, status=status.HTTP_200_OK)


class DeactivateMachineView(APIView):
    """View for releasing a machine binding."""

    @extend_schema(
        operation_id="deactivate_machine",
        summary="Deactivate Machine",
        description=(
            "Unbind a machine from a license, freeing its slot. Requires the "
            "license key itself; unbinding a machine that is not bound is a no-op."
        ),
        tags=["License API"],
        request=DeactivateMachineRequestSerializer,
        responses={
            200: DeactivateMachineResponseSerializer,
            400: VerificationFailureSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Deactivate a machine."""
        return async_to_sync(self._handle_deactivate_machine)(request)

    async def _handle_deactivate_machine(self, request: Request) -> Response:
        """Async handler for deactivate machine."""
        with tracer.start_as_current_span("deactivate_machine") as span:
            span.set_attribute("operation", "deactivate_machine")

            serializer = DeactivateMachineRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            handler = DeactivateMachineHandler(
                license_repository=_license_repo, signer=get_license_signer()
            )
            command = DeactivateMachineCommand(
                license_key=serializer.validated_data["licenseKey"],
                machine_id=serializer.validated_data["machineId"],
            )

            result = await handler.handle(command)

            span.set_attribute("license.id", str(result.license_id))
            span.set_attribute("was_bound", result.was_bound)
            span.set_status(Status(StatusCode.OK))
            return Response(
                DeactivateMachineResponseSerializer(result).data, status=status.HTTP_200_OK
            )
