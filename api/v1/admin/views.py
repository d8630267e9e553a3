"""
Admin API views.

These endpoints are used by operators to:
- Create manual licenses
- List all licenses
- Enable or disable a license

Requests are authenticated by AdminSecretMiddleware (X-Admin-Secret).
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.admin.serializers import CreateLicenseRequestSerializer, LicenseListQuerySerializer
from api.v1.licenses.serializers import LicenseSerializer
from core.domain.exceptions import LicenseNotFoundError
from core.domain.value_objects import normalize_metadata
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.set_license_active import SetLicenseActiveCommand
from licenses.application.handlers.license_status_handlers import (
    ListLicensesHandler,
    SetLicenseActiveHandler,
)
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.application.services.signing import get_license_signer
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from purchases.application.commands.create_manual_license import CreateManualLicenseCommand
from purchases.application.handlers.create_manual_license_handler import (
    CreateManualLicenseHandler,
)
from purchases.application.handlers.issue_license_handler import IssueLicenseFromPurchaseHandler

_license_repo = DjangoLicenseRepository()

tracer = get_tracer(__name__)

ADMIN_SECRET_PARAMETER = OpenApiParameter(
    name="X-Admin-Secret",
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Shared administrator secret",
)


class LicenseCollectionView(APIView):
    """View for listing and creating licenses."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description="List all licenses, newest first. Optionally filter by buyer email.",
        tags=["Admin API"],
        parameters=[
            ADMIN_SECRET_PARAMETER,
            OpenApiParameter(
                name="email",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Buyer email address",
            ),
        ],
        responses={
            200: LicenseSerializer(many=True),
            401: {"description": "Unauthorized - Missing or invalid admin secret"},
        },
    )
    def get(self, request: Request) -> Response:
        """List licenses."""
        return async_to_sync(self._handle_list_licenses)(request)

    async def _handle_list_licenses(self, request: Request) -> Response:
        """Async handler for list licenses."""
        with tracer.start_as_current_span("list_licenses") as span:
            span.set_attribute("operation", "list_licenses")

            query_serializer = LicenseListQuerySerializer(data=request.query_params)
            if not query_serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response(
                    {"error": query_serializer.errors}, status=status.HTTP_400_BAD_REQUEST
                )

            handler = ListLicensesHandler(license_repository=_license_repo)
            licenses = await handler.handle(
                ListLicensesQuery(email=query_serializer.validated_data.get("email"))
            )

            span.set_attribute("licenses.count", len(licenses))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(licenses, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="create_license",
        summary="Create License",
        description="Issue a manual license outside any sales channel.",
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER],
        request=CreateLicenseRequestSerializer,
        responses={
            201: LicenseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized - Missing or invalid admin secret"},
        },
    )
    def post(self, request: Request) -> Response:
        """Create a manual license."""
        return async_to_sync(self._handle_create_license)(request)

    async def _handle_create_license(self, request: Request) -> Response:
        """Async handler for create license."""
        with tracer.start_as_current_span("create_license") as span:
            span.set_attribute("operation", "create_license")

            serializer = CreateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            data = serializer.validated_data
            handler = CreateManualLicenseHandler(
                issue_handler=IssueLicenseFromPurchaseHandler(
                    license_repository=_license_repo, signer=get_license_signer()
                )
            )
            command = CreateManualLicenseCommand(
                email=data["email"],
                name=data.get("name") or None,
                product_id=data.get("productId") or None,
                expires_at=data.get("expiresAt"),
                notes=data.get("notes") or None,
                max_activations=data["maxActivations"],
                metadata=normalize_metadata(data.get("metadata")),
            )

            result = await handler.handle(command)

            span.set_attribute("license.id", str(result.license.id))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(result.license).data, status=status.HTTP_201_CREATED)


class SetLicenseActiveView(APIView):
    """View for enabling or disabling a license."""

    is_active = True

    @extend_schema(
        summary="Set License Active Flag",
        description="Enable or disable a license. Disabled licenses fail verification.",
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER],
        request=None,
        responses={
            200: LicenseSerializer,
            401: {"description": "Unauthorized - Missing or invalid admin secret"},
            404: {"description": "License not found"},
        },
    )
    def put(self, request: Request, license_id: uuid.UUID) -> Response:
        """Set the license's active flag."""
        return async_to_sync(self._handle_set_active)(request, license_id)

    async def _handle_set_active(self, request: Request, license_id: uuid.UUID) -> Response:
        """Async handler for set license active."""
        operation = "activate_license" if self.is_active else "deactivate_license"
        with tracer.start_as_current_span(operation) as span:
            span.set_attribute("operation", operation)
            span.set_attribute("license.id", str(license_id))

            handler = SetLicenseActiveHandler(license_repository=_license_repo)
            try:
                result = await handler.handle(
                    SetLicenseActiveCommand(license_id=license_id, is_active=self.is_active)
                )
            except LicenseNotFoundError as e:
                span.set_attribute("error", "license_not_found")
                span.set_status(Status(StatusCode.ERROR, "License not found"))
                response = Response(
                    {"error": {"code": e.code, "message": e.message}},
                    status=status.HTTP_404_NOT_FOUND,
                )
                if hasattr(request, "trace_id") and request.trace_id:
                    response["X-Trace-ID"] = request.trace_id
                return response

            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(result).data, status=status.HTTP_200_OK)


class ActivateLicenseView(SetLicenseActiveView):
    """View for enabling a license."""

    is_active = True


class DeactivateLicenseView(SetLicenseActiveView):
    """View for disabling a license."""

    is_active = False
