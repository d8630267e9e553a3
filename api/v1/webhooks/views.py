"""
Webhook API views.

Sales channels notify the service of purchases here. Each delivery is
authenticated by its channel adapter before anything is issued.
"""

from typing import Any, Dict, Optional

from asgiref.sync import async_to_sync
from django.http import QueryDict
from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.exceptions import ParseError
from rest_framework.parsers import FormParser, JSONParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.domain.value_objects import Platform
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.services.signing import get_license_signer
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from purchases.application.commands.process_webhook import ProcessWebhookCommand
from purchases.application.handlers.issue_license_handler import IssueLicenseFromPurchaseHandler
from purchases.application.handlers.process_webhook_handler import ProcessWebhookHandler
from purchases.application.services.channels import get_purchase_adapter

_license_repo = DjangoLicenseRepository()

tracer = get_tracer(__name__)


class WebhookResponseSerializer(serializers.Serializer):
    """Serializer for WebhookResultDTO."""

    success = serializers.BooleanField(default=True)
    outcome = serializers.ChoiceField(choices=["issued", "duplicate", "revoked", "ignored"])
    created = serializers.BooleanField()
    licenseId = serializers.UUIDField(source="license.id", allow_null=True, default=None)
    licenseKey = serializers.CharField(source="license.license_key", allow_null=True, default=None)


class PurchaseWebhookView(APIView):
    """Base view for sales channel webhooks."""

    platform: Platform
    parser_classes = [JSONParser, FormParser]

    def post(self, request: Request) -> Response:
        """Process a webhook delivery."""
        return async_to_sync(self._handle_webhook)(request)

    def _read_payload(self, request: Request) -> Optional[Dict[str, Any]]:
        try:
            data = request.data
        except ParseError:
            return None
        if isinstance(data, QueryDict):
            return data.dict()
        return data if isinstance(data, dict) else None

    async def _handle_webhook(self, request: Request) -> Response:
        """Async handler for webhook delivery."""
        with tracer.start_as_current_span(f"{self.platform.value}_webhook") as span:
            span.set_attribute("operation", "process_webhook")
            span.set_attribute("platform", self.platform.value)

            # Raw body must be read before request.data consumes the stream.
            body = request.body
            payload = self._read_payload(request)

            handler = ProcessWebhookHandler(
                adapter=get_purchase_adapter(self.platform),
                license_repository=_license_repo,
                issue_handler=IssueLicenseFromPurchaseHandler(
                    license_repository=_license_repo, signer=get_license_signer()
                ),
            )
            result = await handler.handle(
                ProcessWebhookCommand(
                    platform=self.platform,
                    body=body,
                    headers=request.headers,
                    payload=payload,
                )
            )

            span.set_attribute("webhook.outcome", result.outcome)
            span.set_status(Status(StatusCode.OK))
            return Response(
                WebhookResponseSerializer(result).data,
                status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
            )


@extend_schema(
    operation_id="gumroad_webhook",
    summary="Gumroad Webhook",
    description="Gumroad sale ping. Authenticated by seller ID; issues a one-year license.",
    tags=["Webhooks"],
    request=None,
    responses={
        200: WebhookResponseSerializer,
        201: WebhookResponseSerializer,
        403: {"description": "Forbidden - Unknown seller"},
    },
)
class GumroadWebhookView(PurchaseWebhookView):
    """View for Gumroad pings."""

    platform = Platform.GUMROAD


@extend_schema(
    operation_id="appsumo_webhook",
    summary="AppSumo Webhook",
    description=(
        "AppSumo deal notification, signed in X-AppSumo-Signature. "
        "Active deals issue a lifetime license."
    ),
    tags=["Webhooks"],
    request=None,
    responses={
        200: WebhookResponseSerializer,
        201: WebhookResponseSerializer,
        403: {"description": "Forbidden - Invalid signature"},
    },
)
class AppSumoWebhookView(PurchaseWebhookView):
    """View for AppSumo notifications."""

    platform = Platform.APPSUMO


@extend_schema(
    operation_id="stripe_webhook",
    summary="Stripe Webhook",
    description=(
        "Stripe event, signed in Stripe-Signature. Completed checkouts issue "
        "licenses; deleted subscriptions disable theirs."
    ),
    tags=["Webhooks"],
    request=None,
    responses={
        200: WebhookResponseSerializer,
        201: WebhookResponseSerializer,
        403: {"description": "Forbidden - Invalid signature"},
    },
)
class StripeWebhookView(PurchaseWebhookView):
    """View for Stripe events."""

    platform = Platform.STRIPE
