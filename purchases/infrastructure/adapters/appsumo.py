"""
AppSumo purchase adapter.

Deliveries are signed with HMAC-SHA256 over the raw body. Only
``active`` deals issue a license, and AppSumo licenses never expire.
"""
import hashlib
import hmac
from typing import Any, Mapping, Optional

from core.domain.exceptions import WebhookAuthenticationError
from core.domain.value_objects import Platform
from purchases.domain.purchase import PurchaseEvent
from purchases.infrastructure.adapters.base import (
    BasePurchaseAdapter,
    optional_field,
    require_field,
)

SIGNATURE_HEADER = "X-AppSumo-Signature"


def sign_body(secret: str, body: bytes) -> str:
    """Hex HMAC-SHA256 of ``body`` under ``secret``."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


class AppSumoAdapter(BasePurchaseAdapter):
    """Adapter for AppSumo deal notifications."""

    platform = Platform.APPSUMO

    def authenticate(
        self, body: bytes, headers: Mapping[str, str], payload: Optional[Mapping[str, Any]]
    ) -> None:
        secret = self.config.appsumo_secret
        signature = headers.get(SIGNATURE_HEADER) or ""
        if not secret or not signature:
            raise WebhookAuthenticationError("Missing AppSumo signature")
        if not hmac.compare_digest(sign_body(secret, body), signature.strip().lower()):
            raise WebhookAuthenticationError("Invalid AppSumo signature")

    def normalize(self, payload: Mapping[str, Any]) -> Optional[PurchaseEvent]:
        if payload.get("status") != "active":
            return None

        plan_id = require_field(payload, "plan_id")
        return self.build_event(
            sale_id=require_field(payload, "uuid"),
            email=require_field(payload, "email"),
            product_id=plan_id,
            name=optional_field(payload, "name", "full_name"),
            metadata={"plan_id": plan_id, "invoice_item_uuid": payload.get("invoice_item_uuid")},
        )
