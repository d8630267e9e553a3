"""
Gumroad purchase adapter.

Gumroad pings carry the seller's ID; a ping is accepted when it
matches the configured seller. Licenses are fixed-term.
"""
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


class GumroadAdapter(BasePurchaseAdapter):
    """Adapter for Gumroad sale pings."""

    platform = Platform.GUMROAD

    def authenticate(
        self, body: bytes, headers: Mapping[str, str], payload: Optional[Mapping[str, Any]]
    ) -> None:
        expected = self.config.gumroad_seller_id
        seller_id = str((payload or {}).get("seller_id") or "")
        if not expected or not seller_id:
            raise WebhookAuthenticationError("Gumroad seller not recognized")
        if not hmac.compare_digest(seller_id.encode("utf-8"), expected.encode("utf-8")):
            raise WebhookAuthenticationError("Gumroad seller not recognized")

    def normalize(self, payload: Mapping[str, Any]) -> Optional[PurchaseEvent]:
        if str(payload.get("refunded", "")).lower() == "true":
            return None

        metadata = {
            "product_name": payload.get("product_name"),
            "permalink": payload.get("permalink"),
        }
        return self.build_event(
            sale_id=require_field(payload, "sale_id"),
            email=require_field(payload, "email"),
            product_id=optional_field(payload, "product_id", "permalink") or "unknown",
            name=optional_field(payload, "full_name", "purchaser_name"),
            expires_at=self.term_expiry(),
            metadata=metadata,
        )
