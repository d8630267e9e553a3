"""
Stripe purchase adapter.

Signatures are checked with the Stripe SDK. Completed checkout
sessions issue licenses: one-time payments get a fixed term, and
subscriptions run until Stripe reports the subscription deleted.
"""
import logging
from typing import Any, Mapping, Optional

import stripe

from core.domain.exceptions import InvalidPurchaseEventError, WebhookAuthenticationError
from core.domain.value_objects import Platform
from purchases.domain.purchase import PurchaseEvent
from purchases.infrastructure.adapters.base import BasePurchaseAdapter, optional_field

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Stripe-Signature"

CHECKOUT_COMPLETED = "checkout.session.completed"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"


class StripeCheckoutAdapter(BasePurchaseAdapter):
    """Adapter for Stripe webhook events."""

    platform = Platform.STRIPE

    def authenticate(
        self, body: bytes, headers: Mapping[str, str], payload: Optional[Mapping[str, Any]]
    ) -> None:
        secret = self.config.stripe_webhook_secret
        signature = headers.get(SIGNATURE_HEADER)
        if not secret or not signature:
            raise WebhookAuthenticationError("Missing Stripe signature")

        try:
            stripe.Webhook.construct_event(body, signature, secret)
        except stripe.SignatureVerificationError as e:
            raise WebhookAuthenticationError("Invalid Stripe signature") from e
        except ValueError as e:
            raise InvalidPurchaseEventError("Invalid Stripe payload") from e

    def normalize(self, payload: Mapping[str, Any]) -> Optional[PurchaseEvent]:
        event_type = payload.get("type")
        if event_type != CHECKOUT_COMPLETED:
            logger.debug("Ignoring Stripe event type %s", event_type)
            return None

        session = _event_object(payload)
        mode = session.get("mode")
        if mode not in ("payment", "subscription"):
            return None

        session_id = optional_field(session, "id")
        if not session_id:
            raise InvalidPurchaseEventError("Missing required field: id")
        customer_details = session.get("customer_details") or {}
        email = optional_field(customer_details, "email") or optional_field(
            session, "customer_email"
        )
        if not email:
            raise InvalidPurchaseEventError("Missing required field: customer_details.email")

        session_metadata = session.get("metadata") or {}
        metadata = {"checkout_session": session_id}

        if mode == "subscription":
            subscription_id = optional_field(session, "subscription")
            if not subscription_id:
                raise InvalidPurchaseEventError("Missing required field: subscription")
            metadata["subscription"] = subscription_id
            # Keyed by subscription so a later deletion can find the license.
            sale_id = subscription_id
            expires_at = None
        else:
            sale_id = session_id
            expires_at = self.term_expiry()

        return self.build_event(
            sale_id=sale_id,
            email=email,
            product_id=optional_field(session_metadata, "product_id") or "unknown",
            name=optional_field(customer_details, "name"),
            expires_at=expires_at,
            metadata=metadata,
        )

    def revoked_sale_id(self, payload: Mapping[str, Any]) -> Optional[str]:
        if payload.get("type") != SUBSCRIPTION_DELETED:
            return None
        return optional_field(_event_object(payload), "id")


def _event_object(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    data = payload.get("data") or {}
    obj = data.get("object") if isinstance(data, Mapping) else None
    if not isinstance(obj, Mapping):
        raise InvalidPurchaseEventError("Missing Stripe event object")
    return obj
