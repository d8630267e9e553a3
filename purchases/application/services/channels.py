"""
Sales channel factory.

Builds channel configuration and adapters from Django settings.
"""
from typing import Dict, Type

from django.conf import settings

from core.domain.value_objects import Platform
from licenses.domain.license import DEFAULT_MAX_ACTIVATIONS
from purchases.domain.channel_config import DEFAULT_TERM_DAYS, ChannelConfig
from purchases.infrastructure.adapters.appsumo import AppSumoAdapter
from purchases.infrastructure.adapters.base import BasePurchaseAdapter
from purchases.infrastructure.adapters.gumroad import GumroadAdapter
from purchases.infrastructure.adapters.stripe_checkout import StripeCheckoutAdapter

ADAPTERS: Dict[Platform, Type[BasePurchaseAdapter]] = {
    Platform.GUMROAD: GumroadAdapter,
    Platform.APPSUMO: AppSumoAdapter,
    Platform.STRIPE: StripeCheckoutAdapter,
}


def get_channel_config() -> ChannelConfig:
    """
    Read sales channel configuration from settings.

    Returns:
        ChannelConfig instance
    """
    return ChannelConfig(
        gumroad_seller_id=getattr(settings, "GUMROAD_SELLER_ID", ""),
        appsumo_secret=getattr(settings, "APPSUMO_SECRET", ""),
        stripe_webhook_secret=getattr(settings, "STRIPE_WEBHOOK_SECRET", ""),
        default_max_activations=getattr(
            settings, "LICENSE_DEFAULT_MAX_ACTIVATIONS", DEFAULT_MAX_ACTIVATIONS
        ),
        default_term_days=getattr(settings, "LICENSE_DEFAULT_TERM_DAYS", DEFAULT_TERM_DAYS),
    )


def get_purchase_adapter(platform: Platform) -> BasePurchaseAdapter:
    """
    Build the adapter for a webhook-driven platform.

    Args:
        platform: Sales channel

    Returns:
        Adapter configured from settings

    Raises:
        KeyError: If the platform has no webhook adapter
    """
    return ADAPTERS[platform](get_channel_config())
