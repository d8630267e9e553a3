"""
Shared helpers for purchase adapters.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from core.domain.exceptions import InvalidPurchaseEventError
from purchases.domain.channel_config import ChannelConfig
from purchases.domain.purchase import PurchaseEvent
from purchases.ports.purchase_adapter import PurchaseAdapter


class BasePurchaseAdapter(PurchaseAdapter):
    """Adapter base holding the channel configuration."""

    def __init__(self, config: ChannelConfig):
        """Initialize adapter with channel configuration."""
        self.config = config

    def term_expiry(self, now: Optional[datetime] = None) -> datetime:
        """Expiry for a fixed-term license bought ``now``."""
        return (now or datetime.now(timezone.utc)) + timedelta(days=self.config.default_term_days)

    def build_event(self, **fields) -> PurchaseEvent:
        """
        Build a PurchaseEvent for this platform.

        Raises:
            InvalidPurchaseEventError: If the fields do not form a valid purchase
        """
        fields.setdefault("max_activations", self.config.default_max_activations)
        try:
            return PurchaseEvent(platform=self.platform, **fields)
        except ValueError as e:
            raise InvalidPurchaseEventError(f"Invalid {self.platform.value} purchase: {e}") from e


def require_field(payload: Mapping[str, Any], name: str) -> str:
    """
    Read a required, non-empty field from a payload.

    Raises:
        InvalidPurchaseEventError: If the field is missing or empty
    """
    value = payload.get(name)
    if value is None or str(value).strip() == "":
        raise InvalidPurchaseEventError(f"Missing required field: {name}")
    return str(value).strip()


def optional_field(payload: Mapping[str, Any], *names: str) -> Optional[str]:
    """Return the first non-empty field among ``names``."""
    for name in names:
        value = payload.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None
