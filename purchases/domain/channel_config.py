"""
Sales channel configuration.
"""
from dataclasses import dataclass

from licenses.domain.license import DEFAULT_MAX_ACTIVATIONS

DEFAULT_TERM_DAYS = 365


@dataclass(frozen=True)
class ChannelConfig:
    """
    Credentials and issuance defaults for the sales channels.

    An empty credential disables its channel: every delivery is rejected.
    """

    gumroad_seller_id: str = ""
    appsumo_secret: str = ""
    stripe_webhook_secret: str = ""
    default_max_activations: int = DEFAULT_MAX_ACTIVATIONS
    default_term_days: int = DEFAULT_TERM_DAYS

    def __post_init__(self):
        """Validate issuance defaults."""
        if self.default_max_activations < 1:
            raise ValueError("Default max activations must be at least 1")
        if self.default_term_days < 1:
            raise ValueError("Default term must be at least one day")
