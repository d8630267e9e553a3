"""
Purchase adapter port (interface).

A purchase adapter turns one sales channel's webhook delivery into a
PurchaseEvent. Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from core.domain.value_objects import Platform
from purchases.domain.purchase import PurchaseEvent


class PurchaseAdapter(ABC):
    """
    Abstract adapter for a sales channel.

    Deliveries are authenticated before anything in them is trusted.
    """

    platform: Platform

    @abstractmethod
    def authenticate(
        self, body: bytes, headers: Mapping[str, str], payload: Optional[Mapping[str, Any]]
    ) -> None:
        """
        Check that a delivery really comes from the channel.

        Args:
            body: Raw request body
            headers: Request headers
            payload: Parsed request body, or None if it could not be parsed

        Raises:
            WebhookAuthenticationError: If the delivery is not authentic
        """
        pass

    @abstractmethod
    def normalize(self, payload: Mapping[str, Any]) -> Optional[PurchaseEvent]:
        """
        Extract a purchase from an authenticated payload.

        Args:
            payload: Parsed request body

        Returns:
            PurchaseEvent, or None if the delivery does not create a license

        Raises:
            InvalidPurchaseEventError: If required fields are missing
        """
        pass

    def revoked_sale_id(self, payload: Mapping[str, Any]) -> Optional[str]:
        """
        Return the sale whose license the delivery revokes, if any.

        Args:
            payload: Parsed request body

        Returns:
            Sale ID on this platform, or None
        """
        return None
