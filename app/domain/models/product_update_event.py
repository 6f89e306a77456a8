"""
Product update event domain model.

Represents a verified products/update webhook, reduced to what the
reconciliation engine needs.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProductUpdateEvent:
    """
    Evento de actualización de producto recibido desde Shopify.

    Attributes:
        product_id: Numeric product ID as sent in the webhook body
        shop_domain: Shop that emitted the event
    """

    product_id: str
    shop_domain: str

    @classmethod
    def from_payload(cls, payload: Any, shop_domain: str) -> "ProductUpdateEvent":
        """
        Create an event from a decoded webhook body.

        Args:
            payload: Decoded JSON body
            shop_domain: Shop domain from the request headers

        Returns:
            ProductUpdateEvent: Parsed event

        Raises:
            ValueError: If the body is not an object or has no usable ``id``
        """
        if not isinstance(payload, dict):
            raise ValueError("Webhook body must be a JSON object")

        product_id = payload.get("id")
        if isinstance(product_id, bool) or not isinstance(product_id, (int, str)):
            raise ValueError("Webhook body is missing a product id")

        product_id = str(product_id).strip()
        if not product_id:
            raise ValueError("Webhook body is missing a product id")

        return cls(product_id=product_id, shop_domain=shop_domain)
