"""
Tenant domain model.

Represents one Shopify storefront and the credentials used to talk to it.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Tenant:
    """
    Domain model representing a storefront (tenant).

    Tenants are loaded once from configuration and never change at runtime.

    Attributes:
        shop_domain: Shop domain as sent in X-Shopify-Shop-Domain
        secret_key: Shared secret used to sign webhooks
        access_token: Admin API access token
        related_products_enabled: Whether the related-products sync runs for this shop
    """

    shop_domain: str
    secret_key: str
    access_token: str
    related_products_enabled: bool = False

    def __post_init__(self) -> None:
        """Validate tenant data after initialization."""
        if not self.shop_domain:
            raise ValueError("Shop domain is required")

    def __repr__(self) -> str:
        # Nunca exponer credenciales en logs
        return (
            f"Tenant(shop_domain='{self.shop_domain}', "
            f"related_products_enabled={self.related_products_enabled})"
        )
