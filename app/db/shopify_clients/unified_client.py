"""
Unified Shopify GraphQL client that combines all specialized clients.

This module provides a single tenant-scoped interface whose specialized
clients share one HTTP session.
"""

import logging
from typing import Callable, Optional

from app.domain.models import Tenant

from .base_client import BaseShopifyGraphQLClient
from .collection_client import ShopifyCollectionClient
from .product_client import ShopifyProductClient
from .webhook_client import ShopifyWebhookClient

logger = logging.getLogger(__name__)


class ShopifyGraphQLClient(BaseShopifyGraphQLClient):
    """
    Unified Shopify GraphQL client for one tenant.

    Usage::

        async with ShopifyGraphQLClient(tenant) as client:
            await client.collections.get_product_collections("123")
    """

    def __init__(self, tenant: Tenant, api_version: Optional[str] = None):
        """Initialize the unified client with all specialized clients."""
        super().__init__(tenant, api_version)

        self.products = ShopifyProductClient(tenant, self.api_version)
        self.collections = ShopifyCollectionClient(tenant, self.api_version)
        self.webhooks = ShopifyWebhookClient(tenant, self.api_version)

    def _specialized_clients(self):
        return [self.products, self.collections, self.webhooks]

    async def initialize(self):
        """
        Initialize the unified client and share its session with the specialized clients.
        """
        await super().initialize()

        for client in self._specialized_clients():
            client.session = self.session

        logger.debug(f"Unified Shopify GraphQL client ready for {self.shop_domain}")

    async def close(self):
        """Close the unified client and all specialized clients."""
        # The specialized clients share the same session, so we only need to close once
        await super().close()

        for client in self._specialized_clients():
            client.session = None


# Builds the client for a tenant (injectable in services and tests)
ClientFactory = Callable[[Tenant], ShopifyGraphQLClient]
