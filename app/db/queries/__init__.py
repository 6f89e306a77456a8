"""
Modular GraphQL queries for the Shopify Admin API.

Queries are grouped by domain:
- collections: product collections and manual reordering
- products: product metafields and variant lookups
- metafields: metafield writes
- webhooks: webhook subscription management
"""

from .collections import *  # noqa: F403
from .metafields import *  # noqa: F403
from .products import *  # noqa: F403
from .webhooks import *  # noqa: F403

__all__ = [
    # Collection operations
    "PRODUCT_COLLECTIONS_ORDER_QUERY",  # noqa: F405
    "COLLECTION_REORDER_PRODUCTS_MUTATION",  # noqa: F405
    # Product operations
    "PRODUCT_RELATED_SOURCE_QUERY",  # noqa: F405
    "VARIANTS_PARENT_PRODUCTS_QUERY",  # noqa: F405
    # Metafield operations
    "METAFIELDS_SET_MUTATION",  # noqa: F405
    # Webhook operations
    "WEBHOOK_SUBSCRIPTIONS_QUERY",  # noqa: F405
    "CREATE_WEBHOOK_SUBSCRIPTION",  # noqa: F405
    "DELETE_WEBHOOK_SUBSCRIPTION",  # noqa: F405
]
