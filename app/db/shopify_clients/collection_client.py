"""
Shopify GraphQL client for collection operations.

This module handles the collection operations used by the order sync:
reading a product's custom collections with their manual ordering, and
reordering collection members.
"""

import logging
from typing import Any, Dict, List

from app.db.queries import COLLECTION_REORDER_PRODUCTS_MUTATION, PRODUCT_COLLECTIONS_ORDER_QUERY
from app.utils.id_utils import product_gid

from .base_client import BaseShopifyGraphQLClient

logger = logging.getLogger(__name__)

MAX_PRODUCT_COLLECTIONS = 10
MAX_COLLECTION_PRODUCTS = 250


class ShopifyCollectionClient(BaseShopifyGraphQLClient):
    """
    Specialized client for Shopify collection operations.
    """

    async def get_product_collections(self, product_id: str) -> List[Dict[str, Any]]:
        """
        Fetch the custom collections of a product with their members in manual order.

        Args:
            product_id: Product ID (numeric or GraphQL)

        Returns:
            List of collections: ``{"id", "title", "products": [{"id", "order_value"}]}``
            in fetch order. Empty if the product does not exist.
        """
        variables = {
            "id": product_gid(product_id),
            "collectionsFirst": MAX_PRODUCT_COLLECTIONS,
            "productsFirst": MAX_COLLECTION_PRODUCTS,
        }
        result = await self._execute_query(PRODUCT_COLLECTIONS_ORDER_QUERY, variables)

        product = result.get("product")
        if not product:
            logger.warning(f"Product {product_id} not found in {self.shop_domain}")
            return []

        collections = []
        for collection in self._edges_to_nodes(product.get("collections")):
            members = []
            for member in self._edges_to_nodes(collection.get("products")):
                order = member.get("order") or {}
                members.append({"id": member["id"], "order_value": order.get("value")})

            collections.append({"id": collection["id"], "title": collection.get("title"), "products": members})

        logger.debug(f"Product {product_id}: {len(collections)} custom collections fetched")
        return collections

    async def reorder_collection_products(self, collection_id: str, moves: List[Dict[str, str]]) -> Dict[str, Any]:
        """
        Enqueue a reorder of collection members.

        Shopify answers with a job handle; the job is not polled.

        Args:
            collection_id: Collection GraphQL ID
            moves: ``[{"id": product_gid, "newPosition": "1"}, ...]``

        Returns:
            Dict with ``job`` (may be None) and ``userErrors``
        """
        variables = {"id": collection_id, "moves": moves}
        result = await self._execute_query(COLLECTION_REORDER_PRODUCTS_MUTATION, variables)

        reorder_result = result.get("collectionReorderProducts") or {}
        return {
            "job": reorder_result.get("job"),
            "userErrors": self._extract_user_errors(reorder_result),
        }
