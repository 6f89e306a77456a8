"""
Shopify GraphQL client for product operations.

This module handles product metafield reads and writes, and variant to
parent-product resolution.
"""

import logging
from typing import Any, Dict, List, Optional

from app.db.queries import METAFIELDS_SET_MUTATION, PRODUCT_RELATED_SOURCE_QUERY, VARIANTS_PARENT_PRODUCTS_QUERY
from app.utils.id_utils import is_variant_id, product_gid, variant_rest_id

from .base_client import BaseShopifyGraphQLClient

logger = logging.getLogger(__name__)

VARIANTS_BATCH_SIZE = 100


class ShopifyProductClient(BaseShopifyGraphQLClient):
    """
    Specialized client for Shopify product operations.
    """

    async def get_related_products_source(self, product_id: str) -> Optional[str]:
        """
        Read the curated related-variants metafield of a product.

        Args:
            product_id: Product ID (numeric or GraphQL)

        Returns:
            Raw metafield value, or None if the product or metafield is missing
        """
        result = await self._execute_query(PRODUCT_RELATED_SOURCE_QUERY, {"id": product_gid(product_id)})

        product = result.get("product")
        if not product:
            logger.warning(f"Product {product_id} not found in {self.shop_domain}")
            return None

        related_source = product.get("relatedSource") or {}
        return related_source.get("value")

    async def get_variants_parent_products(self, variant_ids: List[str]) -> Dict[str, str]:
        """
        Resolve variants to their parent product.

        Variants are queried in batches of up to 100 as an ``id:X OR id:Y``
        disjunction. IDs that are not numeric or ProductVariant GraphQL IDs
        never reach the search query.

        Args:
            variant_ids: Variant IDs (numeric or GraphQL), duplicates allowed

        Returns:
            Dict: numeric variant ID -> parent product GraphQL ID (only resolved variants)
        """
        invalid_ids = [variant_id for variant_id in variant_ids if not is_variant_id(variant_id)]
        if invalid_ids:
            logger.warning(f"Skipping invalid variant IDs in {self.shop_domain}: {invalid_ids}")

        unique_ids = list(
            dict.fromkeys(variant_rest_id(variant_id) for variant_id in variant_ids if is_variant_id(variant_id))
        )

        parents: Dict[str, str] = {}
        for start in range(0, len(unique_ids), VARIANTS_BATCH_SIZE):
            batch = unique_ids[start : start + VARIANTS_BATCH_SIZE]
            variables = {
                "first": len(batch),
                "query": " OR ".join(f"id:{variant_id}" for variant_id in batch),
            }
            result = await self._execute_query(VARIANTS_PARENT_PRODUCTS_QUERY, variables)

            for variant in self._edges_to_nodes(result.get("productVariants")):
                parent = variant.get("product") or {}
                if parent.get("id"):
                    parents[variant_rest_id(variant["id"])] = parent["id"]

            logger.debug(f"Variants batch {start // VARIANTS_BATCH_SIZE + 1}: {len(batch)} requested")

        return parents

    async def set_metafields(self, metafields: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Set metafields (create or replace).

        Args:
            metafields: ``MetafieldsSetInput`` list (ownerId, namespace, key, type, value)

        Returns:
            Dict with ``metafields`` and ``userErrors``
        """
        result = await self._execute_query(METAFIELDS_SET_MUTATION, {"metafields": metafields})

        set_result = result.get("metafieldsSet") or {}
        return {
            "metafields": set_result.get("metafields") or [],
            "userErrors": self._extract_user_errors(set_result),
        }
