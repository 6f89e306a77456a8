"""
ID format conversion utilities for Shopify GraphQL and REST API compatibility.

This module handles conversion between different ID formats used by Shopify:
- REST API IDs: numeric strings like "8515057680670"
- GraphQL IDs: global IDs like "gid://shopify/Product/8515057680670"
"""

import logging
import re

logger = logging.getLogger(__name__)

_GID_PATTERN = re.compile(r"^gid://shopify/(\w+)/(\d+)$")


def rest_to_graphql_id(rest_id: str, resource_type: str) -> str:
    """
    Convert a REST API ID to a GraphQL global ID.

    Args:
        rest_id: Numeric REST ID (e.g., "8515057680670")
        resource_type: Resource type (e.g., "Collection", "Product", "ProductVariant")

    Returns:
        GraphQL global ID (e.g., "gid://shopify/Product/8515057680670")
    """
    if not rest_id or not resource_type:
        return ""

    clean_id = graphql_to_rest_id(str(rest_id))
    return f"gid://shopify/{resource_type}/{clean_id}"


def graphql_to_rest_id(graphql_id: str) -> str:
    """
    Extract the numeric ID from a GraphQL global ID.

    Args:
        graphql_id: GraphQL global ID (e.g., "gid://shopify/ProductVariant/42")

    Returns:
        Numeric REST ID (e.g., "42"); input unchanged if it is not a global ID
    """
    if not graphql_id:
        return ""

    graphql_id = graphql_id.strip()
    if graphql_id.isdigit():
        return graphql_id

    match = _GID_PATTERN.match(graphql_id)
    if match:
        return match.group(2)

    logger.debug(f"Could not extract REST ID from: {graphql_id}")
    return graphql_id


def product_gid(product_id: str) -> str:
    """Convert a product ID in any format to its GraphQL ID."""
    if product_id and str(product_id).startswith("gid://shopify/Product/"):
        return str(product_id)
    return rest_to_graphql_id(product_id, "Product")


def variant_rest_id(variant_id: str) -> str:
    """Extract the numeric ID of a variant given as REST or GraphQL ID."""
    return graphql_to_rest_id(variant_id)


_VARIANT_GID_PATTERN = re.compile(r"^gid://shopify/ProductVariant/\d+$")


def is_variant_id(value: str) -> bool:
    """Check that a value is a numeric variant ID or a ProductVariant GraphQL ID."""
    if not isinstance(value, str):
        return False
    return value.isdigit() or bool(_VARIANT_GID_PATTERN.match(value))
