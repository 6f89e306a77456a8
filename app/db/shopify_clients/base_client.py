"""
Base Shopify GraphQL client with common functionality.

This module provides the foundation for all Shopify GraphQL clients,
including tenant-scoped connection management and basic query execution.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from app.core.config import get_settings, get_shopify_graphql_url
from app.domain.models import Tenant
from app.utils.error_handler import ShopifyAPIException

logger = logging.getLogger(__name__)


class BaseShopifyGraphQLClient:
    """
    Base client for Shopify GraphQL API operations.

    Each instance talks to a single tenant (shop) with that tenant's access
    token. Requests are sent once: there is no retry loop and no timeout
    beyond aiohttp's defaults.
    """

    def __init__(self, tenant: Tenant, api_version: Optional[str] = None):
        """
        Initialize the base Shopify GraphQL client.

        Args:
            tenant: Shop whose credentials are used
            api_version: Admin API version (defaults to SHOPIFY_API_VERSION)
        """
        self.settings = get_settings()
        self.tenant = tenant
        self.shop_domain = tenant.shop_domain
        self.access_token = tenant.access_token
        self.api_version = api_version or self.settings.SHOPIFY_API_VERSION
        self.graphql_url = get_shopify_graphql_url(self.shop_domain, self.api_version)

        self.session: Optional[aiohttp.ClientSession] = None

    async def initialize(self):
        """
        Initialize the HTTP session.

        Raises:
            ShopifyAPIException: If the session cannot be created
        """
        if self.session:
            return

        try:
            self.session = aiohttp.ClientSession(
                headers={
                    "Content-Type": "application/json",
                    "X-Shopify-Access-Token": self.access_token,
                    "User-Agent": f"Shopify-Collection-Sync/{self.api_version}",
                },
            )
            logger.debug(f"Shopify GraphQL session opened for {self.shop_domain}")

        except Exception as e:
            logger.error(f"❌ Failed to initialize Shopify GraphQL client for {self.shop_domain}: {e}")
            raise ShopifyAPIException(
                f"Client initialization failed: {str(e)}", shop_domain=self.shop_domain
            ) from e

    async def close(self):
        """Close the HTTP session and clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None
            logger.debug(f"Shopify GraphQL session closed for {self.shop_domain}")

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _execute_query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GraphQL query or mutation.

        Args:
            query: GraphQL query string
            variables: Query variables

        Returns:
            Dict: The ``data`` member of the response

        Raises:
            ShopifyAPIException: On HTTP errors, network errors, top-level
                GraphQL errors or a response without ``data``
        """
        if not self.session:
            raise ShopifyAPIException(
                "Client not initialized. Call initialize() first.", shop_domain=self.shop_domain
            )

        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            async with self.session.post(self.graphql_url, json=payload) as response:
                if response.status != 200:
                    body = await response.text()
                    raise ShopifyAPIException(
                        f"HTTP {response.status}: {body[:200]}",
                        api_response_code=response.status,
                        shop_domain=self.shop_domain,
                    )

                response_data = await response.json()

        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ShopifyAPIException(f"Network error: {str(e)}", shop_domain=self.shop_domain) from e

        if not isinstance(response_data, dict):
            raise ShopifyAPIException("Unexpected response shape from Shopify", shop_domain=self.shop_domain)

        # Check for GraphQL errors
        if response_data.get("errors"):
            errors = response_data["errors"]
            error_messages = [err.get("message", str(err)) if isinstance(err, dict) else str(err) for err in errors]
            raise ShopifyAPIException(
                f"GraphQL errors: {', '.join(error_messages)}", api_response_code=200, shop_domain=self.shop_domain
            )

        data = response_data.get("data")
        if not isinstance(data, dict):
            raise ShopifyAPIException("GraphQL response without data", shop_domain=self.shop_domain)

        return data

    @staticmethod
    def _extract_user_errors(operation_result: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Return the userErrors of a mutation payload (empty list if none).

        Args:
            operation_result: Mutation payload (e.g. data["metafieldsSet"])
        """
        if not operation_result:
            return []
        return list(operation_result.get("userErrors") or [])

    @staticmethod
    def _edges_to_nodes(connection: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Flatten a GraphQL connection ({edges: [{node}]}) into a list of nodes."""
        if not connection:
            return []
        return [edge["node"] for edge in connection.get("edges") or [] if edge and edge.get("node")]

    def __str__(self):
        """String representation of the client."""
        return f"{self.__class__.__name__}(shop={self.shop_domain}, api_version={self.api_version})"

    def __repr__(self):
        """Detailed string representation of the client."""
        return (
            f"{self.__class__.__name__}("
            f"shop_domain='{self.shop_domain}', "
            f"api_version='{self.api_version}', "
            f"initialized={self.session is not None})"
        )
