"""
Shopify GraphQL client for webhook subscription management.

Only used by the startup bootstrap that (re)registers the products/update
subscription; the reconciliation engine never touches it.
"""

import logging
from typing import Any, Dict, List, Optional

from app.db.queries import CREATE_WEBHOOK_SUBSCRIPTION, DELETE_WEBHOOK_SUBSCRIPTION, WEBHOOK_SUBSCRIPTIONS_QUERY

from .base_client import BaseShopifyGraphQLClient

logger = logging.getLogger(__name__)


class ShopifyWebhookClient(BaseShopifyGraphQLClient):
    """
    Specialized client for webhook subscriptions.
    """

    async def list_webhook_subscriptions(self, topic: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Fetch all webhook subscriptions, optionally filtered by topic.

        Args:
            topic: WebhookSubscriptionTopic (e.g. PRODUCTS_UPDATE)

        Returns:
            List of subscriptions: ``{"id", "topic", "callbackUrl", "includeFields"}``
        """
        subscriptions = []
        cursor = None

        while True:
            variables: Dict[str, Any] = {"first": 100}
            if cursor:
                variables["after"] = cursor
            if topic:
                variables["topics"] = [topic]

            result = await self._execute_query(WEBHOOK_SUBSCRIPTIONS_QUERY, variables)
            connection = result.get("webhookSubscriptions") or {}

            for node in self._edges_to_nodes(connection):
                endpoint = node.get("endpoint") or {}
                subscriptions.append(
                    {
                        "id": node["id"],
                        "topic": node.get("topic"),
                        "callbackUrl": endpoint.get("callbackUrl"),
                        "includeFields": node.get("includeFields") or [],
                    }
                )

            page_info = connection.get("pageInfo") or {}
            cursor = page_info.get("endCursor")
            if not page_info.get("hasNextPage") or not cursor:
                break

        return subscriptions

    async def create_webhook_subscription(
        self, topic: str, callback_url: str, include_fields: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """
        Create an HTTP webhook subscription.

        Args:
            topic: WebhookSubscriptionTopic
            callback_url: Public URL Shopify will POST to
            include_fields: Payload fields to include (filtered webhook)

        Returns:
            Dict with ``webhookSubscription`` and ``userErrors``
        """
        subscription_input: Dict[str, Any] = {"callbackUrl": callback_url, "format": "JSON"}
        if include_fields:
            subscription_input["includeFields"] = include_fields

        result = await self._execute_query(
            CREATE_WEBHOOK_SUBSCRIPTION, {"topic": topic, "webhookSubscription": subscription_input}
        )

        create_result = result.get("webhookSubscriptionCreate") or {}
        return {
            "webhookSubscription": create_result.get("webhookSubscription"),
            "userErrors": self._extract_user_errors(create_result),
        }

    async def delete_webhook_subscription(self, subscription_id: str) -> Dict[str, Any]:
        """
        Delete a webhook subscription.

        Args:
            subscription_id: WebhookSubscription GraphQL ID

        Returns:
            Dict with ``deletedWebhookSubscriptionId`` and ``userErrors``
        """
        result = await self._execute_query(DELETE_WEBHOOK_SUBSCRIPTION, {"id": subscription_id})

        delete_result = result.get("webhookSubscriptionDelete") or {}
        return {
            "deletedWebhookSubscriptionId": delete_result.get("deletedWebhookSubscriptionId"),
            "userErrors": self._extract_user_errors(delete_result),
        }
