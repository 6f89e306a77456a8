"""Tests unitarios para el registro de webhooks products/update."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.config import Settings
from app.services.webhook_registration import (
    PRODUCTS_UPDATE_INCLUDE_FIELDS,
    PRODUCTS_UPDATE_TOPIC,
    register_product_update_webhook,
    register_webhooks_for_all_tenants,
)
from app.utils.error_handler import ConfigurationException, ShopifyAPIException

CALLBACK_URL = "https://api.example.com/webhooks-filtered"


class TestRegisterProductUpdateWebhook:
    """Tests para el registro en una tienda."""

    @pytest.mark.asyncio
    async def test_replaces_existing_subscriptions(self, client_factory, mock_client, tenant_a):
        """Elimina las suscripciones existentes y crea una nueva."""
        mock_client.webhooks.list_webhook_subscriptions = AsyncMock(
            return_value=[
                {"id": "ws-old-1", "topic": PRODUCTS_UPDATE_TOPIC, "callbackUrl": "https://old.example.com"},
                {"id": "ws-old-2", "topic": PRODUCTS_UPDATE_TOPIC, "callbackUrl": CALLBACK_URL},
            ]
        )

        result = await register_product_update_webhook(tenant_a, CALLBACK_URL, client_factory)

        mock_client.webhooks.list_webhook_subscriptions.assert_awaited_once_with(PRODUCTS_UPDATE_TOPIC)
        assert [call.args[0] for call in mock_client.webhooks.delete_webhook_subscription.await_args_list] == [
            "ws-old-1",
            "ws-old-2",
        ]
        mock_client.webhooks.create_webhook_subscription.assert_awaited_once_with(
            PRODUCTS_UPDATE_TOPIC, CALLBACK_URL, include_fields=PRODUCTS_UPDATE_INCLUDE_FIELDS
        )
        assert result["deleted"] == ["ws-old-1", "ws-old-2"]
        assert result["created"] == "gid://shopify/WebhookSubscription/1"
        assert result["errors"] == []

    @pytest.mark.asyncio
    async def test_user_errors_are_reported(self, client_factory, mock_client, tenant_a):
        mock_client.webhooks.create_webhook_subscription = AsyncMock(
            return_value={
                "webhookSubscription": None,
                "userErrors": [{"field": ["webhookSubscription", "callbackUrl"], "message": "Address is invalid"}],
            }
        )

        result = await register_product_update_webhook(tenant_a, CALLBACK_URL, client_factory)

        assert result["created"] is None
        assert result["errors"] == ["webhookSubscription.callbackUrl: Address is invalid"]


class TestRegisterWebhooksForAllTenants:
    """Tests para el bootstrap de todas las tiendas."""

    @pytest.fixture
    def settings(self):
        return Settings(
            ENVIRONMENT="production",
            API_BASE_URL="https://api.example.com",
            SHOPIFY_TENANTS={
                "store-a.myshopify.com": {"secret_key": "s1", "access_token": "t1"},
                "store-b.myshopify.com": {"secret_key": "s2", "access_token": "t2"},
            },
        )

    @pytest.mark.asyncio
    async def test_registers_every_tenant(self, settings, client_factory, mock_client):
        results = await register_webhooks_for_all_tenants(settings, client_factory)

        assert {result["shop_domain"] for result in results} == {"store-a.myshopify.com", "store-b.myshopify.com"}
        assert mock_client.webhooks.create_webhook_subscription.await_count == 2
        for call in mock_client.webhooks.create_webhook_subscription.await_args_list:
            assert call.args[1] == CALLBACK_URL

    @pytest.mark.asyncio
    async def test_failure_in_one_tenant_does_not_stop_others(self, settings, mock_client):
        """Un error de API en una tienda se registra y se continúa con la siguiente."""

        def factory(tenant):
            context = MagicMock()
            if tenant.shop_domain == "store-a.myshopify.com":
                context.__aenter__ = AsyncMock(side_effect=ShopifyAPIException("HTTP 401: Invalid API key"))
            else:
                context.__aenter__ = AsyncMock(return_value=mock_client)
            context.__aexit__ = AsyncMock(return_value=False)
            return context

        results = await register_webhooks_for_all_tenants(settings, factory)

        by_shop = {result["shop_domain"]: result for result in results}
        assert by_shop["store-a.myshopify.com"]["errors"]
        assert by_shop["store-b.myshopify.com"]["created"] == "gid://shopify/WebhookSubscription/1"

    @pytest.mark.asyncio
    async def test_missing_public_url_raises(self, client_factory):
        settings = Settings(ENVIRONMENT="production", API_BASE_URL=None, STAGING_URL=None)

        with pytest.raises(ConfigurationException):
            await register_webhooks_for_all_tenants(settings, client_factory)

        client_factory.assert_not_called()
