"""Fixtures compartidas por los tests."""

import base64
import hashlib
import hmac
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.models import Tenant


def sign(body: bytes, secret: str) -> str:
    """Firma un cuerpo como lo hace Shopify (base64 de HMAC-SHA256)."""
    return base64.b64encode(hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()).decode("ascii")


@pytest.fixture
def sign_body():
    """Helper para firmar cuerpos de webhook."""
    return sign


@pytest.fixture
def tenant_a():
    """Tienda con sincronización de relacionados activa."""
    return Tenant(
        shop_domain="store-a.myshopify.com",
        secret_key="secret-a",
        access_token="shpat_a",
        related_products_enabled=True,
    )


@pytest.fixture
def tenant_b():
    """Tienda solo con sincronización de orden de colecciones."""
    return Tenant(
        shop_domain="store-b.myshopify.com",
        secret_key="secret-b",
        access_token="shpat_b",
    )


@pytest.fixture
def mock_client():
    """Cliente GraphQL unificado simulado (products / collections / webhooks)."""
    client = MagicMock()
    client.collections.get_product_collections = AsyncMock(return_value=[])
    client.collections.reorder_collection_products = AsyncMock(
        return_value={"job": {"id": "gid://shopify/Job/1", "done": False}, "userErrors": []}
    )
    client.products.get_related_products_source = AsyncMock(return_value=None)
    client.products.get_variants_parent_products = AsyncMock(return_value={})
    client.products.set_metafields = AsyncMock(return_value={"metafields": [], "userErrors": []})
    client.webhooks.list_webhook_subscriptions = AsyncMock(return_value=[])
    client.webhooks.create_webhook_subscription = AsyncMock(
        return_value={"webhookSubscription": {"id": "gid://shopify/WebhookSubscription/1"}, "userErrors": []}
    )
    client.webhooks.delete_webhook_subscription = AsyncMock(
        return_value={"deletedWebhookSubscriptionId": "x", "userErrors": []}
    )
    return client


@pytest.fixture
def client_factory(mock_client):
    """Factory compatible con ``async with factory(tenant) as client``."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=mock_client)
    context.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=context)
