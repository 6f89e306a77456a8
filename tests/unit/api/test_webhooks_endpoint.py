"""Tests de los endpoints de webhooks usando TestClient de FastAPI."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api.v1.endpoints.webhooks import get_event_dispatcher, process_product_update_background
from app.domain.models import ProductUpdateEvent
from app.main import create_application
from app.services.tenant_resolver import TenantResolver, get_tenant_resolver

WEBHOOK_PATHS = ["/webhooks-filtered", "/webhooks"]


@pytest.fixture
def dispatcher():
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock(return_value={"collection_order": {"status": "success"}})
    return dispatcher


@pytest.fixture
def client(tenant_a, tenant_b, dispatcher):
    app = create_application()
    resolver = TenantResolver({tenant_a.shop_domain: tenant_a, tenant_b.shop_domain: tenant_b})
    app.dependency_overrides[get_tenant_resolver] = lambda: resolver
    app.dependency_overrides[get_event_dispatcher] = lambda: dispatcher
    return TestClient(app, raise_server_exceptions=False)


def webhook_headers(shop_domain, signature):
    return {
        "Content-Type": "application/json",
        "X-Shopify-Shop-Domain": shop_domain,
        "X-Shopify-Hmac-Sha256": signature,
        "X-Shopify-Topic": "products/update",
        "X-Shopify-Webhook-Id": "b54557e4-bdd9-4b37-8a5f-bf7d70bcd043",
    }


class TestWebhookEndpoints:
    """Tests para POST /webhooks-filtered y /webhooks."""

    @pytest.mark.parametrize("path", WEBHOOK_PATHS)
    def test_valid_webhook_is_accepted_and_dispatched(self, client, dispatcher, tenant_a, sign_body, path):
        body = json.dumps({"id": 8515057680670, "updated_at": "2024-10-01T00:00:00Z"}).encode()

        headers = webhook_headers(tenant_a.shop_domain, sign_body(body, tenant_a.secret_key))

        response = client.post(path, content=body, headers=headers)

        assert response.status_code == 200
        assert response.json()["received"] is True
        assert response.json()["product_id"] == "8515057680670"

        dispatcher.dispatch.assert_awaited_once()
        event, tenant = dispatcher.dispatch.await_args.args
        assert event == ProductUpdateEvent(product_id="8515057680670", shop_domain=tenant_a.shop_domain)
        assert tenant is tenant_a

    @pytest.mark.parametrize("path", WEBHOOK_PATHS)
    def test_invalid_signature_is_rejected(self, client, dispatcher, tenant_a, sign_body, path):
        body = b'{"id": 1}'

        headers = webhook_headers(tenant_a.shop_domain, sign_body(body, "wrong"))

        response = client.post(path, content=body, headers=headers)

        assert response.status_code == 401
        assert "secret-a" not in response.text
        dispatcher.dispatch.assert_not_called()

    def test_cross_tenant_signature_is_rejected(self, client, dispatcher, tenant_a, tenant_b, sign_body):
        """Firmado con el secreto de B pero declarando la tienda A."""
        body = b'{"id": 1}'

        response = client.post(
            "/webhooks-filtered",
            content=body,
            headers=webhook_headers(tenant_a.shop_domain, sign_body(body, tenant_b.secret_key)),
        )

        assert response.status_code == 401
        dispatcher.dispatch.assert_not_called()

    def test_unknown_shop_is_rejected(self, client, dispatcher, sign_body):
        body = b'{"id": 1}'

        response = client.post(
            "/webhooks-filtered",
            content=body,
            headers=webhook_headers("unknown.myshopify.com", sign_body(body, "secret-a")),
        )

        assert response.status_code == 401
        dispatcher.dispatch.assert_not_called()

    def test_missing_signature_is_rejected(self, client, dispatcher, tenant_a):
        response = client.post(
            "/webhooks-filtered",
            content=b'{"id": 1}',
            headers={"Content-Type": "application/json", "X-Shopify-Shop-Domain": tenant_a.shop_domain},
        )

        assert response.status_code == 401
        dispatcher.dispatch.assert_not_called()

    @pytest.mark.parametrize("body", [b"not json", b'{"title": "no id"}'])
    def test_authenticated_malformed_body_returns_500(self, client, dispatcher, tenant_a, sign_body, body):
        response = client.post(
            "/webhooks-filtered",
            content=body,
            headers=webhook_headers(tenant_a.shop_domain, sign_body(body, tenant_a.secret_key)),
        )

        assert response.status_code == 500
        dispatcher.dispatch.assert_not_called()

    def test_reconciliation_failure_does_not_change_response(self, client, dispatcher, tenant_a, sign_body):
        """Los errores de sincronización nunca llegan a Shopify."""
        dispatcher.dispatch = AsyncMock(side_effect=RuntimeError("boom"))
        body = b'{"id": 1}'

        response = client.post(
            "/webhooks-filtered",
            content=body,
            headers=webhook_headers(tenant_a.shop_domain, sign_body(body, tenant_a.secret_key)),
        )

        assert response.status_code == 200

    def test_get_is_not_allowed(self, client):
        assert client.get("/webhooks-filtered").status_code == 405

    def test_security_headers_are_set(self, client):
        response = client.get("/ping")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "X-Request-ID" in response.headers


class TestProcessProductUpdateBackground:
    @pytest.mark.asyncio
    async def test_never_raises(self, tenant_a):
        dispatcher = MagicMock()
        dispatcher.dispatch = AsyncMock(side_effect=RuntimeError("boom"))
        event = ProductUpdateEvent(product_id="1", shop_domain=tenant_a.shop_domain)

        result = await process_product_update_background(dispatcher, event, tenant_a)

        assert result["status"] == "error"


class TestHealthEndpoints:
    def test_ping(self, client):
        response = client.get("/ping")

        assert response.status_code == 200
        assert response.json()["message"] == "pong"

    def test_health_reports_tenant_count(self, client, tenant_a, monkeypatch):
        monkeypatch.setattr(
            "app.core.routers.get_tenant_resolver",
            lambda: TenantResolver({tenant_a.shop_domain: tenant_a}),
        )

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["tenants"] == 1

    def test_health_without_tenants_is_unhealthy(self, client, monkeypatch):
        monkeypatch.setattr("app.core.routers.get_tenant_resolver", lambda: TenantResolver({}))

        response = client.get("/health")

        assert response.status_code == 503
