"""Tests unitarios para el modelo ProductUpdateEvent."""

import pytest

from app.domain.models import ProductUpdateEvent
from app.utils.id_utils import graphql_to_rest_id, is_variant_id, product_gid


class TestProductUpdateEvent:
    def test_numeric_id_is_stringified(self):
        event = ProductUpdateEvent.from_payload({"id": 8515057680670, "title": "x"}, "store-a.myshopify.com")

        assert event.product_id == "8515057680670"
        assert event.shop_domain == "store-a.myshopify.com"

    def test_string_id(self):
        assert ProductUpdateEvent.from_payload({"id": "42"}, "s").product_id == "42"

    @pytest.mark.parametrize("payload", [[], "x", {}, {"id": None}, {"id": True}, {"id": "  "}, {"id": {"a": 1}}])
    def test_invalid_payloads(self, payload):
        with pytest.raises(ValueError):
            ProductUpdateEvent.from_payload(payload, "s")


class TestIdUtils:
    def test_product_gid(self):
        assert product_gid("42") == "gid://shopify/Product/42"
        assert product_gid("gid://shopify/Product/42") == "gid://shopify/Product/42"

    def test_graphql_to_rest_id(self):
        assert graphql_to_rest_id("gid://shopify/ProductVariant/7") == "7"
        assert graphql_to_rest_id("7") == "7"

    @pytest.mark.parametrize("value", ["7", "gid://shopify/ProductVariant/7"])
    def test_is_variant_id_accepts_numeric_and_variant_gid(self, value):
        assert is_variant_id(value)

    @pytest.mark.parametrize(
        "value", ["", "7 OR title:x", "id:7", "gid://shopify/Product/7", "gid://shopify/ProductVariant/x", None, 7]
    )
    def test_is_variant_id_rejects_everything_else(self, value):
        assert not is_variant_id(value)
