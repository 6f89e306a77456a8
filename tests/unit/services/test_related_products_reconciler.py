"""Tests unitarios para la sincronización de productos relacionados."""

import json
from unittest.mock import AsyncMock

import pytest

from app.services.related_products_reconciler import (
    RELATED_PRODUCTS_KEY,
    RELATED_PRODUCTS_NAMESPACE,
    RELATED_PRODUCTS_TYPE,
    RelatedProductsReconciler,
    build_related_products_metafield,
    parse_related_variant_ids,
)
from app.utils.error_handler import ErrorCode, ShopifyAPIException, ValidationException

PRODUCT_A = "gid://shopify/Product/100"
PRODUCT_B = "gid://shopify/Product/200"


class TestParseRelatedVariantIds:
    """Tests para la interpretación de la lista curada."""

    def test_flattens_groups_in_order(self):
        assert parse_related_variant_ids('["11,22", "33"]') == ["11", "22", "33"]

    def test_keeps_duplicates(self):
        assert parse_related_variant_ids('["11,11", "11"]') == ["11", "11", "11"]

    def test_strips_whitespace_and_drops_empty_parts(self):
        assert parse_related_variant_ids('[" 11 , ,22,", ""]') == ["11", "22"]

    def test_accepts_numeric_entries(self):
        assert parse_related_variant_ids("[11, 22]") == ["11", "22"]

    def test_empty_list(self):
        assert parse_related_variant_ids("[]") == []

    @pytest.mark.parametrize("raw_value", ["not json", '{"a": 1}', '"11,22"', '[["11"]]', "[true]"])
    def test_invalid_values_raise_validation_error(self, raw_value):
        with pytest.raises(ValidationException) as exc_info:
            parse_related_variant_ids(raw_value)

        assert exc_info.value.error_code == ErrorCode.INVALID_METAFIELD_VALUE


class TestBuildRelatedProductsMetafield:
    def test_metafield_input(self):
        metafield = build_related_products_metafield("555", [PRODUCT_A, PRODUCT_B])

        assert metafield == {
            "ownerId": "gid://shopify/Product/555",
            "namespace": RELATED_PRODUCTS_NAMESPACE,
            "key": RELATED_PRODUCTS_KEY,
            "type": RELATED_PRODUCTS_TYPE,
            "value": json.dumps([PRODUCT_A, PRODUCT_B]),
        }


class TestRelatedProductsReconciler:
    """Tests para el reconciliador de productos relacionados."""

    @pytest.mark.asyncio
    async def test_reference_scenario_keeps_one_entry_per_variant(self, mock_client):
        """["v1,v2","v3"] con v1,v2 -> A y v3 -> B escribe [A, A, B]."""
        mock_client.products.get_related_products_source = AsyncMock(return_value='["1,2", "3"]')
        mock_client.products.get_variants_parent_products = AsyncMock(
            return_value={"1": PRODUCT_A, "2": PRODUCT_A, "3": PRODUCT_B}
        )

        result = await RelatedProductsReconciler(mock_client).reconcile("555")

        mock_client.products.get_variants_parent_products.assert_awaited_once_with(["1", "2", "3"])
        mock_client.products.set_metafields.assert_awaited_once_with(
            [build_related_products_metafield("555", [PRODUCT_A, PRODUCT_A, PRODUCT_B])]
        )
        assert result["status"] == "success"
        assert result["related_product_ids"] == [PRODUCT_A, PRODUCT_A, PRODUCT_B]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_value", [None, "", "   ", "[]", '["", " , "]'])
    async def test_missing_or_empty_source_is_a_noop(self, mock_client, raw_value):
        """Sin lista curada no hay lecturas de variantes ni escrituras."""
        mock_client.products.get_related_products_source = AsyncMock(return_value=raw_value)

        result = await RelatedProductsReconciler(mock_client).reconcile("555")

        assert result["status"] == "skipped"
        mock_client.products.get_variants_parent_products.assert_not_called()
        mock_client.products.set_metafields.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_json_produces_no_mutation(self, mock_client):
        """Un metafield con JSON inválido se registra y no se escribe nada."""
        mock_client.products.get_related_products_source = AsyncMock(return_value="1,2,3")

        result = await RelatedProductsReconciler(mock_client).reconcile("555")

        assert result["status"] == "error"
        mock_client.products.set_metafields.assert_not_called()

    @pytest.mark.asyncio
    async def test_unresolved_variants_are_skipped(self, mock_client):
        """Las variantes que no existen se omiten del resultado."""
        mock_client.products.get_related_products_source = AsyncMock(return_value='["1,404", "3"]')
        mock_client.products.get_variants_parent_products = AsyncMock(return_value={"1": PRODUCT_A, "3": PRODUCT_B})

        result = await RelatedProductsReconciler(mock_client).reconcile("555")

        assert result["related_product_ids"] == [PRODUCT_A, PRODUCT_B]
        assert result["unresolved_variant_ids"] == ["404"]

    @pytest.mark.asyncio
    async def test_invalid_variant_ids_never_reach_lookup(self, mock_client):
        """Entradas con sintaxis de búsqueda se omiten y no desplazan a las variantes válidas."""
        mock_client.products.get_related_products_source = AsyncMock(
            return_value='["111 OR title:shirt", "222", "gid://shopify/ProductVariant/333", "gid://shopify/Product/9"]'
        )
        mock_client.products.get_variants_parent_products = AsyncMock(
            return_value={"222": PRODUCT_A, "333": PRODUCT_B}
        )

        result = await RelatedProductsReconciler(mock_client).reconcile("555")

        mock_client.products.get_variants_parent_products.assert_awaited_once_with(
            ["222", "gid://shopify/ProductVariant/333"]
        )
        assert result["related_product_ids"] == [PRODUCT_A, PRODUCT_B]
        assert result["invalid_variant_ids"] == ["111 OR title:shirt", "gid://shopify/Product/9"]

    @pytest.mark.asyncio
    async def test_all_unresolved_still_replaces_value(self, mock_client):
        """Si ninguna variante resuelve se escribe la lista vacía (reemplazo completo)."""
        mock_client.products.get_related_products_source = AsyncMock(return_value='["404"]')

        await RelatedProductsReconciler(mock_client).reconcile("555")

        mock_client.products.set_metafields.assert_awaited_once_with([build_related_products_metafield("555", [])])

    @pytest.mark.asyncio
    async def test_user_errors_are_reported(self, mock_client):
        mock_client.products.get_related_products_source = AsyncMock(return_value='["1"]')
        mock_client.products.get_variants_parent_products = AsyncMock(return_value={"1": PRODUCT_A})
        mock_client.products.set_metafields = AsyncMock(
            return_value={"metafields": [], "userErrors": [{"field": ["metafields", "0", "value"], "message": "bad"}]}
        )

        result = await RelatedProductsReconciler(mock_client).reconcile("555")

        assert result["status"] == "error"
        assert result["user_errors"][0]["message"] == "bad"

    @pytest.mark.asyncio
    async def test_api_failure_never_raises(self, mock_client):
        mock_client.products.get_related_products_source = AsyncMock(side_effect=ShopifyAPIException("HTTP 500"))

        result = await RelatedProductsReconciler(mock_client).reconcile("555")

        assert result["status"] == "error"
        mock_client.products.set_metafields.assert_not_called()

    @pytest.mark.asyncio
    async def test_idempotent_writes(self, mock_client):
        """Dos ejecuciones con los mismos datos escriben el mismo valor."""
        mock_client.products.get_related_products_source = AsyncMock(return_value='["1,2"]')
        mock_client.products.get_variants_parent_products = AsyncMock(return_value={"1": PRODUCT_A, "2": PRODUCT_B})
        reconciler = RelatedProductsReconciler(mock_client)

        await reconciler.reconcile("555")
        await reconciler.reconcile("555")

        first, second = mock_client.products.set_metafields.await_args_list
        assert first == second
