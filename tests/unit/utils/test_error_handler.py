"""Tests unitarios para las excepciones y utilidades de errores."""

import pytest

from app.utils.error_handler import (
    ConfigurationException,
    ErrorCode,
    MalformedWebhookException,
    ShopifyAPIException,
    WebhookAuthenticationException,
    format_user_errors,
)


class TestErrorCodes:
    def test_only_codes_in_use_are_defined(self):
        """Cada código corresponde a un error que la aplicación puede producir."""
        assert {code.name for code in ErrorCode} == {
            "UNKNOWN_ERROR",
            "VALIDATION_ERROR",
            "CONFIGURATION_ERROR",
            "SHOPIFY_API_ERROR",
            "INVALID_WEBHOOK_SIGNATURE",
            "UNKNOWN_SHOP_DOMAIN",
            "INVALID_WEBHOOK_PAYLOAD",
            "INVALID_METAFIELD_VALUE",
        }

    @pytest.mark.parametrize(
        "exception, status_code, error_code",
        [
            (WebhookAuthenticationException("bad signature"), 401, ErrorCode.INVALID_WEBHOOK_SIGNATURE),
            (MalformedWebhookException("bad body"), 500, ErrorCode.INVALID_WEBHOOK_PAYLOAD),
            (ShopifyAPIException("HTTP 502", api_response_code=502), 502, ErrorCode.SHOPIFY_API_ERROR),
            (ConfigurationException("bad tenants", setting="SHOPIFY_TENANTS"), 500, ErrorCode.CONFIGURATION_ERROR),
        ],
    )
    def test_exception_status_and_code(self, exception, status_code, error_code):
        assert exception.status_code == status_code
        assert exception.error_code == error_code


class TestFormatUserErrors:
    def test_field_path_and_message(self):
        errors = [
            {"field": ["moves", "0", "newPosition"], "message": "is invalid"},
            {"field": None, "message": "Collection is not manually sorted"},
        ]

        assert format_user_errors(errors) == (
            "moves.0.newPosition: is invalid, general: Collection is not manually sorted"
        )

    def test_empty(self):
        assert format_user_errors(None) == ""
