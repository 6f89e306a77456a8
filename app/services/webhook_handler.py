"""
Manejador de webhooks de Shopify.

Este módulo contiene la puerta de autenticación de los webhooks
(verificación HMAC por tenant) y la validación de la request entrante.
"""

import base64
import hashlib
import hmac
import json
import logging
from typing import Optional, Tuple

from fastapi import Request

from app.core.logging_config import log_webhook_received
from app.domain.models import ProductUpdateEvent, Tenant
from app.services.tenant_resolver import TenantResolver
from app.utils.error_handler import ErrorCode, MalformedWebhookException, WebhookAuthenticationException

logger = logging.getLogger(__name__)

HMAC_HEADER = "X-Shopify-Hmac-Sha256"
SHOP_DOMAIN_HEADER = "X-Shopify-Shop-Domain"
TOPIC_HEADER = "X-Shopify-Topic"
WEBHOOK_ID_HEADER = "X-Shopify-Webhook-Id"


def verify_webhook_signature(raw_body: bytes, signature_header: Optional[str], secret: Optional[str]) -> bool:
    """
    Verifica la firma HMAC del webhook.

    La firma esperada es base64(HMAC-SHA256(secret, raw_body)) calculada sobre
    los bytes exactos del cuerpo. La comparación es de tiempo constante.

    Args:
        raw_body: Cuerpo de la request en bytes, sin re-serializar
        signature_header: Valor del header X-Shopify-Hmac-Sha256
        secret: Secreto del tenant (None si el tenant no existe)

    Returns:
        bool: True solo si la firma coincide; nunca lanza excepción
    """
    if not secret or not signature_header or not isinstance(signature_header, str):
        return False
    if not isinstance(raw_body, (bytes, bytearray)):
        return False

    try:
        received_signature = signature_header.encode("ascii")
    except UnicodeEncodeError:
        return False

    digest = hmac.new(secret.encode("utf-8"), bytes(raw_body), hashlib.sha256).digest()
    expected_signature = base64.b64encode(digest)

    # Comparación segura contra timing attacks
    return hmac.compare_digest(expected_signature, received_signature)


async def validate_webhook_request(request: Request, resolver: TenantResolver) -> Tuple[Tenant, ProductUpdateEvent]:
    """
    Valida una request de webhook products/update.

    Args:
        request: Request de FastAPI
        resolver: Resolver de tenants

    Returns:
        Tuple: (tenant, evento)

    Raises:
        WebhookAuthenticationException: Tienda desconocida o firma inválida (401)
        MalformedWebhookException: Cuerpo no JSON o sin id de producto (500)
    """
    shop_domain = request.headers.get(SHOP_DOMAIN_HEADER)
    signature = request.headers.get(HMAC_HEADER)

    tenant = resolver.resolve(shop_domain)
    if tenant is None:
        logger.warning(f"Webhook rejected: unknown shop domain '{shop_domain}'")
        raise WebhookAuthenticationException(
            message="Unknown shop domain",
            shop_domain=shop_domain,
            error_code=ErrorCode.UNKNOWN_SHOP_DOMAIN,
        )

    # Bytes exactos para la verificación, sin pasar por JSON
    payload_bytes = await request.body()

    if not verify_webhook_signature(payload_bytes, signature, tenant.secret_key):
        logger.warning(f"Webhook rejected: invalid signature from {shop_domain}")
        raise WebhookAuthenticationException(message="Invalid webhook signature", shop_domain=shop_domain)

    try:
        payload = json.loads(payload_bytes.decode("utf-8"))
        event = ProductUpdateEvent.from_payload(payload, shop_domain)
    except (UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
        logger.error(f"Invalid webhook payload from {shop_domain}: {e!r}")
        raise MalformedWebhookException(message=f"Invalid webhook payload: {str(e)}", shop_domain=shop_domain) from e

    log_webhook_received(
        request.headers.get(TOPIC_HEADER, "products/update"),
        shop_domain,
        product_id=event.product_id,
        webhook_id=request.headers.get(WEBHOOK_ID_HEADER),
    )
    return tenant, event
