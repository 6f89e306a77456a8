"""
Registro de suscripciones de webhooks products/update.

Bootstrap que se ejecuta una sola vez al arrancar el proceso (lifespan o
``configure_webhooks.py``): por cada tenant elimina las suscripciones
PRODUCTS_UPDATE existentes de la app y crea una nueva apuntando a la URL
pública del servicio.
"""

import logging
from typing import Any, Dict, List, Optional

from app.core.config import Settings, get_settings
from app.db.shopify_clients import ClientFactory, ShopifyGraphQLClient
from app.domain.models import Tenant
from app.utils.error_handler import ConfigurationException, format_user_errors, log_error

logger = logging.getLogger(__name__)

PRODUCTS_UPDATE_TOPIC = "PRODUCTS_UPDATE"
# Webhook filtrado: solo lo necesario para identificar el producto
PRODUCTS_UPDATE_INCLUDE_FIELDS = ["id", "updated_at"]


async def register_product_update_webhook(
    tenant: Tenant,
    callback_url: str,
    client_factory: ClientFactory = ShopifyGraphQLClient,
    include_fields: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Reemplaza la suscripción products/update de un tenant.

    Args:
        tenant: Tienda a configurar
        callback_url: URL pública del endpoint de webhooks
        client_factory: Construye el cliente GraphQL del tenant
        include_fields: Campos incluidos en el payload

    Returns:
        Dict: Suscripciones eliminadas, suscripción creada y errores
    """
    result: Dict[str, Any] = {"shop_domain": tenant.shop_domain, "deleted": [], "created": None, "errors": []}

    async with client_factory(tenant) as client:
        existing = await client.webhooks.list_webhook_subscriptions(PRODUCTS_UPDATE_TOPIC)
        logger.info(f"📋 {tenant.shop_domain}: {len(existing)} existing {PRODUCTS_UPDATE_TOPIC} subscriptions")

        for subscription in existing:
            delete_result = await client.webhooks.delete_webhook_subscription(subscription["id"])
            if delete_result["userErrors"]:
                message = format_user_errors(delete_result["userErrors"])
                logger.error(f"❌ Error deleting subscription {subscription['id']}: {message}")
                result["errors"].append(message)
                continue
            result["deleted"].append(subscription["id"])

        create_result = await client.webhooks.create_webhook_subscription(
            PRODUCTS_UPDATE_TOPIC,
            callback_url,
            include_fields=include_fields or PRODUCTS_UPDATE_INCLUDE_FIELDS,
        )
        if create_result["userErrors"]:
            message = format_user_errors(create_result["userErrors"])
            logger.error(f"❌ Error creating {PRODUCTS_UPDATE_TOPIC} webhook for {tenant.shop_domain}: {message}")
            result["errors"].append(message)
        else:
            subscription = create_result["webhookSubscription"] or {}
            result["created"] = subscription.get("id")
            logger.info(f"✅ Webhook {PRODUCTS_UPDATE_TOPIC} registered for {tenant.shop_domain} → {callback_url}")

    return result


async def register_webhooks_for_all_tenants(
    settings: Optional[Settings] = None,
    client_factory: ClientFactory = ShopifyGraphQLClient,
) -> List[Dict[str, Any]]:
    """
    Registra el webhook products/update en todas las tiendas configuradas.

    Un fallo en una tienda se registra en el log y no impide las demás.

    Args:
        settings: Configuración (por defecto get_settings())
        client_factory: Construye el cliente GraphQL de cada tenant

    Returns:
        List[Dict]: Resultado por tienda

    Raises:
        ConfigurationException: Si no hay URL pública configurada
    """
    settings = settings or get_settings()
    callback_url = settings.webhook_callback_url
    if not callback_url:
        raise ConfigurationException(
            message="No public URL configured for webhooks (API_BASE_URL / STAGING_URL)",
            setting="API_BASE_URL",
        )

    logger.info(f"🔧 Registering webhooks ({settings.ENVIRONMENT}) → {callback_url}")

    results = []
    for tenant in settings.tenants.values():
        try:
            results.append(await register_product_update_webhook(tenant, callback_url, client_factory))
        except Exception as e:
            log_error(e, {"shop_domain": tenant.shop_domain, "operation": "webhook_registration"})
            results.append({"shop_domain": tenant.shop_domain, "deleted": [], "created": None, "errors": [str(e)]})

    return results
