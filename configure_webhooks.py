#!/usr/bin/env python3
"""
Script para configurar los webhooks products/update en Shopify.

Para cada tienda de SHOPIFY_TENANTS elimina las suscripciones
PRODUCTS_UPDATE existentes y crea una nueva apuntando a
API_BASE_URL (producción) o STAGING_URL (resto de entornos).
"""

import asyncio
import sys

from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.services.webhook_registration import register_webhooks_for_all_tenants


async def main() -> int:
    """
    Función principal para configurar webhooks.

    Returns:
        int: Código de salida (0 si todas las tiendas quedaron configuradas)
    """
    settings = get_settings()
    setup_logging()

    print(f"🔧 Configuring Shopify webhooks ({settings.ENVIRONMENT})...")
    print(f"Callback URL: {settings.webhook_callback_url}")
    print(f"API Version: {settings.SHOPIFY_API_VERSION}")

    results = await register_webhooks_for_all_tenants(settings)

    failed = 0
    for result in results:
        if result["errors"]:
            failed += 1
            print(f"❌ {result['shop_domain']}: {'; '.join(result['errors'])}")
        else:
            print(
                f"✅ {result['shop_domain']}: created {result['created']} "
                f"(removed {len(result['deleted'])} previous subscriptions)"
            )

    print(f"\n✨ Done: {len(results) - failed}/{len(results)} stores configured")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
