"""
Gestión del ciclo de vida de la aplicación FastAPI.

Este módulo maneja los eventos de startup y shutdown de la aplicación:
configuración de logging, verificación de tenants y registro opcional
de los webhooks en Shopify.
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI

from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.services.tenant_resolver import get_tenant_resolver
from app.services.webhook_registration import register_webhooks_for_all_tenants

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gestión del ciclo de vida de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    # === STARTUP ===
    settings = get_settings()
    logger.info(f"🚀 Starting {settings.APP_NAME}...")

    try:
        # 1. Configurar logging
        await startup_configure_logging()

        # 2. Verificar configuración
        await startup_verify_configuration()

        # 3. Registrar webhooks (opcional)
        await startup_register_webhooks()

        app.state.started_at = datetime.now(timezone.utc)
        logger.info("🎉 Application started")

    except Exception as e:
        logger.error(f"❌ Error during startup: {e}")
        sys.exit(1)

    # === YIELD (aplicación corriendo) ===
    yield

    # === SHUTDOWN ===
    logger.info(f"🛑 Shutting down {settings.APP_NAME}...")
    logging.shutdown()


# === FUNCIONES DE STARTUP ===


async def startup_configure_logging():
    """Configura el sistema de logging."""
    try:
        setup_logging()
        logger.info("✅ Logging configured")
    except Exception as e:
        print(f"Error configuring logging: {e}")
        raise


async def startup_verify_configuration():
    """
    Verifica que la tabla de tenants sea válida.

    Raises:
        ConfigurationException: Si algún tenant tiene credenciales incompletas
    """
    settings = get_settings()
    resolver = get_tenant_resolver()

    if not len(resolver):
        logger.warning("⚠️ No tenants configured (SHOPIFY_TENANTS): every webhook will be rejected")
    else:
        logger.info(f"✅ Configuration verified - {len(resolver)} tenants: {resolver.shop_domains}")

    logger.info(f"Shopify API version: {settings.SHOPIFY_API_VERSION} - environment: {settings.ENVIRONMENT}")


async def startup_register_webhooks():
    """
    Registra los webhooks products/update si REGISTER_WEBHOOKS_ON_STARTUP está activo.

    Un error de registro no detiene la aplicación.
    """
    settings = get_settings()
    if not settings.REGISTER_WEBHOOKS_ON_STARTUP:
        logger.info("Webhook registration on startup disabled")
        return

    try:
        results = await register_webhooks_for_all_tenants(settings)
        failed = [result["shop_domain"] for result in results if result["errors"]]
        if failed:
            logger.warning(f"⚠️ Webhook registration finished with errors for: {failed}")
        else:
            logger.info(f"✅ Webhooks registered for {len(results)} tenants")
    except Exception as e:
        logger.error(f"❌ Webhook registration failed: {e}")
