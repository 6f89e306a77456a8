"""
Configuración centralizada de routers para la aplicación FastAPI.

Este módulo registra el router de webhooks y los endpoints base
(info, ping y health check).
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.v1.endpoints.webhooks import router as webhooks_router
from app.core.config import get_settings
from app.services.tenant_resolver import get_tenant_resolver

logger = logging.getLogger(__name__)


def create_root_endpoints(app: FastAPI) -> None:
    """
    Crea endpoints raíz de la aplicación.

    Args:
        app: Instancia de FastAPI
    """

    @app.get("/", tags=["Root"], summary="API Info")
    async def root():
        """
        Endpoint raíz que proporciona información básica del servicio.
        """
        settings = get_settings()
        return {
            "message": settings.APP_NAME,
            "description": "Shopify products/update webhook receiver (collection order and related products sync)",
            "version": settings.APP_VERSION,
            "status": "running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": {
                "health": "/health",
                "webhooks": ["/webhooks-filtered", "/webhooks"],
            },
        }

    @app.get("/ping", tags=["Root"], summary="Simple Ping")
    async def ping():
        """
        Endpoint simple para verificar que la API responde.
        """
        return {"message": "pong", "timestamp": datetime.now(timezone.utc).isoformat()}


def create_health_endpoints(app: FastAPI) -> None:
    """
    Crea el endpoint de health check.

    Args:
        app: Instancia de FastAPI
    """

    @app.get("/health", tags=["Health"], summary="Health Check")
    async def health_check(request: Request):
        """
        Health check local: no llama a Shopify.

        Returns:
            JSONResponse: 200 si hay al menos un tenant configurado, 503 si no
        """
        settings = get_settings()
        try:
            tenant_count = len(get_tenant_resolver())
        except Exception as e:
            logger.error(f"Error in health check: {e}")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "error": str(e),
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "version": settings.APP_VERSION,
                },
            )

        started_at = getattr(request.app.state, "started_at", None)
        uptime = (datetime.now(timezone.utc) - started_at).total_seconds() if started_at else None

        return JSONResponse(
            status_code=200 if tenant_count else 503,
            content={
                "status": "healthy" if tenant_count else "unhealthy",
                "version": settings.APP_VERSION,
                "environment": settings.ENVIRONMENT,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "uptime": uptime,
                "tenants": tenant_count,
            },
        )


def configure_all_routers(app: FastAPI) -> None:
    """
    Configura todos los routers y endpoints de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configuring routers...")

    create_root_endpoints(app)
    create_health_endpoints(app)

    # Los webhooks van en la raíz: Shopify llama a /webhooks-filtered y /webhooks
    app.include_router(webhooks_router, tags=["Webhooks"])

    logger.info("✅ Routers configured")
