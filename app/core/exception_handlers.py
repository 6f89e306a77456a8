"""
Manejadores de excepciones centralizados para la aplicación FastAPI.

Este módulo define los manejadores de excepciones personalizados y globales,
proporcionando respuestas consistentes y logging apropiado para cada tipo de error.
"""

import logging
import traceback
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.utils.error_handler import (
    AppException,
    MalformedWebhookException,
    WebhookAuthenticationException,
)

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Manejador para excepciones personalizadas de la aplicación.

    Args:
        request: Request de FastAPI
        exc: Excepción personalizada de la app

    Returns:
        JSONResponse: Respuesta JSON con error formateado
    """
    logger.error(
        f"App Exception: {exc.message} - "
        f"Code: {exc.error_code.value} - "
        f"URL: {request.url.path} - "
        f"Details: {exc.details}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "error_type": "application_error",
            "error_code": exc.error_code.value,
            "message": exc.message,
            "details": exc.details if get_settings().DEBUG else None,
            "path": str(request.url.path),
            "timestamp": _timestamp(),
            "request_id": request.headers.get("X-Request-ID"),
        },
    )


async def webhook_authentication_exception_handler(
    request: Request, exc: WebhookAuthenticationException
) -> JSONResponse:
    """
    Manejador para webhooks rechazados por autenticación.

    La respuesta no revela si falló la tienda o la firma.

    Args:
        request: Request de FastAPI
        exc: Excepción de autenticación

    Returns:
        JSONResponse: 401 sin detalles
    """
    logger.warning(
        f"Webhook rejected: {exc.message} - "
        f"Code: {exc.error_code.value} - "
        f"Shop: {exc.shop_domain} - "
        f"URL: {request.url.path}"
    )

    return JSONResponse(
        status_code=401,
        content={
            "error": True,
            "error_type": "authentication_error",
            "message": "Unauthorized",
            "path": str(request.url.path),
            "timestamp": _timestamp(),
        },
    )


async def malformed_webhook_exception_handler(request: Request, exc: MalformedWebhookException) -> JSONResponse:
    """
    Manejador para webhooks autenticados con cuerpo inválido.

    Args:
        request: Request de FastAPI
        exc: Excepción de payload inválido

    Returns:
        JSONResponse: 500 (Shopify reintentará la entrega)
    """
    logger.error(f"Malformed webhook from {exc.shop_domain}: {exc.message} - URL: {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "error": True,
            "error_type": "malformed_webhook",
            "error_code": exc.error_code.value,
            "message": "Could not process webhook body",
            "path": str(request.url.path),
            "timestamp": _timestamp(),
        },
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Manejador para HTTPException estándar de FastAPI.

    Args:
        request: Request de FastAPI
        exc: HTTPException

    Returns:
        JSONResponse: Respuesta JSON estandarizada
    """
    logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail} - URL: {request.url.path}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "error_type": "http_error",
            "status_code": exc.status_code,
            "message": exc.detail,
            "path": str(request.url.path),
            "timestamp": _timestamp(),
            "request_id": request.headers.get("X-Request-ID"),
        },
    )


async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Manejador para HTTPException de Starlette (404, 405...).
    """
    logger.warning(f"Starlette HTTP Exception: {exc.status_code} - {exc.detail} - URL: {request.url.path}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "error_type": "http_error",
            "status_code": exc.status_code,
            "message": exc.detail,
            "path": str(request.url.path),
            "timestamp": _timestamp(),
            "request_id": request.headers.get("X-Request-ID"),
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Manejador global para excepciones no capturadas.

    Args:
        request: Request de FastAPI
        exc: Excepción no manejada

    Returns:
        JSONResponse: Respuesta JSON de error interno
    """
    settings = get_settings()
    logger.error(
        f"Unhandled Exception: {str(exc)} - "
        f"Type: {type(exc).__name__} - "
        f"URL: {request.url.path} - "
        f"Traceback: {traceback.format_exc()}"
    )

    # Respuesta genérica (sin exponer detalles internos)
    error_message = "Internal server error occurred"
    if settings.DEBUG:
        error_message = f"{type(exc).__name__}: {str(exc)}"

    return JSONResponse(
        status_code=500,
        content={
            "error": True,
            "error_type": "internal_server_error",
            "message": error_message,
            "path": str(request.url.path),
            "timestamp": _timestamp(),
            "request_id": request.headers.get("X-Request-ID"),
        },
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Configura todos los manejadores de excepciones de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configuring exception handlers...")

    # Manejadores específicos (orden de especificidad)
    app.add_exception_handler(WebhookAuthenticationException, webhook_authentication_exception_handler)
    app.add_exception_handler(MalformedWebhookException, malformed_webhook_exception_handler)
    app.add_exception_handler(AppException, app_exception_handler)

    # Manejadores HTTP estándar
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, starlette_http_exception_handler)

    # Manejador global (debe ser el último)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("✅ Exception handlers configured")
