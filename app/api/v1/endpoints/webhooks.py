"""
Endpoints para webhooks de Shopify.

Este módulo define el endpoint que recibe los webhooks products/update,
los autentica y delega la sincronización a una tarea en background.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import JSONResponse

from app.domain.models import ProductUpdateEvent, Tenant
from app.services.event_dispatcher import EventDispatcher
from app.services.tenant_resolver import TenantResolver, get_tenant_resolver
from app.services.webhook_handler import WEBHOOK_ID_HEADER, validate_webhook_request

logger = logging.getLogger(__name__)

# Crear router
router = APIRouter()


def get_event_dispatcher() -> EventDispatcher:
    """Dependencia: despachador de eventos de producto."""
    return EventDispatcher()


async def receive_product_update_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    resolver: TenantResolver = Depends(get_tenant_resolver),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
) -> JSONResponse:
    """
    Endpoint para recibir webhooks products/update de Shopify.

    Responde antes de sincronizar: la sincronización corre en background y
    sus errores nunca llegan a Shopify.

    Args:
        request: Request HTTP con el webhook
        background_tasks: Tareas en background
        resolver: Resolver de tenants
        dispatcher: Despachador de eventos

    Returns:
        JSONResponse: 200 si el webhook fue aceptado

    Raises:
        WebhookAuthenticationException: 401 (tienda desconocida o firma inválida)
        MalformedWebhookException: 500 (cuerpo inválido)
    """
    tenant, event = await validate_webhook_request(request, resolver)

    background_tasks.add_task(process_product_update_background, dispatcher, event, tenant)

    return JSONResponse(
        status_code=200,
        content={
            "received": True,
            "product_id": event.product_id,
            "webhook_id": request.headers.get(WEBHOOK_ID_HEADER),
            "processing": "background",
        },
    )


# Misma lógica en ambas rutas (la versión filtrada y la clásica)
router.add_api_route(
    "/webhooks-filtered",
    receive_product_update_webhook,
    methods=["POST"],
    status_code=status.HTTP_200_OK,
    summary="Product update webhook (filtered)",
)
router.add_api_route(
    "/webhooks",
    receive_product_update_webhook,
    methods=["POST"],
    status_code=status.HTTP_200_OK,
    summary="Product update webhook",
)


async def process_product_update_background(
    dispatcher: EventDispatcher, event: ProductUpdateEvent, tenant: Tenant
) -> Dict[str, Any]:
    """
    Procesa un evento de producto en background.

    Args:
        dispatcher: Despachador de eventos
        event: Evento verificado
        tenant: Tenant del evento

    Returns:
        Dict: Resultado del despacho (nunca lanza excepción)
    """
    try:
        result = await dispatcher.dispatch(event, tenant)
        logger.info(f"Background product update processing completed: {result}")
        return result

    except Exception as e:
        # El despachador ya aísla errores; este es el último límite antes del event loop
        logger.error(f"Background product update processing failed: {e}")
        return {"status": "error", "error": str(e)}
