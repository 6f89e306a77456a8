"""
Despachador de eventos products/update.

Ejecuta las sincronizaciones de un evento ya verificado. Cada sincronización
corre dentro de su propio límite de errores: un fallo en una no impide la
otra, y el despachador nunca propaga excepciones.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List

from app.db.shopify_clients import ClientFactory, ShopifyGraphQLClient
from app.domain.models import ProductUpdateEvent, Tenant
from app.services.collection_order_reconciler import CollectionOrderReconciler
from app.services.related_products_reconciler import RelatedProductsReconciler
from app.utils.error_handler import log_error

logger = logging.getLogger(__name__)


class EventDispatcher:
    """
    Orquesta las sincronizaciones de un evento de producto.

    Note:
        No hay exclusión mutua por producto: dos eventos del mismo producto
        pueden procesarse en paralelo y gana la última escritura.
    """

    def __init__(self, client_factory: ClientFactory = ShopifyGraphQLClient):
        """
        Args:
            client_factory: Construye un cliente GraphQL para un tenant
        """
        self.client_factory = client_factory

    async def dispatch(self, event: ProductUpdateEvent, tenant: Tenant) -> Dict[str, Any]:
        """
        Procesa un evento de actualización de producto.

        Args:
            event: Evento verificado
            tenant: Tenant resuelto para el evento

        Returns:
            Dict: Resultado por sincronización; nunca lanza excepción
        """
        start_time = datetime.now(timezone.utc)
        context = {"shop_domain": tenant.shop_domain, "product_id": event.product_id}
        logger.info(f"Processing product update {event.product_id} from {tenant.shop_domain}", extra=context)

        results: Dict[str, Any] = {}
        try:
            async with self.client_factory(tenant) as client:
                steps: List[tuple] = [("collection_order", CollectionOrderReconciler(client).reconcile)]
                if tenant.related_products_enabled:
                    steps.append(("related_products", RelatedProductsReconciler(client).reconcile))

                outcomes = await asyncio.gather(
                    *(self._run_isolated(name, step, event.product_id, context) for name, step in steps)
                )
                results = dict(zip((name for name, _ in steps), outcomes))

        except Exception as e:
            log_error(e, {**context, "operation": "dispatch"})
            logger.error(f"❌ Dispatch failed for product {event.product_id} ({tenant.shop_domain}): {e}")
            results["dispatch"] = {"status": "error", "error": str(e)}

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(f"Product update {event.product_id} processed in {duration:.2f}s", extra=context)
        return results

    @staticmethod
    async def _run_isolated(
        name: str,
        step: Callable[[str], Awaitable[Dict[str, Any]]],
        product_id: str,
        context: Dict[str, Any],
    ) -> Dict[str, Any]:
        try:
            return await step(product_id)
        except Exception as e:
            log_error(e, {**context, "operation": name})
            logger.error(f"❌ {name} failed for product {product_id}: {e}")
            return {"status": "error", "error": str(e)}
