"""
Sincronización del orden manual de colecciones.

Cuando un producto cambia, se recorren sus colecciones personalizadas y se
reordenan sus productos según el metafield ``custom.product_order`` de cada
miembro. Solo se envía la mutación de reordenamiento cuando el orden
calculado difiere del orden actual.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from app.db.shopify_clients import ShopifyGraphQLClient
from app.utils.error_handler import format_user_errors, log_error

logger = logging.getLogger(__name__)


def parse_order_value(value: Any) -> float:
    """
    Convierte el valor del metafield de orden a número.

    Args:
        value: Valor crudo del metafield (texto numérico o None)

    Returns:
        float: Valor numérico; 0 si falta, no es numérico o no es finito
    """
    if value is None:
        return 0.0
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def compute_collection_moves(products: List[Dict[str, Any]]) -> Optional[List[Dict[str, str]]]:
    """
    Calcula los movimientos necesarios para dejar una colección en orden canónico.

    El orden canónico es un sort estable por valor de orden ascendente: los
    empates conservan el orden actual de la colección, así ejecuciones
    repetidas convergen al mismo resultado.

    Args:
        products: Miembros en el orden actual (``{"id", "order_value"}``)

    Returns:
        Optional[List]: Movimientos ``{"id", "newPosition"}`` (posiciones desde 1)
        para todos los miembros, o None si el orden ya es el correcto
    """
    desired = sorted(products, key=lambda product: parse_order_value(product.get("order_value")))

    current_ids = [product["id"] for product in products]
    desired_ids = [product["id"] for product in desired]
    if desired_ids == current_ids:
        return None

    return [{"id": product_id, "newPosition": str(position)} for position, product_id in enumerate(desired_ids, 1)]


class CollectionOrderReconciler:
    """
    Reordena las colecciones de un producto según ``custom.product_order``.
    """

    def __init__(self, client: ShopifyGraphQLClient):
        """
        Args:
            client: Cliente GraphQL ya inicializado para el tenant del evento
        """
        self.client = client

    async def reconcile(self, product_id: str) -> Dict[str, Any]:
        """
        Sincroniza el orden de todas las colecciones personalizadas del producto.

        Nunca lanza excepciones: los errores se registran en el log.

        Args:
            product_id: ID numérico del producto

        Returns:
            Dict: Resumen de la ejecución
        """
        summary: Dict[str, Any] = {
            "status": "success",
            "product_id": product_id,
            "collections_checked": 0,
            "collections_reordered": [],
            "collections_unchanged": [],
            "errors": [],
        }

        try:
            collections = await self.client.collections.get_product_collections(product_id)
        except Exception as e:
            log_error(e, {"product_id": product_id, "operation": "collection_order"})
            logger.error(f"❌ Collection order sync failed for product {product_id}: {e}")
            summary["status"] = "error"
            summary["errors"].append(str(e))
            return summary

        for collection in collections:
            summary["collections_checked"] += 1
            try:
                await self._reconcile_collection(collection, summary)
            except Exception as e:
                # Un error en una colección no detiene las demás
                logger.error(f"❌ Error reordering collection {collection.get('id')}: {e}")
                summary["errors"].append(f"{collection.get('id')}: {e}")

        if summary["errors"]:
            summary["status"] = "partial"

        logger.info(
            f"Collection order sync for product {product_id}: "
            f"{len(summary['collections_reordered'])} reordered, "
            f"{len(summary['collections_unchanged'])} unchanged, "
            f"{len(summary['errors'])} errors"
        )
        return summary

    async def _reconcile_collection(self, collection: Dict[str, Any], summary: Dict[str, Any]) -> None:
        collection_id = collection["id"]
        moves = compute_collection_moves(collection.get("products") or [])

        if moves is None:
            logger.debug(f"Collection {collection_id} already in order")
            summary["collections_unchanged"].append(collection_id)
            return

        result = await self.client.collections.reorder_collection_products(collection_id, moves)

        user_errors = result.get("userErrors") or []
        if user_errors:
            logger.error(
                f"Reorder of collection {collection_id} returned user errors: {format_user_errors(user_errors)}",
                extra={"collection_id": collection_id, "user_errors": user_errors},
            )
            summary["errors"].append(f"{collection_id}: {format_user_errors(user_errors)}")
            return

        job = result.get("job") or {}
        logger.info(
            f"✅ Reorder enqueued for collection '{collection.get('title')}' "
            f"({collection_id}): {len(moves)} moves, job {job.get('id')}"
        )
        summary["collections_reordered"].append(collection_id)
