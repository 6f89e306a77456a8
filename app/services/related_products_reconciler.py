"""
Sincronización de productos relacionados.

Lee la lista curada de variantes relacionadas del metafield
``custom.related_products_from_volo``, la traduce a productos padre y la
escribe en el metafield de recomendaciones de Shopify
(``shopify--discovery--product_recommendation.related_products``).
"""

import json
import logging
from typing import Any, Dict, List

from app.db.shopify_clients import ShopifyGraphQLClient
from app.utils.error_handler import ErrorCode, ValidationException, format_user_errors, log_error
from app.utils.id_utils import is_variant_id, product_gid, variant_rest_id

logger = logging.getLogger(__name__)

RELATED_PRODUCTS_NAMESPACE = "shopify--discovery--product_recommendation"
RELATED_PRODUCTS_KEY = "related_products"
RELATED_PRODUCTS_TYPE = "list.product_reference"


def parse_related_variant_ids(raw_value: str) -> List[str]:
    """
    Interpreta el metafield curado como lista plana de IDs de variante.

    El valor es una lista JSON de grupos separados por comas, por ejemplo
    ``["111,222", "333"]``. Se conserva el orden y los duplicados.

    Args:
        raw_value: Valor crudo del metafield

    Returns:
        List[str]: IDs de variante en orden de aparición

    Raises:
        ValidationException: Si el valor no es una lista JSON de textos
    """
    try:
        groups = json.loads(raw_value)
    except (TypeError, json.JSONDecodeError) as e:
        raise ValidationException(
            message=f"Related products metafield is not valid JSON: {e}",
            field="custom.related_products_from_volo",
            invalid_value=raw_value,
            expected_format='["id,id", "id"]',
            error_code=ErrorCode.INVALID_METAFIELD_VALUE,
        ) from e

    if not isinstance(groups, list):
        raise ValidationException(
            message="Related products metafield must be a JSON list",
            field="custom.related_products_from_volo",
            invalid_value=raw_value,
            expected_format='["id,id", "id"]',
            error_code=ErrorCode.INVALID_METAFIELD_VALUE,
        )

    variant_ids = []
    for group in groups:
        if isinstance(group, bool) or not isinstance(group, (str, int)):
            raise ValidationException(
                message=f"Unexpected related products entry: {group!r}",
                field="custom.related_products_from_volo",
                invalid_value=raw_value,
                error_code=ErrorCode.INVALID_METAFIELD_VALUE,
            )
        variant_ids.extend(part.strip() for part in str(group).split(",") if part.strip())

    return variant_ids


def build_related_products_metafield(product_id: str, related_product_ids: List[str]) -> Dict[str, Any]:
    """
    Construye el MetafieldsSetInput del campo de recomendaciones.

    Args:
        product_id: Producto dueño del metafield
        related_product_ids: IDs GraphQL de productos relacionados

    Returns:
        Dict: Input para metafieldsSet
    """
    return {
        "ownerId": product_gid(product_id),
        "namespace": RELATED_PRODUCTS_NAMESPACE,
        "key": RELATED_PRODUCTS_KEY,
        "type": RELATED_PRODUCTS_TYPE,
        "value": json.dumps(related_product_ids),
    }


class RelatedProductsReconciler:
    """
    Escribe el metafield de productos relacionados a partir de la lista curada.

    El metafield de salida pertenece por completo a este proceso: cada
    ejecución reemplaza el valor anterior.
    """

    def __init__(self, client: ShopifyGraphQLClient):
        """
        Args:
            client: Cliente GraphQL ya inicializado para el tenant del evento
        """
        self.client = client

    async def reconcile(self, product_id: str) -> Dict[str, Any]:
        """
        Sincroniza los productos relacionados de un producto.

        Nunca lanza excepciones: los errores se registran en el log.

        Args:
            product_id: ID numérico del producto

        Returns:
            Dict: Resumen de la ejecución
        """
        try:
            return await self._reconcile(product_id)
        except Exception as e:
            log_error(e, {"product_id": product_id, "operation": "related_products"})
            logger.error(f"❌ Related products sync failed for product {product_id}: {e}")
            return {"status": "error", "product_id": product_id, "error": str(e)}

    async def _reconcile(self, product_id: str) -> Dict[str, Any]:
        raw_value = await self.client.products.get_related_products_source(product_id)
        if not raw_value or not raw_value.strip():
            logger.debug(f"Product {product_id} has no curated related products")
            return {"status": "skipped", "product_id": product_id, "reason": "no related products source"}

        variant_ids = parse_related_variant_ids(raw_value)
        if not variant_ids:
            logger.debug(f"Product {product_id} curated related products list is empty")
            return {"status": "skipped", "product_id": product_id, "reason": "empty related products source"}

        # Solo IDs numéricos o gid de ProductVariant llegan a la búsqueda de Shopify
        invalid = [variant_id for variant_id in variant_ids if not is_variant_id(variant_id)]
        if invalid:
            logger.warning(
                f"Product {product_id}: skipping {len(invalid)} invalid related variant IDs: {invalid}",
                extra={"product_id": product_id, "error_code": ErrorCode.INVALID_METAFIELD_VALUE.value},
            )
            variant_ids = [variant_id for variant_id in variant_ids if is_variant_id(variant_id)]

        parents = await self.client.products.get_variants_parent_products(variant_ids)

        # Un producto por variante resuelta, en el orden de la lista curada (sin deduplicar)
        related_product_ids = []
        unresolved = []
        for variant_id in variant_ids:
            parent_id = parents.get(variant_rest_id(variant_id))
            if parent_id:
                related_product_ids.append(parent_id)
            else:
                unresolved.append(variant_id)

        if unresolved:
            logger.warning(f"Product {product_id}: {len(unresolved)} related variants not found: {unresolved}")

        result = await self.client.products.set_metafields(
            [build_related_products_metafield(product_id, related_product_ids)]
        )

        user_errors = result.get("userErrors") or []
        if user_errors:
            logger.error(
                f"Related products update for product {product_id} returned user errors: "
                f"{format_user_errors(user_errors)}",
                extra={"product_id": product_id, "user_errors": user_errors},
            )
            return {"status": "error", "product_id": product_id, "user_errors": user_errors}

        logger.info(f"✅ Related products updated for product {product_id}: {len(related_product_ids)} products")
        return {
            "status": "success",
            "product_id": product_id,
            "related_product_ids": related_product_ids,
            "unresolved_variant_ids": unresolved,
            "invalid_variant_ids": invalid,
        }
