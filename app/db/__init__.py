"""
Módulo de acceso a Shopify para el servicio de sincronización.

- queries: documentos GraphQL agrupados por dominio
- shopify_clients: clientes GraphQL por tenant (colecciones, productos, webhooks)
"""

from app.db.shopify_clients import ShopifyGraphQLClient

__all__ = ["ShopifyGraphQLClient"]
