"""
Resolución de tenants (tiendas) para webhooks entrantes.

Mapea el dominio enviado en X-Shopify-Shop-Domain al conjunto de
credenciales configurado al arrancar el proceso.
"""

import logging
from functools import lru_cache
from typing import Dict, List, Mapping, Optional

from app.core.config import get_settings
from app.domain.models import Tenant

logger = logging.getLogger(__name__)


class TenantResolver:
    """
    Búsqueda exacta dominio -> Tenant.

    No normaliza dominios, no descubre tiendas nuevas y nunca devuelve
    un tenant por defecto.
    """

    def __init__(self, tenants: Mapping[str, Tenant]):
        """
        Inicializa el resolver.

        Args:
            tenants: Tenants indexados por dominio exacto
        """
        self._tenants: Dict[str, Tenant] = dict(tenants)

    def resolve(self, shop_domain: Optional[str]) -> Optional[Tenant]:
        """
        Obtiene el tenant de un dominio.

        Args:
            shop_domain: Dominio recibido en el webhook

        Returns:
            Optional[Tenant]: Tenant configurado, o None si el dominio es desconocido
        """
        if not shop_domain:
            return None
        return self._tenants.get(shop_domain)

    @property
    def shop_domains(self) -> List[str]:
        return list(self._tenants)

    def __len__(self) -> int:
        return len(self._tenants)


@lru_cache()
def get_tenant_resolver() -> TenantResolver:
    """
    Construye el resolver a partir de la configuración (cached).

    Returns:
        TenantResolver: Resolver con los tenants de SHOPIFY_TENANTS
    """
    tenants = get_settings().tenants
    logger.info(f"Tenant resolver loaded with {len(tenants)} shop(s)")
    return TenantResolver(tenants)
