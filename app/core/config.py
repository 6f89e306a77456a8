"""
Configuración centralizada de la aplicación.

Este módulo maneja todas las variables de entorno y configuraciones
de la aplicación usando Pydantic Settings para validación automática.
"""

import json
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from app.domain.models import Tenant
from app.utils.error_handler import ConfigurationException


class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic Settings.

    Todas las configuraciones se cargan desde variables de entorno
    con valores por defecto apropiados para desarrollo.
    """

    # === CONFIGURACIÓN BÁSICA DE LA APP ===
    APP_NAME: str = "Shopify Collection Sync"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development", validation_alias=AliasChoices("ENVIRONMENT", "ENV"))
    DEBUG: bool = False

    # === CONFIGURACIÓN DEL SERVIDOR ===
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # === CONFIGURACIÓN DE SHOPIFY ===
    SHOPIFY_API_VERSION: str = "2024-10"
    # JSON: {"tienda.myshopify.com": {"secret_key": "...", "access_token": "...", "related_products_enabled": true}}
    SHOPIFY_TENANTS: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    # === CONFIGURACIÓN DE WEBHOOKS ===
    API_BASE_URL: Optional[str] = None
    STAGING_URL: Optional[str] = None
    WEBHOOK_PATH: str = "/webhooks-filtered"
    REGISTER_WEBHOOKS_ON_STARTUP: bool = False

    # === CONFIGURACIÓN DE SEGURIDAD ===
    # Lista separada por comas (ej: "api.example.com,localhost")
    ALLOWED_HOSTS: Optional[str] = None

    # === CONFIGURACIÓN DE LOGGING ===
    LOG_FILE_PATH: Optional[str] = None
    LOG_MAX_SIZE_MB: int = 10
    LOG_BACKUP_COUNT: int = 5

    # === CONFIGURACIÓN DE DOCUMENTACIÓN ===
    ENABLE_DOCS: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "allow",
    }

    @field_validator("SHOPIFY_TENANTS", mode="before")
    @classmethod
    def parse_shopify_tenants(cls, v):
        """Acepta SHOPIFY_TENANTS como JSON en texto o como diccionario."""
        if v is None or v == "":
            return {}
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f"SHOPIFY_TENANTS debe ser un objeto JSON válido: {e}") from e
        if not isinstance(v, dict):
            raise ValueError("SHOPIFY_TENANTS debe ser un objeto JSON (dominio -> credenciales)")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Valida que el nivel de log sea válido."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL debe ser uno de: {valid_levels}")
        return v.upper()

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Valida que el entorno sea válido."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT debe ser uno de: {valid_envs}")
        return v.lower()

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v):
        """Valida que el puerto esté en rango válido."""
        if not 1 <= v <= 65535:
            raise ValueError("PORT debe estar entre 1 y 65535")
        return v

    @field_validator("WEBHOOK_PATH")
    @classmethod
    def validate_webhook_path(cls, v):
        if not v.startswith("/"):
            v = f"/{v}"
        return v

    @property
    def is_production(self) -> bool:
        """Verifica si está en entorno de producción."""
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        """Verifica si está en entorno de desarrollo."""
        return self.ENVIRONMENT == "development"

    @property
    def allowed_hosts(self) -> List[str]:
        """Hosts permitidos (lista vacía = sin restricción)."""
        if not self.ALLOWED_HOSTS:
            return []
        return [host.strip() for host in self.ALLOWED_HOSTS.split(",") if host.strip()]

    @property
    def tenants(self) -> Dict[str, Tenant]:
        """
        Construye la tabla de tenants (dominio -> credenciales).

        Returns:
            Dict[str, Tenant]: Tenants indexados por dominio exacto

        Raises:
            ConfigurationException: Si algún tenant no tiene credenciales completas
        """
        tenants = {}
        for shop_domain, credentials in self.SHOPIFY_TENANTS.items():
            if not isinstance(credentials, dict):
                raise ConfigurationException(
                    message=f"Credenciales inválidas para la tienda {shop_domain}",
                    setting="SHOPIFY_TENANTS",
                )

            secret_key = credentials.get("secret_key")
            access_token = credentials.get("access_token")
            missing = [
                name for name, value in (("secret_key", secret_key), ("access_token", access_token)) if not value
            ]
            if missing:
                raise ConfigurationException(
                    message=f"Faltan credenciales para la tienda {shop_domain}: {missing}",
                    setting="SHOPIFY_TENANTS",
                )

            tenants[shop_domain] = Tenant(
                shop_domain=shop_domain,
                secret_key=secret_key,
                access_token=access_token,
                related_products_enabled=bool(credentials.get("related_products_enabled", False)),
            )
        return tenants

    @property
    def webhook_base_url(self) -> Optional[str]:
        """URL pública del servicio según el entorno."""
        if self.is_production:
            base_url = self.API_BASE_URL
        else:
            base_url = self.STAGING_URL or self.API_BASE_URL
        return base_url.rstrip("/") if base_url else None

    @property
    def webhook_callback_url(self) -> Optional[str]:
        """URL completa que Shopify debe llamar para products/update."""
        base_url = self.webhook_base_url
        if not base_url:
            return None
        return f"{base_url}{self.WEBHOOK_PATH}"


@lru_cache()
def get_settings() -> Settings:
    """
    Obtiene la instancia de configuración (cached).

    Returns:
        Settings: Instancia de configuración
    """
    return Settings()


def get_shopify_graphql_url(shop_domain: str, api_version: Optional[str] = None) -> str:
    """
    Construye la URL del endpoint GraphQL Admin para una tienda.

    Args:
        shop_domain: Dominio de la tienda (ej: tienda.myshopify.com)
        api_version: Versión de la API (por defecto la configurada)

    Returns:
        str: URL del endpoint GraphQL
    """
    version = api_version or get_settings().SHOPIFY_API_VERSION
    shop_url = shop_domain
    if not shop_url.startswith(("http://", "https://")):
        shop_url = f"https://{shop_url}"
    return f"{shop_url.rstrip('/')}/admin/api/{version}/graphql.json"
