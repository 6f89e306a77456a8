"""
Sistema de manejo de errores personalizado.

Este módulo define todas las excepciones personalizadas de la aplicación
y proporciona utilidades para manejo consistente de errores.
"""

import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """
    Códigos de error estandardizados para la aplicación.
    """

    # Errores generales
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Errores de Shopify
    SHOPIFY_API_ERROR = "SHOPIFY_API_ERROR"

    # Errores de webhooks
    INVALID_WEBHOOK_SIGNATURE = "INVALID_WEBHOOK_SIGNATURE"
    UNKNOWN_SHOP_DOMAIN = "UNKNOWN_SHOP_DOMAIN"
    INVALID_WEBHOOK_PAYLOAD = "INVALID_WEBHOOK_PAYLOAD"

    # Errores de reconciliación
    INVALID_METAFIELD_VALUE = "INVALID_METAFIELD_VALUE"


class ErrorSeverity(Enum):
    """
    Niveles de severidad para errores.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AppException(Exception):
    """
    Excepción base para todas las excepciones personalizadas de la aplicación.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    ):
        """
        Inicializa la excepción.

        Args:
            message: Mensaje de error
            error_code: Código de error estandardizado
            details: Información adicional del error
            status_code: Código HTTP asociado
            severity: Severidad del error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.severity = severity
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convierte la excepción a diccionario.

        Returns:
            Dict: Representación de la excepción
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "details": self.details,
            "status_code": self.status_code,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        """String representation del error."""
        return f"{self.error_code.value}: {self.message}"


class ConfigurationException(AppException):
    """
    Excepción para configuración inválida (variables de entorno, tenants).
    """

    def __init__(self, message: str, setting: str, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            status_code=500,
            severity=ErrorSeverity.CRITICAL,
            **kwargs,
        )
        self.setting = setting
        self.details.update({"setting": setting})


class ValidationException(AppException):
    """
    Excepción para errores de validación de datos.
    """

    def __init__(
        self,
        message: str,
        field: str,
        invalid_value: Any = None,
        expected_format: Optional[str] = None,
        **kwargs,
    ):
        """
        Inicializa la excepción de validación.

        Args:
            message: Mensaje de error
            field: Campo que falló la validación
            invalid_value: Valor que causó el error
            expected_format: Formato esperado
            **kwargs: Argumentos adicionales para AppException
        """
        kwargs.setdefault("error_code", ErrorCode.VALIDATION_ERROR)
        kwargs.setdefault("status_code", 422)
        super().__init__(
            message=message,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field = field
        self.invalid_value = invalid_value
        self.expected_format = expected_format

        self.details.update(
            {
                "field": field,
                "invalid_value": str(invalid_value)[:200] if invalid_value is not None else None,
                "expected_format": expected_format,
            }
        )


class WebhookAuthenticationException(AppException):
    """
    Excepción para webhooks rechazados (firma inválida o tienda desconocida).

    El mensaje y los detalles nunca incluyen secretos ni firmas.
    """

    def __init__(
        self,
        message: str,
        shop_domain: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.INVALID_WEBHOOK_SIGNATURE,
        **kwargs,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=401,
            severity=ErrorSeverity.MEDIUM,
            **kwargs,
        )
        self.shop_domain = shop_domain
        self.details.update({"shop_domain": shop_domain})


class MalformedWebhookException(AppException):
    """
    Excepción para webhooks autenticados cuyo cuerpo no se puede interpretar.
    """

    def __init__(self, message: str, shop_domain: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_WEBHOOK_PAYLOAD,
            status_code=500,
            severity=ErrorSeverity.MEDIUM,
            **kwargs,
        )
        self.shop_domain = shop_domain
        self.details.update({"shop_domain": shop_domain})


class ShopifyAPIException(AppException):
    """
    Excepción para errores de la API de Shopify.
    """

    def __init__(
        self,
        message: str,
        api_response_code: Optional[int] = None,
        shop_domain: Optional[str] = None,
        **kwargs,
    ):
        """
        Inicializa la excepción de Shopify API.

        Args:
            message: Mensaje de error
            api_response_code: Código de respuesta de Shopify
            shop_domain: Tienda contra la que se ejecutó la operación
            **kwargs: Argumentos adicionales para AppException
        """
        severity = ErrorSeverity.MEDIUM
        if api_response_code and api_response_code >= 500:
            severity = ErrorSeverity.HIGH

        super().__init__(
            message=message,
            error_code=ErrorCode.SHOPIFY_API_ERROR,
            status_code=502,
            severity=severity,
            **kwargs,
        )

        self.api_response_code = api_response_code
        self.shop_domain = shop_domain

        self.details.update(
            {
                "api_response_code": api_response_code,
                "shop_domain": shop_domain,
            }
        )


# === FUNCIONES DE UTILIDAD ===


def format_user_errors(user_errors: Optional[List[Dict[str, Any]]]) -> str:
    """
    Formatea los userErrors de una mutación GraphQL para logging.

    Args:
        user_errors: Lista de errores ({field, message})

    Returns:
        str: Errores en formato "campo: mensaje", separados por coma
    """
    messages = []
    for error in user_errors or []:
        field = error.get("field") or []
        if isinstance(field, str):
            field = [field]
        field_str = ".".join(str(part) for part in field) if field else "general"
        messages.append(f"{field_str}: {error.get('message', 'Unknown error')}")
    return ", ".join(messages)


def log_error(
    exception: Exception,
    context: Optional[Dict[str, Any]] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Loggea un error de manera consistente.

    Args:
        exception: Excepción a loggear
        context: Contexto adicional
        level: Nivel de logging
    """
    context = context or {}

    log_data = {
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
        "traceback": "".join(traceback.format_exception(type(exception), exception, exception.__traceback__)),
        **context,
    }

    if isinstance(exception, AppException):
        message = f"{exception.error_code.value}: {exception.message}"
        log_data.update(
            {
                "error_code": exception.error_code.value,
                "severity": exception.severity.value,
            }
        )
    else:
        message = f"Unhandled exception: {type(exception).__name__}: {str(exception)}"

    logger.log(level, message, extra=log_data)
