"""
Domain models for business entities.

These models represent core business concepts and contain
business logic and invariants.
"""

from .product_update_event import ProductUpdateEvent
from .tenant import Tenant

__all__ = ["Tenant", "ProductUpdateEvent"]
