"""
Domain layer for the Shopify collection sync service.

This layer contains the immutable entities that flow through the
webhook gate and the reconciliation engine.
"""
