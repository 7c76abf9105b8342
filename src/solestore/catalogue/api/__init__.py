"""Catalogue API package."""

from solestore.catalogue.api.routes import product_router

__all__ = ["product_router"]
