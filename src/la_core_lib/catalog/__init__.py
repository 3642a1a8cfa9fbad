"""Service Catalog Module

Category rules and service weights used to score case progress.
"""

from .service_catalog import (
    CatalogEntry,
    ServiceCatalog,
    load_service_catalog,
    get_service_catalog,
    reset_service_catalog,
)

__all__ = [
    "CatalogEntry",
    "ServiceCatalog",
    "load_service_catalog",
    "get_service_catalog",
    "reset_service_catalog",
]
