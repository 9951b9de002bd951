"""Service layer for orchestrating storage, scrapers and caching."""

from .catalog_service import (
    CatalogNotFoundError,
    CatalogService,
    CatalogValidationError,
    CategoryNotFoundError,
    ProductNotFoundError,
    ProductQuery,
    ShopInfoNotFoundError,
    UnknownCollectionError,
)
from .rate_service import RateService, UnknownSourceError

__all__ = [
    "CatalogNotFoundError",
    "CatalogService",
    "CatalogValidationError",
    "CategoryNotFoundError",
    "ProductNotFoundError",
    "ProductQuery",
    "RateService",
    "ShopInfoNotFoundError",
    "UnknownCollectionError",
    "UnknownSourceError",
]
