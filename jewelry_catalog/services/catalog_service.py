"""Application service for catalog reads, writes and product listing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import logging

from pymongo.errors import DuplicateKeyError

from jewelry_catalog.config import Config
from jewelry_catalog.mongo_manager import MongoManager
from jewelry_catalog.schemas import (
    CarouselImageCreate,
    CategoryCreate,
    ProductCreate,
    ShopInfoUpdate,
    ValidationError,
    validation_message,
)
from jewelry_catalog.storage import CatalogStorage

logger = logging.getLogger(__name__)

ATTRIBUTE_FILTERS = ("purity", "weight", "stone", "gender", "occasion")

SORT_OPTIONS = {
    "price-low": (lambda product: _price(product), False),
    "price-high": (lambda product: _price(product), True),
    "name-asc": (lambda product: str(product.get("name") or "").lower(), False),
    "name-desc": (lambda product: str(product.get("name") or "").lower(), True),
}

# collection slug -> storage method name
COLLECTIONS = {
    "new-arrivals": "get_new_arrivals",
    "trending": "get_trending_products",
    "exclusive": "get_exclusive_products",
}


class CatalogValidationError(ValueError):
    """Raised when a request body or query fails validation."""


class UnknownCollectionError(ValueError):
    """Raised when the caller asks for a collection that does not exist."""


class CatalogNotFoundError(LookupError):
    """Base class for lookups that found nothing."""


class ProductNotFoundError(CatalogNotFoundError):
    pass


class CategoryNotFoundError(CatalogNotFoundError):
    pass


class ShopInfoNotFoundError(CatalogNotFoundError):
    pass


def _price(product: Dict[str, Any]) -> float:
    try:
        return float(product.get("price") or 0)
    except (TypeError, ValueError):
        return 0.0


def _display_order(product: Dict[str, Any]) -> float:
    try:
        return float(product.get("displayOrder") or 0)
    except (TypeError, ValueError):
        return 0.0


def _parse_price(raw: Optional[str], name: str) -> Optional[float]:
    if raw is None or not str(raw).strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise CatalogValidationError(f"{name} must be a number, got '{raw}'") from exc


def _multi_value(args, name: str) -> List[str]:
    """Accept both ``?purity=22K&purity=18K`` and ``?purity=22K,18K``."""

    values: List[str] = []
    for raw in args.getlist(name):
        values.extend(part.strip() for part in raw.split(",") if part.strip())
    return values


@dataclass
class ProductQuery:
    """Listing options for :meth:`CatalogService.list_products`."""

    category: Optional[str] = None
    collection: Optional[str] = None
    search: str = ""
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    attributes: Dict[str, List[str]] = field(default_factory=dict)
    sort: str = "default"

    @classmethod
    def from_args(cls, args) -> "ProductQuery":
        """Build a query from request arguments (a werkzeug ``MultiDict``)."""

        category = (args.get("category") or "").strip()
        collection = (args.get("collection") or "").strip().lower()
        return cls(
            category=category if category and category != "all" else None,
            collection=collection or None,
            search=args.get("search") or "",
            min_price=_parse_price(args.get("minPrice"), "minPrice"),
            max_price=_parse_price(args.get("maxPrice"), "maxPrice"),
            attributes={name: _multi_value(args, name) for name in ATTRIBUTE_FILTERS},
            sort=(args.get("sort") or "default").strip().lower(),
        )


def filter_products(products: List[Dict[str, Any]], query: ProductQuery) -> List[Dict[str, Any]]:
    filtered = list(products)

    needle = query.search.strip().lower()
    if needle:
        filtered = [
            product
            for product in filtered
            if any(needle in str(product.get(key) or "").lower() for key in ("name", "description", "category"))
        ]

    if query.min_price is not None:
        filtered = [product for product in filtered if _price(product) >= query.min_price]
    if query.max_price is not None:
        filtered = [product for product in filtered if _price(product) <= query.max_price]

    for name, selected in query.attributes.items():
        if selected:
            filtered = [product for product in filtered if product.get(name) and str(product.get(name)) in selected]

    return filtered


def sort_products(products: List[Dict[str, Any]], sort: str) -> List[Dict[str, Any]]:
    key, reverse = SORT_OPTIONS.get(sort, (_display_order, False))
    return sorted(products, key=key, reverse=reverse)


class CatalogService:
    """Facade over :class:`CatalogStorage` used by both HTTP variants."""

    def __init__(
        self,
        storage: Optional[CatalogStorage] = None,
        mongo_manager: Optional[MongoManager] = None,
        collection_limit: Optional[int] = None,
    ) -> None:
        self._storage = storage
        self._mongo = mongo_manager or (MongoManager() if storage is None else None)
        self._collection_limit = collection_limit or Config.COLLECTION_LIMIT

    @property
    def storage(self) -> CatalogStorage:
        """Storage bound to the catalog database, connecting on first use."""

        if self._storage is None:
            self._storage = CatalogStorage(self._mongo.get_database())
        return self._storage

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    def list_categories(self) -> List[Dict]:
        return self.storage.get_categories()

    def get_category(self, slug: str) -> Dict:
        category = self.storage.get_category_by_slug(slug)
        if category is None:
            raise CategoryNotFoundError("Category not found")
        return category

    def create_category(self, body: Any) -> Dict:
        data = self._validate(CategoryCreate, body)
        try:
            category = self.storage.create_category(data)
        except DuplicateKeyError as exc:
            raise CatalogValidationError(f"Category slug '{data.get('slug')}' already exists") from exc
        logger.info("Created category '%s'", category.get("slug"))
        return category

    def update_category(self, slug: str, body: Any) -> Dict:
        self._require_object(body)
        try:
            category = self.storage.update_category(slug, body)
        except DuplicateKeyError as exc:
            raise CatalogValidationError(f"Category slug '{body.get('slug')}' already exists") from exc
        if category is None:
            raise CategoryNotFoundError("Category not found")
        return category

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    def list_products(self, query: Optional[ProductQuery] = None) -> List[Dict]:
        query = query or ProductQuery()

        if query.collection:
            products = self.list_collection(query.collection)
        else:
            products = self.storage.get_products(query.category)

        return sort_products(filter_products(products, query), query.sort)

    def list_collection(self, name: str) -> List[Dict]:
        method_name = COLLECTIONS.get(name)
        if method_name is None:
            raise UnknownCollectionError(
                f"Unknown collection '{name}'. Available collections: {list(COLLECTIONS.keys())}"
            )
        fetch: Callable[..., List[Dict]] = getattr(self.storage, method_name)
        return fetch(limit=self._collection_limit)

    def get_product(self, product_id: str) -> Dict:
        product = self.storage.get_product_by_id(product_id)
        if product is None:
            raise ProductNotFoundError("Product not found")
        return product

    def get_similar_products(self, product_id: str, limit: int = 4) -> List[Dict]:
        products = self.storage.get_similar_products(product_id, limit=limit)
        if products is None:
            raise ProductNotFoundError("Product not found")
        return products

    def create_product(self, body: Any) -> Dict:
        data = self._validate(ProductCreate, body)
        product = self.storage.create_product(data)
        logger.info("Created product %s (%s)", product.get("_id"), product.get("name"))
        return product

    def migrate_products(self) -> Dict:
        updated = self.storage.migrate_products()
        return {"message": "Products migrated successfully", "updated": updated}

    # ------------------------------------------------------------------
    # Carousel and shop info
    # ------------------------------------------------------------------
    def list_carousel_images(self) -> List[Dict]:
        return self.storage.get_carousel_images()

    def create_carousel_image(self, body: Any) -> Dict:
        return self.storage.create_carousel_image(self._validate(CarouselImageCreate, body))

    def get_shop_info(self) -> Dict:
        info = self.storage.get_shop_info()
        if info is None:
            raise ShopInfoNotFoundError("Shop info not found")
        return info

    def update_shop_info(self, body: Any) -> Dict:
        data = self._validate(ShopInfoUpdate, body)
        if not data:
            raise CatalogValidationError("No shop info fields supplied")
        return self.storage.update_shop_info(data)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _require_object(body: Any) -> None:
        if not isinstance(body, dict):
            raise CatalogValidationError("Request body must be a JSON object")

    def _validate(self, model, body: Any) -> Dict:
        self._require_object(body)
        try:
            return model.model_validate(body).to_document()
        except ValidationError as exc:
            raise CatalogValidationError(validation_message(exc)) from exc
