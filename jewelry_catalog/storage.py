"""MongoDB-backed document store for the jewelry catalog."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.database import Database

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

# Positional flags handed out by ``migrate_products``: (flag, first, last)
MIGRATION_SLOTS = (
    ("isNewArrival", 0, 5),
    ("isTrending", 5, 10),
    ("isExclusive", 10, 15),
)


class InvalidObjectIdError(ValueError):
    """Raised when a caller supplies an identifier that is not an ObjectId."""


def object_id_to_string(value: Union[ObjectId, str]) -> str:
    return str(value) if isinstance(value, ObjectId) else value


def string_to_object_id(value: str) -> ObjectId:
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidObjectIdError(f"Invalid ObjectId format: {value}")
    return ObjectId(value)


def serialize_document(document: Optional[Document]) -> Optional[Document]:
    """Return a copy of ``document`` with ``_id`` rendered as a string."""

    if document is None:
        return None
    serialized = dict(document)
    if "_id" in serialized:
        serialized["_id"] = object_id_to_string(serialized["_id"])
    return serialized


class CatalogStorage:
    """Thin query wrapper over the catalog collections."""

    CATEGORIES = "categories"
    PRODUCTS = "products"
    CAROUSEL_IMAGES = "carousel_images"
    SHOP_INFO = "shop_info"

    def __init__(self, db: Database) -> None:
        self._db = db

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    def get_categories(self) -> List[Document]:
        cursor = self._db[self.CATEGORIES].find().sort("displayOrder", ASCENDING)
        return [serialize_document(doc) for doc in cursor]

    def get_category_by_slug(self, slug: str) -> Optional[Document]:
        return serialize_document(self._db[self.CATEGORIES].find_one({"slug": slug}))

    def create_category(self, data: Document) -> Document:
        return self._insert(self.CATEGORIES, data)

    def update_category(self, slug: str, data: Document) -> Optional[Document]:
        """Apply ``data`` to the category; ``None`` when the slug is unknown."""

        changes = {key: value for key, value in data.items() if key != "_id"}
        if not changes:
            return self.get_category_by_slug(slug)

        updated = self._db[self.CATEGORIES].find_one_and_update(
            {"slug": slug},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return serialize_document(updated)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    def get_products(self, category: Optional[str] = None) -> List[Document]:
        query = {"category": category} if category else {}
        cursor = self._db[self.PRODUCTS].find(query).sort("displayOrder", ASCENDING)
        return [serialize_document(doc) for doc in cursor]

    def get_product_by_id(self, product_id: str) -> Optional[Document]:
        document = self._db[self.PRODUCTS].find_one({"_id": string_to_object_id(product_id)})
        return serialize_document(document)

    def get_new_arrivals(self, limit: int = 10) -> List[Document]:
        return self._find_products({"featured": True}, ASCENDING, limit)

    def get_trending_products(self, limit: int = 10) -> List[Document]:
        return self._find_products({"featured": True}, DESCENDING, limit)

    def get_exclusive_products(self, limit: int = 10) -> List[Document]:
        cursor = (
            self._db[self.PRODUCTS]
            .find({"isExclusive": True, "inStock": True})
            .sort("displayOrder", ASCENDING)
            .limit(limit)
        )
        # Seeded documents with hand-written string ids cannot be linked to.
        return [serialize_document(doc) for doc in cursor if isinstance(doc.get("_id"), ObjectId)]

    def get_similar_products(self, product_id: str, limit: int = 4) -> Optional[List[Document]]:
        """Products sharing the category of ``product_id``; ``None`` if it is unknown."""

        object_id = string_to_object_id(product_id)
        product = self._db[self.PRODUCTS].find_one({"_id": object_id})
        if product is None:
            return None

        query = {"category": product.get("category"), "_id": {"$ne": object_id}}
        return self._find_products(query, ASCENDING, limit)

    def create_product(self, data: Document) -> Document:
        return self._insert(self.PRODUCTS, data)

    def migrate_products(self) -> int:
        """Backfill collection flags by position, keeping values already set."""

        collection = self._db[self.PRODUCTS]
        products = list(collection.find())

        for index, product in enumerate(products):
            changes = {}
            for flag, first, last in MIGRATION_SLOTS:
                if flag not in product:
                    changes[flag] = first <= index < last
                else:
                    changes[flag] = product[flag]
            collection.update_one({"_id": product["_id"]}, {"$set": changes})

        logger.info("Migrated %d products", len(products))
        return len(products)

    # ------------------------------------------------------------------
    # Carousel
    # ------------------------------------------------------------------
    def get_carousel_images(self) -> List[Document]:
        cursor = self._db[self.CAROUSEL_IMAGES].find({"active": True}).sort("displayOrder", ASCENDING)
        return [serialize_document(doc) for doc in cursor]

    def create_carousel_image(self, data: Document) -> Document:
        return self._insert(self.CAROUSEL_IMAGES, data)

    # ------------------------------------------------------------------
    # Shop info
    # ------------------------------------------------------------------
    def get_shop_info(self) -> Optional[Document]:
        return serialize_document(self._db[self.SHOP_INFO].find_one())

    def update_shop_info(self, data: Document) -> Optional[Document]:
        changes = {key: value for key, value in data.items() if key != "_id"}
        if not changes:
            return self.get_shop_info()

        updated = self._db[self.SHOP_INFO].find_one_and_update(
            {},
            {"$set": changes},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return serialize_document(updated)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _insert(self, collection: str, data: Document) -> Document:
        document = {key: value for key, value in data.items() if key != "_id"}
        result = self._db[collection].insert_one(document)
        stored = self._db[collection].find_one({"_id": result.inserted_id})
        return serialize_document(stored)

    def _find_products(self, query: Document, direction: int, limit: int) -> List[Document]:
        cursor = self._db[self.PRODUCTS].find(query).sort("displayOrder", direction).limit(limit)
        return [serialize_document(doc) for doc in cursor]
