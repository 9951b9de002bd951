import mongomock
import pytest
from bson import ObjectId

from jewelry_catalog.mongo_manager import DatabaseConfigError, MongoManager
from jewelry_catalog.storage import (
    CatalogStorage,
    InvalidObjectIdError,
    object_id_to_string,
    string_to_object_id,
)


@pytest.fixture
def db():
    return mongomock.MongoClient()["jewelry_catalog_test"]


@pytest.fixture
def storage(db):
    return CatalogStorage(db)


def seed_products(db):
    db.products.insert_many(
        [
            {"name": "Temple Necklace", "category": "necklaces", "price": 185000, "featured": True,
             "displayOrder": 2, "isExclusive": True, "inStock": True},
            {"name": "Jhumka Earrings", "category": "earrings", "price": 42000, "featured": True,
             "displayOrder": 1, "isExclusive": True, "inStock": False},
            {"name": "Solitaire Ring", "category": "rings", "price": 98000, "featured": False,
             "displayOrder": 3},
            {"name": "Choker", "category": "necklaces", "price": 120000, "featured": True,
             "displayOrder": 4},
            {"_id": "legacy-1", "name": "Legacy Bangle", "category": "bangles", "price": 60000,
             "featured": False, "displayOrder": 0, "isExclusive": True, "inStock": True},
        ]
    )


def test_object_id_conversion_round_trip():
    object_id = ObjectId()

    assert object_id_to_string(object_id) == str(object_id)
    assert object_id_to_string("already-a-string") == "already-a-string"
    assert string_to_object_id(str(object_id)) == object_id


def test_invalid_object_id_raises():
    with pytest.raises(InvalidObjectIdError, match="Invalid ObjectId format: not-an-id"):
        string_to_object_id("not-an-id")


def test_categories_sorted_by_display_order(storage, db):
    db.categories.insert_many(
        [
            {"name": "Rings", "slug": "rings", "displayOrder": 2},
            {"name": "Necklaces", "slug": "necklaces", "displayOrder": 1},
        ]
    )

    categories = storage.get_categories()

    assert [category["slug"] for category in categories] == ["necklaces", "rings"]
    assert all(isinstance(category["_id"], str) for category in categories)


def test_create_and_update_category(storage):
    created = storage.create_category({"name": "Rings", "slug": "rings", "displayOrder": 1})

    updated = storage.update_category("rings", {"name": "Fine Rings", "_id": "ignored"})

    assert updated["_id"] == created["_id"]
    assert updated["name"] == "Fine Rings"
    assert storage.get_category_by_slug("rings")["name"] == "Fine Rings"


def test_update_unknown_category_returns_none(storage):
    assert storage.update_category("missing", {"name": "Nothing"}) is None
    assert storage.get_category_by_slug("missing") is None


def test_get_products_filters_by_category(storage, db):
    seed_products(db)

    necklaces = storage.get_products("necklaces")
    everything = storage.get_products()

    assert [product["name"] for product in necklaces] == ["Temple Necklace", "Choker"]
    assert everything[0]["name"] == "Legacy Bangle"
    assert len(everything) == 5


def test_get_product_by_id(storage):
    created = storage.create_product({"name": "Nose Pin", "category": "nose-pins", "price": 3500})

    assert storage.get_product_by_id(created["_id"])["name"] == "Nose Pin"
    assert storage.get_product_by_id(str(ObjectId())) is None
    with pytest.raises(InvalidObjectIdError):
        storage.get_product_by_id("12345")


def test_new_arrivals_and_trending_order(storage, db):
    seed_products(db)

    new_arrivals = storage.get_new_arrivals()
    trending = storage.get_trending_products(limit=2)

    assert [product["name"] for product in new_arrivals] == ["Jhumka Earrings", "Temple Necklace", "Choker"]
    assert [product["name"] for product in trending] == ["Choker", "Temple Necklace"]


def test_exclusive_products_require_stock_and_object_id(storage, db):
    seed_products(db)

    exclusive = storage.get_exclusive_products()

    assert [product["name"] for product in exclusive] == ["Temple Necklace"]


def test_similar_products_share_category(storage, db):
    seed_products(db)
    necklace = db.products.find_one({"name": "Temple Necklace"})

    similar = storage.get_similar_products(str(necklace["_id"]))

    assert [product["name"] for product in similar] == ["Choker"]
    assert storage.get_similar_products(str(ObjectId())) is None


def test_carousel_returns_active_images_only(storage):
    storage.create_carousel_image({"imageUrl": "/a.jpg", "title": "Bridal", "active": True, "displayOrder": 2})
    storage.create_carousel_image({"imageUrl": "/b.jpg", "title": "Festive", "active": True, "displayOrder": 1})
    storage.create_carousel_image({"imageUrl": "/c.jpg", "title": "Retired", "active": False, "displayOrder": 0})

    assert [image["title"] for image in storage.get_carousel_images()] == ["Festive", "Bridal"]


def test_shop_info_upsert(storage, db):
    assert storage.get_shop_info() is None

    first = storage.update_shop_info({"name": "Jewelry Catalog", "phone": "+91 98765 43210"})
    second = storage.update_shop_info({"phone": "+91 91234 56789"})

    assert first["_id"] == second["_id"]
    assert second["name"] == "Jewelry Catalog"
    assert second["phone"] == "+91 91234 56789"
    assert db.shop_info.count_documents({}) == 1


def test_migrate_products_assigns_flags_by_position(storage, db):
    db.products.insert_many([{"name": f"Item {index}", "displayOrder": index} for index in range(16)])
    db.products.update_one({"name": "Item 0"}, {"$set": {"isNewArrival": False}})
    db.products.update_one({"name": "Item 6"}, {"$set": {"isTrending": None}})

    updated = storage.migrate_products()

    assert updated == 16
    flags = {
        product["name"]: (product["isNewArrival"], product["isTrending"], product["isExclusive"])
        for product in db.products.find()
    }
    assert flags["Item 0"] == (False, False, False)
    assert flags["Item 4"] == (True, False, False)
    assert flags["Item 5"] == (False, True, False)
    assert flags["Item 6"] == (False, None, False)
    assert flags["Item 12"] == (False, False, True)
    assert flags["Item 15"] == (False, False, False)


def test_mongo_manager_requires_uri():
    with pytest.raises(DatabaseConfigError):
        MongoManager(uri="", database_name="jewelry_catalog").get_database()


def test_mongo_manager_creates_indexes_once():
    manager = MongoManager(client=mongomock.MongoClient(), database_name="jewelry_catalog_test")

    db = manager.get_database()

    assert manager.get_database() is db
    assert manager.ensure_indexes(db) is False
    slug_indexes = [
        info for info in db.categories.index_information().values() if info["key"] == [("slug", 1)]
    ]
    assert slug_indexes and slug_indexes[0].get("unique") is True
