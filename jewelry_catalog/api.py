"""REST routes shared by the Flask server and the Cloud Functions entry points."""

import logging
from datetime import datetime, timezone

from flask import Blueprint, current_app, json, jsonify, request
from werkzeug.exceptions import HTTPException

from jewelry_catalog.mongo_manager import DatabaseConfigError
from jewelry_catalog.services import (
    CatalogNotFoundError,
    CatalogService,
    CatalogValidationError,
    ProductQuery,
    RateService,
    UnknownCollectionError,
)
from jewelry_catalog.storage import InvalidObjectIdError

logger = logging.getLogger(__name__)

EXTENSION_KEY = "jewelry_catalog"

api = Blueprint("api", __name__)


def _catalog() -> CatalogService:
    return current_app.extensions[EXTENSION_KEY]["catalog"]


def _rates() -> RateService:
    return current_app.extensions[EXTENSION_KEY]["rates"]


def _body():
    return request.get_json(silent=True)


# ----------------------------------------------------------------------
# Categories
# ----------------------------------------------------------------------
@api.route("/api/categories", methods=["GET"])
def list_categories():
    return jsonify(_catalog().list_categories())


@api.route("/api/categories", methods=["POST"])
def create_category():
    return jsonify(_catalog().create_category(_body())), 201


@api.route("/api/categories/<slug>", methods=["GET"])
def get_category(slug):
    return jsonify(_catalog().get_category(slug))


@api.route("/api/categories/<slug>", methods=["PATCH"])
def update_category(slug):
    return jsonify(_catalog().update_category(slug, _body()))


# ----------------------------------------------------------------------
# Products
# ----------------------------------------------------------------------
@api.route("/api/products", methods=["GET"])
def list_products():
    query = ProductQuery.from_args(request.args)
    logger.info("GET /api/products - category=%s collection=%s", query.category or "all", query.collection)
    return jsonify(_catalog().list_products(query))


@api.route("/api/products", methods=["POST"])
def create_product():
    return jsonify(_catalog().create_product(_body())), 201


# Fixed collection routes must be registered ahead of /api/products/<product_id>
@api.route("/api/products/new-arrivals", methods=["GET"])
def new_arrivals():
    return jsonify(_catalog().list_collection("new-arrivals"))


@api.route("/api/products/trending", methods=["GET"])
def trending_products():
    return jsonify(_catalog().list_collection("trending"))


@api.route("/api/products/exclusive", methods=["GET"])
def exclusive_products():
    return jsonify(_catalog().list_collection("exclusive"))


@api.route("/api/products/<product_id>", methods=["GET"])
def get_product(product_id):
    return jsonify(_catalog().get_product(product_id))


@api.route("/api/products/<product_id>/similar", methods=["GET"])
def similar_products(product_id):
    return jsonify(_catalog().get_similar_products(product_id))


@api.route("/api/migrate-products", methods=["POST"])
def migrate_products():
    return jsonify(_catalog().migrate_products())


# ----------------------------------------------------------------------
# Carousel and shop info
# ----------------------------------------------------------------------
@api.route("/api/carousel", methods=["GET"])
def list_carousel_images():
    return jsonify(_catalog().list_carousel_images())


@api.route("/api/carousel", methods=["POST"])
def create_carousel_image():
    return jsonify(_catalog().create_carousel_image(_body())), 201


@api.route("/api/shop-info", methods=["GET"])
def get_shop_info():
    return jsonify(_catalog().get_shop_info())


@api.route("/api/shop-info", methods=["POST", "PUT", "PATCH"])
def update_shop_info():
    return jsonify(_catalog().update_shop_info(_body()))


# ----------------------------------------------------------------------
# Live rates
# ----------------------------------------------------------------------
def rates_response(force_refresh: bool):
    """Serve the rates payload; the service itself never gives up on a request."""

    logger.info("GET /api/rates - refresh=%s", force_refresh)
    try:
        payload = _rates().get_rates(force_refresh=force_refresh)
    except Exception:
        logger.error("Unexpected error while fetching rates", exc_info=True)
        payload = RateService.error_payload()
        payload["error"] = "Failed to fetch rates"
        return jsonify(payload), 500
    return jsonify(payload)


@api.route("/api/rates", methods=["GET"])
def get_rates():
    return rates_response(force_refresh=(request.args.get("refresh") or "").lower() == "true")


@api.route("/api/rates/refresh", methods=["GET"])
def refresh_rates():
    return rates_response(force_refresh=True)


@api.route("/health", methods=["GET"])
def health():
    return jsonify(
        {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "rates_cache": _rates().cache_status(),
        }
    )


# ----------------------------------------------------------------------
# Error translation
# ----------------------------------------------------------------------
def _error(message: str, status: int):
    return jsonify({"error": message}), status


def register_error_handlers(app) -> None:
    """Map domain exceptions and HTTP errors onto JSON responses."""

    @app.errorhandler(CatalogValidationError)
    def handle_validation_error(exc):
        logger.warning("Invalid request: %s", exc)
        return _error(str(exc), 400)

    @app.errorhandler(UnknownCollectionError)
    @app.errorhandler(InvalidObjectIdError)
    def handle_bad_identifier(exc):
        logger.warning("Bad identifier: %s", exc)
        return _error(str(exc), 400)

    @app.errorhandler(CatalogNotFoundError)
    def handle_not_found(exc):
        return _error(str(exc), 404)

    @app.errorhandler(DatabaseConfigError)
    def handle_database_config(exc):
        logger.error("Database unavailable: %s", exc)
        return _error("Catalog database is not configured", 503)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        # Keep werkzeug's headers, such as Allow on a 405.
        response = exc.get_response()
        response.data = json.dumps({"error": exc.description or exc.name})
        response.content_type = "application/json"
        return response

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        logger.error("Unexpected error handling %s %s", request.method, request.path, exc_info=True)
        return _error("Internal server error", 500)
