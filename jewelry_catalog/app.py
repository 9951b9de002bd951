"""Flask application factory for the catalog API."""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from jewelry_catalog.api import EXTENSION_KEY, api, register_error_handlers
from jewelry_catalog.config import Config
from jewelry_catalog.services import CatalogService, RateService

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, level or Config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Silence verbose third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


def create_app(
    catalog_service: Optional[CatalogService] = None,
    rate_service: Optional[RateService] = None,
) -> Flask:
    """Build the API app; services default to the configured MongoDB and sources."""

    app = Flask(__name__)
    app.json.sort_keys = False
    app.config["DEBUG"] = Config.DEBUG

    CORS(app, resources={r"/api/*": {"origins": Config.CORS_ORIGINS}})

    app.extensions[EXTENSION_KEY] = {
        "catalog": catalog_service or CatalogService(),
        "rates": rate_service or RateService(),
    }

    app.register_blueprint(api)
    register_error_handlers(app)

    Config.validate()
    return app
