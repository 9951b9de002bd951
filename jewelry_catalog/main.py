"""Firebase Cloud Functions entry points for the Jewelry Catalog API."""

import logging

from firebase_functions import https_fn

from jewelry_catalog.api import rates_response
from jewelry_catalog.app import configure_logging, create_app

configure_logging()
logger = logging.getLogger(__name__)

# One app (and so one rates cache) per Cloud Function instance, reused by
# every invocation until the next cold start.
app = create_app()


@https_fn.on_request()
def api(req: https_fn.Request) -> https_fn.Response:
    """Serve any catalog route through the shared Flask app."""

    logger.info("%s %s", req.method, req.path)
    with app.request_context(req.environ):
        return app.full_dispatch_request()


@https_fn.on_request()
def get_rates(req: https_fn.Request) -> https_fn.Response:
    """Return live gold and silver rates, honouring ``?refresh=true``."""

    force_refresh = (req.args.get("refresh") or "").lower() == "true"
    with app.app_context():
        return app.make_response(rates_response(force_refresh=force_refresh))


@https_fn.on_request()
def refresh_rates(req: https_fn.Request) -> https_fn.Response:
    """Force a refresh of the cached rates and return the latest snapshot."""

    with app.app_context():
        return app.make_response(rates_response(force_refresh=True))
