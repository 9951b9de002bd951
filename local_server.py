"""Local development server that mirrors the production Cloud Functions API."""

import logging

from flask import render_template_string

from jewelry_catalog.app import configure_logging, create_app
from jewelry_catalog.config import Config
from ui_template import HTML_TEMPLATE

configure_logging()
logger = logging.getLogger(__name__)


def build_app():
    app = create_app()

    @app.route("/")
    def index():
        return render_template_string(HTML_TEMPLATE)

    return app


if __name__ == "__main__":
    app = build_app()

    print("=" * 72)
    print("Jewelry Catalog API - Local Development Server")
    print("=" * 72)
    print(f"\nDatabase: {Config.get_database_name()} ({'configured' if Config.MONGODB_URI else 'MONGODB_URI not set'})")
    print(f"Rate sources: {', '.join(Config.RATES_SOURCES)}")
    print("\nAvailable endpoints:")
    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        if rule.endpoint == "static":
            continue
        methods = ",".join(sorted(rule.methods - {"HEAD", "OPTIONS"}))
        print(f"  {methods:<16} http://localhost:5000{rule.rule}")
    print("\n" + "=" * 72 + "\n")

    app.run(debug=Config.DEBUG, host="0.0.0.0", port=5000)
