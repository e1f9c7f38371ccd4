"""Application factory and app-wide configuration."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from pension_sim.app.api.routes import api_bp
from pension_sim.schemas.config import load_config
from pension_sim.storage.usage_store import init_db

# overridable with PENSION_SIM_<KEY> environment variables (JSON-decoded)
DEFAULT_SETTINGS = {
    "CORS_ORIGINS": [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ],
    "USAGE_DB_PATH": "pension_sim.db",
    "LOG_LEVEL": "INFO",
    "FORECAST_DEFAULTS": {},
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("pension_sim").setLevel(level)


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask app instance."""
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_SETTINGS)
    app.config.from_prefixed_env("PENSION_SIM")
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config["LOG_LEVEL"])
    app.extensions["forecast_config"] = load_config(app.config["FORECAST_DEFAULTS"])
    init_db(app.config["USAGE_DB_PATH"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
