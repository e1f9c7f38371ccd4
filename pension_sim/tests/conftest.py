from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from pension_sim.app import create_app


@pytest.fixture()
def app(tmp_path) -> Flask:
    return create_app(
        {
            "TESTING": True,
            "USAGE_DB_PATH": str(tmp_path / "usage.db"),
            "LOG_LEVEL": "WARNING",
        }
    )


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
