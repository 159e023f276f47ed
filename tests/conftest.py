from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from vaultsim.app import create_app
from vaultsim.config import Settings


@pytest.fixture()
def client() -> FlaskClient:
    app = create_app(Settings(log_level="WARNING", default_horizon_years=3))
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
