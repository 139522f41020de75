"""Pytest configuration and shared fixtures."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from collective.core.config import Constants, Settings
from collective.main import app
from collective.services.repository import Fixture, load_fixture


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings isolated from the developer's .env file."""
    return Settings(_env_file=None, fixture_path=tmp_path / "household.json", seed_fixture_on_startup=False)


@pytest.fixture
def household() -> Fixture:
    """Fresh collections loaded from the bundled household fixture."""
    return load_fixture(Constants.DEFAULT_FIXTURE_PATH)


@pytest.fixture
def test_client(household: Fixture) -> Generator[TestClient]:
    """Client for the app with the household fixture installed as its store.

    The lifespan is not entered, so startup seeding never runs and the store
    is exactly the fixture handed in here.
    """
    app.state.store = household
    try:
        yield TestClient(app)
    finally:
        del app.state.store
