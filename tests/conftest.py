"""Pytest configuration and fixtures for basicauth-e2e tests."""

import os
from collections.abc import Generator
from typing import Any

import pytest

from basicauth_e2e.browser import BrowserSession
from basicauth_e2e.constants import CONFIG_ENV_VAR, ENV_OVERRIDE_PREFIX
from basicauth_e2e.core.config import ConfigLoader
from basicauth_e2e.lifecycle import ScenarioSession
from tests.fakes import FakeWebDriver


@pytest.fixture(autouse=True)
def clean_override_env() -> Generator[None, None, None]:
    """Remove BASICAUTH_E2E_* variables so tests see built-in defaults."""
    saved = {
        key: os.environ.pop(key)
        for key in list(os.environ)
        if key.startswith(ENV_OVERRIDE_PREFIX) or key == CONFIG_ENV_VAR
    }

    yield

    for key in list(os.environ):
        if key.startswith(ENV_OVERRIDE_PREFIX) or key == CONFIG_ENV_VAR:
            del os.environ[key]
    os.environ.update(saved)


@pytest.fixture
def settings(tmp_path) -> dict[str, Any]:
    """Validated built-in settings with fast polling."""
    loader = ConfigLoader()
    merged = loader.get_settings({"defaults": {}}, environ={})
    merged["wait_timeout"] = 0.2
    merged["poll_interval"] = 0.01
    merged["artifacts_dir"] = str(tmp_path / "artifacts")
    loader.validate_config(merged)
    return merged


@pytest.fixture
def fake_driver() -> FakeWebDriver:
    return FakeWebDriver()


@pytest.fixture
def scenario_session(fake_driver: FakeWebDriver, settings: dict[str, Any]) -> ScenarioSession:
    browser = BrowserSession(
        fake_driver,
        wait_timeout=settings["wait_timeout"],
        poll_interval=settings["poll_interval"],
    )
    return ScenarioSession(
        browser=browser, server=None, settings=settings, scenario_name="Sign in"
    )
