"""Fake implementations for testing with dependency injection."""

from tests.fakes.fake_webdriver import FakeElement, FakeWebDriver, build_login_site

__all__ = ["FakeElement", "FakeWebDriver", "build_login_site"]
