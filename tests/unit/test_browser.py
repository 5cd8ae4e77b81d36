"""Unit tests for BrowserSession polling."""

from unittest.mock import MagicMock

import pytest
from selenium.common.exceptions import NoSuchElementException, WebDriverException
from selenium.webdriver.common.by import By

from basicauth_e2e.browser import BrowserSession
from basicauth_e2e.errors import StepTimeoutError
from tests.fakes import FakeElement, FakeWebDriver


def make_browser(driver) -> BrowserSession:
    return BrowserSession(driver, wait_timeout=0.2, poll_interval=0.01)


class TestBrowserSessionActions:
    def test_find_uses_css_selector(self) -> None:
        driver = MagicMock()
        browser = make_browser(driver)

        browser.find("#claim")

        driver.find_element.assert_called_once_with(By.CSS_SELECTOR, "#claim")

    def test_actions_delegate_to_element(self) -> None:
        element = FakeElement(text="hello")
        browser = make_browser(FakeWebDriver())

        browser.type(element, "abc")
        browser.clear(element)
        browser.type(element, "xyz")
        browser.click(element)

        assert element.value == "xyz"
        assert element.click_count == 1
        assert browser.text(element) == "hello"

    def test_navigation_errors_propagate(self) -> None:
        driver = MagicMock()
        driver.get.side_effect = WebDriverException("connection refused")

        with pytest.raises(WebDriverException):
            make_browser(driver).navigate("http://localhost:8080/login")


class TestBrowserSessionWaits:
    def test_wait_for_element_returns_element(self) -> None:
        driver = FakeWebDriver()
        element = FakeElement()
        driver.render({".profilePage": element})

        assert make_browser(driver).wait_for_element(".profilePage") is element

    def test_not_found_is_retried_until_present(self) -> None:
        driver = FakeWebDriver()
        element = FakeElement()
        driver.render_later(".profilePage", element, misses=2)

        assert make_browser(driver).wait_for_element(".profilePage") is element
        assert driver.lookups.count(".profilePage") == 3

    def test_timeout_raises_step_timeout(self) -> None:
        browser = make_browser(FakeWebDriver())

        with pytest.raises(StepTimeoutError) as exc_info:
            browser.wait_for_element(".profilePage", timeout=0.05)

        assert exc_info.value.selector == ".profilePage"
        assert exc_info.value.timeout == 0.05
        assert "0.05s" in str(exc_info.value)

    def test_other_errors_are_not_swallowed(self) -> None:
        driver = MagicMock()
        driver.find_element.side_effect = WebDriverException("session deleted")

        with pytest.raises(WebDriverException):
            make_browser(driver).wait_for_element(".profilePage")

    def test_wait_until_polls_falsy_predicate(self) -> None:
        results = iter([False, None, "ready"])
        browser = make_browser(FakeWebDriver())

        assert browser.wait_until(lambda driver: next(results)) == "ready"

    def test_wait_until_treats_missing_element_as_not_ready(self) -> None:
        calls = []

        def predicate(driver):
            calls.append(1)
            if len(calls) < 3:
                raise NoSuchElementException("not yet")
            return True

        assert make_browser(FakeWebDriver()).wait_until(predicate) is True
        assert len(calls) == 3
