"""Thin capability wrapper over a remote selenium WebDriver session."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from selenium.common.exceptions import NoSuchElementException, TimeoutException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support.ui import WebDriverWait

from basicauth_e2e.constants import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_WAIT_TIMEOUT_SECONDS,
)
from basicauth_e2e.errors import StepTimeoutError

logger = logging.getLogger(__name__)


class BrowserSession:
    """Live browser session used by step handlers.

    Every lookup uses CSS selectors. Waits follow a single polling policy:
    a missing element means "not ready yet" and the poll gives up with
    ``StepTimeoutError`` once ``wait_timeout`` elapses.

    Parameters
    ----------
    driver : WebDriver
        Remote WebDriver session
    wait_timeout : float
        Default poll timeout in seconds
    poll_interval : float
        Default delay between poll attempts in seconds
    """

    def __init__(
        self,
        driver: WebDriver,
        wait_timeout: float = DEFAULT_WAIT_TIMEOUT_SECONDS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self.driver = driver
        self.wait_timeout = wait_timeout
        self.poll_interval = poll_interval

    def navigate(self, url: str) -> None:
        logger.debug("Navigating to %s", url)
        self.driver.get(url)

    def find(self, selector: str) -> WebElement:
        """Locate a single element.

        Raises
        ------
        NoSuchElementException
            If no element matches selector
        """
        return self.driver.find_element(By.CSS_SELECTOR, selector)

    def clear(self, element: WebElement) -> None:
        element.clear()

    def type(self, element: WebElement, text: str) -> None:
        element.send_keys(text)

    def click(self, element: WebElement) -> None:
        element.click()

    def text(self, element: WebElement) -> str:
        return element.text

    def wait_until(
        self,
        predicate: Callable[[WebDriver], Any],
        timeout: float | None = None,
        interval: float | None = None,
        description: str = "condition",
    ) -> Any:
        """Poll predicate until it returns a truthy value.

        Parameters
        ----------
        predicate : Callable[[WebDriver], Any]
            Called with the driver on every attempt. Raising
            NoSuchElementException counts as "not ready yet"
        timeout : float | None
            Seconds before giving up (default: session wait_timeout)
        interval : float | None
            Seconds between attempts (default: session poll_interval)
        description : str
            Label used in the timeout error

        Returns
        -------
        Any
            First truthy value returned by predicate

        Raises
        ------
        StepTimeoutError
            If predicate never held within timeout
        """
        timeout = self.wait_timeout if timeout is None else timeout
        interval = self.poll_interval if interval is None else interval

        wait = WebDriverWait(
            self.driver,
            timeout,
            poll_frequency=interval,
            ignored_exceptions=(NoSuchElementException,),
        )

        try:
            return wait.until(predicate)
        except TimeoutException as e:
            logger.debug("Gave up waiting for %s after %ss", description, timeout)
            raise StepTimeoutError(description, timeout) from e

    def wait_for_element(self, selector: str, timeout: float | None = None) -> WebElement:
        """Poll until an element matching selector is present.

        Raises
        ------
        StepTimeoutError
            If the element never appears within timeout
        """
        return self.wait_until(
            lambda driver: driver.find_element(By.CSS_SELECTOR, selector),
            timeout=timeout,
            description=selector,
        )

    def save_screenshot(self, path: str) -> bool:
        return self.driver.save_screenshot(path)

    def page_source(self) -> str:
        return self.driver.page_source

    def quit(self) -> None:
        self.driver.quit()
