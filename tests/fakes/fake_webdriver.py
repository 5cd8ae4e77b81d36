"""Fake WebDriver serving an in-memory DOM keyed by CSS selector."""

import logging
from collections.abc import Callable

from selenium.common.exceptions import NoSuchElementException

from basicauth_e2e.constants import (
    IDENTIFIER_SELECTOR,
    PASSCODE_SELECTOR,
    PREFERRED_USERNAME_SELECTOR,
    PROFILE_PAGE_SELECTOR,
    SUBMIT_SELECTOR,
)

logger = logging.getLogger(__name__)


class FakeElement:
    """Fake WebElement recording the interactions performed on it.

    Parameters
    ----------
    text : str
        Rendered text of the element
    on_click : Callable[[], None] | None
        Invoked when the element is clicked
    """

    def __init__(self, text: str = "", on_click: Callable[[], None] | None = None) -> None:
        self.text = text
        self.value = ""
        self.clear_count = 0
        self.click_count = 0
        self._on_click = on_click

    def clear(self) -> None:
        self.value = ""
        self.clear_count += 1

    def send_keys(self, *values: str) -> None:
        self.value += "".join(values)

    def click(self) -> None:
        self.click_count += 1
        if self._on_click is not None:
            self._on_click()


class FakeWebDriver:
    """Fake WebDriver matching the subset of the selenium API the suite uses.

    Pages map a URL to the elements rendered there. Elements can also be
    scheduled to appear only after a number of failed lookups.

    Parameters
    ----------
    pages : dict[str, dict[str, FakeElement]] | None
        Elements rendered per URL
    """

    def __init__(self, pages: dict[str, dict[str, FakeElement]] | None = None) -> None:
        self.pages = pages or {}
        self.elements: dict[str, FakeElement] = {}
        self.visited: list[str] = []
        self.lookups: list[str] = []
        self.quit_called = False
        self.page_source = "<html></html>"
        self._pending: dict[str, tuple[int, FakeElement]] = {}

    def get(self, url: str) -> None:
        self.visited.append(url)
        self.elements = dict(self.pages.get(url, {}))

    def find_element(self, by: str, value: str) -> FakeElement:
        self.lookups.append(value)

        if value in self._pending:
            remaining, element = self._pending[value]
            if remaining <= 0:
                del self._pending[value]
                self.elements[value] = element
            else:
                self._pending[value] = (remaining - 1, element)

        if value in self.elements:
            return self.elements[value]

        raise NoSuchElementException(f"Unable to locate element: {value}")

    def render(self, elements: dict[str, FakeElement]) -> None:
        """Replace the current DOM, as a page transition would."""
        self.elements = dict(elements)

    def render_later(self, selector: str, element: FakeElement, misses: int) -> None:
        """Make selector resolvable only after it was looked up ``misses`` times."""
        self._pending[selector] = (misses, element)

    def save_screenshot(self, filename: str) -> bool:
        with open(filename, "wb") as f:
            f.write(b"\x89PNG\r\n\x1a\n")
        return True

    def quit(self) -> None:
        self.quit_called = True


def build_login_site(
    driver: FakeWebDriver,
    login_url: str,
    preferred_username: str = "username",
    profile_loads: bool = True,
) -> dict[str, FakeElement]:
    """Wire a login page whose submit button renders the profile page.

    Parameters
    ----------
    driver : FakeWebDriver
        Driver to attach the site to
    login_url : str
        URL serving the login form
    preferred_username : str
        Claim text shown on the profile page
    profile_loads : bool
        If False, submitting never renders the profile page

    Returns
    -------
    dict[str, FakeElement]
        Login form elements keyed by selector
    """

    def submit() -> None:
        if profile_loads:
            driver.render(
                {
                    PROFILE_PAGE_SELECTOR: FakeElement(),
                    PREFERRED_USERNAME_SELECTOR: FakeElement(text=preferred_username),
                }
            )
        else:
            driver.render({})

    login_form = {
        IDENTIFIER_SELECTOR: FakeElement(),
        PASSCODE_SELECTOR: FakeElement(),
        SUBMIT_SELECTOR: FakeElement(on_click=submit),
    }
    driver.pages[login_url] = login_form
    return login_form
