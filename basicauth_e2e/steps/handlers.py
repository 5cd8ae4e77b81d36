"""Step handlers for the basic auth login flow.

Each handler receives the scenario's ``ScenarioSession`` explicitly. A
handler passes by returning and fails by raising.
"""

import logging

from basicauth_e2e.constants import (
    IDENTIFIER_SELECTOR,
    PASSCODE_SELECTOR,
    PREFERRED_USERNAME_SELECTOR,
    PROFILE_PAGE_SELECTOR,
    SUBMIT_SELECTOR,
)
from basicauth_e2e.errors import UnexpectedTextError
from basicauth_e2e.lifecycle import ScenarioSession

logger = logging.getLogger(__name__)


def i_am_an_anonymous_user(session: ScenarioSession) -> None:
    """Document the scenario precondition; nothing to do."""


def i_navigate_to(session: ScenarioSession, path: str) -> None:
    """Open base_url + path and wait for the login form to render."""
    session.browser.navigate(session.url_for(path))
    session.browser.wait_for_element(IDENTIFIER_SELECTOR)


def _fill_field(session: ScenarioSession, selector: str, value: str) -> None:
    browser = session.browser
    element = browser.find(selector)
    browser.clear(element)
    browser.type(element, value)


def i_fill_in_my_username(session: ScenarioSession) -> None:
    _fill_field(session, IDENTIFIER_SELECTOR, session.settings["username"])


def i_fill_in_my_password(session: ScenarioSession) -> None:
    _fill_field(session, PASSCODE_SELECTOR, session.settings["password"])


def i_submit_the_login_form(session: ScenarioSession) -> None:
    browser = session.browser
    browser.click(browser.find(SUBMIT_SELECTOR))


def i_should_see_my_profile_page_details(session: ScenarioSession) -> None:
    """Wait for the profile page and check the preferred username claim.

    Raises
    ------
    StepTimeoutError
        If the profile page or the claim never renders
    UnexpectedTextError
        If the claim text differs from the expected username
    """
    browser = session.browser
    browser.wait_for_element(PROFILE_PAGE_SELECTOR)
    claim = browser.wait_for_element(PREFERRED_USERNAME_SELECTOR)

    expected = session.settings["expected_username"]
    actual = browser.text(claim)

    if actual != expected:
        raise UnexpectedTextError(PREFERRED_USERNAME_SELECTOR, expected, actual)

    logger.debug("Profile shows preferred username %r", actual)
