"""Step table for the basic auth login flow."""

from __future__ import annotations

from basicauth_e2e.steps import handlers
from basicauth_e2e.steps.registry import SESSION_ATTRIBUTE, StepDefinition, StepRegistry

STEP_TABLE = (
    (r"^I am an anonymous user$", handlers.i_am_an_anonymous_user),
    (r'^I navigate to /(?P<path>[^"]*)$', handlers.i_navigate_to),
    (r"^I fill in my username$", handlers.i_fill_in_my_username),
    (r"^I fill in my Password$", handlers.i_fill_in_my_password),
    (r"^I submit the login form$", handlers.i_submit_the_login_form),
    (r"^I should see my profile page details$", handlers.i_should_see_my_profile_page_details),
)


def build_registry() -> StepRegistry:
    """Build a registry holding the login flow steps in declaration order."""
    registry = StepRegistry()

    for pattern, handler in STEP_TABLE:
        registry.register(pattern, handler)

    return registry


__all__ = [
    "SESSION_ATTRIBUTE",
    "STEP_TABLE",
    "StepDefinition",
    "StepRegistry",
    "build_registry",
]
