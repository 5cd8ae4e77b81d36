"""Behave environment wiring the browser session lifecycle into scenarios."""

import logging
from collections.abc import Iterable

from behave.model import Scenario
from behave.runner import Context

from basicauth_e2e.capabilities import Capabilities
from basicauth_e2e.constants import (
    USERDATA_CONFIG_KEY,
    USERDATA_ENV_KEY,
    WAIT_TIMEOUT_TAG_PREFIX,
)
from basicauth_e2e.core.config import load_settings
from basicauth_e2e.errors import SessionStartError
from basicauth_e2e.lifecycle import SessionLifecycleManager
from basicauth_e2e.steps import SESSION_ATTRIBUTE

logger = logging.getLogger(__name__)


def wait_timeout_from_tags(tags: Iterable[str]) -> float | None:
    """Return the wait timeout requested by a ``@wait_timeout_<n>`` tag."""
    for tag in tags:
        if tag.startswith(WAIT_TIMEOUT_TAG_PREFIX):
            try:
                timeout = float(tag[len(WAIT_TIMEOUT_TAG_PREFIX):])
            except ValueError:
                logger.warning(f"Invalid wait timeout tag format: {tag}, using default")
                continue

            if timeout > 0:
                logger.info(f"Using custom wait timeout from tag: {timeout}s")
                return timeout

            logger.warning(f"Wait timeout tag must be positive: {tag}, using default")

    return None


def abort_run(context: Context, reason: str) -> None:
    """Stop the runner after the current scenario."""
    abort = getattr(context, "abort", None)

    if callable(abort):
        abort(reason=reason)
    else:
        context._runner.aborted = True


def before_all(context: Context) -> None:
    """Load settings and build the capabilities shared by every scenario."""
    userdata = context.config.userdata
    settings = load_settings(
        config_path=userdata.get(USERDATA_CONFIG_KEY),
        env_name=userdata.get(USERDATA_ENV_KEY),
    )

    context.settings = settings
    context.lifecycle = SessionLifecycleManager(
        settings, Capabilities.from_settings(settings)
    )
    logger.info(f"Testing {settings['base_url']} with {settings['browser_name']}")


def before_scenario(context: Context, scenario: Scenario) -> None:
    """Open a fresh browser session for the scenario.

    A server or session that cannot start aborts the whole run.
    """
    setattr(context, SESSION_ATTRIBUTE, None)
    wait_timeout = wait_timeout_from_tags(scenario.effective_tags)

    try:
        session = context.lifecycle.before_scenario(
            scenario.name, wait_timeout=wait_timeout
        )
    except SessionStartError as e:
        logger.error(f"Aborting run, browser session could not start: {e}")
        abort_run(context, str(e))
        raise

    setattr(context, SESSION_ATTRIBUTE, session)


def after_scenario(context: Context, scenario: Scenario) -> None:
    """Quit the browser session and stop the server, whatever the outcome."""
    session = getattr(context, SESSION_ATTRIBUTE, None)

    try:
        context.lifecycle.after_scenario(session, failed=scenario.status == "failed")
    finally:
        setattr(context, SESSION_ATTRIBUTE, None)
