"""Global constants for basicauth-e2e.

Selectors describe the DOM contract the system under test must expose.
Everything that varies between environments lives in configuration instead.
"""

DEFAULT_BASE_URL = "http://localhost:8080/"
"""Base URL of the system under test when nothing else is configured."""

DEFAULT_SERVER_PORT = 4444
"""Fixed TCP port the local automation server binds to."""

DEFAULT_WAIT_TIMEOUT_SECONDS = 60
"""Upper bound for every DOM poll.

Matches the default wait timeout of the WebDriver protocol client.
"""

DEFAULT_POLL_INTERVAL_SECONDS = 1.0
"""Delay between DOM poll attempts."""

DEFAULT_DRIVER_PATHS = {
    "linux": "selenium/chromedriver-90.0.4430.24-linux64",
    "darwin": "selenium/chromedriver-90.0.4430.24-mac64",
}
"""Local chromedriver binaries keyed by host platform."""

FALLBACK_PLATFORM = "linux"

LOG_CATEGORIES = ("server", "browser", "client", "driver", "performance", "profiler")
"""Remote session log categories silenced on every scenario."""

LOG_LEVEL_OFF = "OFF"

SUPPORTED_BROWSERS = ("chrome",)
"""Browser names the session options can be built for."""

LOGGING_PREFS_CAPABILITY = "goog:loggingPrefs"

IDENTIFIER_SELECTOR = '[name="identifier"]'
PASSCODE_SELECTOR = '[name="credentials.passcode"]'
SUBMIT_SELECTOR = '[data-type="save"]'
PROFILE_PAGE_SELECTOR = ".profilePage"
PREFERRED_USERNAME_SELECTOR = "#claim-preferred_username"

CONFIG_ENV_VAR = "BASICAUTH_E2E_CONFIG"
DEFAULT_CONFIG_FILE = "basicauth-e2e.yaml"
ENV_OVERRIDE_PREFIX = "BASICAUTH_E2E_"
DEBUG_ENV_VAR = "BASICAUTH_E2E_DEBUG"

USERDATA_CONFIG_KEY = "basicauth_config"
USERDATA_ENV_KEY = "basicauth_env"

WAIT_TIMEOUT_TAG_PREFIX = "wait_timeout_"
"""Scenario tag prefix overriding the wait timeout, e.g. ``@wait_timeout_5``."""
