"""Per-scenario browser session lifecycle."""

from __future__ import annotations

import logging
import platform
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.service import Service as ChromeService

from basicauth_e2e.artifacts import ArtifactManager
from basicauth_e2e.browser import BrowserSession
from basicauth_e2e.capabilities import Capabilities
from basicauth_e2e.constants import FALLBACK_PLATFORM, LOG_LEVEL_OFF
from basicauth_e2e.errors import SessionStartError

logger = logging.getLogger(__name__)


@dataclass
class ScenarioSession:
    """Scenario-scoped state handed to every step handler.

    Attributes
    ----------
    browser : BrowserSession
        Browser session opened for this scenario
    server : ChromeService | None
        Local automation server, None when a remote grid is used
    settings : dict[str, Any]
        Validated settings
    scenario_name : str
        Name of the running scenario
    """

    browser: BrowserSession
    server: Any
    settings: dict[str, Any]
    scenario_name: str = ""

    def url_for(self, path: str) -> str:
        """Join the configured base URL and a relative path."""
        base_url = self.settings["base_url"]
        return base_url.rstrip("/") + "/" + path.lstrip("/")


class SessionLifecycleManager:
    """Opens and tears down one browser session per scenario.

    Holds the suite-wide settings and capabilities. Each scenario gets a
    fresh ``ScenarioSession``; at most one session/server pair is live at a
    time.

    Parameters
    ----------
    settings : dict[str, Any]
        Validated settings
    capabilities : Capabilities
        Capabilities reused for every session
    service_factory : Callable[..., Any] | None
        Factory for the local automation server (default: ChromeService)
    remote_factory : Callable[..., Any] | None
        Factory for remote WebDriver sessions (default: webdriver.Remote)
    platform_name : str | None
        Host platform override, e.g. "linux" or "darwin"
    """

    def __init__(
        self,
        settings: dict[str, Any],
        capabilities: Capabilities,
        service_factory: Callable[..., Any] | None = None,
        remote_factory: Callable[..., Any] | None = None,
        platform_name: str | None = None,
    ) -> None:
        self.settings = settings
        self.capabilities = capabilities
        self.default_url = settings["base_url"]
        self.remote_url = settings.get("remote_url") or ""
        self._service_factory = service_factory or ChromeService
        self._remote_factory = remote_factory or webdriver.Remote
        self._platform_name = platform_name
        self.live_sessions = 0

    def select_driver_path(self) -> str | None:
        """Pick the chromedriver binary for the host platform.

        Returns
        -------
        str | None
            Explicit driver_path if configured, otherwise the platform entry
            from driver_paths (linux when the platform is unknown). None lets
            selenium locate a driver on its own.
        """
        if self.settings.get("driver_path"):
            return self.settings["driver_path"]

        driver_paths = self.settings.get("driver_paths") or {}
        current = (self._platform_name or platform.system()).lower()

        if current in driver_paths:
            return driver_paths[current]

        return driver_paths.get(FALLBACK_PLATFORM)

    def start_server(self) -> Any:
        """Start the local automation server on the configured port.

        Raises
        ------
        SessionStartError
            If the server process cannot be started
        """
        driver_path = self.select_driver_path()
        port = self.settings["server_port"]

        try:
            service = self._service_factory(
                executable_path=driver_path,
                port=port,
                log_output=subprocess.DEVNULL,
            )
            service.start()
        except (WebDriverException, OSError) as e:
            logger.error("Failed to start automation server on port %s: %s", port, e)
            raise SessionStartError(
                f"Failed to start automation server '{driver_path}' on port {port}: {e}"
            ) from e

        logger.debug("Automation server listening on %s", service.service_url)
        return service

    def open_driver(self, command_executor: str) -> Any:
        """Open a remote WebDriver session with the shared capabilities.

        Raises
        ------
        SessionStartError
            If the session cannot be created
        """
        options = self.capabilities.to_options()

        try:
            return self._remote_factory(
                command_executor=command_executor, options=options
            )
        except (WebDriverException, OSError) as e:
            logger.error("Failed to open browser session at %s: %s", command_executor, e)
            raise SessionStartError(
                f"Failed to open browser session at {command_executor}: {e}"
            ) from e

    def before_scenario(
        self, scenario_name: str, wait_timeout: float | None = None
    ) -> ScenarioSession:
        """Start a server and open a fresh browser session for a scenario.

        Parameters
        ----------
        scenario_name : str
            Name of the scenario about to run
        wait_timeout : float | None
            Poll timeout override for this scenario

        Returns
        -------
        ScenarioSession
            Session to pass to step handlers

        Raises
        ------
        RuntimeError
            If a previous session is still live
        SessionStartError
            If the server or session cannot be started
        """
        if self.live_sessions:
            raise RuntimeError(
                "A browser session is still live; after_scenario must run before "
                "the next scenario starts"
            )

        server = None
        if not self.remote_url:
            server = self.start_server()

        self.capabilities.silence_logs(self.settings.get("log_level") or LOG_LEVEL_OFF)
        command_executor = self.remote_url or server.service_url

        try:
            driver = self.open_driver(command_executor)
        except SessionStartError:
            if server is not None:
                self._stop_server(server)
            raise

        self.live_sessions += 1
        logger.info("Opened browser session", extra={"scenario": scenario_name})

        browser = BrowserSession(
            driver,
            wait_timeout=wait_timeout or self.settings["wait_timeout"],
            poll_interval=self.settings["poll_interval"],
        )
        return ScenarioSession(
            browser=browser,
            server=server,
            settings=self.settings,
            scenario_name=scenario_name,
        )

    def after_scenario(self, session: ScenarioSession | None, failed: bool = False) -> None:
        """Quit the browser session and stop the server.

        Runs every cleanup action regardless of scenario outcome. Failures
        are logged and do not prevent the remaining cleanup; the first
        unexpected error is re-raised once the server is stopped.

        Parameters
        ----------
        session : ScenarioSession | None
            Session returned by before_scenario, None if it never opened
        failed : bool
            Whether the scenario failed; failed scenarios get artifacts saved
        """
        if session is None:
            return

        first_error: Exception | None = None

        try:
            if failed and self.settings.get("artifacts_dir"):
                self._capture_artifacts(session)

            try:
                session.browser.quit()
            except WebDriverException as e:
                logger.warning("Failed to quit browser session: %s", e)
            except Exception as e:
                logger.error("Unexpected error quitting browser session: %s", e)
                first_error = e

            if session.server is not None:
                try:
                    self._stop_server(session.server)
                except Exception as e:
                    logger.error("Unexpected error stopping automation server: %s", e)
                    first_error = first_error or e
        finally:
            self.live_sessions = max(0, self.live_sessions - 1)
            logger.info("Closed browser session", extra={"scenario": session.scenario_name})

        if first_error is not None:
            raise first_error

    def _capture_artifacts(self, session: ScenarioSession) -> None:
        try:
            ArtifactManager(self.settings["artifacts_dir"]).capture_browser_state(
                session.browser, session.scenario_name
            )
        except Exception as e:
            logger.warning("Failed to capture failure artifacts: %s", e)

    def _stop_server(self, server: Any) -> None:
        try:
            server.stop()
        except (WebDriverException, OSError) as e:
            logger.warning("Failed to stop automation server: %s", e)
