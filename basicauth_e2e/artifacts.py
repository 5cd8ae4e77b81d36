"""Failure artifact capture for browser scenarios."""

import logging
import re
from pathlib import Path

from selenium.common.exceptions import WebDriverException

from basicauth_e2e.browser import BrowserSession

logger = logging.getLogger(__name__)


def scenario_slug(scenario_name: str) -> str:
    """Turn a scenario name into a filesystem-safe directory name."""
    slug = re.sub(r"[^a-z0-9]+", "-", scenario_name.lower()).strip("-")
    return slug or "scenario"


class ArtifactManager:
    """Manages scenario-specific artifact directories.

    Attributes
    ----------
    base_dir : Path
        Base directory for all artifacts
    scenario_dir : Path | None
        Current scenario's artifact directory
    """

    def __init__(self, base_dir: Path | str | None = None) -> None:
        if base_dir is None:
            base_dir = Path.cwd() / "tmp" / "behave"
        self.base_dir = Path(base_dir)
        self.scenario_dir: Path | None = None

    def create_scenario_dir(self, scenario_name: str) -> Path:
        """Create a scenario-specific artifact directory.

        Parameters
        ----------
        scenario_name : str
            Name of the scenario

        Returns
        -------
        Path
            Path to created scenario directory
        """
        self.scenario_dir = self.base_dir / scenario_slug(scenario_name)
        self.scenario_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Created artifact directory: {self.scenario_dir}")
        return self.scenario_dir

    def capture_browser_state(self, browser: BrowserSession, scenario_name: str) -> list[Path]:
        """Save a screenshot and the page source of a failed scenario.

        Best effort: browser errors are logged and whatever could be saved
        is returned.

        Parameters
        ----------
        browser : BrowserSession
            Session whose current page is captured
        scenario_name : str
            Name of the failed scenario

        Returns
        -------
        list[Path]
            Artifact files written
        """
        scenario_dir = self.create_scenario_dir(scenario_name)
        written: list[Path] = []

        screenshot_path = scenario_dir / "screenshot.png"
        try:
            if browser.save_screenshot(str(screenshot_path)):
                written.append(screenshot_path)
        except WebDriverException as e:
            logger.warning(f"Failed to save screenshot for '{scenario_name}': {e}")

        source_path = scenario_dir / "page.html"
        try:
            source_path.write_text(browser.page_source(), encoding="utf-8")
            written.append(source_path)
        except (WebDriverException, OSError) as e:
            logger.warning(f"Failed to save page source for '{scenario_name}': {e}")

        if written:
            logger.info(
                "Saved failure artifacts for '%s' to %s", scenario_name, scenario_dir
            )

        return written
