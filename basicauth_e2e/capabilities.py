"""Requested browser capabilities for remote sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from selenium.webdriver.chrome.options import Options as ChromeOptions

from basicauth_e2e.constants import (
    LOG_CATEGORIES,
    LOG_LEVEL_OFF,
    LOGGING_PREFS_CAPABILITY,
)


@dataclass
class Capabilities:
    """Capability set requested for every browser session.

    Attributes
    ----------
    values : dict[str, Any]
        Capability name to desired value, e.g. ``{"browserName": "chrome"}``
    log_levels : dict[str, str]
        Log level per remote session log category
    arguments : list[str]
        Extra browser command line arguments
    """

    values: dict[str, Any] = field(default_factory=dict)
    log_levels: dict[str, str] = field(default_factory=dict)
    arguments: list[str] = field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "Capabilities":
        """Build capabilities from merged settings.

        Parameters
        ----------
        settings : dict[str, Any]
            Validated settings

        Returns
        -------
        Capabilities
            Capabilities with browser name and optional headless argument
        """
        capabilities = cls(values={"browserName": settings["browser_name"]})

        if settings.get("headless"):
            capabilities.arguments.append("--headless=new")

        return capabilities

    def set_log_level(self, category: str, level: str) -> None:
        """Set the log level for one remote session log category.

        Raises
        ------
        ValueError
            If category is not a known log category
        """
        if category not in LOG_CATEGORIES:
            raise ValueError(
                f"Unknown log category '{category}'. Known categories: {list(LOG_CATEGORIES)}"
            )

        self.log_levels[category] = level.upper()

    def silence_logs(self, level: str = LOG_LEVEL_OFF) -> None:
        """Apply the same level to every log category."""
        for category in LOG_CATEGORIES:
            self.set_log_level(category, level)

    def to_options(self) -> ChromeOptions:
        """Translate capabilities into selenium ChromeOptions."""
        options = ChromeOptions()

        for name, value in self.values.items():
            options.set_capability(name, value)

        if self.log_levels:
            options.set_capability(LOGGING_PREFS_CAPABILITY, dict(self.log_levels))

        for argument in self.arguments:
            options.add_argument(argument)

        return options
