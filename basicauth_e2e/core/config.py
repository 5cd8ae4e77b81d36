import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import InterpolationResolutionError, OmegaConfBaseException

from basicauth_e2e.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_BASE_URL,
    DEFAULT_CONFIG_FILE,
    DEFAULT_DRIVER_PATHS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_SERVER_PORT,
    DEFAULT_WAIT_TIMEOUT_SECONDS,
    ENV_OVERRIDE_PREFIX,
    LOG_LEVEL_OFF,
    SUPPORTED_BROWSERS,
)

logger = logging.getLogger(__name__)

CONFIG_SECTIONS = ("vars", "defaults", "environments")

ENV_OVERRIDE_KEYS = {
    "base_url": str,
    "username": str,
    "password": str,
    "expected_username": str,
    "browser_name": str,
    "remote_url": str,
    "driver_path": str,
    "artifacts_dir": str,
    "log_level": str,
    "server_port": int,
    "wait_timeout": float,
    "poll_interval": float,
    "headless": bool,
}


class ConfigLoader:
    """Load and merge YAML configuration with built-in defaults."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS = {
            "base_url": DEFAULT_BASE_URL,
            "username": "username",
            "password": "password",
            "expected_username": None,
            "browser_name": "chrome",
            "headless": False,
            "server_port": DEFAULT_SERVER_PORT,
            "remote_url": "",
            "driver_path": None,
            "driver_paths": dict(DEFAULT_DRIVER_PATHS),
            "wait_timeout": DEFAULT_WAIT_TIMEOUT_SECONDS,
            "poll_interval": DEFAULT_POLL_INTERVAL_SECONDS,
            "log_level": LOG_LEVEL_OFF,
            "artifacts_dir": "tmp/behave",
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Read the YAML config file and resolve its interpolations.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, BASICAUTH_E2E_CONFIG is used,
            then basicauth-e2e.yaml in the working directory

        Returns
        -------
        dict[str, Any]
            The vars, defaults and environments sections with every
            ``${...}`` reference resolved. A missing or empty file yields an
            empty defaults section.

        Raises
        ------
        ValueError
            If the file is not valid YAML or has an unknown top-level section
        omegaconf.errors.InterpolationResolutionError
            If a reference cannot be resolved
        """
        config_file = Path(config_path or os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))

        if not config_file.exists():
            logger.debug("No config file at %s, using built-in defaults", config_file)
            return {"defaults": {}}

        cfg = self._read_yaml(config_file)

        if not cfg:
            return {"defaults": {}}

        if not isinstance(cfg, DictConfig):
            raise ValueError(f"{config_file} must contain a mapping at the top level")

        unknown = sorted(set(cfg.keys()) - set(CONFIG_SECTIONS))
        if unknown:
            raise ValueError(
                f"Unknown section(s) {unknown} in {config_file}. "
                f"Expected only: {list(CONFIG_SECTIONS)}"
            )

        # vars are exposed at the root so ${name} works anywhere in the file
        root_vars = OmegaConf.to_container(cfg.vars, resolve=False) if "vars" in cfg else {}
        merged = OmegaConf.merge(root_vars, cfg)

        try:
            resolved = OmegaConf.to_container(merged, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Unresolved reference in %s: %s", config_file, e)
            raise
        except OmegaConfBaseException as e:
            logger.error("Failed to resolve %s: %s", config_file, e)
            raise ValueError(f"Configuration resolution error in {config_file}: {e}") from e

        return {section: resolved[section] for section in CONFIG_SECTIONS if section in resolved}

    def _read_yaml(self, config_file: Path) -> Any:
        try:
            return OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config file %s: %s", config_file, e)
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_file, e)
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

    def get_settings(
        self,
        config: dict[str, Any],
        env_name: str | None = None,
        environ: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Get merged settings for a named environment or defaults.

        Parameters
        ----------
        config : dict[str, Any]
            Full configuration from YAML
        env_name : str | None
            Name of the environment section to apply, or None for defaults only
        environ : dict[str, str] | None
            Process environment used for BASICAUTH_E2E_* overrides
            (default: os.environ)

        Returns
        -------
        dict[str, Any]
            Merged settings (built-in defaults + YAML defaults + environment
            section + environment variable overrides)

        Raises
        ------
        ValueError
            If env_name is not defined in the configuration
        """
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        yaml_defaults = config.get("defaults") or {}
        for key, value in yaml_defaults.items():
            merged[key] = value

        if env_name is not None:
            environments = config.get("environments") or {}

            if env_name not in environments:
                available = list(environments.keys())

                if not available:
                    raise ValueError(
                        f"Environment '{env_name}' not found in configuration. "
                        f"No environments are defined in the config file."
                    )

                raise ValueError(
                    f"Environment '{env_name}' not found in configuration. "
                    f"Available environments: {available}"
                )

            for key, value in (environments[env_name] or {}).items():
                merged[key] = value

        self._apply_env_overrides(merged, os.environ if environ is None else environ)

        if not merged.get("expected_username"):
            merged["expected_username"] = merged["username"]

        return merged

    def _apply_env_overrides(self, merged: dict[str, Any], environ: Any) -> None:
        """Override single keys from BASICAUTH_E2E_<KEY> environment variables.

        Parameters
        ----------
        merged : dict[str, Any]
            Settings to update in place
        environ : Mapping[str, str]
            Environment to read from

        Raises
        ------
        ValueError
            If an override cannot be converted to the key's type
        """
        for key, expected_type in ENV_OVERRIDE_KEYS.items():
            var_name = f"{ENV_OVERRIDE_PREFIX}{key.upper()}"
            raw = environ.get(var_name)

            if raw is None:
                continue

            if expected_type is bool:
                value: Any = raw.strip().lower() in ("1", "true", "yes", "on")
            else:
                try:
                    value = expected_type(raw)
                except ValueError as e:
                    raise ValueError(
                        f"{var_name} must be {expected_type.__name__}, got '{raw}'"
                    ) from e

            logger.debug("Overriding %s from %s", key, var_name)
            merged[key] = value

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate settings have required fields and correct types.

        Parameters
        ----------
        config : dict[str, Any]
            Merged settings to validate

        Raises
        ------
        ValueError
            If settings are invalid
        """
        self._validate_required_fields(config)
        self._validate_optional_fields(config)
        self._validate_timing(config)
        self._validate_server_port(config)
        self._validate_driver_paths(config)

    def _validate_required_fields(self, config: dict[str, Any]) -> None:
        """Validate required string fields are present and non-empty."""
        for field in ("base_url", "username", "password", "browser_name"):
            if field not in config or config[field] in (None, ""):
                raise ValueError(f"{field} is required")

            if not isinstance(config[field], str):
                raise ValueError(f"{field} must be a string")

        if config["browser_name"] not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"browser_name must be one of {list(SUPPORTED_BROWSERS)}, "
                f"got '{config['browser_name']}'"
            )

        if not config["base_url"].startswith(("http://", "https://")):
            raise ValueError(
                f"base_url must start with http:// or https://, got '{config['base_url']}'"
            )

    def _validate_optional_fields(self, config: dict[str, Any]) -> None:
        optional_validations = {
            "expected_username": (str, "expected_username must be a string"),
            "remote_url": (str, "remote_url must be a string"),
            "driver_path": (str, "driver_path must be a string"),
            "artifacts_dir": (str, "artifacts_dir must be a string"),
            "log_level": (str, "log_level must be a string"),
            "headless": (bool, "headless must be a boolean"),
        }

        for field, (expected_type, type_msg) in optional_validations.items():
            if config.get(field) is not None and not isinstance(
                config[field], expected_type
            ):
                raise ValueError(type_msg)

    def _validate_timing(self, config: dict[str, Any]) -> None:
        for field in ("wait_timeout", "poll_interval"):
            value = config.get(field)

            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{field} must be a number")

            if value <= 0:
                raise ValueError(f"{field} must be positive")

        if config["poll_interval"] > config["wait_timeout"]:
            raise ValueError("poll_interval cannot exceed wait_timeout")

    def _validate_server_port(self, config: dict[str, Any]) -> None:
        port = config.get("server_port")

        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError("server_port must be an integer")

        if not (1 <= port <= 65535):
            raise ValueError("server_port must be between 1 and 65535")

    def _validate_driver_paths(self, config: dict[str, Any]) -> None:
        driver_paths = config.get("driver_paths")

        if driver_paths is None:
            return

        if not isinstance(driver_paths, dict):
            raise ValueError("driver_paths must be a dictionary")

        for platform_name, path in driver_paths.items():
            if not isinstance(path, str):
                raise ValueError(
                    f"driver_paths entry for '{platform_name}' must be a string"
                )


def load_settings(
    config_path: str | None = None, env_name: str | None = None
) -> dict[str, Any]:
    """Load, merge and validate settings in one call.

    Parameters
    ----------
    config_path : str | None
        Path to YAML config file (default: BASICAUTH_E2E_CONFIG or
        basicauth-e2e.yaml)
    env_name : str | None
        Environment section to apply

    Returns
    -------
    dict[str, Any]
        Validated settings
    """
    loader = ConfigLoader()
    config = loader.load_config(config_path)
    settings = loader.get_settings(config, env_name=env_name)
    loader.validate_config(settings)
    return settings
