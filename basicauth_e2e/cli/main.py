"""CLI entry point for basicauth-e2e."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

import fire
import yaml

from basicauth_e2e.constants import DEBUG_ENV_VAR, USERDATA_CONFIG_KEY, USERDATA_ENV_KEY
from basicauth_e2e.core.config import load_settings
from basicauth_e2e.logging import StreamFormatter, StreamRoutingFilter

DEFAULT_FEATURES_PATH = "features"

for _noisy_module in ["selenium", "urllib3"]:
    logging.getLogger(_noisy_module).setLevel(logging.WARNING)


def _split_tags(tags: str | Sequence[str] | None) -> list[str]:
    if tags is None:
        return []

    if isinstance(tags, str):
        return [tag.strip() for tag in tags.split(";") if tag.strip()]

    return [str(tag) for tag in tags]


def build_behave_args(
    paths: Sequence[str] = (),
    format: str = "progress",
    color: bool = True,
    tags: str | Sequence[str] | None = None,
    env: str | None = None,
    config: str | None = None,
    stop: bool = False,
) -> list[str]:
    """Translate CLI options into behave's argv.

    Parameters
    ----------
    paths : Sequence[str]
        Feature files or directories (default: features)
    format : str
        Behave formatter name
    color : bool
        Use ANSI colors in the output
    tags : str | Sequence[str] | None
        Tag expressions; a string may hold several separated by ';'
    env : str | None
        Environment section passed through behave userdata
    config : str | None
        Config file path passed through behave userdata
    stop : bool
        Stop at the first failing scenario

    Returns
    -------
    list[str]
        Arguments for behave's main()
    """
    args = ["--format", format, "--color" if color else "--no-color"]

    for tag in _split_tags(tags):
        args.extend(["--tags", tag])

    if config:
        args.extend(["-D", f"{USERDATA_CONFIG_KEY}={config}"])

    if env:
        args.extend(["-D", f"{USERDATA_ENV_KEY}={env}"])

    if stop:
        args.append("--stop")

    args.extend(paths or [DEFAULT_FEATURES_PATH])
    return args


def run_behave(args: list[str]) -> int:
    """Run behave in-process and return its exit status."""
    from behave.__main__ import main as behave_main

    logging.getLogger(__name__).debug("Running behave %s", " ".join(args))
    return behave_main(args)


class BasicAuthE2ECLI:
    """Browser end-to-end tests for the basic auth login flow."""

    def run(
        self,
        *paths: str,
        format: str = "progress",
        color: bool = True,
        tags: str | None = None,
        env: str | None = None,
        config: str | None = None,
        stop: bool = False,
        verbose: bool = False,
    ) -> None:
        """Run the login scenarios and exit with the runner's status.

        Parameters
        ----------
        paths : str
            Feature files or directories (default: features)
        format : str
            Behave formatter, e.g. progress, pretty, plain
        color : bool
            Colored output; pass --nocolor to disable
        tags : str | None
            Tag expression(s), several separated by ';'
        env : str | None
            Named environment from the config file
        config : str | None
            Path to the YAML config file
        stop : bool
            Stop at the first failure
        verbose : bool
            Enable debug logging
        """
        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        load_settings(config_path=config, env_name=env)

        status = run_behave(
            build_behave_args(
                paths=paths,
                format=format,
                color=color,
                tags=tags,
                env=env,
                config=config,
                stop=stop,
            )
        )
        sys.exit(status)

    def config(self, env: str | None = None, config: str | None = None) -> str:
        """Print the resolved settings as YAML with the password masked.

        Parameters
        ----------
        env : str | None
            Named environment from the config file
        config : str | None
            Path to the YAML config file

        Returns
        -------
        str
            YAML document of the merged settings
        """
        settings: dict[str, Any] = dict(load_settings(config_path=config, env_name=env))

        if settings.get("password"):
            settings["password"] = "********"

        return yaml.safe_dump(settings, sort_keys=True, default_flow_style=False)


def handle_value_error(error: ValueError, debug_mode: bool) -> None:
    """Report a configuration error and exit with status 2.

    Raises
    ------
    ValueError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(2)


def handle_runtime_error(error: RuntimeError, debug_mode: bool) -> None:
    if debug_mode:
        raise error

    print(f"Unexpected error: {error}", file=sys.stderr)
    sys.exit(1)


def configure_logging(level: int = logging.INFO) -> None:
    """Route log records to stdout/stderr with stream-aware formatting."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(StreamFormatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(StreamFormatter("%(levelname)s: %(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    logging.basicConfig(
        level=level,
        handlers=[stdout_handler, stderr_handler],
        force=True,
    )


def main() -> None:
    """Entry point for the Fire CLI with graceful error handling.

    Fire maps BasicAuthE2ECLI methods to subcommands (``run``, ``config``).
    Set BASICAUTH_E2E_DEBUG=1 to get tracebacks instead of short messages.
    """
    configure_logging()

    debug_mode = os.environ.get(DEBUG_ENV_VAR) == "1"

    try:
        fire.Fire(BasicAuthE2ECLI(), name="basicauth-e2e")
    except ValueError as e:
        handle_value_error(e, debug_mode)
    except RuntimeError as e:
        handle_runtime_error(e, debug_mode)
