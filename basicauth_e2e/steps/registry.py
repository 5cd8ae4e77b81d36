"""Ordered step pattern to handler table."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

SESSION_ATTRIBUTE = "browser_session"
"""Attribute of the behave context holding the scenario's ScenarioSession."""


@dataclass(frozen=True)
class StepDefinition:
    """One row of the step table.

    Attributes
    ----------
    pattern : str
        Anchored regular expression; named groups become handler kwargs
    handler : Callable[..., None]
        Called with the ScenarioSession and the matched groups
    """

    pattern: str
    handler: Callable[..., None]

    @property
    def regex(self) -> re.Pattern[str]:
        return re.compile(self.pattern)


class StepRegistry:
    """Explicit table of step patterns checked in registration order.

    The table is built once. After ``freeze`` (or ``bind``) it can no longer
    change.
    """

    def __init__(self) -> None:
        self._definitions: list[StepDefinition] = []
        self._frozen = False

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, pattern: str, handler: Callable[..., None]) -> None:
        """Append a pattern/handler pair.

        Raises
        ------
        RuntimeError
            If the registry is frozen
        ValueError
            If pattern is already registered or is not a valid regex
        """
        if self._frozen:
            raise RuntimeError("Step registry is frozen; register steps before binding")

        if any(d.pattern == pattern for d in self._definitions):
            raise ValueError(f"Step pattern already registered: {pattern}")

        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid step pattern '{pattern}': {e}") from e

        self._definitions.append(StepDefinition(pattern=pattern, handler=handler))

    def freeze(self) -> None:
        self._frozen = True

    def match(self, text: str) -> tuple[StepDefinition, dict[str, str]] | None:
        """Find the first definition matching step text.

        Returns
        -------
        tuple[StepDefinition, dict[str, str]] | None
            Matching definition and its named groups, or None
        """
        for definition in self._definitions:
            found = definition.regex.match(text)
            if found:
                return definition, found.groupdict()

        return None

    def run(self, session: Any, text: str) -> None:
        """Dispatch step text directly to its handler.

        Raises
        ------
        LookupError
            If no definition matches text
        """
        result = self.match(text)

        if result is None:
            raise LookupError(f"No step definition matches: {text}")

        definition, kwargs = result
        definition.handler(session, **kwargs)

    def bind(self, step_decorator: Callable[[str], Callable]) -> None:
        """Register every definition with the scenario runner and freeze.

        Parameters
        ----------
        step_decorator : Callable[[str], Callable]
            Runner decorator factory, e.g. ``behave.step`` with the regex
            step matcher active
        """
        for definition in self._definitions:
            step_decorator(definition.pattern)(_runner_adapter(definition.handler))
            logger.debug("Bound step: %s", definition.pattern)

        self.freeze()


def _runner_adapter(handler: Callable[..., None]) -> Callable[..., None]:
    """Wrap a handler so it pulls the ScenarioSession off the runner context."""

    def run_step(context: Any, **kwargs: str) -> None:
        session = getattr(context, SESSION_ATTRIBUTE, None)
        if session is None:
            raise RuntimeError("No browser session is open for this scenario")
        handler(session, **kwargs)

    run_step.__name__ = handler.__name__
    run_step.__doc__ = handler.__doc__
    return run_step
