"""Exception hierarchy for basicauth-e2e."""


class BasicAuthE2EError(Exception):
    """Base exception for all basicauth-e2e errors."""

    pass


class SessionStartError(BasicAuthE2EError):
    """Raised when the automation server or browser session cannot start.

    Unrecoverable: the suite run is aborted.
    """

    pass


class StepTimeoutError(BasicAuthE2EError):
    """Raised when a DOM poll gives up before its condition holds.

    Parameters
    ----------
    selector : str
        CSS selector that was being polled
    timeout : float
        Seconds waited before giving up
    """

    def __init__(self, selector: str, timeout: float) -> None:
        self.selector = selector
        self.timeout = timeout
        super().__init__(
            f"Timed out after {timeout:g}s waiting for element '{selector}'"
        )


class UnexpectedTextError(AssertionError):
    """Raised when an element's text differs from the expected value.

    Parameters
    ----------
    selector : str
        CSS selector of the inspected element
    expected : str
        Expected text
    actual : str
        Text actually rendered
    """

    def __init__(self, selector: str, expected: str, actual: str) -> None:
        self.selector = selector
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Unexpected text in '{selector}': expected {expected!r}, got {actual!r}"
        )
