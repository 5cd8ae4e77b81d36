"""Logging filters routing records to stdout or stderr."""

import logging


class StreamRoutingFilter(logging.Filter):
    """Pass only the records destined for one output stream.

    A record goes to the stream named by its ``stream`` extra. Without one,
    WARNING and above go to stderr and everything else to stdout.

    Parameters
    ----------
    stream : str
        Stream this filter admits, "stdout" or "stderr"
    """

    def __init__(self, stream: str) -> None:
        super().__init__()
        if stream not in ("stdout", "stderr"):
            raise ValueError(f"stream must be 'stdout' or 'stderr', got '{stream}'")
        self.stream = stream

    def filter(self, record: logging.LogRecord) -> bool:
        target = getattr(record, "stream", None)

        if target not in ("stdout", "stderr"):
            target = "stderr" if record.levelno >= logging.WARNING else "stdout"

        return target == self.stream
