"""Logging formatters for stream routing."""

import logging


class StreamFormatter(logging.Formatter):
    """Logging formatter that prepends scenario and stream tags from extra."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with scenario and stream prefixes if present.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format

        Returns
        -------
        str
            Formatted log message with optional prefixes
        """
        msg = super().format(record)

        scenario = getattr(record, "scenario", None)
        if scenario:
            msg = f"[{scenario}] {msg}"

        stream = getattr(record, "stream", None)

        if stream == "stdout":
            return f"[stdout] {msg}"
        elif stream == "stderr":
            return f"[stderr] {msg}"

        return msg
