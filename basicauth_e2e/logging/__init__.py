"""Logging helpers for basicauth-e2e."""

from basicauth_e2e.logging.filters import StreamRoutingFilter
from basicauth_e2e.logging.formatters import StreamFormatter

__all__ = ["StreamFormatter", "StreamRoutingFilter"]
