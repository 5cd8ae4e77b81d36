"""Core basicauth-e2e functionality."""

from __future__ import annotations

from basicauth_e2e.core.config import ConfigLoader, load_settings

__all__ = ["ConfigLoader", "load_settings"]
