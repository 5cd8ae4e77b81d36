"""End-to-end browser tests for the basic auth login flow."""

__version__ = "0.1.0"
