"""Command line entry point for basicauth-e2e."""

from __future__ import annotations

from basicauth_e2e.cli.main import BasicAuthE2ECLI, build_behave_args, main, run_behave

__all__ = ["BasicAuthE2ECLI", "build_behave_args", "main", "run_behave"]
