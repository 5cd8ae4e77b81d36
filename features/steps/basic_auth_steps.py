"""Step definitions for the basic auth login feature."""

from behave import step, use_step_matcher

from basicauth_e2e.steps import build_registry

use_step_matcher("re")

registry = build_registry()
registry.bind(step)

use_step_matcher("parse")
