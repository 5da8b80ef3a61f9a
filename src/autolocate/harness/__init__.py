"""
Harness Module - Step pacing, failure capture and console helpers.
"""

from autolocate.harness.console_helpers import CONSOLE_HELPERS, CONSOLE_HELPERS_JS
from autolocate.harness.diagnostics import FailureDiagnostics, FailureReport, failure_timestamp
from autolocate.harness.step import HarnessState, StepHarness

__all__ = [
    "CONSOLE_HELPERS",
    "CONSOLE_HELPERS_JS",
    "FailureDiagnostics",
    "FailureReport",
    "failure_timestamp",
    "HarnessState",
    "StepHarness",
]
