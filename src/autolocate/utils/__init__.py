"""
Utilities module - Common utility functions.
"""

from autolocate.utils.logging import JsonLinesFormatter, setup_logging
from autolocate.utils.polling import Deadline, budget, now_ms

__all__ = [
    "setup_logging",
    "JsonLinesFormatter",
    "Deadline",
    "budget",
    "now_ms",
]
