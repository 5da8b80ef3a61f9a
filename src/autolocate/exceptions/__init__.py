"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout autolocate,
providing clear error types for different failure scenarios.
"""

from autolocate.exceptions.base import (
    AutolocateError,
    ConfigurationError,
)
from autolocate.exceptions.resolution import (
    DEFAULT_REMEDIATION,
    ResolutionError,
    ElementNotFoundError,
    VisibilityTimeoutError,
)
from autolocate.exceptions.action import (
    ActionError,
    ActionExecutionError,
)
from autolocate.exceptions.session import (
    SessionError,
    BrowserLaunchError,
    HarnessStateError,
)

__all__ = [
    # Base exceptions
    "AutolocateError",
    "ConfigurationError",
    # Resolution exceptions
    "DEFAULT_REMEDIATION",
    "ResolutionError",
    "ElementNotFoundError",
    "VisibilityTimeoutError",
    # Action exceptions
    "ActionError",
    "ActionExecutionError",
    # Session exceptions
    "SessionError",
    "BrowserLaunchError",
    "HarnessStateError",
]
