"""
Action-related exceptions.
"""

from autolocate.exceptions.base import AutolocateError


class ActionError(AutolocateError):
    """Base exception for action-related errors."""
    pass


class ActionExecutionError(ActionError):
    """
    Error during action execution.

    Raised when an element was resolved but every interaction mechanism
    (e.g. click, then dispatched click event) failed.
    """

    def __init__(self, message: str, action_type: str, hint: str | None = None):
        super().__init__(message, {"action_type": action_type, "hint": hint})
        self.action_type = action_type
        self.hint = hint
