"""
Element resolution exceptions.

Sub-strategies never raise these; they are surfaced once, at the action
boundary, after every fallback has been tried.
"""

from autolocate.exceptions.base import AutolocateError

DEFAULT_REMEDIATION = (
    "Add a stable attribute such as data-testid or aria-label to the element, "
    "or pass a more specific hint."
)


class ResolutionError(AutolocateError):
    """Base exception for element resolution errors."""

    def __init__(self, message: str, hint: str, details: dict | None = None):
        super().__init__(message, {"hint": hint, **(details or {})})
        self.hint = hint


class ElementNotFoundError(ResolutionError):
    """
    No element matched the hint.

    Raised when every strategy (scoring, fallbacks, proximity, positional)
    came up empty.
    """

    def __init__(self, message: str, hint: str, remediation: str = DEFAULT_REMEDIATION):
        super().__init__(f"{message}. {remediation}", hint)
        self.remediation = remediation

    def __str__(self) -> str:
        return self.message


class VisibilityTimeoutError(ResolutionError):
    """
    Element did not become visible in time.

    Attributes:
        timeout_ms: Configured timeout
        elapsed_ms: Time actually spent polling
        last_error: Last underlying failure, if any
    """

    def __init__(
        self,
        hint: str,
        timeout_ms: int,
        elapsed_ms: int,
        last_error: BaseException | None = None,
    ):
        message = f"Visibility check failed for {hint} after {elapsed_ms}ms (timeout {timeout_ms}ms)."
        if last_error is not None:
            message = f"{message} Last error: {last_error}"
        super().__init__(
            message,
            hint,
            {"timeout_ms": timeout_ms, "elapsed_ms": elapsed_ms},
        )
        self.timeout_ms = timeout_ms
        self.elapsed_ms = elapsed_ms
        self.last_error = last_error
