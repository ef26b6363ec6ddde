"""
Exception hierarchy for browser session management.

- Startup failures (no context could be obtained)
- Page-closed failures (never retried)
- Element lookup failures
- Final failures after the retry budget is exhausted
"""

from typing import Optional


class BrowserSessionError(Exception):
    """
    Base exception for all pagewarden errors.

    Catch `BrowserSessionError` to handle any session-level failure.
    """

    def __init__(self, message: str, *, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details or {}


class SessionStartError(BrowserSessionError):
    """Raised when neither a persistent nor an ephemeral context could be launched."""
    pass


class PageClosedError(BrowserSessionError):
    """
    Raised when the target page, context or browser has already terminated.

    The retry orchestrator never retries these; callers decide whether to
    restart the whole session.
    """
    pass


class PageNotInitializedError(PageClosedError):
    """Raised when no open page can be resolved for an operation."""

    def __init__(self, message: str = "Page not initialized or closed", *,
                 details: Optional[dict] = None):
        super().__init__(message, details=details)


class ElementNotFoundError(BrowserSessionError):
    """Raised when a selector resolves to no element."""

    def __init__(self, selector: str, *, details: Optional[dict] = None):
        super().__init__(f"Element not found: {selector}", details=details)
        self.selector = selector


class OperationFailedError(BrowserSessionError):
    """Raised when an operation keeps failing after every retry attempt."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        attempts: int,
        last_error: Optional[BaseException] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details=details)
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
