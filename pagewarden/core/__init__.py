"""
Core pagewarden Components

This package contains the fundamental building blocks:
- Browser process supervision and tab tracking
- Navigation and page operations
- Retrying session manager
"""

from .browser import BrowserSession, SessionEvents, TabRegistry
from .errors import (
    BrowserSessionError, ElementNotFoundError, OperationFailedError,
    PageClosedError, PageNotInitializedError, SessionStartError,
)
from .session import Operation, SessionManager

__all__ = [
    'BrowserSession', 'SessionEvents', 'TabRegistry',
    'SessionManager', 'Operation',
    'BrowserSessionError', 'ElementNotFoundError', 'OperationFailedError',
    'PageClosedError', 'PageNotInitializedError', 'SessionStartError'
]
