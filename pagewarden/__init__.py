"""
pagewarden: Resilient Browser Session Manager

Keeps one Playwright-driven browser alive behind a small control surface
(navigate, click, type, snapshot, screenshot, content, tabs) and retries
operations across crashes, closed pages and flaky navigations.

Key Components:
- Core: Process supervision, tab registry, navigation, page operations
- Session: Retry orchestration and the request-handler facade
- Config: Browser, timeout and retry configuration
"""

from .config import BrowserConfig, ProxyConfig, RetryConfig, TimeoutConfig
from .core import (
    BrowserSession, SessionEvents, SessionManager, Operation,
    BrowserSessionError, ElementNotFoundError, OperationFailedError,
    PageClosedError, PageNotInitializedError, SessionStartError,
)

__version__ = "1.0.0"

__all__ = [
    # Core
    'SessionManager', 'BrowserSession', 'SessionEvents', 'Operation',

    # Configuration
    'BrowserConfig', 'ProxyConfig', 'RetryConfig', 'TimeoutConfig',

    # Errors
    'BrowserSessionError', 'ElementNotFoundError', 'OperationFailedError',
    'PageClosedError', 'PageNotInitializedError', 'SessionStartError'
]
