"""
Browser Session Manager

Wraps every page operation in bounded fixed-delay retries with a health
pre-check, and exposes the small facade used by request handlers.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Union

from playwright.async_api import async_playwright, Page

from ...config import BrowserConfig
from ...utils.error_handler import ErrorKind, ErrorLog, classify_error
from ..browser.events import SessionEvents, ATTEMPT, FAILED, HEALTH_CHECK, SUCCEEDED
from ..browser.navigation import NavigationEngine
from ..browser.operations import PageOperations
from ..browser.results import ContentResult, NavigationResult, TabCloseResult
from ..browser.supervisor import BrowserSession
from ..errors import OperationFailedError, PageClosedError
from .commands import Operation, build_params

logger = logging.getLogger(__name__)

DEFAULT_INVOKE_TIMEOUT = 30000


class SessionManager:
    """
    Resilient control surface over one browser session.

    Calls are serialized with an asyncio lock; a manager is meant to be
    shared by sequential callers, and several managers can run side by side.
    """

    def __init__(self, config: Optional[BrowserConfig] = None,
                 events: Optional[SessionEvents] = None,
                 playwright_factory: Callable[[], Any] = async_playwright):
        self.config = config or BrowserConfig()
        self.events = events or SessionEvents()
        self.session = BrowserSession(self.config, self.events, playwright_factory)
        self.navigation = NavigationEngine(self.session)
        self.operations = PageOperations(self.session)
        self.error_log = ErrorLog()
        self._lock = asyncio.Lock()

        ops = self.operations
        self._handlers: Dict[Operation, Callable] = {
            Operation.NAVIGATE: lambda p, tab: self.navigation.navigate(p.url, p.is_new, p.label),
            Operation.CLICK: lambda p, tab: ops.click(p.selector, p.ref, p.element, tab_id=tab),
            Operation.TYPE: lambda p, tab: ops.type(p.selector, p.ref, p.element, p.text, tab_id=tab),
            Operation.SNAPSHOT: lambda p, tab: ops.snapshot(tab_id=tab),
            Operation.TABS: lambda p, tab: ops.get_tabs(p.action, p.index),
            Operation.CLOSE_CURRENT_TAB: lambda p, tab: ops.close_current_tab(tab),
            Operation.RELOAD: lambda p, tab: ops.reload(tab_id=tab),
            Operation.SCREENSHOT: lambda p, tab: ops.screenshot(
                p.path, p.selector, p.full_page, tab_id=tab),
            Operation.GET_CONTENT: lambda p, tab: ops.get_content(p.selector),
        }

    @property
    def prefix(self) -> str:
        return self.config.log_prefix

    @property
    def current_page(self) -> Optional[Page]:
        return self.session.page

    async def invoke(self, operation: Union[Operation, str], params: Any = None,
                     timeout_ms: int = DEFAULT_INVOKE_TIMEOUT,
                     tab_id: Optional[str] = None) -> Any:
        """
        Run an operation with health checks and bounded retries.

        Args:
            operation: Operation kind or its string value
            params: Parameter record or mapping for the operation
            timeout_ms: Caller's time budget, reported in logs and events;
                operations enforce their own configured timeouts
            tab_id: Tab identifier or URL keyword selecting the page

        Returns:
            The operation's result object

        Raises:
            PageClosedError: The page or session was closed (not retried)
            OperationFailedError: Every attempt failed
        """
        operation = Operation(operation)
        params = build_params(operation, params)

        async with self._lock:
            return await self._invoke_with_retry(operation, params, timeout_ms, tab_id)

    async def _invoke_with_retry(self, operation: Operation, params: Any,
                                 timeout_ms: int, tab_id: Optional[str]) -> Any:
        retry = self.config.retry
        name = operation.value
        tab_note = f" [tab: {tab_id}]" if tab_id else ""
        last_error: Optional[BaseException] = None
        last_kind: Optional[ErrorKind] = None

        for attempt in range(1, retry.max_attempts + 1):
            logger.info(f"🔄 {self.prefix}Calling {name} (attempt {attempt}){tab_note}")
            await self.events.emit(ATTEMPT, operation=name, attempt=attempt,
                                   tab_id=tab_id, timeout_ms=timeout_ms)
            try:
                if attempt == 1 or self.session.consecutive_failures > 0:
                    if last_kind is not ErrorKind.CLOSED:
                        await self._preflight()
                if not self.session.is_started:
                    await self.session.start()

                result = await self._handlers[operation](params, tab_id)

            except Exception as e:
                kind = classify_error(e)
                last_error, last_kind = e, kind
                url = self._page_url(tab_id)
                self.error_log.record(e, name, attempt, url=url, kind=kind, tab_id=tab_id)
                await self.events.emit(FAILED, operation=name, attempt=attempt,
                                       kind=kind, error=e, tab_id=tab_id)

                if not kind.retryable:
                    logger.error(f"❌ {self.prefix}Page closed or not found during {name}: {e}")
                    raise PageClosedError(
                        f"Page closed: {e}",
                        details={'operation': name, 'attempt': attempt, 'tab_id': tab_id},
                    ) from e

                self.session.consecutive_failures += 1
                logger.error(
                    f"❌ {self.prefix}{name} failed (attempt {attempt}){tab_note} "
                    f"[page: {url or 'no page found'}] [{kind.value}]: {e}"
                )
                if attempt < retry.max_attempts:
                    logger.info(f"⏳ Waiting {retry.retry_delay}ms before retrying...")
                    await asyncio.sleep(retry.retry_delay / 1000)
                continue

            self.session.consecutive_failures = 0
            logger.info(f"✅ {self.prefix}{name} succeeded (attempt {attempt})")
            await self.events.emit(SUCCEEDED, operation=name, attempt=attempt, tab_id=tab_id)
            return result

        logger.error(f"💥 {self.prefix}{name} failed after {retry.max_attempts} attempts")
        raise OperationFailedError(
            f"Operation failed: {name} - {last_error}",
            operation=name,
            attempts=retry.max_attempts,
            last_error=last_error,
            details={'tab_id': tab_id, 'timeout_ms': timeout_ms},
        ) from last_error

    async def _preflight(self) -> None:
        healthy = await self.session.is_healthy()
        await self.events.emit(HEALTH_CHECK, healthy=healthy)
        if healthy:
            return

        if not self.session.is_started:
            await self.session.start()
        else:
            logger.warning(f"🩺 {self.prefix}Browser context unhealthy, restarting...")
            await self.session.restart()

    def _page_url(self, tab_id: Optional[str]) -> str:
        try:
            page = self.session.tabs.resolve(tab_id)
            return page.url if page else ''
        except Exception:
            return ''

    async def ensure_started(self) -> None:
        """Start the session unless it is already running."""
        async with self._lock:
            await self.session.start()

    async def navigate(self, url: str, is_new: bool = False,
                       label: Optional[str] = None) -> NavigationResult:
        async with self._lock:
            return await self.navigation.navigate(url, is_new, label)

    async def extract_content(self, selector: str) -> ContentResult:
        async with self._lock:
            return await self.operations.get_content(selector)

    async def close_current_tab(self, tab_id: Optional[str] = None) -> TabCloseResult:
        async with self._lock:
            return await self.operations.close_current_tab(tab_id)

    async def is_healthy(self) -> bool:
        return await self.session.is_healthy()

    async def restart(self) -> None:
        async with self._lock:
            await self.session.restart()

    async def stop(self) -> None:
        async with self._lock:
            await self.session.stop()

    def get_error_summary(self) -> Dict[str, Any]:
        return self.error_log.get_error_summary()

    async def __aenter__(self) -> 'SessionManager':
        await self.ensure_started()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
