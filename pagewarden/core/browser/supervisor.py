"""
Browser Process Supervisor

Owns the Playwright driver, the browser process and its context: start with
a persistent profile (falling back to a throwaway browser), health checks,
stop and restart.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page

from ...config import BrowserConfig
from ..errors import SessionStartError
from .events import SessionEvents, SESSION_STARTED, SESSION_STOPPED, SESSION_RESTARTED
from .tabs import TabRegistry

logger = logging.getLogger(__name__)

CLIPBOARD_PERMISSIONS = ['clipboard-read', 'clipboard-write']


class BrowserSession:
    """
    One supervised browser process/context pair.

    Sessions are constructed explicitly and may coexist, e.g. one per
    browser id label. `start()` may be called freely: it is a no-op while a
    context is held.
    """

    def __init__(self, config: Optional[BrowserConfig] = None,
                 events: Optional[SessionEvents] = None,
                 playwright_factory: Callable[[], Any] = async_playwright):
        """
        Args:
            config: Launch, timeout and retry configuration
            events: Observer hooks; a private dispatcher is created if omitted
            playwright_factory: Returns an object whose ``start()`` yields a Playwright driver
        """
        self.config = config or BrowserConfig()
        self.events = events or SessionEvents()
        self._playwright_factory = playwright_factory

        # Browser instances
        self.playwright = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.launch_strategy: Optional[str] = None

        self.tabs = TabRegistry(self._context_pages)
        self.consecutive_failures = 0

    @property
    def prefix(self) -> str:
        return self.config.log_prefix

    @property
    def page(self) -> Optional[Page]:
        """The current page."""
        return self.tabs.current

    @page.setter
    def page(self, value: Optional[Page]) -> None:
        self.tabs.current = value

    @property
    def is_started(self) -> bool:
        return self.context is not None

    async def start(self) -> None:
        """Launch the browser and select an initial page."""
        if self.context is not None:
            logger.debug(f"{self.prefix}Browser session already started")
            return

        logger.info(f"🟢 {self.prefix}Starting browser session...")
        logger.info(f"   📂 UserDataDir: {self.config.user_data_dir}")

        try:
            self.playwright = await self._playwright_factory().start()
            self.context = await self._launch_context()
        except Exception as e:
            logger.error(f"❌ {self.prefix}Browser session failed to start: {e}")
            await self._release_partial_start()
            raise SessionStartError(
                f"Browser session failed to start: {e}",
                details={'user_data_dir': self.config.user_data_dir},
            ) from e

        if self.config.grant_clipboard:
            await self._grant_clipboard_permissions()
        await self._select_initial_page()

        self.consecutive_failures = 0
        logger.info(f"✅ {self.prefix}Browser session started ({self.launch_strategy})")
        await self.events.emit(
            SESSION_STARTED,
            browser_id=self.config.browser_id,
            launch_strategy=self.launch_strategy,
        )

    async def _launch_context(self) -> BrowserContext:
        chromium = self.playwright.chromium
        options = self._launch_options()

        try:
            logger.info(f"📌 {self.prefix}Launching persistent context...")
            Path(self.config.user_data_dir).mkdir(parents=True, exist_ok=True)
            context = await chromium.launch_persistent_context(
                self.config.user_data_dir,
                no_viewport=True,
                **options
            )
            self.launch_strategy = 'persistent'
            return context
        except Exception as e:
            logger.warning(
                f"⚠️ {self.prefix}Persistent context failed ({e}), "
                f"falling back to a non-persistent browser..."
            )

        self.browser = await chromium.launch(**options)
        context = await self.browser.new_context(no_viewport=True)
        self.launch_strategy = 'ephemeral'
        return context

    def _launch_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {'headless': self.config.headless}
        if self.config.channel:
            options['channel'] = self.config.channel

        if self.config.proxy:
            logger.info(f"🌐 {self.prefix}Using proxy: {self.config.proxy.server}")
            options['proxy'] = self.config.proxy.to_playwright()
        else:
            logger.info(f"🌐 {self.prefix}No proxy configured")
        return options

    async def _grant_clipboard_permissions(self) -> None:
        try:
            await self.context.grant_permissions(CLIPBOARD_PERMISSIONS)
            logger.info(f"✅ {self.prefix}Clipboard permissions granted")
        except Exception as e:
            logger.warning(f"⚠️ {self.prefix}Could not grant clipboard permissions: {e}")

    async def _select_initial_page(self) -> None:
        try:
            pages = self.context.pages
            if pages:
                self.page = pages[0]
            else:
                self.page = await self.context.new_page()
        except Exception as e:
            logger.warning(f"⚠️ {self.prefix}Could not open initial page: {e}")

    async def _release_partial_start(self) -> None:
        browser, playwright = self.browser, self.playwright
        self.browser = None
        self.playwright = None
        self.context = None
        self.launch_strategy = None

        if browser:
            try:
                await browser.close()
            except Exception as e:
                logger.debug(f"Browser close after failed start: {e}")
        if playwright:
            try:
                await playwright.stop()
            except Exception as e:
                logger.debug(f"Driver stop after failed start: {e}")

    async def is_healthy(self) -> bool:
        """Probe the context; never raises."""
        if self.context is None:
            logger.debug(f"🔍 {self.prefix}Health check: no context")
            return False

        try:
            pages = self.context.pages
            logger.debug(f"🔍 {self.prefix}Health check: context valid, {len(pages)} page(s)")
            return True
        except Exception as e:
            logger.warning(f"🔍 {self.prefix}Health check: context broken - {e}")
            return False

    async def stop(self) -> None:
        """Close context, browser and driver; handles are cleared even if closing fails."""
        logger.info(f"🔄 {self.prefix}Stopping browser session...")

        if self.context:
            try:
                await self.context.close()
                logger.info(f"✅ {self.prefix}Browser context closed")
            except Exception as e:
                logger.error(f"❌ {self.prefix}Failed to close browser context: {e}")
        else:
            logger.info(f"⚠️ {self.prefix}Browser context already empty, skipping close")

        if self.browser:
            try:
                await self.browser.close()
                logger.info(f"✅ {self.prefix}Browser instance closed")
            except Exception as e:
                logger.error(f"❌ {self.prefix}Failed to close browser instance: {e}")

        if self.playwright:
            try:
                await self.playwright.stop()
            except Exception as e:
                logger.error(f"❌ {self.prefix}Failed to stop Playwright driver: {e}")

        self.context = None
        self.browser = None
        self.playwright = None
        self.launch_strategy = None
        self.tabs.clear()

        await self.events.emit(SESSION_STOPPED, browser_id=self.config.browser_id)

    async def restart(self) -> None:
        """Stop, wait, start again."""
        logger.info(f"🔄 {self.prefix}Restarting browser session...")
        await self.stop()
        await asyncio.sleep(self.config.retry.restart_delay / 1000)
        await self.start()
        logger.info(f"✅ {self.prefix}Browser session restarted")
        await self.events.emit(SESSION_RESTARTED, browser_id=self.config.browser_id)

    def _context_pages(self) -> List[Page]:
        return list(self.context.pages) if self.context else []

    def open_pages(self) -> List[Page]:
        """Pages of the context that are still open, in context order."""
        return [p for p in self._context_pages() if not p.is_closed()]

    def first_open_page(self) -> Optional[Page]:
        pages = self.open_pages()
        return pages[0] if pages else None

    async def new_page(self) -> Page:
        return await self.context.new_page()

    async def __aenter__(self) -> 'BrowserSession':
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
