"""
Browser Management Module

Handles browser lifecycle, tab tracking, navigation and page interactions.
"""

from .events import SessionEvents
from .navigation import NavigationEngine
from .operations import PageOperations, TabAction
from .results import (
    ActionResult, ContentElement, ContentResult, NavigationResult,
    ScreenshotResult, SnapshotResult, TabCloseResult, TabInfo, TabsResult,
)
from .supervisor import BrowserSession
from .tabs import Tab, TabRegistry

__all__ = [
    'BrowserSession', 'SessionEvents', 'NavigationEngine', 'PageOperations',
    'TabAction', 'Tab', 'TabRegistry',
    'ActionResult', 'ContentElement', 'ContentResult', 'NavigationResult',
    'ScreenshotResult', 'SnapshotResult', 'TabCloseResult', 'TabInfo', 'TabsResult'
]
