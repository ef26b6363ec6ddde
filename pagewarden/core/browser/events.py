"""
Session Event Handling

Observer hooks for session lifecycle and retry activity, so callers can
collect logs or metrics without touching control flow.
"""

import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

SESSION_STARTED = 'session_started'
SESSION_STOPPED = 'session_stopped'
SESSION_RESTARTED = 'session_restarted'
HEALTH_CHECK = 'health_check'
ATTEMPT = 'attempt'
SUCCEEDED = 'succeeded'
FAILED = 'failed'
TAB_REGISTERED = 'tab_registered'
TAB_CLOSED = 'tab_closed'

EVENT_NAMES = (
    SESSION_STARTED, SESSION_STOPPED, SESSION_RESTARTED, HEALTH_CHECK,
    ATTEMPT, SUCCEEDED, FAILED, TAB_REGISTERED, TAB_CLOSED,
)


class SessionEvents:
    """Centralized session event dispatcher."""

    def __init__(self):
        self.handlers: Dict[str, List[Callable]] = defaultdict(list)

    def add_handler(self, event: str, handler: Callable) -> None:
        """Register a sync or async handler for an event."""
        if event not in EVENT_NAMES:
            raise ValueError(f"Unknown session event: {event}")
        self.handlers[event].append(handler)

    def remove_handler(self, event: str, handler: Callable) -> None:
        """Remove a previously registered handler."""
        if handler in self.handlers.get(event, []):
            self.handlers[event].remove(handler)

    async def emit(self, event: str, **payload: Any) -> None:
        """Call every handler for an event; handler errors are logged, not raised."""
        for handler in list(self.handlers.get(event, [])):
            try:
                result = handler(event, **payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Error in {event} handler: {e}")
