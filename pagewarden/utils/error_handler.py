"""
Error Handling Utility

Classifies transport errors into a small closed set of kinds at the boundary
and keeps a record of failures seen by a session for later inspection.
"""

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..core.errors import ElementNotFoundError, PageClosedError, SessionStartError

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """Failure classes the retry orchestrator distinguishes."""
    CLOSED = "closed"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    OTHER = "other"

    @property
    def retryable(self) -> bool:
        return self is not ErrorKind.CLOSED


CLOSED_MARKERS = (
    'target closed',
    'target page, context or browser has been closed',
    'page closed',
    'session closed',
    'browser has been closed',
    'execution context was destroyed',
    'no page found',
)

NOT_FOUND_MARKERS = (
    'not found',
    'no element',
)


def classify_error(error: BaseException) -> ErrorKind:
    """
    Classify an exception raised by a page operation.

    Args:
        error: Exception raised by Playwright or by pagewarden itself

    Returns:
        The ErrorKind the exception belongs to
    """
    if isinstance(error, PageClosedError):
        return ErrorKind.CLOSED
    if isinstance(error, ElementNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(error, SessionStartError):
        return ErrorKind.OTHER

    message = str(error).lower()
    if any(marker in message for marker in CLOSED_MARKERS):
        return ErrorKind.CLOSED
    if isinstance(error, (PlaywrightTimeoutError, TimeoutError)):
        return ErrorKind.TIMEOUT
    if any(marker in message for marker in NOT_FOUND_MARKERS):
        return ErrorKind.NOT_FOUND
    return ErrorKind.OTHER


@dataclass
class ErrorRecord:
    """Represents a failed operation attempt."""
    kind: ErrorKind
    operation: str
    message: str
    attempt: int
    url: str = ''
    timestamp: float = field(default_factory=time.time)
    context: Dict[str, Any] = field(default_factory=dict)


class ErrorLog:
    """
    Failure history of one browser session.

    Records are grouped by kind; only the most recent `max_records` are kept.
    """

    def __init__(self, max_records: int = 200):
        self.max_records = max_records
        self.records: List[ErrorRecord] = []

    def record(self, error: BaseException, operation: str, attempt: int,
               url: str = '', kind: Optional[ErrorKind] = None, **context) -> ErrorRecord:
        """Store an error record for a failed attempt."""
        record = ErrorRecord(
            kind=kind or classify_error(error),
            operation=operation,
            message=str(error),
            attempt=attempt,
            url=url,
            context=context,
        )
        self.records.append(record)
        if len(self.records) > self.max_records:
            del self.records[:-self.max_records]
        return record

    def get_errors_by_kind(self, kind: ErrorKind) -> List[ErrorRecord]:
        """Get all errors of a specific kind."""
        return [r for r in self.records if r.kind is kind]

    def get_error_summary(self) -> Dict[str, Any]:
        """Get error counts by kind and operation, plus the latest errors."""
        kind_counts = Counter(r.kind.value for r in self.records)
        operation_counts = Counter(r.operation for r in self.records)
        recent = sorted(self.records, key=lambda r: r.timestamp, reverse=True)[:10]

        return {
            'total_errors': len(self.records),
            'kind_breakdown': {kind.value: kind_counts.get(kind.value, 0) for kind in ErrorKind},
            'operation_breakdown': dict(operation_counts),
            'recent_errors': [
                {
                    'kind': r.kind.value,
                    'operation': r.operation,
                    'message': r.message[:100],
                    'attempt': r.attempt,
                    'timestamp': r.timestamp
                }
                for r in recent
            ]
        }

    def clear(self) -> None:
        """Clear all stored errors."""
        self.records.clear()
        logger.info("🧹 Error log cleared")

    def __len__(self) -> int:
        return len(self.records)
