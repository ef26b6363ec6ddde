"""
Shared helpers: error classification and URL comparison.
"""

from .error_handler import ErrorKind, ErrorLog, ErrorRecord, classify_error
from .navigation_utils import is_partial_success, is_same_location, strip_query

__all__ = [
    'ErrorKind', 'ErrorLog', 'ErrorRecord', 'classify_error',
    'is_partial_success', 'is_same_location', 'strip_query'
]
