"""
Session Management Module

Retry orchestration and operation dispatch over a browser session.
"""

from .commands import Operation, build_params
from .manager import SessionManager

__all__ = ['SessionManager', 'Operation', 'build_params']
