"""
Configuration Management

Centralized configuration for pagewarden components:
- Browser launch and profile settings
- Per-operation timeouts
- Retry and restart policy
"""

from .browser import BrowserConfig, ProxyConfig, RetryConfig, TimeoutConfig

__all__ = [
    'BrowserConfig', 'ProxyConfig',
    'RetryConfig', 'TimeoutConfig'
]
