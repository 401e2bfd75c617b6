"""
Infrastructure layer - External dependencies and implementations.

Contains:
- SmartConnect HTTP client
- Configuration
"""

from .api_client import (
    ApiResponse,
    SmartConnectClient,
    interpret_response,
)
from .settings import (
    ApiSettings,
    PollingSettings,
    Settings,
)


__all__ = [
    # API client
    "ApiResponse",
    "SmartConnectClient",
    "interpret_response",
    # Settings
    "ApiSettings",
    "PollingSettings",
    "Settings",
]
