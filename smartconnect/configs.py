"""
Configuration module for the SmartConnect client.

This module provides the static defaults for the cloud API, the polling
loop, logging sinks and the frontend WebSocket. Per-deployment values are
read from ``SMARTCONNECT_*`` environment variables by
``infrastructure.settings``; only the logging sinks are read here because
the default logger is built at import time.
"""

import os
from typing import Final, Optional


# =============================================================================
# SmartConnect API
# =============================================================================

# All development and testing should be done against DEV.
DEV_BASE_URL: Final[str] = "https://api-dev.smart-connect.cloud/POS"

REQUEST_TIMEOUT: Final[float] = 30.0

PAIRING_PATH: Final[str] = "/Pairing/"
TRANSACTION_PATH: Final[str] = "/Transaction"


# =============================================================================
# Polling Configuration
# =============================================================================

# PROD rate limits polling to one request every 2 seconds.
POLL_INTERVAL_SECONDS: Final[float] = 2.0
POLL_TIMEOUT_SECONDS: Final[float] = 10 * 60.0


# =============================================================================
# Register Identity Defaults
# =============================================================================

DEFAULT_REGISTER_NAME: Final[str] = "Register 1"


# =============================================================================
# External Services Configuration
# =============================================================================

WS_URL: Final[str] = "ws://localhost:8005/ws"
LOKI_URL: Final[Optional[str]] = os.environ.get("SMARTCONNECT_LOKI_URL") or None


# =============================================================================
# Logging Configuration
# =============================================================================

LOG_FILE: Final[Optional[str]] = os.environ.get("SMARTCONNECT_LOG_FILE") or None
LOG_LEVEL: Final[str] = os.environ.get("SMARTCONNECT_LOG_LEVEL", "DEBUG").upper()
