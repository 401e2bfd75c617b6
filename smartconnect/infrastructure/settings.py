"""
Application settings.

Provides typed, validated configuration. A Settings value is built once by
the caller and handed to the services, so differently configured clients
(DEV and PROD, several merchants) can live in one process.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..configs import (
    DEFAULT_REGISTER_NAME,
    DEV_BASE_URL,
    POLL_INTERVAL_SECONDS,
    POLL_TIMEOUT_SECONDS,
    REQUEST_TIMEOUT,
)
from ..core.value_objects import RegisterIdentity


# =============================================================================
# Configuration Classes
# =============================================================================


@dataclass(frozen=True)
class ApiSettings:
    """SmartConnect API endpoint settings."""

    base_url: str = DEV_BASE_URL
    request_timeout: float = REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")


@dataclass(frozen=True)
class PollingSettings:
    """Polling loop timing, in seconds."""

    interval: float = POLL_INTERVAL_SECONDS
    timeout: float = POLL_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ValueError("Polling interval must be positive")
        if self.timeout <= 0:
            raise ValueError("Polling timeout must be positive")


# =============================================================================
# Main Settings
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """
    Main application settings.

    Aggregates the register identity and all configuration sections.
    """

    register: RegisterIdentity
    api: ApiSettings = field(default_factory=ApiSettings)
    polling: PollingSettings = field(default_factory=PollingSettings)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from ``SMARTCONNECT_*`` environment variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``).

        Returns:
            Settings instance.

        Raises:
            ValueError: If a required variable is missing or invalid.
        """
        env = os.environ if environ is None else environ

        missing = [
            name
            for name in (
                "SMARTCONNECT_REGISTER_ID",
                "SMARTCONNECT_BUSINESS_NAME",
                "SMARTCONNECT_VENDOR_NAME",
            )
            if not env.get(name)
        ]
        if missing:
            raise ValueError(f"Missing configuration: {', '.join(missing)}")

        register = RegisterIdentity(
            register_id=env["SMARTCONNECT_REGISTER_ID"],
            register_name=env.get("SMARTCONNECT_REGISTER_NAME") or DEFAULT_REGISTER_NAME,
            business_name=env["SMARTCONNECT_BUSINESS_NAME"],
            vendor_name=env["SMARTCONNECT_VENDOR_NAME"],
        )
        api = ApiSettings(
            base_url=env.get("SMARTCONNECT_BASE_URL") or DEV_BASE_URL,
            request_timeout=float(env.get("SMARTCONNECT_REQUEST_TIMEOUT") or REQUEST_TIMEOUT),
        )
        polling = PollingSettings(
            interval=float(env.get("SMARTCONNECT_POLL_INTERVAL") or POLL_INTERVAL_SECONDS),
            timeout=float(env.get("SMARTCONNECT_POLL_TIMEOUT") or POLL_TIMEOUT_SECONDS),
        )
        return cls(register=register, api=api, polling=polling)
