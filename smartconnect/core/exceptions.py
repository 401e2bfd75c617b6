"""
Custom exceptions for the SmartConnect client.

Every operation reports failure by raising one of these. The hierarchy
mirrors where the failure originated: local validation, the remote API,
the transport, a violated response contract, or the polling loop.
"""

from typing import Any, Optional


class SmartConnectError(Exception):
    """Base exception for all SmartConnect errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            code: Optional error code for programmatic handling.
            details: Optional additional error details.
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(SmartConnectError):
    """Required input is missing or malformed. Raised before any request."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.field_name = field_name
        if field_name:
            self.details["field"] = field_name


class PairingCodeRequiredError(ValidationError):
    """No pairing code supplied."""

    pass


class AmountRequiredError(ValidationError):
    """No transaction amount supplied."""

    pass


class InvalidAmountError(ValidationError):
    """Amount is not a whole number."""

    pass


class TransactionTypeRequiredError(ValidationError):
    """No transaction type supplied."""

    pass


class PollingUrlRequiredError(ValidationError):
    """No polling URL supplied."""

    pass


class InvalidRequestUrlError(ValidationError):
    """Request URL cannot be used (no scheme, unsupported protocol)."""

    pass


# =============================================================================
# Remote Errors
# =============================================================================


class RemoteApiError(SmartConnectError):
    """Base exception for failures reported by the SmartConnect API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code
        if status_code is not None:
            self.details["status_code"] = status_code


class ExpectedRemoteError(RemoteApiError):
    """4xx response carrying an ``error`` message (e.g. invalid pairing code)."""

    pass


class UnexpectedRemoteError(RemoteApiError):
    """Error response without a usable body (5xx, 404, malformed JSON)."""

    pass


class InvalidStatusCodeError(RemoteApiError):
    """Successful response with a status other than 200."""

    pass


class ApiConnectionError(SmartConnectError):
    """No HTTP response was received at all."""

    pass


# =============================================================================
# Contract Violations
# =============================================================================


class ContractViolationError(SmartConnectError):
    """A 200 response did not have the shape the API promises."""

    pass


class MalformedResponseError(ContractViolationError):
    """A required field is missing from a 200 response."""

    def __init__(
        self,
        message: str,
        missing_field: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.missing_field = missing_field
        if missing_field:
            self.details["missing_field"] = missing_field


class ResponseParseError(ContractViolationError):
    """The body of a 200 response is not valid JSON."""

    pass


# =============================================================================
# Polling Errors
# =============================================================================


class PollingError(SmartConnectError):
    """Base exception for polling loop failures."""

    pass


class PollingTimeoutError(PollingError):
    """No outcome was classified within the polling budget."""

    pass


class PollingCancelledError(PollingError):
    """The caller raised the cancellation signal."""

    pass
