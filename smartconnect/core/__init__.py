"""
Core module - Foundation layer.

Contains:
- Exceptions
- Interfaces (Protocols)
- Value Objects
"""

from .exceptions import (
    SmartConnectError,
    ValidationError,
    PairingCodeRequiredError,
    AmountRequiredError,
    InvalidAmountError,
    TransactionTypeRequiredError,
    PollingUrlRequiredError,
    InvalidRequestUrlError,
    RemoteApiError,
    ExpectedRemoteError,
    UnexpectedRemoteError,
    InvalidStatusCodeError,
    ApiConnectionError,
    ContractViolationError,
    MalformedResponseError,
    ResponseParseError,
    PollingError,
    PollingTimeoutError,
    PollingCancelledError,
)
from .interfaces import (
    CancellationSignal,
    DelayedCallback,
)
from .value_objects import (
    TransactionOutcome,
    TransactionStatus,
    TransactionResultCode,
    ResultCode,
    TransactionType,
    RegisterIdentity,
    PairingRequest,
    TransactionRequest,
    PollResponse,
    PollingResult,
)


__all__ = [
    # Exceptions
    "SmartConnectError",
    "ValidationError",
    "PairingCodeRequiredError",
    "AmountRequiredError",
    "InvalidAmountError",
    "TransactionTypeRequiredError",
    "PollingUrlRequiredError",
    "InvalidRequestUrlError",
    "RemoteApiError",
    "ExpectedRemoteError",
    "UnexpectedRemoteError",
    "InvalidStatusCodeError",
    "ApiConnectionError",
    "ContractViolationError",
    "MalformedResponseError",
    "ResponseParseError",
    "PollingError",
    "PollingTimeoutError",
    "PollingCancelledError",
    # Interfaces
    "CancellationSignal",
    "DelayedCallback",
    # Value Objects
    "TransactionOutcome",
    "TransactionStatus",
    "TransactionResultCode",
    "ResultCode",
    "TransactionType",
    "RegisterIdentity",
    "PairingRequest",
    "TransactionRequest",
    "PollResponse",
    "PollingResult",
]
