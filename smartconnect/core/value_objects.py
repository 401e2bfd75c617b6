"""
Value Objects for the SmartConnect client.

Immutable objects that represent values in the domain: the register
identity, request parameter sets, the server's raw codes, a single poll
response and the final polling result.
"""

import numbers
import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Final, Mapping, Optional

from .exceptions import (
    AmountRequiredError,
    InvalidAmountError,
    MalformedResponseError,
    PairingCodeRequiredError,
    TransactionTypeRequiredError,
)


# =============================================================================
# Enums
# =============================================================================


class TransactionOutcome(Enum):
    """Final outcome of a transaction, as the POS should present it."""

    ACCEPTED = auto()
    DECLINED = auto()
    CANCELLED = auto()
    DEVICE_OFFLINE = auto()
    FAILED = auto()


class TransactionStatus(str, Enum):
    """Values of ``transactionStatus`` in a poll response."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class TransactionResultCode(str, Enum):
    """Values of ``data.TransactionResult``: the actual transaction outcome."""

    OK_ACCEPTED = "OK-ACCEPTED"
    OK_DECLINED = "OK-DECLINED"
    OK_UNAVAILABLE = "OK-UNAVAILABLE"
    OK_DELAYED = "OK-DELAYED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"
    FAILED_INTERFACE = "FAILED-INTERFACE"


class ResultCode(str, Enum):
    """
    Values of ``data.Result``: whether the device function was performed.

    A declined transaction is still a function performed successfully.
    Mostly useful to tell a user cancel apart from an offline device.
    """

    OK = "OK"
    CANCELLED = "CANCELLED"
    DELAYED_TRANSACTION = "DELAYED-TRANSACTION"
    FAILED = "FAILED"
    FAILED_INTERFACE = "FAILED-INTERFACE"


class TransactionType(str, Enum):
    """Common device functions. Any other string is passed through as is."""

    PURCHASE = "Card.Purchase"
    REFUND = "Card.Refund"
    PURCHASE_PLUS_CASH = "Card.PurchasePlusCash"


TRANSACTION_MODE_ASYNC: Final[str] = "ASYNC"

_INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$")


# =============================================================================
# Input Coercion
# =============================================================================


def is_absent(value: Any) -> bool:
    """Check if a required input counts as not supplied."""
    if value is None or value == "":
        return True
    return isinstance(value, numbers.Number) and value == 0


def coerce_amount(value: Any, field_name: str = "amount") -> int:
    """
    Coerce an amount in minor currency units to int.

    Accepts integers of any numeric type, whole-valued reals (float,
    Decimal, Fraction) and strings of decimal digits.

    Args:
        value: Raw amount as supplied by the caller.
        field_name: Name reported in the error details.

    Returns:
        The amount as an int.

    Raises:
        InvalidAmountError: If the value is not a whole number.
    """
    if isinstance(value, bool):
        pass
    elif isinstance(value, numbers.Integral):
        return int(value)
    elif isinstance(value, (numbers.Real, Decimal)):
        try:
            whole = int(value)
        except (ValueError, OverflowError):
            # NaN and infinity
            pass
        else:
            if value == whole:
                return whole
    elif isinstance(value, str) and _INTEGER_PATTERN.match(value):
        return int(value)

    raise InvalidAmountError(
        "The provided amount is not a valid integer",
        field_name=field_name,
    )


# =============================================================================
# Register Identity
# =============================================================================


@dataclass(frozen=True)
class RegisterIdentity:
    """
    Identity of the POS register as known to the SmartConnect API.

    Attributes:
        register_id: Unique across all customers of the POS. Must be the
            same for pairing and transaction requests.
        register_name: Displayed on the device. Only sent when pairing.
        business_name: Merchant name. Changing it requires re-pairing.
        vendor_name: Name of the POS application.
    """

    register_id: str
    register_name: str
    business_name: str
    vendor_name: str

    def pairing_parameters(self) -> dict[str, str]:
        """Form parameters for a pairing request."""
        return {
            "POSRegisterID": self.register_id,
            "POSRegisterName": self.register_name,
            "POSBusinessName": self.business_name,
            "POSVendorName": self.vendor_name,
        }

    def transaction_parameters(self) -> dict[str, str]:
        """Form parameters identifying the register on a transaction."""
        return {
            "POSRegisterID": self.register_id,
            "POSBusinessName": self.business_name,
            "POSVendorName": self.vendor_name,
        }


# =============================================================================
# Requests
# =============================================================================


@dataclass(frozen=True)
class PairingRequest:
    """Pairing code entered by the user, plus the register identity."""

    pairing_code: str
    register: RegisterIdentity

    @classmethod
    def create(cls, pairing_code: Optional[str], register: RegisterIdentity) -> "PairingRequest":
        """
        Validate the input and build the request.

        Raises:
            PairingCodeRequiredError: If the pairing code is empty.
        """
        if not pairing_code:
            raise PairingCodeRequiredError(
                "A pairing code has to be supplied.",
                field_name="pairing_code",
            )
        return cls(pairing_code=str(pairing_code), register=register)

    def to_form(self) -> dict[str, str]:
        return self.register.pairing_parameters()


@dataclass(frozen=True)
class TransactionRequest:
    """
    Parameters of a transaction creation call.

    Attributes:
        amount: Total in minor currency units ($1.99 is 199).
        transaction_type: Device function to invoke, e.g. Card.Purchase.
        register: Register identity.
        amount_cash: Cash-out component, for types that require one.
    """

    amount: int
    transaction_type: str
    register: RegisterIdentity
    amount_cash: Optional[int] = None

    @classmethod
    def create(
        cls,
        amount: Any,
        transaction_type: Any,
        register: RegisterIdentity,
        amount_cash: Any = None,
    ) -> "TransactionRequest":
        """
        Validate the input and build the request.

        Checks run in order and the first failure wins. The transaction
        type is not validated beyond presence; the server rejects unknown
        types.

        Raises:
            AmountRequiredError: If the amount is missing.
            InvalidAmountError: If an amount is not a whole number.
            TransactionTypeRequiredError: If the type is missing.
        """
        if is_absent(amount):
            raise AmountRequiredError(
                "The amount has to be supplied",
                field_name="amount",
            )
        amount_value = coerce_amount(amount)

        if not transaction_type:
            raise TransactionTypeRequiredError(
                "The transactionType has to be supplied",
                field_name="transaction_type",
            )

        cash_value = None
        if amount_cash is not None and amount_cash != "":
            cash_value = coerce_amount(amount_cash, field_name="amount_cash")

        if isinstance(transaction_type, Enum):
            transaction_type = transaction_type.value

        return cls(
            amount=amount_value,
            transaction_type=str(transaction_type),
            register=register,
            amount_cash=cash_value,
        )

    def to_form(self) -> dict[str, Any]:
        parameters: dict[str, Any] = {
            **self.register.transaction_parameters(),
            "TransactionMode": TRANSACTION_MODE_ASYNC,
            "TransactionType": self.transaction_type,
            "AmountTotal": self.amount,
        }
        if self.amount_cash is not None:
            parameters["AmountCash"] = self.amount_cash
        return parameters


# =============================================================================
# Poll Response
# =============================================================================


@dataclass(frozen=True)
class PollResponse:
    """
    One parsed poll response. Lives for a single loop iteration.

    Attributes:
        transaction_status: ``transactionStatus`` (PENDING, COMPLETED, ...).
        transaction_result: ``data.TransactionResult``.
        result: ``data.Result``.
    """

    transaction_status: Optional[str]
    transaction_result: Optional[str]
    result: Optional[str]

    @classmethod
    def from_payload(cls, payload: Any) -> "PollResponse":
        """
        Extract the status fields from a decoded poll body.

        Raises:
            MalformedResponseError: If there is no ``data`` object.
        """
        data = payload.get("data") if isinstance(payload, Mapping) else None
        if not isinstance(data, Mapping):
            raise MalformedResponseError(
                "Returned 200 but data structure not as expected",
                missing_field="data",
            )
        return cls(
            transaction_status=payload.get("transactionStatus"),
            transaction_result=data.get("TransactionResult"),
            result=data.get("Result"),
        )

    @property
    def is_completed(self) -> bool:
        return self.transaction_status == TransactionStatus.COMPLETED

    @property
    def is_delayed(self) -> bool:
        """Device has not reported yet and the server says it is late."""
        return (
            self.transaction_status == TransactionStatus.PENDING
            and self.transaction_result == TransactionResultCode.OK_DELAYED
        )


# =============================================================================
# Polling Result
# =============================================================================


@dataclass(frozen=True)
class PollingResult:
    """
    Result of a polling loop that reached an outcome.

    Attributes:
        outcome: Classified transaction outcome.
        polling_url: The polling handle that was consumed.
        raw_response: Body text of the final poll, for diagnostics.
        payload: Decoded body of the final poll.
        attempts: Number of poll requests issued.
        delayed_notifications: Times the delayed callback was invoked.
        transient_failures: Failed poll requests that were ignored.
        elapsed: Seconds from loop start to resolution.
    """

    outcome: TransactionOutcome
    polling_url: str
    raw_response: str = ""
    payload: dict[str, Any] = field(default_factory=dict)
    attempts: int = 0
    delayed_notifications: int = 0
    transient_failures: int = 0
    elapsed: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "outcome": self.outcome.name,
            "polling_url": self.polling_url,
            "attempts": self.attempts,
            "delayed_notifications": self.delayed_notifications,
            "transient_failures": self.transient_failures,
            "elapsed": round(self.elapsed, 3),
            "response": self.payload,
        }
