"""
Transaction outcome classification.

TransactionResult is the main determinant of the outcome. Result only
matters for cancelled transactions, to tell a user pressing Cancel on the
device apart from the device being offline.
"""

from typing import Optional

from ..core.value_objects import (
    ResultCode,
    TransactionOutcome,
    TransactionResultCode,
)


def classify_outcome(
    transaction_result: Optional[str],
    result: Optional[str] = None,
) -> TransactionOutcome:
    """
    Map the raw codes of a completed transaction to an outcome.

    Args:
        transaction_result: ``data.TransactionResult`` of the poll response.
        result: ``data.Result`` of the poll response.

    Returns:
        The outcome. Unknown codes classify as FAILED.
    """
    if transaction_result == TransactionResultCode.OK_ACCEPTED:
        return TransactionOutcome.ACCEPTED
    if transaction_result == TransactionResultCode.OK_DECLINED:
        return TransactionOutcome.DECLINED
    if transaction_result == TransactionResultCode.CANCELLED:
        if result == ResultCode.FAILED_INTERFACE:
            return TransactionOutcome.DEVICE_OFFLINE
        return TransactionOutcome.CANCELLED
    return TransactionOutcome.FAILED
