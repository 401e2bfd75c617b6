"""
Application layer - Application services and use cases.

Contains:
- Pairing service
- Transaction service
- API facade
"""

from .pairing_service import PairingService
from .transaction_service import TransactionService
from .api_facade import SmartConnectFacade, OperationResponse


__all__ = [
    "PairingService",
    "TransactionService",
    "SmartConnectFacade",
    "OperationResponse",
]
