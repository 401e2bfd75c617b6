"""
SmartConnect POS client.

Async client for the SmartConnect cloud API: pairs a POS register with a
payment device, creates transactions and polls them to their outcome.

Example:
    import asyncio
    from smartconnect import SmartConnectFacade, Settings

    async def main():
        async with SmartConnectFacade(Settings.from_env()) as api:
            response = await api.run_transaction(199, "Card.Purchase")
            print(response["message"])

    asyncio.run(main())
"""

from .application import (
    OperationResponse,
    PairingService,
    SmartConnectFacade,
    TransactionService,
)
from .core import (
    PollingResult,
    RegisterIdentity,
    SmartConnectError,
    TransactionOutcome,
    TransactionType,
)
from .domain import classify_outcome
from .infrastructure import (
    ApiSettings,
    PollingSettings,
    Settings,
    SmartConnectClient,
)


__all__ = [
    # Facade and services
    "SmartConnectFacade",
    "OperationResponse",
    "PairingService",
    "TransactionService",
    # Client and settings
    "SmartConnectClient",
    "ApiSettings",
    "PollingSettings",
    "Settings",
    # Domain
    "classify_outcome",
    "PollingResult",
    "RegisterIdentity",
    "SmartConnectError",
    "TransactionOutcome",
    "TransactionType",
]

__version__ = "1.0.0"
