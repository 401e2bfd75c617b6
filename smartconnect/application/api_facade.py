"""
API Facade - Unified interface for the SmartConnect client.

Wires the HTTP client and the services together from one Settings value
and turns every operation into a response dictionary, so command-style
callers (the CLI, a UI bridge) never have to handle exceptions.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import httpx

from ..core.exceptions import SmartConnectError
from ..core.interfaces import CancellationSignal, DelayedCallback
from ..infrastructure.api_client import SmartConnectClient
from ..infrastructure.settings import Settings
from ..loggers import logger
from .pairing_service import PairingService
from .transaction_service import TransactionService


@dataclass
class OperationResponse:
    """
    Standardized response for an operation.

    Attributes:
        success: Whether the operation succeeded.
        message: Human-readable message.
        data: Optional response data.
        error: Error code on failure.
        details: Additional error details on failure.
    """

    success: bool = False
    message: Optional[str] = None
    data: Any = None
    error: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failed(cls, error: SmartConnectError) -> "OperationResponse":
        """Create a response from an exception."""
        return cls(
            success=False,
            message=error.message,
            error=error.code,
            details=error.details,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert the response to a dictionary."""
        result: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
        }
        if self.data is not None:
            result["data"] = self.data
        if not self.success:
            result["error"] = self.error
            result["details"] = self.details
        return result


class SmartConnectFacade:
    """
    Facade for the SmartConnect API.

    One instance per configuration; use as an async context manager or
    call ``shutdown()`` to release the HTTP client.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the facade.

        Args:
            settings: API, polling and register configuration.
            http_client: Optional preconfigured httpx client.
            clock: Monotonic clock for the polling budget.
        """
        self._settings = settings
        self._client = SmartConnectClient(settings.api, http_client)
        self._pairing_service = PairingService(self._client, settings.register)
        self._transaction_service = TransactionService(
            self._client,
            settings.register,
            settings.polling,
            clock=clock,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def transaction_service(self) -> TransactionService:
        return self._transaction_service

    # =========================================================================
    # Pairing
    # =========================================================================

    async def pair(self, pairing_code: Optional[str]) -> dict[str, Any]:
        """
        Pair the register with a device.

        Args:
            pairing_code: Code displayed on the device.

        Returns:
            Dictionary indicating success or the failure reason.
        """
        try:
            await self._pairing_service.pair(pairing_code)
        except SmartConnectError as e:
            return OperationResponse.failed(e).to_dict()
        return OperationResponse(success=True, message="Pairing successful").to_dict()

    # =========================================================================
    # Transactions
    # =========================================================================

    async def create_transaction(
        self,
        amount: Any,
        transaction_type: Any,
        amount_cash: Any = None,
    ) -> dict[str, Any]:
        """
        Create a transaction.

        Returns:
            Dictionary with the polling URL under ``data.polling_url``.
        """
        try:
            polling_url = await self._transaction_service.create_transaction(
                amount,
                transaction_type,
                amount_cash=amount_cash,
            )
        except SmartConnectError as e:
            return OperationResponse.failed(e).to_dict()
        return OperationResponse(
            success=True,
            message="Transaction created",
            data={"polling_url": polling_url},
        ).to_dict()

    async def poll_for_outcome(
        self,
        polling_url: Optional[str],
        on_delayed: Optional[DelayedCallback] = None,
        cancel_event: Optional[CancellationSignal] = None,
    ) -> dict[str, Any]:
        """
        Poll a transaction to its outcome.

        Returns:
            Dictionary with the polling result under ``data``.
        """
        try:
            result = await self._transaction_service.poll_for_outcome(
                polling_url,
                on_delayed=on_delayed,
                cancel_event=cancel_event,
            )
        except SmartConnectError as e:
            return OperationResponse.failed(e).to_dict()
        return OperationResponse(
            success=True,
            message=f"Transaction outcome: {result.outcome.name}",
            data=result.to_dict(),
        ).to_dict()

    async def run_transaction(
        self,
        amount: Any,
        transaction_type: Any,
        amount_cash: Any = None,
        on_delayed: Optional[DelayedCallback] = None,
        cancel_event: Optional[CancellationSignal] = None,
    ) -> dict[str, Any]:
        """
        Create a transaction and poll it to its outcome.

        ``success`` means an outcome was obtained; a declined or cancelled
        transaction is still a successful operation.
        """
        created = await self.create_transaction(amount, transaction_type, amount_cash)
        if not created["success"]:
            return created
        return await self.poll_for_outcome(
            created["data"]["polling_url"],
            on_delayed=on_delayed,
            cancel_event=cancel_event,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def shutdown(self) -> None:
        """Release the HTTP client."""
        await self._client.aclose()
        logger.debug("SmartConnect client closed")

    async def __aenter__(self) -> "SmartConnectFacade":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.shutdown()
