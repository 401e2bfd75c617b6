"""
Transaction Service - Submits a transaction and polls for its outcome.

Getting an outcome takes at least two requests. A POST creates the
transaction and returns a polling URL; GETs against that URL follow until
the device has reported a final result or the polling budget runs out.

If the device temporarily loses power or connectivity it uploads the
result once it is back, so failed polls never end the loop. Only the
budget, a broken response contract or the caller's cancellation signal do.
"""

import asyncio
import time
from typing import Any, Callable, Final, NoReturn, Optional

from ..configs import TRANSACTION_PATH
from ..core.exceptions import (
    ApiConnectionError,
    PollingCancelledError,
    PollingTimeoutError,
    PollingUrlRequiredError,
    SmartConnectError,
)
from ..core.interfaces import CancellationSignal, DelayedCallback
from ..core.value_objects import (
    PollResponse,
    PollingResult,
    RegisterIdentity,
    TransactionOutcome,
    TransactionRequest,
)
from ..domain.polling_state_machine import PollingStateMachine
from ..infrastructure.api_client import (
    SmartConnectClient,
    extract_field,
    interpret_response,
)
from ..infrastructure.settings import PollingSettings
from ..loggers import logger


POLLING_URL_FIELD: Final[str] = "data.PollingUrl"


class TransactionService:
    """
    Application service for card transactions.

    Stateless between calls: every polling loop gets its own state
    machine, so several loops can run concurrently on one instance.
    """

    def __init__(
        self,
        client: SmartConnectClient,
        register: RegisterIdentity,
        polling: PollingSettings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the transaction service.

        Args:
            client: SmartConnect API client.
            register: Identity sent with every transaction.
            polling: Poll interval and overall budget.
            clock: Monotonic clock used for the budget.
        """
        self._client = client
        self._register = register
        self._polling = polling
        self._clock = clock

    # =========================================================================
    # Submission
    # =========================================================================

    async def create_transaction(
        self,
        amount: Any,
        transaction_type: Any,
        amount_cash: Any = None,
    ) -> str:
        """
        Create an asynchronous transaction on the device.

        Args:
            amount: Total in minor units ($1.99 is 199). Currency falls back
                to the device default.
            transaction_type: Device function, e.g. Card.Purchase.
            amount_cash: Cash-out amount for types that need it.

        Returns:
            The polling URL of the new transaction.

        Raises:
            ValidationError: If the input is invalid; no request is sent.
            SmartConnectError: If the request failed or the response
                carried no polling URL.
        """
        try:
            request = TransactionRequest.create(
                amount,
                transaction_type,
                self._register,
                amount_cash=amount_cash,
            )
            response = await self._client.request(
                "POST",
                self._client.url_for(TRANSACTION_PATH),
                request.to_form(),
                required_fields=(POLLING_URL_FIELD,),
            )
        except SmartConnectError as e:
            logger.error(f"Transaction request failed: {e.message}")
            raise

        polling_url = str(extract_field(response.payload, POLLING_URL_FIELD))
        logger.info(
            f"Transaction {request.transaction_type} for {request.amount} created, "
            f"polling URL: {polling_url}"
        )
        return polling_url

    # =========================================================================
    # Polling
    # =========================================================================

    async def poll_for_outcome(
        self,
        polling_url: Optional[str],
        on_delayed: Optional[DelayedCallback] = None,
        cancel_event: Optional[CancellationSignal] = None,
    ) -> PollingResult:
        """
        Poll until the transaction has an outcome.

        Args:
            polling_url: URL returned by ``create_transaction``.
            on_delayed: Invoked each time the server reports the
                transaction as delayed, e.g. to show a notice to the user.
            cancel_event: Stops the loop when set.

        Returns:
            PollingResult with the outcome and the final raw response.

        Raises:
            PollingUrlRequiredError: If the URL is empty.
            ContractViolationError: If a 200 poll response is malformed.
            PollingTimeoutError: If the budget ran out.
            PollingCancelledError: If ``cancel_event`` was set.
        """
        if not polling_url:
            raise PollingUrlRequiredError(
                "Polling URL needs to be submitted",
                field_name="polling_url",
            )

        machine = PollingStateMachine(
            polling_url,
            self._polling.timeout,
            on_delayed=on_delayed,
            clock=self._clock,
        )

        while True:
            if cancel_event is not None and cancel_event.is_set():
                self._cancel(machine)

            outcome = await self._poll_once(machine, polling_url)
            if outcome is not None:
                return machine.to_result()

            if not machine.has_time_remaining:
                machine.time_out()
                raise PollingTimeoutError(
                    "Polling timed out",
                    details={
                        "polling_url": polling_url,
                        "attempts": machine.context.attempts,
                    },
                )

            if await self._wait_interval(cancel_event):
                self._cancel(machine)

    async def _poll_once(
        self,
        machine: PollingStateMachine,
        polling_url: str,
    ) -> Optional[TransactionOutcome]:
        """Issue one GET and feed the result to the state machine."""
        attempt = machine.begin_attempt()
        logger.debug(f"Polling for outcome (attempt {attempt}): {polling_url}")

        try:
            response = await self._client.send("GET", polling_url)
        except ApiConnectionError as e:
            machine.record_transient_failure(e.message)
            return None
        except SmartConnectError as e:
            machine.fail(e.message)
            raise

        # Infrastructure-level failure (client offline, server unreachable)
        if response.status_code != 200:
            machine.record_transient_failure(
                f"HTTP {response.status_code} {response.reason_phrase}"
            )
            return None

        try:
            api_response = interpret_response(response)
            poll = PollResponse.from_payload(api_response.payload)
        except Exception as e:
            machine.fail(e.message if isinstance(e, SmartConnectError) else str(e))
            raise

        return await machine.record_response(
            poll,
            dict(api_response.payload),
            api_response.text,
        )

    async def _wait_interval(self, cancel_event: Optional[CancellationSignal]) -> bool:
        """
        Wait one poll interval.

        Returns:
            True if the cancellation signal was raised while waiting.
        """
        if cancel_event is None:
            await asyncio.sleep(self._polling.interval)
            return False
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=self._polling.interval)
        except asyncio.TimeoutError:
            return False
        return True

    def _cancel(self, machine: PollingStateMachine) -> NoReturn:
        machine.cancel()
        raise PollingCancelledError(
            "Polling cancelled",
            details={
                "polling_url": machine.context.polling_url,
                "attempts": machine.context.attempts,
            },
        )

    # =========================================================================
    # Full Flow
    # =========================================================================

    async def run_transaction(
        self,
        amount: Any,
        transaction_type: Any,
        amount_cash: Any = None,
        on_delayed: Optional[DelayedCallback] = None,
        cancel_event: Optional[CancellationSignal] = None,
    ) -> PollingResult:
        """Create a transaction and poll it to its outcome."""
        polling_url = await self.create_transaction(
            amount,
            transaction_type,
            amount_cash=amount_cash,
        )
        return await self.poll_for_outcome(
            polling_url,
            on_delayed=on_delayed,
            cancel_event=cancel_event,
        )
