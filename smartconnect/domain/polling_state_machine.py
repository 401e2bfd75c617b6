"""
Polling State Machine - Tracks one transaction until its outcome is known.

Implements the State pattern for the polling loop. The machine does no
I/O: the transaction service feeds it poll results and asks it whether to
go on.
"""

from __future__ import annotations

import inspect
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional

from ..core.interfaces import DelayedCallback
from ..core.value_objects import PollResponse, PollingResult, TransactionOutcome
from ..loggers import logger
from .outcome import classify_outcome


# =============================================================================
# Polling Phases
# =============================================================================


class PollingPhase(Enum):
    """Phases of a polling loop."""

    POLLING = auto()        # Waiting for the device to report
    COMPLETED = auto()      # Outcome classified
    TIMED_OUT = auto()      # Budget exhausted without an outcome
    ERRORED = auto()        # Server broke the response contract
    CANCELLED = auto()      # Caller raised the cancellation signal


# =============================================================================
# Polling Context
# =============================================================================


@dataclass
class PollingContext:
    """
    Context for one polling loop.

    Holds all state for the loop; owned by a single machine.
    """

    polling_url: str
    started_at: float
    phase: PollingPhase = PollingPhase.POLLING
    outcome: Optional[TransactionOutcome] = None
    attempts: int = 0
    delayed_notifications: int = 0
    transient_failures: int = 0
    last_payload: dict[str, Any] = field(default_factory=dict)
    last_raw_response: str = ""
    errors: list[str] = field(default_factory=list)


# =============================================================================
# Polling State Machine
# =============================================================================


class PollingStateMachine:
    """
    State machine for a single polling loop.

    POLLING is the only non-terminal phase. Once the machine leaves it,
    every further transition raises RuntimeError.
    """

    def __init__(
        self,
        polling_url: str,
        timeout: float,
        on_delayed: Optional[DelayedCallback] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the state machine. The time budget starts now.

        Args:
            polling_url: The polling handle this loop consumes.
            timeout: Overall budget in seconds, never reset.
            on_delayed: Called whenever the server reports a delay.
            clock: Monotonic clock in seconds.
        """
        self._clock = clock
        self._timeout = timeout
        self._on_delayed = on_delayed
        self._context = PollingContext(polling_url=polling_url, started_at=clock())

    @property
    def context(self) -> PollingContext:
        """Get the polling context."""
        return self._context

    @property
    def phase(self) -> PollingPhase:
        """Get the current polling phase."""
        return self._context.phase

    @property
    def is_resolved(self) -> bool:
        """Check if the loop reached a terminal phase."""
        return self._context.phase != PollingPhase.POLLING

    @property
    def elapsed(self) -> float:
        """Seconds since the loop started."""
        return self._clock() - self._context.started_at

    @property
    def has_time_remaining(self) -> bool:
        return self.elapsed < self._timeout

    def _ensure_polling(self) -> None:
        if self.is_resolved:
            raise RuntimeError(
                f"Polling loop already resolved ({self._context.phase.name})"
            )

    def begin_attempt(self) -> int:
        """
        Register a new poll request.

        Returns:
            The attempt number, starting at 1.
        """
        self._ensure_polling()
        self._context.attempts += 1
        return self._context.attempts

    def record_transient_failure(self, reason: str) -> None:
        """Record a failed poll request. The loop goes on."""
        self._ensure_polling()
        self._context.transient_failures += 1
        logger.warning(
            f"Ignoring failed poll #{self._context.attempts} "
            f"for {self._context.polling_url}: {reason}"
        )

    async def record_response(
        self,
        poll: PollResponse,
        payload: dict[str, Any],
        raw_response: str,
    ) -> Optional[TransactionOutcome]:
        """
        Apply a well-formed poll response.

        Args:
            poll: Parsed status fields.
            payload: Decoded body.
            raw_response: Body text.

        Returns:
            The outcome if the transaction completed, None to keep polling.
        """
        self._ensure_polling()
        self._context.last_payload = payload
        self._context.last_raw_response = raw_response

        if poll.is_completed:
            outcome = classify_outcome(poll.transaction_result, poll.result)
            self._context.outcome = outcome
            self._context.phase = PollingPhase.COMPLETED
            logger.info(
                f"Transaction completed: {outcome.name} "
                f"(TransactionResult={poll.transaction_result}, Result={poll.result}) "
                f"after {self._context.attempts} poll(s)"
            )
            return outcome

        if poll.is_delayed:
            self._context.delayed_notifications += 1
            logger.info(f"Transaction delayed, still polling {self._context.polling_url}")
            await self._notify_delayed()

        return None

    async def _notify_delayed(self) -> None:
        """Invoke the delayed callback, sync or async."""
        if self._on_delayed is None:
            return
        try:
            result = self._on_delayed()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Delayed callback error: {e}")

    def fail(self, reason: str) -> None:
        """Resolve as ERRORED."""
        self._ensure_polling()
        self._context.phase = PollingPhase.ERRORED
        self._context.errors.append(reason)
        logger.error(f"Polling {self._context.polling_url} failed: {reason}")

    def time_out(self) -> None:
        """Resolve as TIMED_OUT."""
        self._ensure_polling()
        self._context.phase = PollingPhase.TIMED_OUT
        logger.error(
            f"Polling {self._context.polling_url} timed out after "
            f"{self.elapsed:.1f}s and {self._context.attempts} poll(s)"
        )

    def cancel(self) -> None:
        """Resolve as CANCELLED."""
        self._ensure_polling()
        self._context.phase = PollingPhase.CANCELLED
        logger.info(f"Polling {self._context.polling_url} cancelled by caller")

    def to_result(self) -> PollingResult:
        """
        Build the result of a completed loop.

        Raises:
            RuntimeError: If no outcome was classified.
        """
        if self._context.phase != PollingPhase.COMPLETED or self._context.outcome is None:
            raise RuntimeError("No outcome classified")
        return PollingResult(
            outcome=self._context.outcome,
            polling_url=self._context.polling_url,
            raw_response=self._context.last_raw_response,
            payload=self._context.last_payload,
            attempts=self._context.attempts,
            delayed_notifications=self._context.delayed_notifications,
            transient_failures=self._context.transient_failures,
            elapsed=self.elapsed,
        )
