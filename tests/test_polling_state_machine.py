"""
Tests for the polling state machine.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from smartconnect.core.value_objects import PollResponse, TransactionOutcome
from smartconnect.domain.polling_state_machine import PollingPhase, PollingStateMachine

from conftest import POLLING_URL, poll_body


def make_poll(status, transaction_result, result="OK"):
    body = poll_body(status, transaction_result, result)
    return PollResponse.from_payload(body), body


class TestPollingStateMachine:
    """Tests for PollingStateMachine."""

    @pytest.fixture
    def machine(self, clock):
        """Create a fresh state machine with a 10 second budget."""
        return PollingStateMachine(POLLING_URL, timeout=10.0, clock=clock)

    def test_initial_state(self, machine):
        """Test initial phase is POLLING."""
        assert machine.phase == PollingPhase.POLLING
        assert not machine.is_resolved
        assert machine.context.attempts == 0
        assert machine.has_time_remaining

    def test_begin_attempt_counts(self, machine):
        assert machine.begin_attempt() == 1
        assert machine.begin_attempt() == 2
        assert machine.context.attempts == 2

    @pytest.mark.asyncio
    async def test_completed_resolves_outcome(self, machine, clock):
        """Test a COMPLETED response classifies and resolves."""
        machine.begin_attempt()
        clock.advance(3)
        poll, body = make_poll("COMPLETED", "OK-DECLINED")

        outcome = await machine.record_response(poll, body, "raw")

        assert outcome == TransactionOutcome.DECLINED
        assert machine.phase == PollingPhase.COMPLETED
        result = machine.to_result()
        assert result.outcome == TransactionOutcome.DECLINED
        assert result.raw_response == "raw"
        assert result.payload == body
        assert result.attempts == 1
        assert result.elapsed == 3

    @pytest.mark.asyncio
    async def test_pending_keeps_polling(self, machine):
        machine.begin_attempt()
        poll, body = make_poll("PENDING", "")
        assert await machine.record_response(poll, body, "") is None
        assert machine.phase == PollingPhase.POLLING

    @pytest.mark.asyncio
    async def test_delayed_invokes_sync_callback(self, clock):
        on_delayed = MagicMock()
        machine = PollingStateMachine(POLLING_URL, 10.0, on_delayed=on_delayed, clock=clock)
        machine.begin_attempt()
        poll, body = make_poll("PENDING", "OK-DELAYED", "DELAYED-TRANSACTION")

        assert await machine.record_response(poll, body, "") is None

        on_delayed.assert_called_once_with()
        assert machine.context.delayed_notifications == 1

    @pytest.mark.asyncio
    async def test_delayed_awaits_async_callback(self, clock):
        on_delayed = AsyncMock()
        machine = PollingStateMachine(POLLING_URL, 10.0, on_delayed=on_delayed, clock=clock)
        machine.begin_attempt()
        poll, body = make_poll("PENDING", "OK-DELAYED")

        await machine.record_response(poll, body, "")

        on_delayed.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,transaction_result",
        [("PROCESSING", "OK-DELAYED"), ("PENDING", "OK-ACCEPTED"), ("", "")],
    )
    async def test_unknown_pending_combination_has_no_side_effect(self, clock, status, transaction_result):
        """Test only PENDING with OK-DELAYED counts as a delay signal."""
        on_delayed = MagicMock()
        machine = PollingStateMachine(POLLING_URL, 10.0, on_delayed=on_delayed, clock=clock)
        machine.begin_attempt()
        poll, body = make_poll(status, transaction_result)

        assert await machine.record_response(poll, body, "") is None

        on_delayed.assert_not_called()
        assert machine.phase == PollingPhase.POLLING
        assert machine.context.delayed_notifications == 0
        assert machine.context.outcome is None

    @pytest.mark.asyncio
    async def test_delayed_callback_error_does_not_stop_polling(self, clock):
        on_delayed = MagicMock(side_effect=RuntimeError("UI gone"))
        machine = PollingStateMachine(POLLING_URL, 10.0, on_delayed=on_delayed, clock=clock)
        machine.begin_attempt()
        poll, body = make_poll("PENDING", "OK-DELAYED")

        assert await machine.record_response(poll, body, "") is None
        assert machine.phase == PollingPhase.POLLING

    def test_transient_failure_is_counted(self, machine):
        machine.begin_attempt()
        machine.record_transient_failure("HTTP 503")
        assert machine.context.transient_failures == 1
        assert machine.phase == PollingPhase.POLLING

    def test_budget_is_measured_from_start(self, machine, clock):
        clock.advance(9.9)
        assert machine.has_time_remaining
        clock.advance(0.1)
        assert not machine.has_time_remaining

    def test_time_out(self, machine):
        machine.time_out()
        assert machine.phase == PollingPhase.TIMED_OUT
        assert machine.is_resolved

    def test_fail(self, machine):
        machine.fail("bad body")
        assert machine.phase == PollingPhase.ERRORED
        assert machine.context.errors == ["bad body"]

    def test_cancel(self, machine):
        machine.cancel()
        assert machine.phase == PollingPhase.CANCELLED

    @pytest.mark.asyncio
    async def test_no_transition_after_resolution(self, machine):
        """Test a resolved loop never polls or resolves again."""
        machine.begin_attempt()
        poll, body = make_poll("COMPLETED", "OK-ACCEPTED")
        await machine.record_response(poll, body, "")

        with pytest.raises(RuntimeError):
            machine.begin_attempt()
        with pytest.raises(RuntimeError):
            await machine.record_response(poll, body, "")
        with pytest.raises(RuntimeError):
            machine.time_out()
        assert machine.context.outcome == TransactionOutcome.ACCEPTED

    def test_to_result_without_outcome_raises(self, machine):
        machine.time_out()
        with pytest.raises(RuntimeError):
            machine.to_result()
