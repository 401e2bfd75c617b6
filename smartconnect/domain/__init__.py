"""
Domain layer - Business logic.

Contains:
- Outcome classification
- Polling state machine
"""

from .outcome import classify_outcome
from .polling_state_machine import (
    PollingContext,
    PollingPhase,
    PollingStateMachine,
)


__all__ = [
    "classify_outcome",
    "PollingContext",
    "PollingPhase",
    "PollingStateMachine",
]
