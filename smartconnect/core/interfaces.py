"""
Interfaces (Protocols) for the SmartConnect client.

Defines the callables and signals the caller can hand to the polling loop.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, Union, runtime_checkable


# Invoked every time the server reports the transaction as delayed.
# May be a plain function or a coroutine function; the return value is ignored.
DelayedCallback = Callable[[], Union[Awaitable[Any], Any]]


@runtime_checkable
class CancellationSignal(Protocol):
    """Signal a caller raises to stop a polling loop. ``asyncio.Event`` fits."""

    def is_set(self) -> bool:
        ...

    async def wait(self) -> Any:
        ...
