"""
WebSocket client for sending transaction events to the frontend.

The POS interface listens on a WebSocket and shows a notice when a
transaction is delayed and the final outcome once polling is done.
"""

import json
from typing import Any, Callable, Coroutine, Final, Optional

import websockets
from websockets.exceptions import WebSocketException

from .configs import WS_URL
from .loggers import logger


EVENT_TRANSACTION_DELAYED: Final[str] = "transactionDelayed"
EVENT_TRANSACTION_OUTCOME: Final[str] = "transactionOutcome"


async def send_to_ws(
    event: str,
    data: Optional[dict[str, Any]] = None,
    ws_url: str = WS_URL,
) -> bool:
    """
    Send an event to the WebSocket server.

    Args:
        event: The event name/type to send.
        data: Optional dictionary of event data.
        ws_url: WebSocket URL to connect to (default from config).

    Returns:
        True if the message was sent successfully, False otherwise.

    Example:
        await send_to_ws(
            event='transactionOutcome',
            data={'outcome': 'ACCEPTED'},
        )
    """
    message = {"event": event, "data": data}

    try:
        async with websockets.connect(ws_url) as ws:
            await ws.send(json.dumps(message))
            logger.debug(f"WebSocket message sent: {event}")
            return True
    except WebSocketException as e:
        logger.warning(f"WebSocket connection error: {e}")
        return False
    except Exception as e:
        logger.error(f"Failed to send WebSocket message: {e}")
        return False


def delayed_notifier(
    polling_url: str,
    ws_url: str = WS_URL,
) -> Callable[[], Coroutine[Any, Any, bool]]:
    """Build a delayed callback that forwards the signal to the frontend."""

    async def notify() -> bool:
        return await send_to_ws(
            EVENT_TRANSACTION_DELAYED,
            {"polling_url": polling_url},
            ws_url=ws_url,
        )

    return notify
