"""
==============================================================================
Real-time Products WebSocket Module
==============================================================================

Live product feed for the /realtimeproducts view.

Flow:
-----
1. Client connects to /ws and is registered with the fan-out hub
2. Server sends an init event to the new subscriber
3. Client events are relayed to every subscriber, the sender included
4. Durable additions made over HTTP arrive as newProduct events

Messages (Client → Server):
---------------------------
- {"event": "addProduct", "data": {"title": ..., "price": ..., ...}}
- {"event": "deleteProduct", "data": 3}
- {"event": "disconnect"}

Messages (Server → Client):
---------------------------
- {"event": "init", "data": {"subscriber_id": "...", "subscribers": N}}
- {"event": "newProduct", "data": {...}}
- {"event": "deleteProduct", "data": 3}
- {"event": "error", "data": {"code": "...", "message": "..."}}

Client-originated additions are relayed only. They never reach the catalog
store and carry no id or code.

==============================================================================
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from storefront.catalog.models import EPHEMERAL_PRODUCT_FIELDS
from storefront.core.dependencies import get_hub
from .hub import FanoutHub, Subscriber


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter()


class RealtimeWebSocketHandler:
    """
    Handler for one real-time product feed connection.

    Manages the subscriber lifecycle:
    - Registration with the hub
    - Relaying client addProduct/deleteProduct events
    - Deregistration on disconnect
    """

    def __init__(self, websocket: WebSocket, hub: FanoutHub):
        self._websocket = websocket
        self._hub = hub
        self._subscriber = Subscriber(websocket)

    async def _send_error(self, message: str, code: str = "ERROR") -> None:
        """Send error event to this client only."""
        await self._subscriber.send("error", {"code": code, "message": message})

    async def send_init(self) -> None:
        await self._subscriber.send("init", {
            "subscriber_id": self._subscriber.id,
            "subscribers": self._hub.subscriber_count,
        })

    async def handle_add_product(self, data: Any) -> None:
        """Relay a client-submitted product without persisting it."""
        if not isinstance(data, dict):
            await self._send_error("addProduct expects an object", "INVALID_PAYLOAD")
            return

        product = {name: data[name] for name in EPHEMERAL_PRODUCT_FIELDS if name in data}
        logger.info(f"Relaying client product from {self._subscriber.id}: {product}")
        await self._hub.broadcast("newProduct", product)

    async def handle_delete_product(self, data: Any) -> None:
        """Relay a client product deletion; the catalog is left as is."""
        logger.info(f"Relaying deleteProduct {data!r} from {self._subscriber.id}")
        await self._hub.broadcast("deleteProduct", data)

    async def run(self) -> None:
        """Main handler loop."""
        await self._websocket.accept()
        self._hub.connect(self._subscriber)

        try:
            await self.send_init()

            while True:
                frame = await self._websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000))

                if self._subscriber.closed:
                    logger.info(f"Stopping dropped subscriber: {self._subscriber.id}")
                    break

                raw = frame.get("text")
                if raw is None:
                    await self._send_error("Frames must be JSON", "INVALID_FRAME")
                    continue

                try:
                    message = json.loads(raw)
                except json.JSONDecodeError:
                    await self._send_error("Frames must be JSON", "INVALID_FRAME")
                    continue

                if not isinstance(message, dict):
                    await self._send_error("Frames must be JSON objects", "INVALID_FRAME")
                    continue

                event = message.get("event")
                data = message.get("data")

                if event == "addProduct":
                    await self.handle_add_product(data)

                elif event == "deleteProduct":
                    await self.handle_delete_product(data)

                elif event == "disconnect":
                    logger.info(f"Client requested disconnect: {self._subscriber.id}")
                    await self._websocket.close()
                    break

                else:
                    logger.debug(f"Ignoring unknown event {event!r} from {self._subscriber.id}")

        except WebSocketDisconnect:
            logger.info(f"Client disconnected: {self._subscriber.id}")

        finally:
            self._hub.disconnect(self._subscriber)


@router.websocket("/ws")
async def websocket_products(
    websocket: WebSocket,
    hub: FanoutHub = Depends(get_hub),
):
    """Real-time product feed."""
    handler = RealtimeWebSocketHandler(websocket, hub)
    await handler.run()
