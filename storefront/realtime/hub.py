"""
==============================================================================
Fan-out Hub Module
==============================================================================

In-process publish/subscribe relay for catalog change events.

Delivery is fire-and-forget: every subscriber connected when ``broadcast``
starts gets at most one copy of the event, with no acknowledgment, retry or
replay for subscribers that connect later. ``publish`` schedules a broadcast
as a task so the caller never waits on a slow subscriber.

Frame format:
-------------
    {"event": "newProduct", "data": {...}}
    {"event": "deleteProduct", "data": 3}

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Set

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel


# Module logger
logger = logging.getLogger(__name__)


class Subscriber:
    """
    One live real-time connection.

    Attributes:
        id: Generated connection identifier
        closed: Set once the hub has dropped and closed this connection
    """

    def __init__(self, websocket: WebSocket) -> None:
        self.id = uuid.uuid4().hex
        self.closed = False
        self._websocket = websocket

    async def send(self, event: str, data: Any) -> None:
        """Send one event frame to the client."""
        await self._websocket.send_json({"event": event, "data": data})

    async def close(self, code: int = 1011) -> None:
        """Close the underlying socket; a socket already gone is ignored."""
        if self.closed:
            return
        self.closed = True
        try:
            await self._websocket.close(code=code)
        except (RuntimeError, OSError, WebSocketDisconnect) as e:
            logger.debug(f"Socket for {self.id} already closed: {e}")

    def __repr__(self) -> str:
        return f"Subscriber(id={self.id!r})"


class FanoutHub:
    """
    Registry of connected subscribers with a broadcast operation.

    Subscribers only need an ``id`` attribute and async ``send(event, data)``
    and ``close()`` methods.

    Example:
        >>> hub = FanoutHub()
        >>> hub.connect(subscriber)
        >>> await hub.broadcast("deleteProduct", 3)
        >>> hub.publish("newProduct", product)
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, Any] = {}
        self._pending: Set[asyncio.Task] = set()

    @property
    def subscriber_count(self) -> int:
        """Number of currently connected subscribers."""
        return len(self._subscribers)

    @property
    def pending_count(self) -> int:
        """Number of published events still being delivered."""
        return len(self._pending)

    def connect(self, subscriber: Any) -> None:
        """Add a subscriber to the live set."""
        self._subscribers[subscriber.id] = subscriber
        logger.info(f"Subscriber connected: {subscriber.id} (total={self.subscriber_count})")

    def disconnect(self, subscriber: Any) -> None:
        """Remove a subscriber; unknown subscribers are ignored."""
        if self._subscribers.pop(subscriber.id, None) is not None:
            logger.info(f"Subscriber disconnected: {subscriber.id} (total={self.subscriber_count})")

    async def broadcast(self, event: str, payload: Any) -> int:
        """
        Deliver an event to every currently connected subscriber.

        Sends go out concurrently over a snapshot, so subscribers may connect
        or disconnect while the broadcast is in flight and a slow subscriber
        does not hold up the others. A subscriber whose send fails is dropped
        from the hub and its socket is closed.

        Args:
            event: Event name (e.g. "newProduct")
            payload: Product model, product id, or any JSON-compatible value

        Returns:
            Number of subscribers the event was delivered to
        """
        data = payload.model_dump(mode="json") if isinstance(payload, BaseModel) else payload
        snapshot: List[Any] = list(self._subscribers.values())

        results = await asyncio.gather(
            *(subscriber.send(event, data) for subscriber in snapshot),
            return_exceptions=True,
        )

        delivered = 0
        for subscriber, result in zip(snapshot, results):
            if isinstance(result, BaseException):
                logger.warning(f"Dropping subscriber {subscriber.id} after failed send: {result}")
                self.disconnect(subscriber)
                await subscriber.close()
            else:
                delivered += 1

        logger.debug(f"Broadcast '{event}' to {delivered}/{len(snapshot)} subscribers")
        return delivered

    def publish(self, event: str, payload: Any) -> asyncio.Task:
        """
        Schedule a broadcast without waiting for delivery.

        Must be called from within the running event loop.

        Returns:
            The delivery task
        """
        task = asyncio.create_task(self.broadcast(event, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every published event to finish delivering."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
