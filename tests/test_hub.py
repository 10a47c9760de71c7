"""
==============================================================================
Fan-out Hub Tests
==============================================================================

Tests for subscriber membership, broadcast delivery and scheduled publishing.

==============================================================================
"""

import asyncio
from typing import Any, List, Optional, Tuple

from storefront.catalog.models import Product
from storefront.catalog.store import CatalogStore
from storefront.realtime.hub import FanoutHub, Subscriber
from storefront.services.product_service import ProductService


class FakeSubscriber:
    """In-memory subscriber recording every event it receives."""

    def __init__(self, subscriber_id: str, fail: bool = False):
        self.id = subscriber_id
        self.fail = fail
        self.closed = False
        self.received: List[Tuple[str, Any]] = []

    async def send(self, event: str, data: Any) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.received.append((event, data))

    async def close(self) -> None:
        self.closed = True


class StalledSubscriber(FakeSubscriber):
    """Subscriber whose send blocks until released."""

    def __init__(self, subscriber_id: str, release: asyncio.Event):
        super().__init__(subscriber_id)
        self._release = release

    async def send(self, event: str, data: Any) -> None:
        await self._release.wait()
        await super().send(event, data)


class FakeWebSocket:
    """Records close calls; optionally fails like a socket that is already gone."""

    def __init__(self, fail_close: bool = False):
        self.fail_close = fail_close
        self.close_codes: List[Optional[int]] = []

    async def close(self, code: int = 1000) -> None:
        self.close_codes.append(code)
        if self.fail_close:
            raise RuntimeError("Unexpected ASGI message 'websocket.close'")


class LeavingSubscriber(FakeSubscriber):
    """Subscriber that disconnects another one while receiving."""

    def __init__(self, subscriber_id: str, hub: FanoutHub, other: FakeSubscriber):
        super().__init__(subscriber_id)
        self._hub = hub
        self._other = other

    async def send(self, event: str, data: Any) -> None:
        self._hub.disconnect(self._other)
        await super().send(event, data)


class TestMembership:

    def test_connect_and_disconnect(self):
        hub = FanoutHub()
        a, b = FakeSubscriber("a"), FakeSubscriber("b")

        hub.connect(a)
        hub.connect(b)
        assert hub.subscriber_count == 2

        hub.disconnect(a)
        assert hub.subscriber_count == 1

    def test_disconnect_unknown_is_noop(self):
        hub = FanoutHub()
        hub.disconnect(FakeSubscriber("ghost"))
        assert hub.subscriber_count == 0


class TestBroadcast:

    def test_every_subscriber_receives_event(self):
        hub = FanoutHub()
        subscribers = [FakeSubscriber(str(i)) for i in range(3)]
        for s in subscribers:
            hub.connect(s)

        delivered = asyncio.run(hub.broadcast("deleteProduct", 3))

        assert delivered == 3
        assert all(s.received == [("deleteProduct", 3)] for s in subscribers)

    def test_product_payload_is_serialized(self):
        hub = FanoutHub()
        subscriber = FakeSubscriber("a")
        hub.connect(subscriber)
        product = Product(
            id=1, title="Pen", price=1.5, description="blue pen",
            code="P1", stock=10, category="office",
        )

        asyncio.run(hub.broadcast("newProduct", product))

        assert subscriber.received == [("newProduct", product.model_dump(mode="json"))]

    def test_late_subscriber_gets_no_replay(self):
        hub = FanoutHub()
        early, late = FakeSubscriber("early"), FakeSubscriber("late")
        hub.connect(early)

        asyncio.run(hub.broadcast("deleteProduct", 1))
        hub.connect(late)

        assert early.received == [("deleteProduct", 1)]
        assert late.received == []

    def test_failed_subscriber_is_dropped(self):
        hub = FanoutHub()
        healthy, broken = FakeSubscriber("healthy"), FakeSubscriber("broken", fail=True)
        hub.connect(broken)
        hub.connect(healthy)

        delivered = asyncio.run(hub.broadcast("deleteProduct", 2))

        assert delivered == 1
        assert healthy.received == [("deleteProduct", 2)]
        assert hub.subscriber_count == 1
        assert broken.closed is True
        assert healthy.closed is False

    def test_disconnect_during_broadcast(self):
        hub = FanoutHub()
        other = FakeSubscriber("other")
        leaving = LeavingSubscriber("leaving", hub, other)
        hub.connect(leaving)
        hub.connect(other)

        asyncio.run(hub.broadcast("deleteProduct", 4))

        assert leaving.received == [("deleteProduct", 4)]
        assert hub.subscriber_count == 1

    def test_no_subscribers(self):
        assert asyncio.run(FanoutHub().broadcast("newProduct", {"title": "Pen"})) == 0

    def test_stalled_subscriber_does_not_delay_others(self):
        async def scenario():
            hub = FanoutHub()
            release = asyncio.Event()
            stalled = StalledSubscriber("stalled", release)
            healthy = FakeSubscriber("healthy")
            hub.connect(stalled)
            hub.connect(healthy)

            task = asyncio.ensure_future(hub.broadcast("deleteProduct", 5))
            await asyncio.sleep(0.05)
            seen_before_release = list(healthy.received)

            release.set()
            delivered = await asyncio.wait_for(task, timeout=1)
            return seen_before_release, delivered, stalled.received

        seen_before_release, delivered, stalled_received = asyncio.run(scenario())

        assert seen_before_release == [("deleteProduct", 5)]
        assert delivered == 2
        assert stalled_received == [("deleteProduct", 5)]


class TestPublish:

    def test_publish_delivers_in_background(self):
        async def scenario():
            hub = FanoutHub()
            subscriber = FakeSubscriber("a")
            hub.connect(subscriber)

            task = hub.publish("deleteProduct", 7)
            pending = hub.pending_count
            delivered = await task
            return subscriber.received, pending, delivered, hub.pending_count

        received, pending, delivered, pending_after = asyncio.run(scenario())

        assert received == [("deleteProduct", 7)]
        assert pending == 1
        assert delivered == 1
        assert pending_after == 0

    def test_durable_add_does_not_wait_for_stalled_subscriber(self, store: CatalogStore, pen: dict):
        async def scenario():
            hub = FanoutHub()
            release = asyncio.Event()
            stalled = StalledSubscriber("stalled", release)
            hub.connect(stalled)
            service = ProductService(store, hub)

            product = await asyncio.wait_for(service.add_product(pen), timeout=1)
            pending = hub.pending_count

            release.set()
            await hub.drain()
            return product, pending, stalled.received

        product, pending, received = asyncio.run(scenario())

        assert product.id == 1
        assert pending == 1
        assert received == [("newProduct", product.model_dump(mode="json"))]
        assert [p.id for p in store.list_products()] == [1]

    def test_drain_without_pending_events(self):
        asyncio.run(FanoutHub().drain())


class TestSubscriber:

    def test_close_marks_subscriber_closed(self):
        websocket = FakeWebSocket()
        subscriber = Subscriber(websocket)

        asyncio.run(subscriber.close())
        asyncio.run(subscriber.close())

        assert subscriber.closed is True
        assert websocket.close_codes == [1011]

    def test_close_on_gone_socket(self):
        subscriber = Subscriber(FakeWebSocket(fail_close=True))

        asyncio.run(subscriber.close())

        assert subscriber.closed is True

    def test_failed_send_closes_real_subscriber(self):
        class BrokenWebSocket(FakeWebSocket):
            async def send_json(self, data: Any) -> None:
                raise RuntimeError("connection reset")

        websocket = BrokenWebSocket()
        subscriber = Subscriber(websocket)
        hub = FanoutHub()
        hub.connect(subscriber)

        delivered = asyncio.run(hub.broadcast("deleteProduct", 1))

        assert delivered == 0
        assert hub.subscriber_count == 0
        assert subscriber.closed is True
        assert websocket.close_codes == [1011]
