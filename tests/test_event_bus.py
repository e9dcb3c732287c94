"""
Tests for the in-process event bus.
"""

from voicepilot.services.event_bus import WINDOW_OPENED, EventBus


class TestPublish:

    def test_subscribers_called_in_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe(lambda name, data: calls.append(("first", name, data)))
        bus.subscribe(lambda name, data: calls.append(("second", name, data)))

        bus.publish(WINDOW_OPENED, {"id": "1"})

        assert calls == [
            ("first", WINDOW_OPENED, {"id": "1"}),
            ("second", WINDOW_OPENED, {"id": "1"}),
        ]

    def test_failing_subscriber_does_not_stop_others(self):
        """A subscriber that raises is skipped; the publisher never sees it."""
        bus = EventBus()
        received = []

        def broken(name, data):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(lambda name, data: received.append(name))

        bus.publish("anything")

        assert received == ["anything"]

    def test_missing_payload_is_empty_dict(self):
        bus = EventBus()
        received = []
        bus.subscribe(lambda name, data: received.append(data))

        bus.publish("anything")

        assert received == [{}]


class TestSubscribe:

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        unsubscribe = bus.subscribe(lambda name, data: received.append(name))

        unsubscribe()
        unsubscribe()
        bus.publish("anything")

        assert received == []
        assert bus.subscriber_count == 0

    def test_unsubscribe_while_publishing(self):
        bus = EventBus()
        received = []
        holder = {}

        def once(name, data):
            received.append(name)
            holder["unsubscribe"]()

        holder["unsubscribe"] = bus.subscribe(once)

        bus.publish("first")
        bus.publish("second")

        assert received == ["first"]
