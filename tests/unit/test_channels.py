"""Tests for LatestValueChannel and EventChannel."""

import threading
import time
from unittest.mock import MagicMock

from locationbroker.channels import EventChannel, LatestValueChannel

# ---------------------------------------------------------------------------
# LatestValueChannel
# ---------------------------------------------------------------------------


class TestLatestValueChannel:
    def test_initial_value(self):
        assert LatestValueChannel("c").value is None
        assert LatestValueChannel("c", initial=5).value == 5

    def test_subscriber_gets_replay_then_changes(self):
        channel = LatestValueChannel("c", initial=1)
        received = []
        channel.subscribe(received.append)
        channel.set(2)
        channel.set(3)
        assert received == [1, 2, 3]

    def test_late_subscriber_gets_latest_only(self):
        channel = LatestValueChannel("c")
        channel.set("a")
        channel.set("b")
        received = []
        channel.subscribe(received.append)
        assert received == ["b"]

    def test_value_committed_before_subscribers_run(self):
        channel = LatestValueChannel("c", initial=0)
        seen = []
        channel.subscribe(lambda _v: seen.append(channel.value))
        channel.set(7)
        assert seen == [0, 7]

    def test_cancel_stops_delivery(self):
        channel = LatestValueChannel("c")
        received = []
        subscription = channel.subscribe(received.append)
        subscription.cancel()
        subscription.cancel()
        channel.set(1)
        assert received == [None]
        assert subscription.active is False
        assert channel.subscriber_count == 0

    def test_subscription_context_manager(self):
        channel = LatestValueChannel("c")
        received = []
        with channel.subscribe(received.append):
            channel.set(1)
        channel.set(2)
        assert received == [None, 1]

    def test_failing_subscriber_isolated(self):
        channel = LatestValueChannel("c")
        good = MagicMock()
        channel.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        channel.subscribe(good)
        channel.set(1)
        assert channel.value == 1
        good.assert_called_with(1)


# ---------------------------------------------------------------------------
# EventChannel
# ---------------------------------------------------------------------------


class TestEventChannel:
    def test_no_replay(self):
        channel = EventChannel("e")
        channel.publish(1)
        received = []
        channel.subscribe(received.append)
        channel.publish(2)
        assert received == [2]

    def test_all_subscribers_receive(self):
        channel = EventChannel("e")
        a, b = [], []
        channel.subscribe(a.append)
        channel.subscribe(b.append)
        channel.publish("x")
        assert a == ["x"] and b == ["x"]

    def test_subscriber_can_cancel_during_delivery(self):
        channel = EventChannel("e")
        received = []
        subscription = None

        def once(value):
            received.append(value)
            subscription.cancel()

        subscription = channel.subscribe(once)
        channel.publish(1)
        channel.publish(2)
        assert received == [1]


# ---------------------------------------------------------------------------
# Threaded delivery
# ---------------------------------------------------------------------------


class TestThreadedSubscribers:
    def test_slow_subscriber_does_not_block_publisher(self):
        channel = EventChannel("e")
        release = threading.Event()
        received = []

        def slow(value):
            release.wait(timeout=2.0)
            received.append(value)

        channel.subscribe(slow, threaded=True)
        start = time.monotonic()
        for i in range(5):
            channel.publish(i)
        assert time.monotonic() - start < 1.0

        release.set()
        deadline = time.monotonic() + 2.0
        while len(received) < 5 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert received == [0, 1, 2, 3, 4]

    def test_threaded_latest_subscriber_gets_replay(self):
        channel = LatestValueChannel("c", initial="first")
        got = threading.Event()
        received = []

        def record(value):
            received.append(value)
            got.set()

        subscription = channel.subscribe(record, threaded=True)
        assert got.wait(timeout=2.0)
        subscription.cancel()
        subscription._subscriber.join(timeout=2.0)
        assert received == ["first"]
