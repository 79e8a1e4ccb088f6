"""
Tests for the current-user subject and its read-only view.
"""

import asyncio
import threading

import pytest

from auth_rocket import BehaviorSubject


class TestBehaviorSubject:
    def test_new_subscriber_gets_latest_value(self):
        subject = BehaviorSubject(None)
        subject.next("alice")

        seen = []
        subject.subscribe(seen.append)

        assert seen == ["alice"]

    def test_pushes_every_change(self):
        subject = BehaviorSubject(None)
        seen = []
        subject.subscribe(seen.append)

        subject.next("alice")
        subject.next(None)
        subject.next(None)

        assert seen == [None, "alice", None, None]

    def test_unsubscribe_stops_updates(self):
        subject = BehaviorSubject(0)
        seen = []
        subscription = subject.subscribe(seen.append)

        subscription.unsubscribe()
        subscription.unsubscribe()
        subject.next(1)

        assert seen == [0]
        assert subscription.closed

    def test_subscription_as_context_manager(self):
        subject = BehaviorSubject(0)
        seen = []

        with subject.subscribe(seen.append):
            subject.next(1)
        subject.next(2)

        assert seen == [0, 1]

    def test_failing_handler_does_not_break_others(self):
        subject = BehaviorSubject(0)
        seen = []

        def broken(value):
            raise RuntimeError("boom")

        subject.subscribe(broken)
        subject.subscribe(seen.append)
        subject.next(1)

        assert seen == [0, 1]
        assert subject.value == 1

    def test_concurrent_next_arrives_after_replay(self):
        subject = BehaviorSubject("a")
        seen = []
        publisher = threading.Thread(target=subject.next, args=("b",))

        def handler(value):
            if not seen:
                # Publish from another thread while the replay is in progress
                publisher.start()
                publisher.join(timeout=0.1)
            seen.append(value)

        subject.subscribe(handler)
        publisher.join(timeout=1)

        assert seen == ["a", "b"]

    def test_value_published_during_replay_is_delivered(self):
        subject = BehaviorSubject("a")
        seen = []

        def handler(value):
            seen.append(value)
            if value == "a":
                subject.next("b")

        subject.subscribe(handler)

        assert seen == ["a", "b"]
        assert subject.value == "b"


class TestObservable:
    def test_view_is_read_only(self):
        view = BehaviorSubject("x").as_observable()

        assert view.value == "x"
        assert not hasattr(view, "next")

    @pytest.mark.asyncio
    async def test_updates_iterator(self):
        subject = BehaviorSubject(None)
        view = subject.as_observable()
        received = []

        async def consume():
            async for value in view.updates():
                received.append(value)
                if value == "done":
                    break

        task = asyncio.create_task(consume())
        await asyncio.sleep(0)
        subject.next("alice")
        subject.next("done")
        await asyncio.wait_for(task, timeout=1)

        assert received == [None, "alice", "done"]
