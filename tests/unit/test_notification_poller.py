"""
Unit tests for the notification polling loop.

Tests coverage:
- Dedup: surfaced = fetched minus seen, seen afterwards = seen union fetched
- Fail-fast without session claims
- Failures logged and swallowed
- Overlap guard and background task lifecycle
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from console.auth import SessionContext
from console.notifications import (
    NotificationAPI,
    NotificationPoller,
    NotificationStore,
    SeenNotificationIds,
)
from shared.api_client import ApiError
from shared.storage import MemoryStorage

KEY = "seen_notification_ids"


def raw_notification(n_id):
    return {"id": n_id, "title": f"Title {n_id}", "message": "Body", "type": "info", "category": "repair"}


def make_poller(session, seen_initial=None, interval=30.0):
    api = AsyncMock(spec=NotificationAPI)
    storage = MemoryStorage({KEY: json.dumps(seen_initial)} if seen_initial is not None else None)
    store = NotificationStore()
    seen = SeenNotificationIds(storage, key=KEY)
    poller = NotificationPoller(api, session, store, seen, interval=interval, limit=10)
    return poller, api, store, seen


async def wait_for_awaits(mock, count):
    for _ in range(200):
        if mock.await_count >= count:
            return
        await asyncio.sleep(0.01)
    raise AssertionError(f"expected {count} awaits, got {mock.await_count}")


# ============================================================================
# poll()
# ============================================================================


class TestPoll:
    """Tests for NotificationPoller.poll."""

    @pytest.mark.asyncio
    async def test_surfaces_only_unseen_in_server_order(self, session):
        poller, api, store, seen = make_poller(session, seen_initial=["a", "b"])
        api.get_notifications.return_value = [raw_notification(i) for i in ("d", "b", "c")]

        surfaced = await poller.poll()

        assert [n.id for n in surfaced] == ["d", "c"]
        assert [n.id for n in store.notifications] == ["d", "c"]
        assert set(await seen.load()) == {"a", "b", "c", "d"}
        api.get_notifications.assert_awaited_once_with("user-1", "org-1", 10)

    @pytest.mark.asyncio
    async def test_second_poll_surfaces_nothing(self, session):
        poller, api, store, _ = make_poller(session)
        api.get_notifications.return_value = [raw_notification("a")]

        await poller.poll()
        second = await poller.poll()

        assert second == []
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_no_session_is_silent_noop(self, anonymous_session):
        poller, api, store, seen = make_poller(anonymous_session)

        assert await poller.poll() == []

        api.get_notifications.assert_not_awaited()
        assert store.notifications == []
        assert await seen.load() == []

    @pytest.mark.asyncio
    async def test_missing_org_claim_is_noop(self, make_token):
        session = SessionContext(MemoryStorage({"token": make_token(orgId=None)}))
        poller, api, _, _ = make_poller(session)

        assert await poller.poll() == []
        api.get_notifications.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failures_are_swallowed(self, session):
        poller, api, store, seen = make_poller(session, seen_initial=["a"])
        api.get_notifications.side_effect = ApiError("Server unavailable", status_code=503)

        assert await poller.poll() == []

        assert store.notifications == []
        assert await seen.load() == ["a"]

    @pytest.mark.asyncio
    async def test_malformed_items_are_skipped(self, session):
        poller, api, store, seen = make_poller(session)
        api.get_notifications.return_value = [{"id": "bad"}, raw_notification("good")]

        surfaced = await poller.poll()

        assert [n.id for n in surfaced] == ["good"]
        assert set(await seen.load()) == {"bad", "good"}

    @pytest.mark.asyncio
    async def test_overlapping_poll_is_skipped(self, session):
        poller, api, _, _ = make_poller(session)
        release = asyncio.Event()
        started = asyncio.Event()

        async def slow_fetch(*args):
            started.set()
            await release.wait()
            return [raw_notification("a")]

        api.get_notifications.side_effect = slow_fetch

        first = asyncio.create_task(poller.poll())
        await started.wait()
        assert await poller.poll() == []
        release.set()

        assert [n.id for n in await first] == ["a"]
        assert api.get_notifications.await_count == 1


# ============================================================================
# Background loop
# ============================================================================


class TestPollingLoop:
    """Tests for start/stop."""

    @pytest.mark.asyncio
    async def test_polls_immediately_and_repeatedly(self, session):
        poller, api, _, _ = make_poller(session, interval=0.01)
        api.get_notifications.return_value = []

        poller.start()
        assert poller.running
        await wait_for_awaits(api.get_notifications, 3)
        await poller.stop()

        assert not poller.running

    @pytest.mark.asyncio
    async def test_failing_tick_does_not_stop_loop(self, session):
        poller, api, _, _ = make_poller(session, interval=0.01)
        api.get_notifications.side_effect = RuntimeError("unexpected")

        poller.start()
        await wait_for_awaits(api.get_notifications, 2)

        assert poller.running
        await poller.stop()

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_task(self, session):
        poller, api, _, _ = make_poller(session, interval=60)
        api.get_notifications.return_value = []

        poller.start()
        task = poller._task
        poller.start()

        assert poller._task is task
        await poller.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, session):
        poller, _, _, _ = make_poller(session)
        await poller.stop()
        assert not poller.running
