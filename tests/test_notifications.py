"""Tests for the notification channel."""

from datetime import datetime, timezone

import pytest

from hajari.core.notifications import NotificationChannel
from hajari.types.claims import RemovalNotice


def make_notice(identifier="00:11:22:33:44:55"):
    return RemovalNotice.for_device(identifier, datetime(2024, 1, 1, tzinfo=timezone.utc))


class TestNotificationChannel:
    def test_publish_without_subscribers_drops(self):
        channel = NotificationChannel()
        assert not channel.publish(make_notice())
        assert channel.dropped == 1
        assert channel.published == 0

    def test_fan_out(self):
        channel = NotificationChannel()
        first, second = channel.subscribe(), channel.subscribe()

        assert channel.publish(make_notice())
        assert first.get_nowait() == second.get_nowait()
        assert channel.published == 1

    def test_full_queue_does_not_block(self):
        channel = NotificationChannel(maxsize=2)
        queue = channel.subscribe()

        results = [channel.publish(make_notice(f"00:00:00:00:00:0{i}")) for i in range(4)]
        assert results == [True, True, False, False]
        assert queue.qsize() == 2

    def test_unsubscribe(self):
        channel = NotificationChannel()
        queue = channel.subscribe()
        channel.unsubscribe(queue)
        channel.unsubscribe(queue)
        assert channel.subscriber_count == 0
        assert not channel.publish(make_notice())

    @pytest.mark.asyncio
    async def test_subscription_context(self):
        channel = NotificationChannel()
        async with channel.subscription() as queue:
            assert channel.subscriber_count == 1
            channel.publish(make_notice())
            notice = await queue.get()
            assert notice.message == "device 00:11:22:33:44:55 has been removed"
        assert channel.subscriber_count == 0
