# tests/test_notification_fanout.py

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from app.bot.core import bot
from app.crud import notification as crud_notification
from app.models.notification import Notification
from app.services import notification_fanout

pytestmark = pytest.mark.asyncio


@pytest.fixture
def queued(db_session, make_consumer, make_friends, make_funding):
    """Владелец и три близких друга с уведомлениями о его новом фандинге в очереди."""
    owner = make_consumer("Owner")
    fans = [make_consumer(f"Fan {i}", telegram_id=1000 + i) for i in range(3)]
    for fan in fans:
        make_friends(fan, owner, a_favors_b=True)
    funding = make_funding(owner)

    notification_fanout.enqueue_funding_created(db_session, owner, funding)
    db_session.commit()
    return owner, fans, funding


async def test_dispatch_marks_each_recipient_independently(db_session, mocker, queued):
    _, fans, funding = queued

    async def fake_send(db, consumer, title, message):
        if consumer.id == fans[0].id:
            return False, "User has blocked the bot"
        if consumer.id == fans[1].id:
            raise RuntimeError("network is down")
        return True, None

    mocked_send = mocker.patch(
        "app.bot.services.notification.send_notification", new=AsyncMock(side_effect=fake_send)
    )

    sent, failed = await notification_fanout.dispatch_pending_notifications(db_session, batch_size=10)

    assert (sent, failed) == (1, 2)
    assert mocked_send.await_count == 3

    statuses = {
        n.consumer_id: (n.delivery_status, n.failure_reason)
        for n in crud_notification.get_notifications_for_entity(db_session, "funding_created", str(funding.id))
    }
    assert statuses[fans[0].id] == ("failed", "User has blocked the bot")
    assert statuses[fans[1].id] == ("failed", "network is down")
    assert statuses[fans[2].id] == ("sent", None)
    assert crud_notification.get_pending_notifications(db_session) == []


async def test_dispatch_does_not_retry_processed_notifications(db_session, mocker, queued):
    mocked_send = mocker.patch(
        "app.bot.services.notification.send_notification", new=AsyncMock(return_value=(False, "boom"))
    )

    await notification_fanout.dispatch_pending_notifications(db_session, batch_size=10)
    sent, failed = await notification_fanout.dispatch_pending_notifications(db_session, batch_size=10)

    assert (sent, failed) == (0, 0)
    assert mocked_send.await_count == 3


async def test_dispatch_respects_batch_size(db_session, mocker, queued):
    mocker.patch(
        "app.bot.services.notification.send_notification", new=AsyncMock(return_value=(True, None))
    )

    sent, _ = await notification_fanout.dispatch_pending_notifications(db_session, batch_size=2)

    assert sent == 2
    assert len(crud_notification.get_pending_notifications(db_session)) == 1


async def test_dispatch_through_bot_transport(db_session, mocker, make_consumer, make_friends, make_funding):
    owner = make_consumer("Owner")
    linked = make_consumer("Linked", telegram_id=555)
    unlinked = make_consumer("Unlinked")
    make_friends(linked, owner, a_favors_b=True)
    make_friends(unlinked, owner, a_favors_b=True)
    funding = make_funding(owner)
    notification_fanout.enqueue_funding_created(db_session, owner, funding)
    db_session.commit()

    send_message = mocker.patch.object(bot, "send_message", new=AsyncMock())

    sent, failed = await notification_fanout.dispatch_pending_notifications(db_session, batch_size=10)

    assert (sent, failed) == (1, 1)
    send_message.assert_awaited_once()
    assert send_message.await_args.kwargs["chat_id"] == 555
    assert "Owner" in send_message.await_args.kwargs["text"]


async def test_cleanup_removes_only_old_processed(db_session, make_consumer):
    consumer = make_consumer("Consumer")
    old = datetime.now(timezone.utc) - timedelta(days=40)

    def add(status, created_at=None):
        notification = Notification(
            consumer_id=consumer.id, type="funding_created", title="t", delivery_status=status
        )
        if created_at:
            notification.created_at = created_at
        db_session.add(notification)
        return notification

    add("sent", old)
    add("failed", old)
    old_pending = add("pending", old)
    fresh_sent = add("sent")
    db_session.commit()

    deleted = crud_notification.delete_old_processed_notifications(db_session, older_than_days=30)

    assert deleted == 2
    remaining = {n.id for n in db_session.query(Notification).all()}
    assert remaining == {old_pending.id, fresh_sent.id}


async def test_concurrent_dispatches_send_each_notification_once(db_session, other_session, mocker, queued):
    """Два одновременных запуска рассылки (фоновая задача и планировщик) не дублируют сообщения."""
    _, fans, _ = queued
    delivered_to = []

    async def slow_send(db, consumer, title, message):
        delivered_to.append(consumer.id)
        await asyncio.sleep(0.05)
        return True, None

    mocked_send = mocker.patch(
        "app.bot.services.notification.send_notification", new=AsyncMock(side_effect=slow_send)
    )

    results = await asyncio.gather(
        notification_fanout.dispatch_pending_notifications(db_session, batch_size=10),
        notification_fanout.dispatch_pending_notifications(other_session, batch_size=10),
    )

    assert mocked_send.await_count == 3
    assert sorted(delivered_to) == sorted(fan.id for fan in fans)
    assert sum(sent for sent, _ in results) == 3
    assert all(failed == 0 for _, failed in results)


async def test_claim_succeeds_only_once(db_session, other_session, queued):
    notification = crud_notification.get_pending_notifications(db_session)[0]
    stale_copy = crud_notification.get_pending_notifications(other_session)[0]
    assert stale_copy.id == notification.id

    assert crud_notification.claim_notification(db_session, notification.id) is True
    assert crud_notification.claim_notification(other_session, stale_copy.id) is False

    db_session.refresh(notification)
    assert notification.delivery_status == "sending"
