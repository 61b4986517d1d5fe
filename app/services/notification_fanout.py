# app/services/notification_fanout.py
import logging
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.core import locales
from app.core.config import settings
from app.crud import consumer as crud_consumer
from app.crud import notification as crud_notification
from app.bot.services import notification as bot_notification_service
from app.models.consumer import Consumer
from app.models.funding import Funding
from app.models.notification import Notification
from app.services import friend as friend_service

logger = logging.getLogger(__name__)

FUNDING_CREATED_TYPE = "funding_created"


def get_audience(db: Session, owner_id: int) -> list[Consumer]:
    """Аудитория событий владельца: живые пользователи, которые отметили его близким другом."""
    return crud_consumer.get_consumers_by_ids(db, sorted(friend_service.favorites_of(db, owner_id)))


def enqueue_funding_created(db: Session, owner: Consumer, funding: Funding) -> list[Notification]:
    """
    Кладет в outbox по одному уведомлению на каждого получателя.
    Ничего не отправляет и не коммитит: строки уходят в БД вместе с фандингом.
    """
    audience = get_audience(db, owner.id)
    notifications = [
        crud_notification.create_notification(
            db,
            consumer_id=recipient.id,
            type=FUNDING_CREATED_TYPE,
            title=locales.NOTIFICATION_FUNDING_CREATED_TITLE,
            message=locales.NOTIFICATION_FUNDING_CREATED_MESSAGE.format(owner_name=owner.name),
            related_entity_id=str(funding.id)
        )
        for recipient in audience
    ]
    logger.info(f"Queued {len(notifications)} notification(s) about funding {funding.id} of consumer {owner.id}.")
    return notifications


async def dispatch_pending_notifications(db: Session, batch_size: int) -> tuple[int, int]:
    """
    Отправляет накопившиеся уведомления. Ошибка доставки одному получателю
    помечает только его уведомление и не прерывает пачку. Повторов нет.
    Каждая строка перед отправкой захватывается, так что параллельные запуски
    не отправят одно уведомление дважды.
    Возвращает (отправлено, не доставлено).
    """
    pending = crud_notification.get_pending_notifications(db, limit=batch_size)
    sent_count = 0
    failed_count = 0

    for notification in pending:
        if not crud_notification.claim_notification(db, notification.id):
            logger.debug(f"Notification {notification.id} is already being dispatched, skipping.")
            continue

        recipient = crud_consumer.get_consumer_by_id(db, notification.consumer_id)
        if recipient is None:
            crud_notification.mark_failed(db, notification, "Recipient not found")
            failed_count += 1
            continue

        try:
            success, reason = await bot_notification_service.send_notification(
                db, recipient, notification.title, notification.message
            )
        except Exception as e:
            logger.error(f"Unexpected error while sending notification {notification.id}", exc_info=True)
            success, reason = False, str(e)

        if success:
            crud_notification.mark_sent(db, notification)
            sent_count += 1
        else:
            crud_notification.mark_failed(db, notification, reason)
            failed_count += 1

    return sent_count, failed_count


async def dispatch_pending_notifications_task():
    """Фоновая задача: разбор outbox-а уведомлений. Запускается планировщиком и после создания фандинга."""
    with SessionLocal() as db:
        try:
            sent_count, failed_count = await dispatch_pending_notifications(
                db, batch_size=settings.NOTIFICATION_DISPATCH_BATCH_SIZE
            )
            if sent_count or failed_count:
                logger.info(f"Notification dispatch finished. Sent: {sent_count}, Failed: {failed_count}")
        except Exception:
            logger.error("An error occurred during notification dispatch task", exc_info=True)
            db.rollback()


def cleanup_old_notifications_task():
    """Фоновая задача: удаляет старые обработанные уведомления из outbox-а."""
    logger.info("--- Starting scheduled job: Cleanup of Processed Notifications ---")
    with SessionLocal() as db:
        try:
            deleted_count = crud_notification.delete_old_processed_notifications(
                db, older_than_days=settings.NOTIFICATION_RETENTION_DAYS
            )
            if deleted_count > 0:
                logger.info(f"Successfully deleted {deleted_count} old notifications.")
            else:
                logger.info("No old notifications to delete.")
        except Exception:
            logger.error("An error occurred during notification cleanup task", exc_info=True)
            db.rollback()
    logger.info("--- Finished scheduled job: Cleanup of Processed Notifications ---")
