# app/crud/notification.py
from sqlalchemy.orm import Session
from sqlalchemy import or_
from app.models.notification import Notification
from typing import List
from datetime import datetime, timedelta, timezone

def create_notification(
    db: Session,
    consumer_id: int,
    type: str,
    title: str,
    message: str | None = None,
    related_entity_id: str | None = None
) -> Notification:
    """
    Создает уведомление в статусе 'pending' и добавляет его в сессию.
    Требует внешнего вызова db.commit() - уведомление коммитится вместе с событием.
    """
    db_notification = Notification(
        consumer_id=consumer_id,
        type=type,
        title=title,
        message=message,
        related_entity_id=related_entity_id,
        delivery_status="pending"
    )
    db.add(db_notification)
    return db_notification

def get_pending_notifications(db: Session, limit: int = 100) -> List[Notification]:
    """Очередь на отправку: самые старые неотправленные уведомления."""
    return db.query(Notification).filter(
        Notification.delivery_status == "pending"
    ).order_by(Notification.id).limit(limit).all()

def claim_notification(db: Session, notification_id: int) -> bool:
    """
    Атомарно переводит уведомление из 'pending' в 'sending'.
    False - строку уже забрал другой запуск рассылки, отправлять ее нельзя.
    """
    claimed = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.delivery_status == "pending"
    ).update({Notification.delivery_status: "sending"}, synchronize_session=False)
    db.commit()
    return claimed == 1

def get_notifications_for_entity(db: Session, type: str, related_entity_id: str) -> List[Notification]:
    return db.query(Notification).filter_by(
        type=type,
        related_entity_id=related_entity_id
    ).order_by(Notification.consumer_id).all()

def mark_sent(db: Session, notification: Notification) -> Notification:
    notification.delivery_status = "sent"
    notification.sent_at = datetime.now(timezone.utc)
    notification.failure_reason = None
    db.commit()
    return notification

def mark_failed(db: Session, notification: Notification, reason: str | None) -> Notification:
    notification.delivery_status = "failed"
    notification.failure_reason = (reason or "unknown")[:255]
    db.commit()
    return notification

def delete_old_processed_notifications(db: Session, older_than_days: int) -> int:
    """Удаляет уже обработанные (отправленные или упавшие) уведомления старше порога."""
    threshold = datetime.now(timezone.utc) - timedelta(days=older_than_days)

    result = db.query(Notification).filter(
        or_(Notification.delivery_status == "sent", Notification.delivery_status == "failed"),
        Notification.created_at < threshold
    ).delete(synchronize_session=False)

    db.commit()
    return result
