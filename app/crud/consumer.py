# app/crud/consumer.py
from sqlalchemy.orm import Session
from app.models.consumer import Consumer


def get_consumer_by_id(db: Session, consumer_id: int) -> Consumer | None:
    """Получает живого (не удаленного) пользователя по ID."""
    return db.query(Consumer).filter(
        Consumer.id == consumer_id,
        Consumer.deleted_at.is_(None)
    ).first()

def get_consumers_by_ids(db: Session, consumer_ids: list[int]) -> list[Consumer]:
    """Получает живых пользователей по списку ID. Удаленные и несуществующие пропускаются."""
    if not consumer_ids:
        return []
    return db.query(Consumer).filter(
        Consumer.id.in_(consumer_ids),
        Consumer.deleted_at.is_(None)
    ).order_by(Consumer.id).all()

def create_consumer(db: Session, name: str, telegram_id: int | None = None) -> Consumer:
    """Создает пользователя. Используется онбордингом и тестами."""
    db_consumer = Consumer(name=name, telegram_id=telegram_id)
    db.add(db_consumer)
    db.commit()
    db.refresh(db_consumer)
    return db_consumer
