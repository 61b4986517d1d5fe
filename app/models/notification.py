# app/models/notification.py
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, func
from app.db.session import Base
from sqlalchemy.orm import relationship

class Notification(Base):
    """
    Уведомление получателю. Таблица одновременно служит outbox-ом:
    строки пишутся в транзакции события со статусом 'pending',
    а рассылает их отдельная фоновая задача.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    consumer_id = Column(Integer, ForeignKey("consumers.id", ondelete="CASCADE"), nullable=False, index=True)

    # Тип уведомления: 'funding_created', ...
    type = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=True)

    # ID связанной сущности (например, ID фандинга)
    related_entity_id = Column(String, nullable=True)

    # 'pending' -> 'sending' -> 'sent' | 'failed'
    delivery_status = Column(String, default="pending", nullable=False, server_default='pending', index=True)
    failure_reason = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    sent_at = Column(DateTime(timezone=True), nullable=True)

    consumer = relationship("Consumer")
