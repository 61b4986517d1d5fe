# app/models/consumer.py

from sqlalchemy import Column, Integer, String, Boolean, BIGINT, DateTime, func
from app.db.session import Base

class Consumer(Base):
    __tablename__ = "consumers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    # Адрес доставки уведомлений. Может отсутствовать, если бот не подключен
    telegram_id = Column(BIGINT, unique=True, index=True, nullable=True)
    bot_accessible = Column(Boolean, default=True, nullable=False, server_default='true')

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    # Мягкое удаление: удаленный пользователь для нас "не найден"
    deleted_at = Column(DateTime(timezone=True), nullable=True)
