# app/models/friend.py
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Boolean, func, Index
from app.db.session import Base

class Friend(Base):
    """
    Направленное ребро дружбы (consumer_id -> to_consumer_id).
    Ребра A->B и B->A - независимые строки, у каждого свой флаг is_favorite.
    is_favorite на A->B значит "A считает B близким другом" и открывает B приватные фандинги A.
    """
    __tablename__ = "friends"

    consumer_id = Column(Integer, ForeignKey("consumers.id", ondelete="CASCADE"), primary_key=True)
    to_consumer_id = Column(Integer, ForeignKey("consumers.id", ondelete="CASCADE"), primary_key=True)

    is_favorite = Column(Boolean, default=False, nullable=False, server_default='false')
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Для выборок "кто добавил меня" (edges_to)
    __table_args__ = (Index("ix_friends_to_consumer_id", "to_consumer_id"),)

    def __repr__(self):
        return f"<Friend({self.consumer_id} -> {self.to_consumer_id}, favorite={self.is_favorite})>"
