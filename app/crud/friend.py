# app/crud/friend.py
from sqlalchemy.orm import Session
from sqlalchemy import or_
from app.models.friend import Friend


def get_edge(db: Session, consumer_id: int, to_consumer_id: int) -> Friend | None:
    """Ищет ребро (consumer_id -> to_consumer_id) по составному ключу."""
    return db.query(Friend).filter_by(consumer_id=consumer_id, to_consumer_id=to_consumer_id).first()

def get_edges_from(db: Session, consumer_id: int) -> list[Friend]:
    """
    Все исходящие ребра пользователя, т.е. его список друзей.
    Порядок (время создания, затем ID друга) и есть "порядок списка друзей".
    """
    return db.query(Friend).filter(
        Friend.consumer_id == consumer_id
    ).order_by(Friend.created_at, Friend.to_consumer_id).all()

def get_edges_to(db: Session, to_consumer_id: int, only_favorite: bool = False) -> list[Friend]:
    """Все входящие ребра: кто добавил пользователя в друзья (опционально - в близкие)."""
    query = db.query(Friend).filter(Friend.to_consumer_id == to_consumer_id)
    if only_favorite:
        query = query.filter(Friend.is_favorite == True)
    return query.order_by(Friend.consumer_id).all()

def create_edge(db: Session, consumer_id: int, to_consumer_id: int, is_favorite: bool = False) -> Friend:
    """Создает ребро дружбы. Сам онбординг друзей живет во внешнем сервисе."""
    edge = Friend(consumer_id=consumer_id, to_consumer_id=to_consumer_id, is_favorite=is_favorite)
    db.add(edge)
    db.commit()
    db.refresh(edge)
    return edge

def toggle_favorite(db: Session, edge: Friend) -> Friend:
    """Переключает флаг близкого друга на одном конкретном ребре."""
    edge.is_favorite = not edge.is_favorite
    db.commit()
    db.refresh(edge)
    return edge

def delete_all_edges(db: Session, consumer_id: int) -> int:
    """Удаляет все ребра, где пользователь стоит с любой стороны. Возвращает число удаленных."""
    deleted = db.query(Friend).filter(
        or_(Friend.consumer_id == consumer_id, Friend.to_consumer_id == consumer_id)
    ).delete(synchronize_session=False)
    db.commit()
    return deleted
