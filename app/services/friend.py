# app/services/friend.py
import logging
from sqlalchemy.orm import Session

from app.core.exceptions import ErrorType, NotFoundError, UnauthorizedError
from app.crud import consumer as crud_consumer
from app.crud import friend as crud_friend
from app.models.consumer import Consumer
from app.models.friend import Friend
from app.schemas.friend import FriendInfo, FavoriteToggleResponse

logger = logging.getLogger(__name__)

# --- Предикаты графа ---

def is_friend(db: Session, consumer_id: int, to_consumer_id: int) -> bool:
    """"to_consumer_id - друг consumer_id" означает наличие ребра consumer_id -> to_consumer_id."""
    return crud_friend.get_edge(db, consumer_id, to_consumer_id) is not None

def is_favorite(db: Session, owner_id: int, viewer_id: int) -> bool:
    """
    Отметил ли owner пользователя viewer как близкого друга.
    Направление важно: именно это открывает viewer приватные фандинги owner.
    """
    edge = crud_friend.get_edge(db, owner_id, viewer_id)
    return edge is not None and edge.is_favorite

def check_friend(db: Session, consumer_id: int, to_consumer_id: int) -> Friend:
    """Как is_friend, но отсутствие ребра - ошибка FRIEND_NOT_FOUND."""
    edge = crud_friend.get_edge(db, consumer_id, to_consumer_id)
    if edge is None:
        raise NotFoundError(ErrorType.FRIEND_NOT_FOUND)
    return edge

def get_friend_ids(db: Session, consumer_id: int) -> list[int]:
    """ID друзей в порядке списка друзей."""
    return [edge.to_consumer_id for edge in crud_friend.get_edges_from(db, consumer_id)]

def favorites_of(db: Session, target_id: int) -> set[int]:
    """Все, кто отметил target как близкого друга. Это аудитория уведомлений о событиях target."""
    return {edge.consumer_id for edge in crud_friend.get_edges_to(db, target_id, only_favorite=True)}

# --- Операции ---

def get_friends(db: Session, consumer: Consumer) -> list[FriendInfo]:
    """Список друзей: сначала близкие, потом остальные, внутри - по имени."""
    edges = crud_friend.get_edges_from(db, consumer.id)
    friends = {c.id: c for c in crud_consumer.get_consumers_by_ids(db, [e.to_consumer_id for e in edges])}

    result = [
        FriendInfo(consumer_id=edge.to_consumer_id, name=friends[edge.to_consumer_id].name, is_favorite=edge.is_favorite)
        for edge in edges
        if edge.to_consumer_id in friends
    ]
    result.sort(key=lambda f: (not f.is_favorite, f.name))
    return result

def toggle_favorite(db: Session, consumer: Consumer, to_consumer_id: int) -> FavoriteToggleResponse:
    """Переключает is_favorite на ребре consumer -> to_consumer_id. Обратное ребро не трогаем."""
    edge = check_friend(db, consumer.id, to_consumer_id)
    edge = crud_friend.toggle_favorite(db, edge)
    logger.info(f"Consumer {consumer.id} set favorite={edge.is_favorite} for friend {to_consumer_id}.")
    return FavoriteToggleResponse(to_consumer_id=to_consumer_id, is_favorite=edge.is_favorite)

def delete_all_friends(db: Session, requester: Consumer, consumer_id: int) -> int:
    """
    Удаляет все связи пользователя в обе стороны.
    Разорвать можно только свои связи.
    """
    if requester.id != consumer_id:
        logger.warning(f"Consumer {requester.id} tried to delete friends of consumer {consumer_id}.")
        raise UnauthorizedError()

    deleted = crud_friend.delete_all_edges(db, consumer_id)
    logger.info(f"Deleted {deleted} friend edges of consumer {consumer_id}.")
    return deleted
