# app/services/visibility.py
import logging
from sqlalchemy.orm import Session

from app.core.exceptions import ErrorType, NotFavoriteError, NotFoundError
from app.models.funding import Funding
from app.services import friend as friend_service

logger = logging.getLogger(__name__)


def can_see_private(db: Session, owner_id: int, viewer_id: int) -> bool:
    """
    Видит ли viewer приватные фандинги owner.
    Единственное место, где решается вопрос приватности: и ветвление запросов,
    и пост-фильтрация ленты идут через эту функцию.
    """
    return owner_id == viewer_id or friend_service.is_favorite(db, owner_id, viewer_id)


def check_can_view(db: Session, viewer_id: int, funding: Funding) -> None:
    """
    Проверка доступа к одному фандингу. Ошибки:
    - FRIEND_NOT_FOUND, если viewer не друг владельца;
    - FRIEND_NOT_FAVORITE, если фандинг приватный, а владелец не отметил viewer близким.
    """
    owner_id = funding.consumer_id
    if owner_id == viewer_id:
        return

    if not friend_service.is_friend(db, viewer_id, owner_id):
        raise NotFoundError(ErrorType.FRIEND_NOT_FOUND)

    if funding.is_private and not can_see_private(db, owner_id, viewer_id):
        logger.info(f"Consumer {viewer_id} denied access to private funding {funding.id}.")
        raise NotFavoriteError()


def can_view(db: Session, viewer_id: int, funding: Funding) -> bool:
    """То же, что check_can_view, но без исключений."""
    owner_id = funding.consumer_id
    if owner_id == viewer_id:
        return True
    if not friend_service.is_friend(db, viewer_id, owner_id):
        return False
    return not funding.is_private or can_see_private(db, owner_id, viewer_id)


def filter_visible_for_friend(db: Session, viewer_id: int, fundings: list[Funding]) -> list[Funding]:
    """
    Пост-фильтр для выборок по друзьям: публичные остаются всегда,
    приватные - только если владелец отметил viewer близким.
    Флаг близости считается один раз на владельца.
    """
    allowed: dict[int, bool] = {}
    result = []
    for funding in fundings:
        if not funding.is_private:
            result.append(funding)
            continue
        owner_id = funding.consumer_id
        if owner_id not in allowed:
            allowed[owner_id] = can_see_private(db, owner_id, viewer_id)
        if allowed[owner_id]:
            result.append(funding)
    return result
