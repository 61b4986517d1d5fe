# app/routers/v1/endpoints/friend.py

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core import locales
from app.dependencies import get_current_consumer, get_db
from app.models.consumer import Consumer
from app.schemas.common import StatusResponse
from app.schemas.friend import FriendInfo, FavoriteToggleResponse
from app.schemas.funding import FundingResponse
from app.services import friend as friend_service
from app.services import funding as funding_service

router = APIRouter(prefix="/friends")


@router.get("", response_model=List[FriendInfo])
def get_friends(
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    """Мои друзья: сначала близкие, затем остальные, по имени."""
    return friend_service.get_friends(db, current_consumer)


@router.get("/fundings-story", response_model=List[FundingResponse])
def get_friends_story(
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    """
    Сторис друзей: только идущие фандинги, у каждого друга - по возрастанию даты начала.
    """
    return funding_service.get_friends_story(db, current_consumer)


@router.put("/{to_consumer_id}/toggle-favorite", response_model=FavoriteToggleResponse)
def toggle_favorite(
    to_consumer_id: int,
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    """Переключает, считаю ли я этого друга близким. На его отношение ко мне не влияет."""
    return friend_service.toggle_favorite(db, current_consumer, to_consumer_id)


@router.delete("/{consumer_id}", response_model=StatusResponse)
def delete_all_friends(
    consumer_id: int,
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    """Удаляет все мои связи, в том числе из списков друзей других пользователей."""
    friend_service.delete_all_friends(db, current_consumer, consumer_id)
    return StatusResponse(message=locales.SUCCESS_FRIENDS_DELETED)
