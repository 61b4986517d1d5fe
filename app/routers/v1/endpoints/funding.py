# app/routers/v1/endpoints/funding.py

from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from app.core import locales
from app.dependencies import get_current_consumer, get_db, get_page_params
from app.models.consumer import Consumer
from app.schemas.common import StatusResponse
from app.schemas.funding import (
    FundingCreate, FundingDetail, FundingCalendarItem, FundingResponse, FundingSlice
)
from app.services import funding as funding_service
from app.services import notification_fanout

router = APIRouter(prefix="/fundings")


@router.post("", response_model=FundingDetail, status_code=status.HTTP_201_CREATED)
def create_funding(
    funding_in: FundingCreate,
    background_tasks: BackgroundTasks,
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    """
    Создание фандинга. Уведомления близким друзьям уходят уже после ответа,
    их доставка на результат запроса не влияет.
    """
    funding = funding_service.create_funding(db, current_consumer.id, funding_in)
    background_tasks.add_task(notification_fanout.dispatch_pending_notifications_task)
    return FundingDetail.model_validate(funding)


@router.get("/me", response_model=FundingSlice)
def get_my_fundings(
    keyword: Optional[str] = Query(None, description="Поиск по названию товара"),
    page_params: tuple[int, int] = Depends(get_page_params),
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    page, size = page_params
    return funding_service.get_my_fundings(db, current_consumer, keyword, page, size)


@router.get("/feeds", response_model=FundingSlice)
def get_funding_feeds(
    page_params: tuple[int, int] = Depends(get_page_params),
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    """
    Лента фандингов друзей. Страница может содержать меньше элементов, чем size,
    даже если has_next=true: приватные фандинги отсеиваются после выборки.
    """
    page, size = page_params
    return funding_service.get_funding_feeds(db, current_consumer, page, size)


@router.get("/calendar", response_model=List[FundingCalendarItem])
def get_funding_calendar(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    return funding_service.get_funding_calendar(db, current_consumer, year, month)


@router.get("/story/{consumer_id}", response_model=List[FundingResponse])
def get_fundings_story(
    consumer_id: int,
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    """Идущие фандинги пользователя по возрастанию даты начала."""
    return funding_service.get_fundings_story(db, current_consumer, consumer_id)


@router.get("/friends/{friend_id}", response_model=FundingSlice)
def get_friend_fundings(
    friend_id: int,
    keyword: Optional[str] = Query(None, description="Поиск по названию товара"),
    page_params: tuple[int, int] = Depends(get_page_params),
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    page, size = page_params
    return funding_service.get_friend_fundings(db, current_consumer, friend_id, keyword, page, size)


@router.get("/{funding_id}", response_model=FundingDetail)
def get_funding_detail(
    funding_id: int,
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    return funding_service.get_funding_detail(db, current_consumer.id, funding_id)


@router.delete("/{funding_id}", response_model=StatusResponse)
def delete_funding(
    funding_id: int,
    current_consumer: Consumer = Depends(get_current_consumer),
    db: Session = Depends(get_db)
):
    """Удалить можно только свой фандинг, который еще не начался."""
    funding_service.delete_funding(db, current_consumer.id, funding_id)
    return StatusResponse(message=locales.SUCCESS_FUNDING_DELETED)
