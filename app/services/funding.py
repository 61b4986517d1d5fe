# app/services/funding.py

import logging
from datetime import date
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    ErrorType, NotFoundError, UnauthorizedError, InvalidStateError,
    OptionMismatchError, FundingValidationError
)
from app.crud import consumer as crud_consumer
from app.crud import funding as crud_funding
from app.crud import product as crud_product
from app.models.consumer import Consumer
from app.models.funding import Funding, FundingStatus
from app.models.product import Product, ProductOption
from app.schemas.funding import (
    FundingCreate, FundingResponse, FundingDetail, FundingCalendarItem, FundingSlice
)
from app.services import friend as friend_service
from app.services import visibility as visibility_service
from app.services import notification_fanout
from app.utils.dates import local_today, utc_now

logger = logging.getLogger(__name__)


def _get_or_raise(found, error_type: ErrorType):
    """Единая точка маппинга "не найдено" в ошибку конкретного вида."""
    if found is None:
        raise NotFoundError(error_type)
    return found


def _to_slice(fundings: list[Funding], has_next: bool, page: int, size: int) -> FundingSlice:
    return FundingSlice(
        items=[FundingResponse.model_validate(f) for f in fundings],
        current_page=page,
        size=size,
        has_next=has_next
    )


def _to_list(fundings: list[Funding]) -> list[FundingResponse]:
    return [FundingResponse.model_validate(f) for f in fundings]

# --- Правила жизненного цикла ---

def validate_funding_dates(start_date: date, anniversary_date: date, end_date: date, today: date) -> None:
    """
    Проверяет даты нового фандинга. Порядок проверок фиксирован,
    каждое нарушение - свой код ошибки.
    """
    if start_date < today:
        raise FundingValidationError(ErrorType.FUNDING_START_DATE_IS_PAST)

    if anniversary_date < start_date:
        raise FundingValidationError(ErrorType.FUNDING_ANNIVERSARY_DATE_IS_PAST)

    if end_date < anniversary_date:
        raise FundingValidationError(ErrorType.FUNDING_END_DATE_IS_PAST)

    if abs((end_date - start_date).days) > settings.FUNDING_MAX_DURATION_DAYS:
        raise FundingValidationError(ErrorType.FUNDING_DURATION_NOT_VALID)


def derive_initial_status(start_date: date, today: date) -> FundingStatus:
    """Статус выставляется один раз при создании и дальше не пересчитывается."""
    if start_date == today:
        return FundingStatus.IN_PROGRESS
    return FundingStatus.PRE_PROGRESS


def check_option_belongs_to_product(product: Product, option: ProductOption) -> None:
    if not any(po.id == option.id for po in product.options):
        raise OptionMismatchError()


def create_funding(db: Session, owner_id: int, funding_in: FundingCreate, today: date | None = None) -> Funding:
    """
    Создает фандинг и в той же транзакции ставит в очередь уведомления
    всем, кто отметил владельца близким другом.
    """
    today = today or local_today()

    # 1. Все ссылки должны существовать
    owner = _get_or_raise(crud_consumer.get_consumer_by_id(db, owner_id), ErrorType.CONSUMER_NOT_FOUND)
    product = _get_or_raise(crud_product.get_product_by_id(db, funding_in.product_id), ErrorType.PRODUCT_NOT_FOUND)
    option = _get_or_raise(
        crud_product.get_active_product_option_by_id(db, funding_in.product_option_id),
        ErrorType.PRODUCT_OPTION_NOT_FOUND
    )
    category = _get_or_raise(
        crud_product.get_anniversary_category_by_id(db, funding_in.anniversary_category_id),
        ErrorType.ANNIVERSARY_CATEGORY_NOT_FOUND
    )

    # 2. Опция должна принадлежать товару
    check_option_belongs_to_product(product, option)

    # 3. Даты
    validate_funding_dates(funding_in.start_date, funding_in.anniversary_date, funding_in.end_date, today)

    # 4-5. Сохраняем и кладем уведомления в outbox одной транзакцией
    funding = crud_funding.create_funding(
        db,
        consumer_id=owner.id,
        product_id=product.id,
        product_option_id=option.id,
        anniversary_category_id=category.id,
        title=funding_in.title,
        content=funding_in.content,
        target_price=option.price,
        start_date=funding_in.start_date,
        anniversary_date=funding_in.anniversary_date,
        end_date=funding_in.end_date,
        is_private=funding_in.is_private,
        status=derive_initial_status(funding_in.start_date, today)
    )
    notification_fanout.enqueue_funding_created(db, owner, funding)
    db.commit()
    db.refresh(funding)

    logger.info(f"Consumer {owner.id} created funding {funding.id} with status {funding.status.value}.")
    return funding


def delete_funding(db: Session, requester_id: int, funding_id: int) -> Funding:
    """Мягко удаляет фандинг. Можно только владельцу и только до старта (PRE_PROGRESS)."""
    funding = _get_or_raise(crud_funding.get_funding_by_id(db, funding_id), ErrorType.FUNDING_NOT_FOUND)

    if funding.consumer_id != requester_id:
        logger.warning(f"Consumer {requester_id} tried to delete funding {funding_id} of consumer {funding.consumer_id}.")
        raise UnauthorizedError()

    if funding.status != FundingStatus.PRE_PROGRESS:
        raise InvalidStateError()

    crud_funding.soft_delete_funding(db, funding, deleted_at=utc_now())
    logger.info(f"Consumer {requester_id} deleted funding {funding_id}.")
    return funding


def get_funding_detail(db: Session, viewer_id: int, funding_id: int) -> FundingDetail:
    funding = _get_or_raise(crud_funding.get_funding_by_id(db, funding_id), ErrorType.FUNDING_NOT_FOUND)
    visibility_service.check_can_view(db, viewer_id, funding)
    return FundingDetail.model_validate(funding)

# --- Списки с пагинацией ---

def get_my_fundings(db: Session, owner: Consumer, keyword: str | None, page: int, size: int) -> FundingSlice:
    """Свои фандинги: без фильтра приватности."""
    fundings, has_next = crud_funding.get_fundings_by_consumer(db, owner.id, page, size, keyword=keyword)
    return _to_slice(fundings, has_next, page, size)


def get_friend_fundings(
    db: Session, viewer: Consumer, friend_id: int, keyword: str | None, page: int, size: int
) -> FundingSlice:
    """
    Фандинги одного друга. Приватность решается формой запроса:
    близкому другу отдаем все, остальным - только публичные.
    """
    _get_or_raise(crud_consumer.get_consumer_by_id(db, friend_id), ErrorType.CONSUMER_NOT_FOUND)
    friend_service.check_friend(db, viewer.id, friend_id)

    public_only = not visibility_service.can_see_private(db, friend_id, viewer.id)
    fundings, has_next = crud_funding.get_fundings_by_consumer(
        db, friend_id, page, size, keyword=keyword, public_only=public_only
    )
    return _to_slice(fundings, has_next, page, size)


def get_funding_feeds(db: Session, viewer: Consumer, page: int, size: int) -> FundingSlice:
    """
    Лента фандингов всех друзей, от новых к старым.
    Сначала берем страницу, потом выкидываем приватные фандинги тех, кто не отметил viewer близким.
    Поэтому страница может быть короче size, а has_next отражает исходную выборку.
    """
    friend_ids = friend_service.get_friend_ids(db, viewer.id)
    fundings, has_next = crud_funding.get_fundings_by_consumers(db, friend_ids, page, size)
    visible = visibility_service.filter_visible_for_friend(db, viewer.id, fundings)
    return _to_slice(visible, has_next, page, size)

# --- Сторис и календарь ---

def _story_of(db: Session, viewer_id: int, owner_id: int) -> list[Funding]:
    public_only = not visibility_service.can_see_private(db, owner_id, viewer_id)
    return crud_funding.get_in_progress_fundings(db, owner_id, public_only=public_only)


def get_fundings_story(db: Session, viewer: Consumer, consumer_id: int) -> list[FundingResponse]:
    """Идущие фандинги одного пользователя по дате начала. Чужие - только для друзей."""
    if viewer.id != consumer_id:
        _get_or_raise(crud_consumer.get_consumer_by_id(db, consumer_id), ErrorType.CONSUMER_NOT_FOUND)
        friend_service.check_friend(db, viewer.id, consumer_id)

    return _to_list(_story_of(db, viewer.id, consumer_id))


def get_friends_story(db: Session, viewer: Consumer) -> list[FundingResponse]:
    """
    Сторис всех друзей: для каждого друга - его идущие фандинги по дате начала,
    склеенные в порядке списка друзей. Общей пересортировки нет.
    """
    result: list[Funding] = []
    for friend_id in friend_service.get_friend_ids(db, viewer.id):
        result.extend(_story_of(db, viewer.id, friend_id))
    return _to_list(result)


def get_funding_calendar(db: Session, viewer: Consumer, year: int, month: int) -> list[FundingCalendarItem]:
    """Фандинги друзей с праздником в указанном месяце, с тем же правилом приватности."""
    result: list[Funding] = []
    for friend_id in friend_service.get_friend_ids(db, viewer.id):
        public_only = not visibility_service.can_see_private(db, friend_id, viewer.id)
        result.extend(crud_funding.get_fundings_in_month(db, friend_id, year, month, public_only=public_only))
    return [FundingCalendarItem.model_validate(f) for f in result]
