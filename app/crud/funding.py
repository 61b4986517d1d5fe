# app/crud/funding.py
from datetime import date
from sqlalchemy.orm import Session, Query
from sqlalchemy import extract

from app.models.funding import Funding, FundingStatus
from app.models.product import Product


def _live(db: Session) -> Query:
    """Базовый запрос: только не удаленные фандинги. Все выборки строятся от него."""
    return db.query(Funding).filter(Funding.deleted_at.is_(None))

def _slice(query: Query, page: int, size: int) -> tuple[list[Funding], bool]:
    """
    Возвращает страницу и флаг "есть еще" без подсчета общего количества.
    Берем на одну строку больше, чем размер страницы.
    """
    rows = query.offset((page - 1) * size).limit(size + 1).all()
    return rows[:size], len(rows) > size

def _newest_first(query: Query) -> Query:
    return query.order_by(Funding.created_at.desc(), Funding.id.desc())

# --- Базовые CRUD-операции ---

def get_funding_by_id(db: Session, funding_id: int) -> Funding | None:
    """Получает живой фандинг по ID. Удаленный считается не найденным."""
    return _live(db).filter(Funding.id == funding_id).first()

def create_funding(
    db: Session,
    consumer_id: int,
    product_id: int,
    product_option_id: int,
    anniversary_category_id: int,
    title: str,
    content: str | None,
    target_price: int,
    start_date: date,
    anniversary_date: date,
    end_date: date,
    is_private: bool,
    status: FundingStatus
) -> Funding:
    """
    Создает объект фандинга и добавляет его в сессию.
    Требует внешнего вызова db.commit().
    """
    funding = Funding(
        consumer_id=consumer_id,
        product_id=product_id,
        product_option_id=product_option_id,
        anniversary_category_id=anniversary_category_id,
        title=title,
        content=content,
        target_price=target_price,
        start_date=start_date,
        anniversary_date=anniversary_date,
        end_date=end_date,
        is_private=is_private,
        status=status
    )
    db.add(funding)
    db.flush()
    return funding

# --- Постраничные выборки (slice) ---

def get_fundings_by_consumer(
    db: Session,
    consumer_id: int,
    page: int,
    size: int,
    keyword: str | None = None,
    public_only: bool = False
) -> tuple[list[Funding], bool]:
    """
    Фандинги одного владельца, от новых к старым.
    keyword ищет по названию товара, public_only отсекает приватные на уровне запроса.
    """
    query = _live(db).filter(Funding.consumer_id == consumer_id)
    if public_only:
        query = query.filter(Funding.is_private == False)
    if keyword:
        query = query.join(Product, Funding.product_id == Product.id).filter(
            Product.name.ilike(f"%{keyword}%")
        )
    return _slice(_newest_first(query), page, size)

def get_fundings_by_consumers(
    db: Session,
    consumer_ids: list[int],
    page: int,
    size: int
) -> tuple[list[Funding], bool]:
    """Фандинги сразу нескольких владельцев (лента), от новых к старым. Без фильтра приватности."""
    if not consumer_ids:
        return [], False
    query = _live(db).filter(Funding.consumer_id.in_(consumer_ids))
    return _slice(_newest_first(query), page, size)

# --- Непостраничные выборки (сторис, календарь) ---

def get_in_progress_fundings(db: Session, consumer_id: int, public_only: bool = False) -> list[Funding]:
    """Идущие фандинги владельца по возрастанию даты начала."""
    query = _live(db).filter(
        Funding.consumer_id == consumer_id,
        Funding.status == FundingStatus.IN_PROGRESS
    )
    if public_only:
        query = query.filter(Funding.is_private == False)
    return query.order_by(Funding.start_date.asc(), Funding.id.asc()).all()

def get_fundings_in_month(
    db: Session,
    consumer_id: int,
    year: int,
    month: int,
    public_only: bool = False
) -> list[Funding]:
    """Фандинги владельца, у которых дата праздника попадает в указанный месяц."""
    query = _live(db).filter(
        Funding.consumer_id == consumer_id,
        extract('year', Funding.anniversary_date) == year,
        extract('month', Funding.anniversary_date) == month
    )
    if public_only:
        query = query.filter(Funding.is_private == False)
    return query.order_by(Funding.anniversary_date.asc(), Funding.id.asc()).all()

def soft_delete_funding(db: Session, funding: Funding, deleted_at) -> Funding:
    """Помечает фандинг удаленным. Физически строки не удаляются."""
    funding.deleted_at = deleted_at
    db.commit()
    db.refresh(funding)
    return funding
