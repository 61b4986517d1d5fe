# app/dependencies.py

import logging
from typing import Iterator

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from app.core.config import settings
from app.crud import consumer as crud_consumer
from app.db.session import SessionLocal
from app.models.consumer import Consumer

# --- Инициализация логгера ---
logger = logging.getLogger(__name__)

# --- Схемы аутентификации ---
strict_bearer_scheme = HTTPBearer(auto_error=True)

# --- Управление сессией БД ---
def get_db() -> Iterator[Session]:
    """
    Основная зависимость FastAPI для получения сессии БД.
    Одна сессия - одна транзакция на запрос.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# --- Зависимости аутентификации ---

def get_current_consumer(
    credentials: HTTPAuthorizationCredentials = Depends(strict_bearer_scheme),
    db: Session = Depends(get_db)
) -> Consumer:
    """
    ОБЯЗАТЕЛЬНАЯ зависимость.
    Токены выпускает сервис авторизации, мы только читаем из них ID пользователя ('sub').
    Если токена нет, он невалиден или пользователь удален - ошибка 401.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        consumer_id = payload.get("sub")
        if consumer_id is None:
            logger.warning("Token payload is missing 'sub' (consumer_id).")
            raise credentials_exception
        consumer_id = int(consumer_id)
    except (JWTError, ValueError) as e:
        logger.warning(f"JWT Error during token decoding: {e}")
        raise credentials_exception

    consumer = crud_consumer.get_consumer_by_id(db, consumer_id)
    if consumer is None:
        logger.warning(f"Consumer with ID {consumer_id} from token not found in DB.")
        raise credentials_exception
    logger.debug(f"Successfully authenticated consumer ID: {consumer.id}")
    return consumer

# --- Пагинация ---

def get_page_params(
    page: int = Query(1, ge=1, description="Номер страницы"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Размер страницы")
) -> tuple[int, int]:
    return page, size
