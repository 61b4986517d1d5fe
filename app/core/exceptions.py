# app/core/exceptions.py

from enum import Enum

from fastapi import status

from app.core import locales
from app.core.config import settings


class ErrorType(Enum):
    """
    Стабильные коды ошибок сервиса.
    Значение: (HTTP-статус, сообщение для клиента).
    """
    CONSUMER_NOT_FOUND = (status.HTTP_404_NOT_FOUND, locales.ERROR_CONSUMER_NOT_FOUND)
    FRIEND_NOT_FOUND = (status.HTTP_404_NOT_FOUND, locales.ERROR_FRIEND_NOT_FOUND)
    FUNDING_NOT_FOUND = (status.HTTP_404_NOT_FOUND, locales.ERROR_FUNDING_NOT_FOUND)
    PRODUCT_NOT_FOUND = (status.HTTP_404_NOT_FOUND, locales.ERROR_PRODUCT_NOT_FOUND)
    PRODUCT_OPTION_NOT_FOUND = (status.HTTP_404_NOT_FOUND, locales.ERROR_PRODUCT_OPTION_NOT_FOUND)
    ANNIVERSARY_CATEGORY_NOT_FOUND = (status.HTTP_404_NOT_FOUND, locales.ERROR_ANNIVERSARY_CATEGORY_NOT_FOUND)

    USER_UNAUTHORIZED = (status.HTTP_403_FORBIDDEN, locales.ERROR_USER_UNAUTHORIZED)
    FRIEND_NOT_FAVORITE = (status.HTTP_403_FORBIDDEN, locales.ERROR_FRIEND_NOT_FAVORITE)

    FUNDING_STATUS_NOT_DELETED = (status.HTTP_409_CONFLICT, locales.ERROR_FUNDING_STATUS_NOT_DELETED)
    PRODUCT_OPTION_MISMATCH = (status.HTTP_400_BAD_REQUEST, locales.ERROR_PRODUCT_OPTION_MISMATCH)

    FUNDING_DURATION_NOT_VALID = (
        status.HTTP_400_BAD_REQUEST,
        locales.ERROR_FUNDING_DURATION_NOT_VALID.format(max_days=settings.FUNDING_MAX_DURATION_DAYS),
    )
    FUNDING_START_DATE_IS_PAST = (status.HTTP_400_BAD_REQUEST, locales.ERROR_FUNDING_START_DATE_IS_PAST)
    FUNDING_ANNIVERSARY_DATE_IS_PAST = (status.HTTP_400_BAD_REQUEST, locales.ERROR_FUNDING_ANNIVERSARY_DATE_IS_PAST)
    FUNDING_END_DATE_IS_PAST = (status.HTTP_400_BAD_REQUEST, locales.ERROR_FUNDING_END_DATE_IS_PAST)

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


class ServiceError(Exception):
    """Базовое исключение бизнес-логики. Роутеры его не ловят, его мапит обработчик в main."""

    def __init__(self, error_type: ErrorType):
        super().__init__(error_type.message)
        self.error_type = error_type

    @property
    def code(self) -> str:
        return self.error_type.name


class NotFoundError(ServiceError):
    pass


class UnauthorizedError(ServiceError):
    def __init__(self, error_type: ErrorType = ErrorType.USER_UNAUTHORIZED):
        super().__init__(error_type)


class InvalidStateError(ServiceError):
    def __init__(self, error_type: ErrorType = ErrorType.FUNDING_STATUS_NOT_DELETED):
        super().__init__(error_type)


class OptionMismatchError(ServiceError):
    def __init__(self, error_type: ErrorType = ErrorType.PRODUCT_OPTION_MISMATCH):
        super().__init__(error_type)


class FundingValidationError(ServiceError):
    """Нарушено одно из правил дат фандинга. Конкретное правило - в error_type."""
    pass


class NotFavoriteError(ServiceError):
    def __init__(self, error_type: ErrorType = ErrorType.FRIEND_NOT_FAVORITE):
        super().__init__(error_type)
