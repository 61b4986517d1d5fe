# app/utils/dates.py
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from app.core.config import settings


def local_today() -> date:
    """Текущая дата в таймзоне сервиса. Все правила дат фандингов считаются от нее."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
