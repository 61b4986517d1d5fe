# app/bot/services/notification.py
import html
import logging
from sqlalchemy.orm import Session
from aiogram.exceptions import TelegramForbiddenError

from app.bot.core import bot
from app.core.config import settings
from app.models.consumer import Consumer

logger = logging.getLogger(__name__)

async def _send_message(db: Session, consumer: Consumer, text: str) -> tuple[bool, str | None]:
    """
    Приватная функция-обертка для безопасной отправки сообщений.
    Обновляет статус 'bot_accessible' в случае блокировки.
    Возвращает кортеж (успех: bool, причина_неудачи: str | None).
    """
    if consumer.telegram_id is None:
        reason = "Consumer has no linked Telegram account"
        logger.info(f"Skipping notification for consumer {consumer.id}: {reason}.")
        return False, reason

    if not consumer.bot_accessible:
        reason = "Bot is marked as inaccessible"
        logger.info(f"Skipping notification for consumer {consumer.id}: {reason}.")
        return False, reason

    try:
        await bot.send_message(chat_id=consumer.telegram_id, text=text)
        return True, None
    except TelegramForbiddenError:
        reason = "User has blocked the bot"
        logger.error(f"Consumer {consumer.id} has blocked the bot. Updating status.")
        consumer.bot_accessible = False
        db.add(consumer)
        db.commit()
        return False, reason
    except Exception as e:
        reason = str(e)
        logger.error(f"Failed to send message to consumer {consumer.id}: {reason}")
        return False, reason


async def send_notification(db: Session, consumer: Consumer, title: str, message: str | None) -> tuple[bool, str | None]:
    """Отправляет одно уведомление (заголовок + текст) одному получателю."""
    text = f"<b>{html.escape(title)}</b>"
    if message:
        text += f"\n\n{html.escape(message)}"
    return await _send_message(db, consumer, text)


async def send_error_to_admin(error_message: str):
    """Отправляет отчет о критической ошибке в админский чат, если он настроен."""
    if settings.ADMIN_CHAT_ID is None:
        return
    # Telegram ограничивает длину сообщения 4096 символами
    if len(error_message) > 4000:
        error_message = error_message[:4000] + "\n...</pre>"
    try:
        await bot.send_message(chat_id=settings.ADMIN_CHAT_ID, text=error_message)
    except Exception as e:
        logger.error(f"Failed to send error report to admin chat: {e}")
