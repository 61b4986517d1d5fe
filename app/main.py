# app/main.py

import asyncio
import traceback
import logging
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from apscheduler.schedulers.asyncio import AsyncIOScheduler

# Конфигурация и ядро
from app.core.config import settings as config
from app.core.exceptions import ServiceError
from app.core.logging_config import setup_logging
from app.core.redis import redis_client

# Роутеры FastAPI
from app.routers.v1.api import api_router as v1_router

# Фоновые задачи и сервисы
from app.bot.services import notification as bot_notification_service
from app.services.notification_fanout import (
    dispatch_pending_notifications_task, cleanup_old_notifications_task
)

# --- Инициализация ---
logger = logging.getLogger(__name__)
scheduler = AsyncIOScheduler()
# Ссылки на задачи отправки отчетов, пока они не завершились
admin_report_tasks: set[asyncio.Task] = set()

# --- Обработчики ошибок ---
async def service_error_handler(request: Request, exc: ServiceError):
    """Ошибки бизнес-логики: стабильный код и сообщение для клиента."""
    logger.info(f"{request.method} {request.url.path} -> {exc.code}")
    return JSONResponse(
        status_code=exc.error_type.status_code,
        content={"code": exc.code, "detail": exc.error_type.message},
    )

async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Глобальный обработчик для всех необработанных исключений.
    Логирует ошибку и отправляет отчет в админский чат.
    """
    logger.critical(f"Unhandled exception for request: {request.method} {request.url}", exc_info=True)

    error_details = "".join(traceback.format_exception(exc))

    error_message = (
        f"🚨 <b>Критическая ошибка в API!</b>\n\n"
        f"<b>URL:</b> <code>{request.method} {request.url}</code>\n\n"
        f"<b>Traceback:</b>\n<pre>{error_details}</pre>"
    )

    task = asyncio.create_task(
        bot_notification_service.send_error_to_admin(error_message)
    )
    admin_report_tasks.add(task)
    task.add_done_callback(admin_report_tasks.discard)

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error. The administrator has been notified."},
    )

# --- Lifespan Manager (запуск и остановка приложения) ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Application lifespan startup...")

    # Планировщик должен работать ровно в одном воркере
    is_main_worker = await redis_client.set("app_startup_lock", "1", ex=60, nx=True)

    if is_main_worker:
        logger.info("This is the main worker. Starting scheduler...")
        if not scheduler.running:
            scheduler.add_job(
                dispatch_pending_notifications_task, 'interval',
                seconds=config.NOTIFICATION_DISPATCH_INTERVAL_SECONDS, max_instances=1
            )
            scheduler.add_job(cleanup_old_notifications_task, 'cron', hour=4, minute=30, timezone=config.TIMEZONE)
            scheduler.start()
            logger.info("Scheduler started with background jobs.")
    else:
        logger.info("This is a secondary worker. Skipping scheduler.")

    yield

    if is_main_worker:
        logger.info("Main worker shutting down...")
        if scheduler.running:
            scheduler.shutdown()
            logger.info("Scheduler shut down.")
        await redis_client.delete("app_startup_lock")
    else:
        logger.info("Secondary worker shutting down.")

# --- Создание FastAPI приложения ---
app = FastAPI(
    title="Fundingift Service",
    description="Backend for anniversary gift fundings among friends",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost", "http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Регистрация обработчиков исключений ---
app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Подключение роутеров FastAPI ---
api_router = APIRouter(prefix="/api")
api_router.include_router(v1_router)

app.include_router(api_router)
