# app/routers/v1/api.py

from fastapi import APIRouter

from app.routers.v1.endpoints import funding, friend

# Создаем главный роутер для API версии v1
# Все пути, подключенные к нему, будут иметь префикс /api/v1
api_router = APIRouter(prefix="/v1")

api_router.include_router(funding.router, tags=["Fundings"])
api_router.include_router(friend.router, tags=["Friends"])
