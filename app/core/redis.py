# app/core/redis.py
import redis.asyncio as redis
from app.core.config import settings

# Асинхронный клиент Redis. Нужен только для межворкерной блокировки при старте
# (кто из воркеров запускает планировщик). Соединение открывается лениво.
redis_client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
