# tests/conftest.py
import os

# Настройки читаются при импорте app, поэтому окружение задаем до любых импортов из app
os.environ.setdefault("DATABASE_USER", "test")
os.environ.setdefault("DATABASE_PASSWORD", "test")
os.environ.setdefault("DATABASE_HOST", "localhost")
os.environ.setdefault("DATABASE_PORT", "5432")
os.environ.setdefault("DATABASE_NAME", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("REDIS_PORT", "6379")
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:TEST-token")

from datetime import date, timedelta

import pytest
from httpx import AsyncClient, ASGITransport
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.db.session import Base
from app.models.consumer import Consumer
from app.models.friend import Friend
from app.models.product import Product, ProductOption
from app.models.funding import AnniversaryCategory, Funding, FundingStatus
from app.models.notification import Notification  # noqa: F401 - нужна для create_all
from app.utils.dates import local_today

# In-memory SQLite, одно соединение на все сессии теста
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session() -> Session:
    """
    Фикстура для создания чистой базы данных для каждого теста.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def other_session(db_session) -> Session:
    """Вторая сессия к той же БД: имитирует параллельный воркер."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def today() -> date:
    return local_today()

# --- Фабрики данных ---

@pytest.fixture
def make_consumer(db_session):
    def _make(name: str, telegram_id: int | None = None) -> Consumer:
        consumer = Consumer(name=name, telegram_id=telegram_id)
        db_session.add(consumer)
        db_session.commit()
        return consumer
    return _make


@pytest.fixture
def make_edge(db_session):
    """Одно направленное ребро from -> to."""
    def _make(from_consumer: Consumer, to_consumer: Consumer, is_favorite: bool = False) -> Friend:
        edge = Friend(consumer_id=from_consumer.id, to_consumer_id=to_consumer.id, is_favorite=is_favorite)
        db_session.add(edge)
        db_session.commit()
        return edge
    return _make


@pytest.fixture
def make_friends(make_edge):
    """Взаимная дружба: два независимых ребра со своими флагами."""
    def _make(a: Consumer, b: Consumer, a_favors_b: bool = False, b_favors_a: bool = False):
        return make_edge(a, b, a_favors_b), make_edge(b, a, b_favors_a)
    return _make


@pytest.fixture
def catalog(db_session):
    """Товар с двумя опциями (одна неактивна), чужая опция и категория праздника."""
    product = Product(name="Беспроводные наушники", price=150000)
    other_product = Product(name="Кофемашина", price=300000)
    db_session.add_all([product, other_product])
    db_session.flush()

    option = ProductOption(product_id=product.id, name="Белые", price=155000)
    inactive_option = ProductOption(product_id=product.id, name="Розовые", price=155000, status="INACTIVE")
    foreign_option = ProductOption(product_id=other_product.id, name="Черная", price=310000)
    category = AnniversaryCategory(name="День рождения")
    db_session.add_all([option, inactive_option, foreign_option, category])
    db_session.commit()

    return {
        "product": product,
        "other_product": other_product,
        "option": option,
        "inactive_option": inactive_option,
        "foreign_option": foreign_option,
        "category": category,
    }


@pytest.fixture
def make_funding(db_session, catalog, today):
    """
    Кладет фандинг напрямую в БД, минуя правила создания.
    Удобно для тестов чтения, где важны конкретные статусы и даты.
    """
    def _make(
        owner: Consumer,
        is_private: bool = False,
        status: FundingStatus = FundingStatus.IN_PROGRESS,
        start_date: date | None = None,
        anniversary_date: date | None = None,
        end_date: date | None = None,
        title: str = "Подарок",
        product: Product | None = None,
    ) -> Funding:
        start_date = start_date or today
        anniversary_date = anniversary_date or start_date + timedelta(days=2)
        end_date = end_date or anniversary_date + timedelta(days=1)
        product = product or catalog["product"]
        option = catalog["option"] if product.id == catalog["product"].id else catalog["foreign_option"]
        funding = Funding(
            consumer_id=owner.id,
            product_id=product.id,
            product_option_id=option.id,
            anniversary_category_id=catalog["category"].id,
            title=title,
            target_price=option.price,
            start_date=start_date,
            anniversary_date=anniversary_date,
            end_date=end_date,
            is_private=is_private,
            status=status,
        )
        db_session.add(funding)
        db_session.commit()
        return funding
    return _make

# --- API ---

@pytest.fixture
async def client(db_session):
    """HTTP-клиент к приложению; все запросы работают в сессии теста."""
    from app.main import app
    from app.dependencies import get_db

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(consumer: Consumer) -> dict:
        token = jwt.encode({"sub": str(consumer.id)}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        return {"Authorization": f"Bearer {token}"}
    return _headers
