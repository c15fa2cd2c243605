from __future__ import annotations

from collections.abc import AsyncIterator
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from catalog.app import create_app
from catalog.common.config import Settings
from catalog.common.database import build_engine, build_session_factory, init_db
from catalog.products.model import Product
from catalog.products.repository import ProductRepository
from catalog.products.service import ProductService


@pytest.fixture
def settings() -> Settings:
    return Settings(DB_URL="sqlite+aiosqlite://", INSTANCE_ID="test-instance", SEED_ON_STARTUP=False)


@pytest.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with the schema created."""
    engine = build_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest.fixture
def repository(session_factory: async_sessionmaker[AsyncSession]) -> ProductRepository:
    return ProductRepository(session_factory)


@pytest.fixture
def service(repository: ProductRepository) -> ProductService:
    return ProductService(repository)


@pytest.fixture
async def stored_products(repository: ProductRepository) -> list[Product]:
    """A small catalog spanning a range of prices."""
    products = [
        Product(name="Widget", price=Decimal("9.99"), image_url=None),
        Product(name="Gadget", price=Decimal("14.99"), image_url="https://img.test/gadget.png"),
        Product(name="Mini widget", price=Decimal("5.00"), image_url=None),
        Product(name="Thingamajig", price=Decimal("19.99"), image_url=None),
        Product(name="Freebie", price=Decimal("0.00"), image_url=None),
    ]
    return [await repository.save(p) for p in products]


@pytest.fixture
async def client(settings: Settings):
    """Quart test client for an app served against an in-memory database."""
    app = create_app(settings)
    async with app.test_app() as test_app:
        yield test_app.test_client()
