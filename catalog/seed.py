import asyncio
import logging
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .common.config import settings
from .common.database import build_engine, build_session_factory, init_db
from .products.model import Product

_logger = logging.getLogger(__name__)


SAMPLE_PRODUCTS = [
    {"name": "Laptop Pro 14", "price": Decimal("1499.00"), "image_url": "https://picsum.photos/seed/laptop/400/300"},
    {"name": "Wireless Mouse", "price": Decimal("24.99"), "image_url": None},
    {"name": "Mechanical Keyboard", "price": Decimal("89.99"), "image_url": None},
    {"name": "USB-C Hub", "price": Decimal("39.99"), "image_url": None},
    {"name": "Noise-cancelling Headphones", "price": Decimal("199.99"), "image_url": None},
    {"name": "4K Monitor 27\"", "price": Decimal("329.99"), "image_url": None},
    {"name": "Portable SSD 1TB", "price": Decimal("99.99"), "image_url": None},
    {"name": "Smartphone Charger 65W", "price": Decimal("19.99"), "image_url": None},
    {"name": "Webcam 1080p", "price": Decimal("49.99"), "image_url": "https://picsum.photos/seed/webcam/400/300"},
    {"name": "Bluetooth Speaker", "price": Decimal("59.99"), "image_url": None},
]


async def seed_products(session_factory: async_sessionmaker[AsyncSession]) -> int:
    """Insert the sample products that are not in the table yet. Returns how many were added."""
    async with session_factory() as session:
        async with session.begin():
            res = await session.execute(sa.select(Product.name))
            existing = set(res.scalars().all())
            added = 0
            for p in SAMPLE_PRODUCTS:
                # avoid duplicates by name
                if p["name"] in existing:
                    continue
                session.add(Product(**p))
                added += 1
    return added


async def amain():
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    engine = build_engine(settings)
    try:
        await init_db(engine)
        added = await seed_products(build_session_factory(engine))
        _logger.info("Seed complete. Added %s products.", added)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(amain())
