from decimal import Decimal
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..common.db import casefold
from .model import Product


class ProductRepository:
    """Row-level access to the ``products`` table.

    Every call opens its own session. Reads run outside an explicit
    transaction block; writes commit inside ``session.begin()``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_all(self) -> List[Product]:
        async with self._session_factory() as session:
            res = await session.execute(sa.select(Product).order_by(Product.id))
            return list(res.scalars().all())

    async def find_by_id(self, product_id: int) -> Optional[Product]:
        async with self._session_factory() as session:
            return await session.get(Product, product_id)

    async def save(self, product: Product) -> Product:
        async with self._session_factory() as session:
            async with session.begin():
                if product.id is None:
                    session.add(product)
                    await session.flush()  # assign PK
                    persisted = product
                else:
                    persisted = await session.merge(product)
                    await session.flush()
            return persisted

    async def delete_by_id(self, product_id: int) -> bool:
        async with self._session_factory() as session:
            async with session.begin():
                res = await session.execute(sa.delete(Product).where(Product.id == product_id))
                deleted = res.rowcount or 0
            return deleted > 0

    async def exists_by_id(self, product_id: int) -> bool:
        async with self._session_factory() as session:
            stmt = sa.select(sa.exists().where(Product.id == product_id))
            res = await session.execute(stmt)
            return bool(res.scalar())

    async def count(self) -> int:
        async with self._session_factory() as session:
            res = await session.execute(sa.select(sa.func.count(Product.id)))
            return int(res.scalar() or 0)

    async def find_by_name_containing(self, term: str) -> List[Product]:
        async with self._session_factory() as session:
            stmt = (
                sa.select(Product)
                .where(casefold(Product.name).contains(term.casefold(), autoescape=True))
                .order_by(Product.id)
            )
            res = await session.execute(stmt)
            return list(res.scalars().all())

    async def find_by_price_between(self, minimum: Decimal, maximum: Decimal) -> List[Product]:
        async with self._session_factory() as session:
            stmt = (
                sa.select(Product)
                .where(Product.price.between(minimum, maximum))
                .order_by(Product.id)
            )
            res = await session.execute(stmt)
            return list(res.scalars().all())
