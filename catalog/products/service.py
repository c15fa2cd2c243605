import functools
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..common.errors import InvalidArgument, StoreError
from .model import IMAGE_URL_MAX_LENGTH, NAME_MAX_LENGTH, Product
from .repository import ProductRepository

_logger = logging.getLogger(__name__)

# NUMERIC(12, 2): two decimal places, ten integer digits
PRICE_QUANTUM = Decimal("0.01")
PRICE_MAX = Decimal("9999999999.99")


def _store_errors(func):
    """Re-raise SQLAlchemy failures from the repository as ``StoreError``."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as e:
            _logger.error("Store failure | op=%s error=%s", func.__name__, e)
            raise StoreError(f"{func.__name__} failed: {e}") from e

    return wrapper


class ProductService:
    """Validates caller input and forwards it to the repository."""

    def __init__(self, repository: ProductRepository):
        self._repository = repository

    @_store_errors
    async def find_all(self) -> List[Product]:
        return await self._repository.find_all()

    @_store_errors
    async def find_by_id(self, product_id: Optional[int]) -> Optional[Product]:
        if product_id is None:
            raise InvalidArgument("El ID no puede ser nulo")
        product = await self._repository.find_by_id(product_id)
        _logger.debug("DB get product | product_id=%s found=%s", product_id, product is not None)
        return product

    @_store_errors
    async def save(self, product: Optional[Product]) -> Product:
        if product is None:
            raise InvalidArgument("El producto no puede ser nulo")
        if product.name is None or not product.name.strip():
            raise InvalidArgument("El nombre del producto es obligatorio")
        if len(product.name) > NAME_MAX_LENGTH:
            raise InvalidArgument(f"El nombre del producto no puede superar {NAME_MAX_LENGTH} caracteres")
        if product.price is None or product.price < 0:
            raise InvalidArgument("El precio del producto debe ser mayor o igual a 0")
        price = product.price if isinstance(product.price, Decimal) else Decimal(str(product.price))
        if price > PRICE_MAX:
            raise InvalidArgument(f"El precio del producto no puede superar {PRICE_MAX}")
        if price != price.quantize(PRICE_QUANTUM):
            raise InvalidArgument("El precio del producto admite como máximo 2 decimales")
        if product.image_url is not None and len(product.image_url) > IMAGE_URL_MAX_LENGTH:
            raise InvalidArgument(f"La URL de la imagen no puede superar {IMAGE_URL_MAX_LENGTH} caracteres")

        product.price = price
        created = product.id is None
        saved = await self._repository.save(product)
        _logger.info("DB %s product | product_id=%s", "insert" if created else "update", saved.id)
        return saved

    @_store_errors
    async def delete_by_id(self, product_id: Optional[int]) -> bool:
        if product_id is None:
            raise InvalidArgument("El ID no puede ser nulo")
        deleted = await self._repository.delete_by_id(product_id)
        _logger.info("DB delete product | product_id=%s deleted=%s", product_id, deleted)
        return deleted

    @_store_errors
    async def exists_by_id(self, product_id: Optional[int]) -> bool:
        if product_id is None:
            return False
        return await self._repository.exists_by_id(product_id)

    @_store_errors
    async def count(self) -> int:
        return await self._repository.count()

    @_store_errors
    async def find_by_name_containing(self, name: Optional[str]) -> List[Product]:
        if name is None or not name.strip():
            return []
        return await self._repository.find_by_name_containing(name.strip())

    @_store_errors
    async def find_by_price_between(
        self, minimum: Optional[Decimal], maximum: Optional[Decimal]
    ) -> List[Product]:
        if minimum is None or maximum is None:
            raise InvalidArgument("Los precios no pueden ser nulos")
        if minimum < 0 or maximum < 0:
            raise InvalidArgument("Los precios deben ser mayores o iguales a 0")
        if minimum > maximum:
            raise InvalidArgument("El precio mínimo no puede ser mayor al precio máximo")
        return await self._repository.find_by_price_between(minimum, maximum)
