import math
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from ..common.db import Base
from ..common.errors import InvalidArgument

NAME_MAX_LENGTH = 255
IMAGE_URL_MAX_LENGTH = 500


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2, asdecimal=True), nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(IMAGE_URL_MAX_LENGTH), nullable=True)

    def __eq__(self, other: Any) -> bool:
        # Identity is the id alone; unsaved products only equal themselves.
        if self is other:
            return True
        if not isinstance(other, Product):
            return NotImplemented
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        if self.id is None:
            return object.__hash__(self)
        return hash((Product, self.id))

    def __repr__(self) -> str:
        return (
            f"Product(id={self.id!r}, name={self.name!r}, "
            f"price={self.price!r}, image_url={self.image_url!r})"
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nombre": self.name,
            "precio": float(self.price) if self.price is not None else None,
            "imagenUrl": self.image_url,
        }

    @classmethod
    def from_json(cls, data: Any) -> "Product":
        """Build an unsaved product from a request body.

        Only the JSON types are checked here. Missing fields come back as
        ``None`` so the service can report them. Any ``id`` in the body is
        ignored: the store assigns ids and PUT takes it from the path.
        """
        if not isinstance(data, dict):
            raise InvalidArgument("El cuerpo de la petición debe ser un objeto JSON")

        name = data.get("nombre")
        if name is not None and not isinstance(name, str):
            raise InvalidArgument("El nombre del producto debe ser un texto")

        image_url = data.get("imagenUrl")
        if image_url is not None and not isinstance(image_url, str):
            raise InvalidArgument("La URL de la imagen debe ser un texto")

        return cls(name=name, price=_json_price(data.get("precio")), image_url=image_url)


def _json_price(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument("El precio del producto debe ser numérico")
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidArgument("El precio del producto debe ser numérico")
    return Decimal(str(value))
