import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from quart import Blueprint, jsonify, request
from werkzeug.exceptions import HTTPException

from ..common.errors import InvalidArgument
from .model import Product
from .service import ProductService

_logger = logging.getLogger(__name__)


ID_MAX = 2**63 - 1
ID_PATTERN = re.compile(r"-?[0-9]+")


def _parse_id(raw: str) -> int:
    if not ID_PATTERN.fullmatch(raw):
        raise InvalidArgument(f"ID de producto inválido: {raw!r}")
    value = int(raw)
    # SQLite and most stores cap integer keys at signed 64 bits
    if abs(value) > ID_MAX:
        raise InvalidArgument(f"ID de producto inválido: {raw!r}")
    return value


def _parse_price(raw: Optional[str], param: str) -> Optional[Decimal]:
    if raw is None or not raw.strip():
        return None
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        raise InvalidArgument(f"{param} debe ser numérico") from None
    if not value.is_finite():
        raise InvalidArgument(f"{param} debe ser numérico")
    return value


def _not_found(product_id: int):
    return jsonify({"error": "product_not_found", "message": f"Producto {product_id} no encontrado"}), 404


def create_blueprint(service: ProductService) -> Blueprint:
    bp = Blueprint("products", __name__, url_prefix="/api/productos")

    @bp.errorhandler(InvalidArgument)
    async def invalid_argument(error: InvalidArgument):
        return jsonify({"error": "invalid_argument", "message": str(error)}), 400

    @bp.errorhandler(Exception)
    async def unexpected_error(error: Exception):
        # Quart's own HTTP errors (e.g. an unparsable JSON body) keep their status
        if isinstance(error, HTTPException):
            return error
        _logger.exception("Unhandled error | %s %s", request.method, request.path)
        return jsonify({"error": "internal_error", "message": "Error interno del servidor"}), 500

    @bp.get("")
    async def products_list():
        products = await service.find_all()
        return jsonify([p.to_json() for p in products])

    @bp.get("/<product_id>")
    async def product_detail(product_id: str):
        pid = _parse_id(product_id)
        product = await service.find_by_id(pid)
        if product is None:
            return _not_found(pid)
        return jsonify(product.to_json())

    @bp.post("")
    async def product_create():
        data = await request.get_json(force=True)
        product = Product.from_json(data)
        saved = await service.save(product)
        return jsonify(saved.to_json()), 201

    @bp.put("/<product_id>")
    async def product_update(product_id: str):
        pid = _parse_id(product_id)
        if not await service.exists_by_id(pid):
            return _not_found(pid)
        data = await request.get_json(force=True)
        product = Product.from_json(data)
        product.id = pid
        saved = await service.save(product)
        return jsonify(saved.to_json())

    @bp.delete("/<product_id>")
    async def product_delete(product_id: str):
        pid = _parse_id(product_id)
        if not await service.delete_by_id(pid):
            return _not_found(pid)
        return "", 204

    @bp.get("/buscar")
    async def products_search():
        nombre = request.args.get("nombre")
        if nombre is None or not nombre.strip():
            raise InvalidArgument("El parámetro nombre es obligatorio")
        products = await service.find_by_name_containing(nombre)
        return jsonify([p.to_json() for p in products])

    @bp.get("/precio")
    async def products_by_price():
        minimum = _parse_price(request.args.get("precioMinimo"), "precioMinimo")
        maximum = _parse_price(request.args.get("precioMaximo"), "precioMaximo")
        products = await service.find_by_price_between(minimum, maximum)
        return jsonify([p.to_json() for p in products])

    @bp.get("/count")
    async def products_count():
        return jsonify(await service.count())

    @bp.get("/<product_id>/exists")
    async def product_exists(product_id: str):
        return jsonify(await service.exists_by_id(_parse_id(product_id)))

    return bp
