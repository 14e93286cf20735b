# backend/ventaspro/services/products_service.py
"""
Products Service

Catalog maintenance. Every write validates its own inputs (HTTP callers and
CLI callers get the same checks) and runs as one serialized transaction.

AUDIT GAP: update_product overwrites stock directly. It is a correction
tool, not a movement, so it writes no Movement row and the previous stock
value is not preserved anywhere.
"""
from __future__ import annotations

from ..extensions import db
from ..models import Product
from ..validation import (
    NotFoundError,
    coerce_int,
    coerce_money_cents,
    coerce_name,
    coerce_optional_text,
)
from .concurrency import lock_for_update, run_in_transaction, run_read

_UNSET = object()


def get_active_product(product_id: int, *, lock: bool = False) -> Product:
    """Load a non-deleted product or raise NotFoundError."""
    query = db.session.query(Product).filter(Product.id == product_id, Product.deleted.is_(False))
    if lock:
        query = lock_for_update(query)
    product = query.first()
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")
    return product


def list_products(*, include_deleted: bool = False) -> list[Product]:
    """Catalog listing; soft-deleted products are excluded unless asked for."""
    def _q():
        query = db.session.query(Product)
        if not include_deleted:
            query = query.filter(Product.deleted.is_(False))
        return query.order_by(Product.name.asc(), Product.id.asc()).all()

    return run_read(_q)


def add_product(*, name, price, initial_stock, image=None) -> int:
    """
    Create a product with stock = initial_stock.

    Raises:
        ValidationError: blank name, non-numeric or negative price/stock
    """
    clean_name = coerce_name(name)
    price_cents = coerce_money_cents(price, "price")
    stock = coerce_int(initial_stock, "initial_stock", minimum=0)
    clean_image = coerce_optional_text(image, "image")

    def _op():
        p = Product(
            name=clean_name,
            price_cents=price_cents,
            stock=stock,
            initial_stock=stock,
            deleted=False,
            image=clean_image,
        )
        db.session.add(p)
        db.session.flush()
        return p.id

    return run_in_transaction(_op)


def update_product(*, product_id: int, name, price, stock, image=_UNSET) -> bool:
    """
    Overwrite name, price and stock of an active product.

    `image` is only touched when passed explicitly (None clears it).

    Raises:
        ValidationError: invalid name/price/stock
        NotFoundError: unknown or soft-deleted product
    """
    clean_name = coerce_name(name)
    price_cents = coerce_money_cents(price, "price")
    clean_stock = coerce_int(stock, "stock", minimum=0)
    clean_image = _UNSET if image is _UNSET else coerce_optional_text(image, "image")

    def _op():
        p = get_active_product(product_id, lock=True)
        p.name = clean_name
        p.price_cents = price_cents
        p.stock = clean_stock
        if clean_image is not _UNSET:
            p.image = clean_image
        db.session.flush()
        return True

    return run_in_transaction(_op)


def soft_delete_product(*, product_id: int) -> bool:
    """
    Hide a product from the catalog.

    Soft-delete only: movements and sale items keep the product id, so
    session reports still show the historical name.

    Raises:
        NotFoundError: unknown or already deleted product
    """
    def _op():
        p = get_active_product(product_id, lock=True)
        p.deleted = True
        db.session.flush()
        return True

    return run_in_transaction(_op)
