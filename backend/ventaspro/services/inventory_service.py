# Overview: Service-layer operations for inventory; encapsulates business logic and database work.

# backend/ventaspro/services/inventory_service.py

from __future__ import annotations

from sqlalchemy import update

from ..extensions import db
from ..models import Product, Movement
from ..time_utils import utcnow
from ..validation import MAX_REASON_LENGTH, ValidationError, coerce_int, coerce_optional_text
from .concurrency import run_in_transaction
from .products_service import get_active_product
from .session_service import ensure_open_session
"""
Inventory Invariants (authoritative)

Stock model:
- Product.stock is the current quantity; Movement rows are the audit trail.
- Every stock-affecting event writes exactly one Movement in the same DB
  transaction as the stock change, stamped with the open session.

Business invariants:
- Stock may never go negative. Decrements are conditional updates
  (stock = stock - q WHERE stock >= q) so a stale read cannot oversell.
- entry/waste come through record_movement; sale movements are written only
  by checkout.
"""

MANUAL_MOVEMENT_KINDS = ("entry", "waste")


class InsufficientStockError(Exception):
    """Raised when a waste or sale would drive stock below zero."""

    def __init__(self, *, product_id: int, product_name: str | None, requested: int, available: int):
        label = product_name or f"product {product_id}"
        super().__init__(
            f"Insufficient stock for {label}: requested {requested}, available {available}"
        )
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available

    def to_dict(self) -> dict:
        return {
            "error": str(self),
            "product_id": self.product_id,
            "product_name": self.product_name,
            "requested": self.requested,
            "available": self.available,
        }


def increment_stock(product: Product, quantity: int) -> int:
    product.stock = Product.stock + quantity
    db.session.flush()
    db.session.refresh(product, attribute_names=["stock"])
    return product.stock


def decrement_stock(product: Product, quantity: int, *, display_name: str | None = None) -> int:
    """
    Take `quantity` units off the product inside the current transaction.

    Raises:
        InsufficientStockError: stock < quantity (nothing is changed)
    """
    result = db.session.execute(
        update(Product)
        .where(Product.id == product.id, Product.stock >= quantity)
        .values(stock=Product.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    db.session.refresh(product, attribute_names=["stock"])
    if result.rowcount != 1:
        raise InsufficientStockError(
            product_id=product.id,
            product_name=display_name or product.name,
            requested=quantity,
            available=product.stock,
        )
    return product.stock


def append_movement(
    *,
    session_id: int,
    product_id: int,
    kind: str,
    quantity: int,
    reason: str | None = None,
) -> Movement:
    """Append-only: movements are never updated or deleted."""
    mv = Movement(
        session_id=session_id,
        product_id=product_id,
        kind=kind,
        quantity=quantity,
        reason=reason,
        occurred_at=utcnow(),
    )
    db.session.add(mv)
    db.session.flush()
    return mv


def record_movement(*, product_id: int, kind: str, quantity, reason=None) -> int:
    """
    Record a restock (entry) or a loss (waste) and return the new stock.

    Raises:
        ValidationError: unknown kind, bad product_id or quantity, reason too long
        NotFoundError: unknown or soft-deleted product
        InsufficientStockError: waste larger than current stock
    """
    if kind not in MANUAL_MOVEMENT_KINDS:
        if kind == "sale":
            raise ValidationError("sale movements are recorded by checkout only")
        raise ValidationError(f"type must be one of: {', '.join(MANUAL_MOVEMENT_KINDS)}")

    pid = coerce_int(product_id, "product_id", minimum=1)
    qty = coerce_int(quantity, "quantity", minimum=1)
    clean_reason = coerce_optional_text(reason, "reason", max_length=MAX_REASON_LENGTH)

    def _op():
        session = ensure_open_session()
        product = get_active_product(pid, lock=True)

        if kind == "entry":
            new_stock = increment_stock(product, qty)
        else:
            new_stock = decrement_stock(product, qty)

        append_movement(
            session_id=session.id,
            product_id=product.id,
            kind=kind,
            quantity=qty,
            reason=clean_reason,
        )
        return new_stock

    return run_in_transaction(_op)
