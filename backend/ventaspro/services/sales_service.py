"""
Sales Service: checkout

WHY: A checkout turns a cart into a Sale, its SaleItems, the stock
decrements and the sale-kind Movements. All of it is one transaction: if any
line fails its stock check, the Sale header, every earlier line and every
earlier decrement are rolled back together.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..extensions import db
from ..models import Sale, SaleItem
from ..time_utils import utcnow
from ..validation import (
    MAX_NAME_LENGTH,
    ValidationError,
    coerce_int,
    coerce_money_cents,
    coerce_optional_text,
    coerce_payment_method,
)
from .concurrency import run_in_transaction
from .inventory_service import append_movement, decrement_stock
from .products_service import get_active_product
from .session_service import ensure_open_session

# Reason stamped on every sale-kind movement
SALE_MOVEMENT_REASON = "Venta"


def _normalize_items(items) -> list[dict]:
    """Validate cart lines up front so no row is staged for malformed input."""
    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        raise ValidationError("items must be a list")
    if not items:
        raise ValidationError("Cannot checkout with no items")

    lines = []
    for i, raw in enumerate(items, start=1):
        if not isinstance(raw, Mapping):
            raise ValidationError(f"item {i} must be an object")

        product_id = raw.get("product_id", raw.get("id"))
        unit_price = raw.get("unit_price", raw.get("price"))

        lines.append({
            "product_id": coerce_int(product_id, f"item {i} product_id", minimum=1),
            "quantity": coerce_int(raw.get("quantity"), f"item {i} quantity", minimum=1),
            "price_at_sale_cents": coerce_money_cents(unit_price, f"item {i} unit_price"),
            "name": coerce_optional_text(raw.get("name"), f"item {i} name", max_length=MAX_NAME_LENGTH),
        })
    return lines


def checkout(*, items, payment_method, total) -> int:
    """
    Record a sale and return its id.

    Args:
        items: ordered cart lines, each with product_id, quantity,
            unit_price (price at sale) and an optional display name
        payment_method: "cash" or "transfer"
        total: sale total as charged

    Raises:
        ValidationError: empty cart, malformed line, bad payment method/total
        NotFoundError: a line references an unknown or deleted product
        InsufficientStockError: a line asks for more than is in stock
    """
    lines = _normalize_items(items)
    method = coerce_payment_method(payment_method)
    total_cents = coerce_money_cents(total, "total")

    def _op():
        session = ensure_open_session()

        sale = Sale(
            session_id=session.id,
            total_cents=total_cents,
            payment_method=method,
            occurred_at=utcnow(),
        )
        db.session.add(sale)
        db.session.flush()

        for line in lines:
            product = get_active_product(line["product_id"], lock=True)

            db.session.add(SaleItem(
                sale_id=sale.id,
                product_id=product.id,
                quantity=line["quantity"],
                price_at_sale_cents=line["price_at_sale_cents"],
            ))
            decrement_stock(product, line["quantity"], display_name=line["name"])
            append_movement(
                session_id=session.id,
                product_id=product.id,
                kind="sale",
                quantity=line["quantity"],
                reason=SALE_MOVEMENT_REASON,
            )

        return sale.id

    return run_in_transaction(_op)
