# Overview: Service-layer operations for reporting; read-only queries over a session's ledger rows.

from __future__ import annotations

import csv
import io

from sqlalchemy import func

from ..extensions import db
from ..models import Sale, SaleItem, Movement, Product, SalesSession
from ..time_utils import to_utc_z
from ..validation import NotFoundError, cents_to_decimal
from .concurrency import run_read
from .session_service import get_current_session


def _sales_for_session(session_id: int) -> list[Sale]:
    return (
        db.session.query(Sale)
        .filter(Sale.session_id == session_id)
        .order_by(Sale.id.asc())
        .all()
    )


def _movements_for_session(session_id: int) -> list[tuple[Movement, str]]:
    return (
        db.session.query(Movement, Product.name)
        .join(Product, Movement.product_id == Product.id)
        .filter(Movement.session_id == session_id)
        .order_by(Movement.id.asc())
        .all()
    )


def report_for_session(session_id: int) -> dict:
    """
    Sales (with their items) and movements (with product name) booked
    against one session, in insertion order.

    Soft-deleted products still join, so historical names survive. An
    unknown session id yields empty lists and session=None.
    """
    def _q():
        session = db.session.get(SalesSession, session_id)
        return {
            "session": session.to_dict() if session else None,
            "sales": [s.to_dict(include_items=True) for s in _sales_for_session(session_id)],
            "movements": [m.to_dict(product_name=name) for m, name in _movements_for_session(session_id)],
        }

    return run_read(_q)


def current_session_report() -> dict:
    """Report for whichever session is open right now (opened if needed)."""
    session = get_current_session()
    return report_for_session(session.id)


def session_summary(session_id: int) -> dict:
    """
    Close-out totals for a session.

    - totals by payment method, from Sale.total as charged
    - per-product units sold and revenue, from SaleItem.price_at_sale
    - waste detail rows
    """
    def _q():
        session = db.session.get(SalesSession, session_id)
        if session is None:
            raise NotFoundError(f"Session {session_id} not found")

        by_method = dict(
            db.session.query(Sale.payment_method, func.coalesce(func.sum(Sale.total_cents), 0))
            .filter(Sale.session_id == session_id)
            .group_by(Sale.payment_method)
            .all()
        )
        sales_count = db.session.query(func.count(Sale.id)).filter(Sale.session_id == session_id).scalar() or 0

        cash_cents = int(by_method.get("cash", 0))
        transfer_cents = int(by_method.get("transfer", 0))

        product_rows = (
            db.session.query(
                Product.id,
                Product.name,
                Product.stock,
                func.sum(SaleItem.quantity).label("units"),
                func.sum(SaleItem.quantity * SaleItem.price_at_sale_cents).label("revenue_cents"),
            )
            .join(SaleItem, SaleItem.product_id == Product.id)
            .join(Sale, Sale.id == SaleItem.sale_id)
            .filter(Sale.session_id == session_id)
            .group_by(Product.id, Product.name, Product.stock)
            .order_by(Product.name.asc(), Product.id.asc())
            .all()
        )

        waste_rows = (
            db.session.query(Movement, Product.name)
            .join(Product, Movement.product_id == Product.id)
            .filter(Movement.session_id == session_id, Movement.kind == "waste")
            .order_by(Movement.id.asc())
            .all()
        )

        return {
            "session": session.to_dict(),
            "sales_count": int(sales_count),
            "totals": {
                "cash": cents_to_decimal(cash_cents),
                "transfer": cents_to_decimal(transfer_cents),
                "total": cents_to_decimal(cash_cents + transfer_cents),
                "cash_cents": cash_cents,
                "transfer_cents": transfer_cents,
                "total_cents": cash_cents + transfer_cents,
            },
            "products": [
                {
                    "product_id": row.id,
                    "name": row.name,
                    "quantity_sold": int(row.units or 0),
                    "revenue": cents_to_decimal(int(row.revenue_cents or 0)),
                    "revenue_cents": int(row.revenue_cents or 0),
                    "stock_remaining": row.stock,
                }
                for row in product_rows
            ],
            "waste": [
                {
                    "product_id": mv.product_id,
                    "name": name,
                    "quantity": mv.quantity,
                    "reason": mv.reason,
                    "timestamp": to_utc_z(mv.occurred_at),
                }
                for mv, name in waste_rows
            ],
        }

    return run_read(_q)


def export_session_csv(session_id: int) -> str:
    """Render session_summary as a single-sheet CSV document."""
    summary = session_summary(session_id)
    session = summary["session"]
    totals = summary["totals"]

    buf = io.StringIO()
    writer = csv.writer(buf)

    writer.writerow(["SESSION SUMMARY", f"#{session['id']}"])
    writer.writerow(["Opened", session["start_time"]])
    writer.writerow(["Closed", session["end_time"] or ""])
    writer.writerow(["Cash total", f"{totals['cash']:.2f}"])
    writer.writerow(["Transfer total", f"{totals['transfer']:.2f}"])
    writer.writerow(["TOTAL SOLD", f"{totals['total']:.2f}"])
    writer.writerow([])

    writer.writerow(["SALES BY PRODUCT"])
    writer.writerow(["Product", "Units sold", "Revenue", "Stock remaining"])
    for row in summary["products"]:
        writer.writerow([row["name"], row["quantity_sold"], f"{row['revenue']:.2f}", row["stock_remaining"]])
    writer.writerow([])

    writer.writerow(["WASTE"])
    writer.writerow(["Product", "Units lost", "Reason", "Timestamp"])
    for row in summary["waste"]:
        writer.writerow([row["name"], row["quantity"], row["reason"] or "", row["timestamp"]])

    return buf.getvalue()
