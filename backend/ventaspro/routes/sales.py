# Overview: Flask API routes for checkout.

from flask import Blueprint, request, jsonify, current_app

from ..services.sales_service import checkout
from ..validation import PayloadPolicy, validate_payload
from ..decorators import ledger_errors


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")

SALE_POLICY = PayloadPolicy(
    writable_fields={"items", "payment_method", "total"},
    required_on_create={"items", "payment_method", "total"},
)


@sales_bp.post("")
@ledger_errors("process sale")
def create_sale_route():
    """
    Checkout a cart.

    Request body:
    {
        "items": [{"id": 3, "name": "Empanada", "quantity": 2, "price": 2.5}],
        "payment_method": "cash",
        "total": 5.0
    }

    Items also accept product_id / unit_price keys.
    """
    payload = validate_payload(
        payload=request.get_json(silent=True),
        policy=SALE_POLICY,
        partial=False,
    )

    sale_id = checkout(
        items=payload["items"],
        payment_method=payload["payment_method"],
        total=payload["total"],
    )
    current_app.logger.info("Sale %s recorded: total %s via %s", sale_id, payload["total"], payload["payment_method"])
    return jsonify({"success": True, "saleId": sale_id}), 201
