# backend/ventaspro/routes/inventory.py
"""
Inventory movement routes.

Only entry (restock) and waste (loss) are accepted here; sale movements are
written by checkout.
"""
from flask import Blueprint, request, jsonify, current_app

from ..services.inventory_service import record_movement
from ..validation import PayloadPolicy, validate_payload
from ..decorators import ledger_errors


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")

MOVEMENT_POLICY = PayloadPolicy(
    writable_fields={"product_id", "type", "quantity", "reason"},
    required_on_create={"product_id", "type", "quantity"},
)


@inventory_bp.post("/move")
@ledger_errors("record movement")
def move_inventory_route():
    """
    Record a stock entry or waste.

    Request body:
    {"product_id": 3, "type": "waste", "quantity": 2, "reason": "Dropped tray"}
    """
    payload = validate_payload(
        payload=request.get_json(silent=True),
        policy=MOVEMENT_POLICY,
        partial=False,
    )

    new_stock = record_movement(
        product_id=payload["product_id"],
        kind=payload["type"],
        quantity=payload["quantity"],
        reason=payload.get("reason"),
    )
    current_app.logger.info(
        "Recorded %s of %s for product %s. New stock: %s",
        payload["type"], payload["quantity"], payload["product_id"], new_stock,
    )
    return jsonify({"success": True, "newStock": new_stock}), 200
