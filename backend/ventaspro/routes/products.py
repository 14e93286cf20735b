# Overview: Flask API routes for the product catalog; parses input and returns JSON responses.

# backend/ventaspro/routes/products.py
"""
Product catalog routes.

Listing excludes soft-deleted products. Updates overwrite name, price and
stock in place (a correction, not a movement).
"""
from flask import Blueprint, request, jsonify, current_app

from ..services import products_service
from ..validation import PayloadPolicy, validate_payload
from ..decorators import ledger_errors

PRODUCT_CREATE_POLICY = PayloadPolicy(
    writable_fields={"name", "price", "initial_stock", "image"},
    required_on_create={"name", "price", "initial_stock"},
)

PRODUCT_UPDATE_POLICY = PayloadPolicy(
    writable_fields={"name", "price", "stock", "image"},
    required_on_create={"name", "price", "stock"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@ledger_errors("get products")
def list_products():
    """List active products ordered by name."""
    products = products_service.list_products()
    return jsonify([p.to_dict() for p in products])


@products_bp.post("")
@ledger_errors("create product")
def create_product_route():
    """
    Create a new product.

    Request body:
    {"name": "Empanada", "price": 2.5, "initial_stock": 40, "image": "..." (optional)}
    """
    payload = validate_payload(
        payload=request.get_json(silent=True),
        policy=PRODUCT_CREATE_POLICY,
        partial=False,
    )

    product_id = products_service.add_product(
        name=payload["name"],
        price=payload["price"],
        initial_stock=payload["initial_stock"],
        image=payload.get("image"),
    )
    current_app.logger.info("Created product %s (%s)", product_id, payload["name"])
    return jsonify({"id": product_id}), 201


@products_bp.put("/<int:product_id>")
@ledger_errors("update product")
def update_product_route(product_id: int):
    """
    Overwrite name, price and stock.

    Request body:
    {"name": "Empanada", "price": 2.75, "stock": 38}
    """
    payload = validate_payload(
        payload=request.get_json(silent=True),
        policy=PRODUCT_UPDATE_POLICY,
        partial=False,
    )

    kwargs = {}
    if "image" in payload:
        kwargs["image"] = payload["image"]

    changed = products_service.update_product(
        product_id=product_id,
        name=payload["name"],
        price=payload["price"],
        stock=payload["stock"],
        **kwargs,
    )
    current_app.logger.info("Updated product %s: stock=%s", product_id, payload["stock"])
    return jsonify({"success": True, "changes": int(changed)}), 200


@products_bp.delete("/<int:product_id>")
@ledger_errors("delete product")
def delete_product_route(product_id: int):
    """Soft-delete a product."""
    changed = products_service.soft_delete_product(product_id=product_id)
    current_app.logger.info("Soft-deleted product %s", product_id)
    return jsonify({"success": True, "changes": int(changed)}), 200
