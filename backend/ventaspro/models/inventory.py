from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z
from ..validation import cents_to_decimal

MOVEMENT_KINDS = ("entry", "waste", "sale")


class Product(db.Model):
    """
    Product master data.

    STOCK: `stock` is the single mutable quantity in the ledger. It changes
    through movements (entry, waste, sale) or an explicit catalog correction.
    `initial_stock` is the snapshot taken at creation and never changes.

    SOFT DELETE: products are never removed. `deleted=True` hides them from
    catalog listings while movements and sale items keep joining to the row.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        db.Index("ix_products_deleted_name", "deleted", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)

    # Authoritative storage in cents (API speaks decimal amounts)
    price_cents = db.Column(db.Integer, nullable=False, default=0)

    stock = db.Column(db.Integer, nullable=False, default=0)
    initial_stock = db.Column(db.Integer, nullable=False, default=0)
    deleted = db.Column(db.Boolean, nullable=False, default=False)
    image = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": cents_to_decimal(self.price_cents),
            "price_cents": self.price_cents,
            "stock": self.stock,
            "initial_stock": self.initial_stock,
            "deleted": self.deleted,
            "image": self.image,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class Movement(db.Model):
    """
    Append-only stock audit record, one row per stock-affecting event.

    KINDS:
    - entry: restock (stock goes up)
    - waste: loss/spoilage (stock goes down)
    - sale: written by checkout only, one row per sale item
    """
    __tablename__ = "movements"
    __table_args__ = (
        db.CheckConstraint("kind IN ('entry', 'waste', 'sale')", name="ck_movements_kind"),
        db.CheckConstraint("quantity > 0", name="ck_movements_quantity_positive"),
        db.Index("ix_movements_session_id_id", "session_id", "id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey("sessions.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)

    kind = db.Column(db.String(16), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.String(255), nullable=True)

    occurred_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), index=True)

    product = db.relationship("Product", backref=db.backref("movements", lazy=True))
    session = db.relationship("SalesSession", backref=db.backref("movements", lazy=True))

    def to_dict(self, product_name: str | None = None) -> dict:
        return {
            "id": self.id,
            "session_id": self.session_id,
            "product_id": self.product_id,
            "product_name": product_name,
            "type": self.kind,
            "quantity": self.quantity,
            "reason": self.reason,
            "timestamp": to_utc_z(self.occurred_at),
        }
