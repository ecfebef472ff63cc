from __future__ import annotations

from ..extensions import db
from storefront.time_utils import to_utc_z, utcnow


class Product(db.Model):
    """
    Sellable catalog entry (new or refurbished).

    REFURBISHED ENTRIES:
    Created only by the approval workflow. original_used_product_id is the
    write-once back-reference to the approved submission; the unique
    constraint keeps the derivation one-to-one.

    Authoritative price storage is in cents (frontend may only format for display).
    """
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("price_cents >= 0", name="ck_products_price_nonneg"),
        db.CheckConstraint("stock >= 0", name="ck_products_stock_nonneg"),
        db.CheckConstraint(
            "NOT is_refurbished OR (condition IS NOT NULL AND original_used_product_id IS NOT NULL)",
            name="ck_products_refurbished_source",
        ),
        db.Index("ix_products_active_featured", "is_active", "featured"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(64), nullable=False, index=True)
    price_cents = db.Column(db.Integer, nullable=False, default=0)

    # Fully-qualified image locators, in display order
    image_urls = db.Column(db.JSON, nullable=False, default=list)

    stock = db.Column(db.Integer, nullable=False, default=0)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    brand = db.Column(db.String(128), nullable=False, default="Unknown")

    is_refurbished = db.Column(db.Boolean, nullable=False, default=False)
    condition = db.Column(db.String(16), nullable=True)

    # Seller snapshot taken at approval time
    seller_name = db.Column(db.String(128), nullable=True)
    seller_email = db.Column(db.String(255), nullable=True)
    seller_phone = db.Column(db.String(32), nullable=True)

    original_used_product_id = db.Column(
        db.Integer,
        db.ForeignKey("used_products.id"),
        nullable=True,
        unique=True,
    )

    is_active = db.Column(db.Boolean, nullable=False, default=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} title={self.title!r} refurbished={self.is_refurbished}>"

    def to_dict(self) -> dict:
        seller_info = None
        if self.seller_name or self.seller_email or self.seller_phone:
            seller_info = {
                "name": self.seller_name,
                "email": self.seller_email,
                "phone": self.seller_phone,
            }
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "price_cents": self.price_cents,
            "image_urls": list(self.image_urls or []),
            "stock": self.stock,
            "featured": self.featured,
            "brand": self.brand,
            "is_refurbished": self.is_refurbished,
            "condition": self.condition,
            "seller_info": seller_info,
            "original_used_product_id": self.original_used_product_id,
            "is_active": self.is_active,
            "version_id": self.version_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
