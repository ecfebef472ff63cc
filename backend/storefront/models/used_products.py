from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..extensions import db
from storefront.time_utils import to_utc_z, utcnow


SUBMISSION_STATUSES = ("pending", "approved", "rejected")
SUBMISSION_CONDITIONS = ("New", "Excellent", "Good", "Fair")


@dataclass(frozen=True)
class Priced:
    """Seller named a price."""
    amount_cents: int

    def __post_init__(self):
        if self.amount_cents < 0:
            raise ValueError("asking price must be >= 0")


@dataclass(frozen=True)
class QuoteRequested:
    """Seller asked the store to quote a price."""


Pricing = Union[Priced, QuoteRequested]


@dataclass(frozen=True)
class SellerInfo:
    name: str
    email: str
    phone: str

    def to_dict(self) -> dict:
        return {"name": self.name, "email": self.email, "phone": self.phone}


class UsedProduct(db.Model):
    """
    A seller-submitted used item awaiting review.

    STATE MACHINE:
        pending -> approved   (review_service.approve_used_product)
        pending -> <deleted>  (review_service.deny_used_product)

    "rejected" stays a valid column value for records written by older
    tooling, but no workflow produces it.

    PRICING: asking_price_cents and request_quote are two columns holding one
    sum type. The CHECK constraint keeps exactly one mode set; code should go
    through the `pricing` property instead of reading the columns directly.
    """
    __tablename__ = "used_products"
    __table_args__ = (
        db.CheckConstraint(
            "(request_quote AND asking_price_cents IS NULL) "
            "OR (NOT request_quote AND asking_price_cents IS NOT NULL)",
            name="ck_used_products_pricing_mode",
        ),
        db.CheckConstraint("asking_price_cents IS NULL OR asking_price_cents >= 0", name="ck_used_products_price_nonneg"),
        db.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_used_products_status"),
        db.Index("ix_used_products_status_created", "status", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(64), nullable=False)
    condition = db.Column(db.String(16), nullable=False)
    brand = db.Column(db.String(128), nullable=True)

    # Ordered list of references: relative local paths or absolute URLs
    images = db.Column(db.JSON, nullable=False, default=list)

    asking_price_cents = db.Column(db.Integer, nullable=True)
    request_quote = db.Column(db.Boolean, nullable=False, default=False)

    seller_name = db.Column(db.String(128), nullable=False)
    seller_email = db.Column(db.String(255), nullable=False, index=True)
    seller_phone = db.Column(db.String(32), nullable=False)

    status = db.Column(db.String(16), nullable=False, default="pending", index=True)
    admin_notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def pricing(self) -> Pricing:
        if self.request_quote:
            return QuoteRequested()
        return Priced(self.asking_price_cents)

    @pricing.setter
    def pricing(self, value: Pricing) -> None:
        if isinstance(value, QuoteRequested):
            self.request_quote = True
            self.asking_price_cents = None
        elif isinstance(value, Priced):
            self.request_quote = False
            self.asking_price_cents = value.amount_cents
        else:
            raise TypeError(f"Unsupported pricing {value!r}")

    @property
    def seller(self) -> SellerInfo:
        return SellerInfo(self.seller_name, self.seller_email, self.seller_phone)

    @seller.setter
    def seller(self, value: SellerInfo) -> None:
        self.seller_name = value.name
        self.seller_email = value.email
        self.seller_phone = value.phone

    def __repr__(self) -> str:
        return f"<UsedProduct id={self.id} title={self.title!r} status={self.status}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "condition": self.condition,
            "brand": self.brand,
            "images": list(self.images or []),
            "asking_price_cents": self.asking_price_cents,
            "request_quote": bool(self.request_quote),
            "seller": self.seller.to_dict(),
            "status": self.status,
            "admin_notes": self.admin_notes,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
