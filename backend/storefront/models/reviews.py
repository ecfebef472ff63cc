from __future__ import annotations

from ..extensions import db
from storefront.time_utils import to_utc_z, utcnow


class ReviewEvent(db.Model):
    """
    Append-only audit row for a review decision.

    Written in the same transaction as the decision itself. used_product_id
    carries no foreign key: a denied submission is deleted, its events stay.
    """
    __tablename__ = "review_events"
    __table_args__ = (
        db.CheckConstraint("action IN ('approved', 'denied')", name="ck_review_events_action"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    used_product_id = db.Column(db.Integer, nullable=False, index=True)
    action = db.Column(db.String(16), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=True)

    # Snapshot so the trail reads on its own after deletion
    title = db.Column(db.String(255), nullable=False)
    seller_email = db.Column(db.String(255), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    occurred_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "used_product_id": self.used_product_id,
            "action": self.action,
            "product_id": self.product_id,
            "title": self.title,
            "seller_email": self.seller_email,
            "notes": self.notes,
            "occurred_at": to_utc_z(self.occurred_at),
        }
