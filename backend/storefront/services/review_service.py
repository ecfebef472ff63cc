# Overview: Service-layer operations for reviewing used-product submissions; encapsulates business logic and database work.

"""
Used-Product Review Service

================================================================================
PURPOSE: Turn a pending seller submission into a catalog entry, or remove it
================================================================================

STATE MACHINE:
    pending -> approved    approve_used_product()
    pending -> <deleted>   deny_used_product()

    approved is terminal. A denied submission no longer exists, so it has no
    outgoing transitions either.

RULES (NON-NEGOTIABLE):
1. Approval flips the status AND inserts the refurbished Product in one
   transaction. Either both are committed or neither is.
2. The pending check is repeated inside the write itself
   (UPDATE/DELETE ... WHERE status = 'pending'). Two concurrent reviewers
   cannot both win; the loser sees InvalidSubmissionState.
3. Approval never touches media. Denial deletes locally stored media only
   after the record deletion has committed; cleanup failures are collected
   as warnings and never fail the denial.
4. Every decision appends a ReviewEvent inside the same transaction.
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flask import current_app
from sqlalchemy import delete, select, update

from ..models import Product, QuoteRequested, ReviewEvent, SUBMISSION_STATUSES, UsedProduct
from ..validation import ValidationError
from .concurrency import lock_for_update, run_with_retry, unit_of_work
from .media_service import MediaCleanupWarning, delete_local_media, has_scheme, qualify_references
from storefront.time_utils import utcnow


DEFAULT_BRAND = "Unknown"
REFURBISHED_STOCK = 1


class SubmissionNotFound(ValueError):
    """No used-product submission with the given id."""

    def __init__(self, used_product_id: int):
        super().__init__("Used product not found")
        self.used_product_id = used_product_id


class InvalidSubmissionState(ValueError):
    """
    Raised when a review action is attempted on a non-pending submission.

    This is a domain error, not a technical error.
    """

    def __init__(self, status: str, action: str):
        super().__init__(f"This product is already {status}. Can't {action}.")
        self.status = status
        self.action = action


@dataclass
class ApprovalResult:
    used_product: dict
    product: dict


@dataclass
class DenialResult:
    used_product: dict
    warnings: list[MediaCleanupWarning] = field(default_factory=list)


def build_catalog_product(used: UsedProduct) -> Product:
    """
    Derive the refurbished catalog entry for an approved submission.

    - price: asking price, or 0 when the seller requested a quote
    - stock: always 1 (a used item is a single unit)
    - images: qualified with SERVER_URL; the files themselves stay where they are
    """
    pricing = used.pricing
    price_cents = 0 if isinstance(pricing, QuoteRequested) else pricing.amount_cents
    seller = used.seller

    return Product(
        title=used.title,
        description=used.description,
        price_cents=price_cents,
        category=used.category,
        brand=used.brand or DEFAULT_BRAND,
        image_urls=qualify_references(used.images or []),
        stock=REFURBISHED_STOCK,
        featured=False,
        is_refurbished=True,
        condition=used.condition,
        seller_name=seller.name,
        seller_email=seller.email,
        seller_phone=seller.phone,
        original_used_product_id=used.id,
    )


def _load_for_review(session, used_product_id: int, action: str) -> UsedProduct:
    used = (
        lock_for_update(session.query(UsedProduct).filter(UsedProduct.id == used_product_id))
        .execution_options(populate_existing=True)
        .one_or_none()
    )
    if used is None:
        raise SubmissionNotFound(used_product_id)
    if used.status != "pending":
        raise InvalidSubmissionState(used.status, action)
    return used


def _raise_lost_race(session, used_product_id: int, action: str):
    # Another writer changed the row between our read and our write
    current = session.execute(
        select(UsedProduct.status)
        .where(UsedProduct.id == used_product_id)
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if current is None:
        raise SubmissionNotFound(used_product_id)
    raise InvalidSubmissionState(current, action)


def _approve_once(used_product_id: int) -> ApprovalResult:
    with unit_of_work() as session:
        used = _load_for_review(session, used_product_id, "approve")
        product = build_catalog_product(used)

        claimed = session.execute(
            update(UsedProduct)
            .where(UsedProduct.id == used_product_id, UsedProduct.status == "pending")
            .values(status="approved", updated_at=utcnow())
            .execution_options(synchronize_session=False)
        ).rowcount
        if claimed != 1:
            _raise_lost_race(session, used_product_id, "approve")

        session.add(product)
        session.flush()

        session.add(ReviewEvent(
            used_product_id=used_product_id,
            action="approved",
            product_id=product.id,
            title=used.title,
            seller_email=used.seller_email,
        ))

    # Committed; attributes reload from the database on access
    session.refresh(used)
    return ApprovalResult(used_product=used.to_dict(), product=product.to_dict())


def approve_used_product(used_product_id: int) -> ApprovalResult:
    """
    Approve a pending submission (pending -> approved) and list it for sale.

    Returns:
        ApprovalResult with the updated submission and the new Product

    Raises:
        SubmissionNotFound: no submission with that id
        InvalidSubmissionState: submission is not pending
        PersistenceError: the transaction could not be committed (rolled back)
    """
    result = run_with_retry(
        lambda: _approve_once(used_product_id),
        attempts=current_app.config.get("REVIEW_COMMIT_ATTEMPTS", 3),
    )
    current_app.logger.info(
        "Approved used product %s as product %s", used_product_id, result.product["id"]
    )
    return result


def _deny_once(used_product_id: int, notes: str | None) -> dict:
    with unit_of_work() as session:
        used = _load_for_review(session, used_product_id, "deny")
        snapshot = used.to_dict()

        removed = session.execute(
            delete(UsedProduct)
            .where(UsedProduct.id == used_product_id, UsedProduct.status == "pending")
            .execution_options(synchronize_session=False)
        ).rowcount
        if removed != 1:
            _raise_lost_race(session, used_product_id, "deny")
        session.expunge(used)

        session.add(ReviewEvent(
            used_product_id=used_product_id,
            action="denied",
            title=snapshot["title"],
            seller_email=snapshot["seller"]["email"],
            notes=notes,
        ))

    if notes:
        snapshot["admin_notes"] = notes
    return snapshot


def deny_used_product(used_product_id: int, *, notes: str | None = None) -> DenialResult:
    """
    Deny a pending submission: delete the record, then its local media.

    notes are kept on the ReviewEvent (the submission itself is gone).

    Returns:
        DenialResult with the snapshot of the deleted submission and any
        media cleanup warnings

    Raises:
        SubmissionNotFound: no submission with that id
        InvalidSubmissionState: submission is not pending
        PersistenceError: the deletion could not be committed (rolled back)
        ValidationError: notes is not a string
    """
    if notes is not None:
        if not isinstance(notes, str):
            raise ValidationError("notes must be a string")
        notes = notes.strip() or None

    snapshot = run_with_retry(
        lambda: _deny_once(used_product_id, notes),
        attempts=current_app.config.get("REVIEW_COMMIT_ATTEMPTS", 3),
    )
    # Intake stores owned media as relative references only
    owned = [ref for ref in snapshot["images"] if not has_scheme(ref)]
    warnings = delete_local_media(owned)
    current_app.logger.info(
        "Denied used product %s (%d media warning(s))", used_product_id, len(warnings)
    )
    return DenialResult(used_product=snapshot, warnings=warnings)


def list_used_products(*, status: str | None = None) -> list[dict]:
    """All submissions, newest first, optionally filtered by status."""
    q = UsedProduct.query
    if status:
        if status not in SUBMISSION_STATUSES:
            raise ValidationError(
                f"Invalid status '{status}'. Must be one of: {', '.join(SUBMISSION_STATUSES)}"
            )
        q = q.filter(UsedProduct.status == status)
    q = q.order_by(UsedProduct.created_at.desc(), UsedProduct.id.desc())
    return [u.to_dict() for u in q.all()]


def get_used_product(used_product_id: int) -> dict:
    used = UsedProduct.query.filter_by(id=used_product_id).one_or_none()
    if used is None:
        raise SubmissionNotFound(used_product_id)
    return used.to_dict()


def list_review_events(used_product_id: int) -> list[dict]:
    events = (
        ReviewEvent.query
        .filter_by(used_product_id=used_product_id)
        .order_by(ReviewEvent.occurred_at.asc(), ReviewEvent.id.asc())
        .all()
    )
    return [e.to_dict() for e in events]
