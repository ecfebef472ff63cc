# backend/storefront/services/products_service.py
"""
Catalog Products Service

Plain catalog management. Refurbished entries are created only by
review_service.approve_used_product; nothing here can set is_refurbished,
condition, the seller snapshot or original_used_product_id.
"""
from __future__ import annotations
from ..extensions import db
from ..models import Product
from .media_service import qualify_references

PRODUCT_MUTABLE_FIELDS = {
    "title", "description", "category", "price_cents",
    "image_urls", "stock", "featured", "brand",
}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        if k == "image_urls":
            v = qualify_references(v or [])
        setattr(p, k, v)


def list_products(
    *,
    featured: bool | None = None,
    refurbished: bool | None = None,
    page: int | None = None,
    per_page: int | None = None,
) -> dict:
    """
    Active catalog listing, newest first, with optional pagination.

    Args:
        featured: only featured products when True
        refurbished: filter on the refurbished flag when not None
        page: Page number (1-indexed). If None, returns all items.
        per_page: Items per page (default 20, max 100)

    Returns:
        Dict with 'items', 'count', and pagination metadata if paginated.
    """
    base_query = db.session.query(Product).filter(Product.is_active.is_(True))
    if featured:
        base_query = base_query.filter(Product.featured.is_(True))
    if refurbished is not None:
        base_query = base_query.filter(Product.is_refurbished.is_(refurbished))
    base_query = base_query.order_by(Product.created_at.desc(), Product.id.desc())

    # If no pagination requested, return all items
    if page is None:
        products = base_query.all()
        return {
            "items": [p.to_dict() for p in products],
            "count": len(products),
        }

    # Pagination logic
    per_page = min(per_page or 20, 100)  # Default 20, max 100
    page = max(page, 1)  # Ensure page >= 1

    total = base_query.count()
    total_pages = (total + per_page - 1) // per_page if total > 0 else 1

    products = base_query.offset((page - 1) * per_page).limit(per_page).all()

    return {
        "items": [p.to_dict() for p in products],
        "count": len(products),
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": total,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }


def get_product(product_id: int) -> dict | None:
    p = db.session.query(Product).filter(Product.id == product_id, Product.is_active.is_(True)).first()
    return p.to_dict() if p else None


def create_product(*, patch: dict) -> dict:
    """Create a (non-refurbished) product using a validated patch dict."""
    p = Product(is_refurbished=False)
    apply_product_patch(p, patch)
    if not p.brand:
        p.brand = "Unknown"

    db.session.add(p)
    db.session.commit()
    return p.to_dict()


def update_product(*, product_id: int, patch: dict) -> dict | None:
    """
    Update a product.

    Returns:
        Updated product dict, or None if not found
    """
    p = db.session.query(Product).filter(Product.id == product_id, Product.is_active.is_(True)).first()
    if not p:
        return None

    apply_product_patch(p, patch)
    db.session.commit()
    return p.to_dict()


def delete_product(*, product_id: int) -> bool:
    """
    Soft-delete a product.

    Returns:
        True if deleted, False if not found
    """
    p = db.session.query(Product).filter(Product.id == product_id).first()
    if not p or not p.is_active:
        return False

    # Soft-delete only: preserve IDs and the link back to the submission.
    p.is_active = False
    db.session.commit()
    return True
