# Overview: Flask API routes for catalog products; parses input and returns JSON responses.

# backend/storefront/routes/products.py
"""
Catalog product routes.

SECURITY:
- Reads are public (storefront)
- Writes require the admin bearer token
"""
from flask import Blueprint, request
from ..services.products_service import (
    list_products as list_products_service,
    get_product,
    create_product,
    update_product,
    delete_product,
)
from ..models import Product
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    parse_bool,
    ValidationError,
)
from ..decorators import require_admin

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"title", "description", "category", "price_cents", "image_urls", "stock", "featured", "brand"},
    required_on_create={"title", "description", "category", "price_cents"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List active products, newest first.

    Query params:
    - featured: "true" to only return featured products
    - refurbished: "true" / "false" to filter on the refurbished flag
    - page: int (optional) - page number (1-indexed). If omitted, returns all items.
    - per_page: int (optional) - items per page (default 20, max 100)
    """
    refurbished = request.args.get("refurbished")
    return list_products_service(
        featured=parse_bool(request.args.get("featured")),
        refurbished=None if refurbished is None else parse_bool(refurbished),
        page=request.args.get("page", type=int),
        per_page=request.args.get("per_page", type=int),
    )


@products_bp.get("/<int:product_id>")
def get_product_route(product_id: int):
    product = get_product(product_id)
    if product is None:
        return {"error": "Product not found"}, 404
    return product, 200


@products_bp.post("")
@require_admin
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)  # Handles price validation including max check
    except ValidationError as e:
        return {"error": str(e)}, 400

    created = create_product(patch=patch)
    return {"message": "Product created successfully", "product": created}, 201


@products_bp.put("/<int:product_id>")
@require_admin
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    updated = update_product(product_id=product_id, patch=patch)
    if not updated:
        return {"error": "Product not found"}, 404

    return {"message": "Product updated successfully", "product": updated}, 200


@products_bp.delete("/<int:product_id>")
@require_admin
def delete_product_route(product_id: int):
    """Soft-delete a product."""
    if not delete_product(product_id=product_id):
        return {"error": "Product not found"}, 404

    return {"message": "Product deleted successfully", "deletedId": product_id}, 200
