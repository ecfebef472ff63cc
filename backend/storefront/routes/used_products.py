# backend/storefront/routes/used_products.py
"""
Used-Product Review API Routes

These routes drive the review of seller submissions:
- GET   /api/used-products              - List submissions (optional ?status=)
- GET   /api/used-products/:id          - One submission
- GET   /api/used-products/:id/events   - Review audit trail
- PATCH /api/used-products/:id/approve  - pending -> approved, lists a refurbished Product
- PATCH /api/used-products/:id/deny     - deletes a pending submission and its local media

SECURITY:
- All routes require the admin bearer token (when configured)
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import review_service
from ..services.concurrency import PersistenceError
from ..services.review_service import InvalidSubmissionState, SubmissionNotFound
from ..validation import ValidationError
from ..decorators import require_admin


used_products_bp = Blueprint("used_products", __name__, url_prefix="/api/used-products")


@used_products_bp.get("")
@require_admin
def list_used_products_route():
    """
    List all submissions, newest first.

    Query params:
    - status: pending | approved | rejected (optional)
    """
    try:
        items = review_service.list_used_products(status=request.args.get("status"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"items": items, "count": len(items)}), 200


@used_products_bp.get("/<int:used_product_id>")
@require_admin
def get_used_product_route(used_product_id: int):
    try:
        return jsonify(review_service.get_used_product(used_product_id)), 200
    except SubmissionNotFound as e:
        return jsonify({"error": str(e)}), 404


@used_products_bp.get("/<int:used_product_id>/events")
@require_admin
def list_review_events_route(used_product_id: int):
    """Review decisions for a submission; still readable after a denial."""
    events = review_service.list_review_events(used_product_id)
    return jsonify({"items": events, "count": len(events)}), 200


@used_products_bp.patch("/<int:used_product_id>/approve")
@require_admin
def approve_used_product_route(used_product_id: int):
    """
    Approve a pending submission (pending -> approved).

    Response:
        {
            "message": "...",
            "usedProduct": {...},  // status=approved
            "newProduct": {...}    // refurbished catalog entry
        }

    Error responses:
        401: Not authenticated
        404: Submission not found
        400: Submission not pending
        500: Transaction could not be committed (nothing was changed)
    """
    try:
        result = review_service.approve_used_product(used_product_id)
    except SubmissionNotFound as e:
        return jsonify({"error": str(e)}), 404
    except InvalidSubmissionState as e:
        return jsonify({"error": str(e)}), 400
    except PersistenceError as e:
        current_app.logger.error("Failed to approve used product %s: %s", used_product_id, e)
        return jsonify({"error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to approve used product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "message": "Used product approved and added to product listings",
        "usedProduct": result.used_product,
        "newProduct": result.product,
    }), 200


@used_products_bp.patch("/<int:used_product_id>/deny")
@require_admin
def deny_used_product_route(used_product_id: int):
    """
    Deny a pending submission. The record and its locally stored images are deleted.

    Body (optional):
        {"notes": "..."}   // "adminNotes" is accepted too; kept on the review event

    Response:
        {
            "message": "...",
            "usedProduct": {...},  // snapshot of the deleted submission
            "warnings": [...]      // media that could not be removed
        }
    """
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    notes = payload.get("notes", payload.get("adminNotes"))

    try:
        result = review_service.deny_used_product(used_product_id, notes=notes)
    except SubmissionNotFound as e:
        return jsonify({"error": str(e)}), 404
    except InvalidSubmissionState as e:
        return jsonify({"error": str(e)}), 400
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except PersistenceError as e:
        current_app.logger.error("Failed to deny used product %s: %s", used_product_id, e)
        return jsonify({"error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to deny used product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "message": "Used product has been denied",
        "usedProduct": result.used_product,
        "warnings": [w.to_dict() for w in result.warnings],
    }), 200
