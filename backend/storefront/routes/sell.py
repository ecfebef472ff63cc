# backend/storefront/routes/sell.py
"""
Seller intake routes (public).

POST /api/sell accepts either:
- multipart/form-data with up to MAX_UPLOAD_IMAGES files under "images"
  (stored locally under UPLOAD_FOLDER), or
- application/json with "images" as a list of already-hosted URLs.
"""
from flask import Blueprint, request, jsonify, current_app

from ..services import intake_service, media_service
from ..validation import ValidationError

sell_bp = Blueprint("sell", __name__, url_prefix="/api/sell")


@sell_bp.get("/test")
def sell_test():
    return {"message": "Sell route is working!"}


@sell_bp.post("")
def submit_used_product_route():
    """
    Submit a used item for review.

    Form fields: title, description, category, condition, brand,
    askingPrice | requestQuote, seller.name, seller.email, seller.phone
    """
    saved: list[str] = []
    try:
        if request.is_json:
            form = request.get_json(silent=True) or {}
            if not isinstance(form, dict):
                raise ValidationError("Invalid JSON payload")
            images = intake_service.validate_external_images(form.get("images") or [])
        else:
            form = request.form.to_dict()
            uploads = [f for f in request.files.getlist("images") if f and f.filename]
            if len(uploads) > current_app.config["MAX_UPLOAD_IMAGES"]:
                raise ValidationError(
                    f"At most {current_app.config['MAX_UPLOAD_IMAGES']} images are allowed"
                )
            for upload in uploads:
                saved.append(media_service.save_upload(upload))
            images = saved

        created = intake_service.submit_used_product(form, images)
    except ValidationError as e:
        media_service.delete_local_media(saved)
        return jsonify({"error": str(e)}), 400
    except Exception:
        media_service.delete_local_media(saved)
        current_app.logger.exception("Failed to submit used product")
        return jsonify({"error": "Failed to submit product listing"}), 500

    return jsonify({
        "message": "Product listing submitted successfully",
        "product": created,
    }), 201


@sell_bp.get("/my-submissions/<path:email>")
def my_submissions_route(email: str):
    items = intake_service.list_submissions_for_seller(email)
    return jsonify({"items": items, "count": len(items)}), 200
