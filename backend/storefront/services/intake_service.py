# Overview: Service-layer operations for seller intake of used products.

from __future__ import annotations

import re

from flask import current_app

from ..extensions import db
from ..models import Priced, QuoteRequested, SUBMISSION_CONDITIONS, UsedProduct
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    parse_bool,
    parse_price_to_cents,
    validate_payload,
)
from .media_service import has_scheme, is_local_reference


INTAKE_POLICY = ModelValidationPolicy(
    writable_fields={
        "title", "description", "category", "condition", "brand",
        "seller_name", "seller_email", "seller_phone",
    },
    required_on_create={
        "title", "description", "category", "condition",
        "seller_name", "seller_email", "seller_phone",
    },
)

# Incoming form/JSON keys -> column keys
FIELD_ALIASES = {
    "title": "title",
    "description": "description",
    "category": "category",
    "condition": "condition",
    "brand": "brand",
    "seller.name": "seller_name",
    "seller.email": "seller_email",
    "seller.phone": "seller_phone",
}

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _flatten_seller(form: dict) -> dict:
    # JSON clients send {"seller": {"name": ...}}, forms send "seller.name"
    flat = dict(form)
    seller = flat.pop("seller", None)
    if isinstance(seller, dict):
        for key, value in seller.items():
            flat.setdefault(f"seller.{key}", value)
    return flat


def parse_pricing(form: dict):
    """requestQuote wins; otherwise askingPrice is required."""
    if parse_bool(form.get("requestQuote")):
        return QuoteRequested()
    return Priced(parse_price_to_cents(form.get("askingPrice"), field="askingPrice"))


def validate_submission(form: dict, images: list[str]) -> dict:
    """
    Normalize a seller submission into UsedProduct column values.

    Raises:
        ValidationError: missing/invalid fields, no images, too many images
    """
    form = _flatten_seller(form or {})

    payload = {}
    for key, column in FIELD_ALIASES.items():
        if key in form and form[key] not in (None, ""):
            payload[column] = form[key]

    patch = validate_payload(model=UsedProduct, payload=payload, policy=INTAKE_POLICY, partial=False)

    if patch["condition"] not in SUBMISSION_CONDITIONS:
        raise ValidationError(
            f"condition must be one of: {', '.join(SUBMISSION_CONDITIONS)}"
        )
    if not _EMAIL_RE.match(patch["seller_email"]):
        raise ValidationError("seller.email must be a valid email address")
    patch["seller_email"] = patch["seller_email"].lower()

    if not images:
        raise ValidationError("At least one image is required")
    max_images = current_app.config["MAX_UPLOAD_IMAGES"]
    if len(images) > max_images:
        raise ValidationError(f"At most {max_images} images are allowed")

    patch["pricing"] = parse_pricing(form)
    patch["images"] = list(images)
    return patch


def validate_external_images(images) -> list[str]:
    """JSON submissions reference already-hosted images by absolute URL."""
    if not isinstance(images, list) or not all(isinstance(i, str) for i in images):
        raise ValidationError("images must be a list of URLs")
    cleaned = [i.strip() for i in images if i and i.strip()]
    for ref in cleaned:
        if not has_scheme(ref) or not ref.lower().startswith(("http://", "https://")):
            raise ValidationError(f"Image reference must be an absolute http(s) URL: {ref}")
        if is_local_reference(ref):
            # Files under our upload folder belong to other listings
            raise ValidationError(f"Image reference must not point at this server's uploads: {ref}")
    return cleaned


def submit_used_product(form: dict, images: list[str]) -> dict:
    """Create a pending submission. Status always starts at 'pending'."""
    values = validate_submission(form, images)
    pricing = values.pop("pricing")

    used = UsedProduct(status="pending", **values)
    used.pricing = pricing

    db.session.add(used)
    db.session.commit()

    current_app.logger.info("Received used product submission %s from %s", used.id, used.seller_email)
    return used.to_dict()


def list_submissions_for_seller(email: str) -> list[dict]:
    rows = (
        UsedProduct.query
        .filter(UsedProduct.seller_email == (email or "").strip().lower())
        .order_by(UsedProduct.created_at.desc(), UsedProduct.id.desc())
        .all()
    )
    return [u.to_dict() for u in rows]
