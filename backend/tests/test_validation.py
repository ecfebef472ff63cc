# Overview: Pytest coverage for payload validation and pricing input.

import pytest

from storefront.models import Priced, Product, QuoteRequested, UsedProduct
from storefront.services.intake_service import parse_pricing
from storefront.validation import (
    ModelValidationPolicy,
    ValidationError,
    parse_bool,
    parse_price_to_cents,
    validate_payload,
)
from tests.conftest import build_submission


class TestParsePrice:

    @pytest.mark.parametrize("raw, cents", [
        ("129.99", 12999),
        ("0", 0),
        (15, 1500),
        (19.5, 1950),
        (" 7.10 ", 710),
    ])
    def test_valid_amounts(self, raw, cents):
        assert parse_price_to_cents(raw) == cents

    @pytest.mark.parametrize("raw", ["", None, "abc", "-1", "1.999", "nan", "99999999.99", True])
    def test_invalid_amounts(self, raw):
        with pytest.raises(ValidationError):
            parse_price_to_cents(raw)


class TestPricingUnion:
    """Exactly one of asking price / quote request."""

    def test_quote_request_wins_over_price(self):
        assert parse_pricing({"requestQuote": "true", "askingPrice": "50"}) == QuoteRequested()

    def test_price_required_without_quote(self):
        with pytest.raises(ValidationError):
            parse_pricing({"requestQuote": "false"})

    def test_priced(self):
        assert parse_pricing({"askingPrice": "50.25"}) == Priced(5025)

    def test_negative_priced_rejected(self):
        with pytest.raises(ValueError):
            Priced(-1)

    def test_model_setter_keeps_columns_exclusive(self):
        used = build_submission(pricing=Priced(100))
        used.pricing = QuoteRequested()
        assert used.asking_price_cents is None
        assert used.request_quote is True

        used.pricing = Priced(250)
        assert used.asking_price_cents == 250
        assert used.request_quote is False
        assert used.pricing == Priced(250)

    def test_pricing_columns_are_checked_by_database(self, db_session):
        from sqlalchemy.exc import IntegrityError

        used = build_submission()
        used.request_quote = True  # asking_price_cents still set
        db_session.add(used)
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


class TestValidatePayload:

    POLICY = ModelValidationPolicy(
        writable_fields={"title", "price_cents", "featured", "image_urls"},
        required_on_create={"title"},
    )

    def test_rejects_fields_outside_policy(self):
        with pytest.raises(ValidationError, match="Field not allowed: is_refurbished"):
            validate_payload(model=Product, payload={"title": "x", "is_refurbished": True},
                             policy=self.POLICY, partial=False)

    def test_missing_required(self):
        with pytest.raises(ValidationError, match="Missing required fields: title"):
            validate_payload(model=Product, payload={}, policy=self.POLICY, partial=False)

    def test_coerces_types(self):
        patch = validate_payload(
            model=Product,
            payload={"title": "  Lamp ", "price_cents": "1200", "featured": "true", "image_urls": [" a.png "]},
            policy=self.POLICY,
            partial=False,
        )
        assert patch == {"title": "Lamp", "price_cents": 1200, "featured": True, "image_urls": ["a.png"]}

    def test_rejects_decimal_cents(self):
        with pytest.raises(ValidationError):
            validate_payload(model=Product, payload={"price_cents": 12.5}, policy=self.POLICY, partial=True)

    def test_rejects_non_list_images(self):
        with pytest.raises(ValidationError):
            validate_payload(model=Product, payload={"image_urls": "a.png"}, policy=self.POLICY, partial=True)

    def test_max_length(self):
        policy = ModelValidationPolicy(writable_fields={"seller_phone"})
        with pytest.raises(ValidationError, match="exceeds max length"):
            validate_payload(model=UsedProduct, payload={"seller_phone": "1" * 40}, policy=policy, partial=True)


@pytest.mark.parametrize("raw, expected", [
    ("true", True), ("True", True), ("1", True), ("on", True),
    ("false", False), ("0", False), ("", False), (None, False),
])
def test_parse_bool(raw, expected):
    assert parse_bool(raw) is expected
