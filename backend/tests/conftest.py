"""
Pytest fixtures for storefront backend tests.

Provides the test application (in-memory SQLite, temp upload folder),
a per-test clean database, and submission/product factories.
"""

import shutil

import pytest
from storefront import create_app
from storefront.extensions import db
from storefront.models import Priced, Product, SellerInfo, UsedProduct


SERVER_URL = "http://testserver:5000"


@pytest.fixture(scope='session')
def upload_dir(tmp_path_factory):
    return tmp_path_factory.mktemp("uploads")


@pytest.fixture(scope='session')
def app(upload_dir):
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SERVER_URL': SERVER_URL,
        'UPLOAD_FOLDER': str(upload_dir),
        'ADMIN_API_TOKEN': None,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app, upload_dir):
    """Create fresh database (and empty upload folder) for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        for child in upload_dir.iterdir():
            if child.is_dir():
                shutil.rmtree(child)
            else:
                child.unlink()

        yield db.session

        # Cleanup after test
        db.session.rollback()


def build_submission(**overrides) -> UsedProduct:
    pricing = overrides.pop("pricing", Priced(15000))
    seller = overrides.pop("seller", SellerInfo("Jordan Reyes", "jordan@example.com", "+1 555 0100"))
    values = {
        "title": "Used Stereo Amplifier",
        "description": "2x50W, remote included.",
        "category": "electronics",
        "condition": "Good",
        "images": ["https://res.cloudinary.com/demo/image/upload/amp.jpg"],
        "status": "pending",
    }
    values.update(overrides)
    used = UsedProduct(**values)
    used.pricing = pricing
    used.seller = seller
    return used


@pytest.fixture(scope='function')
def make_submission(db_session):
    """Factory: persist a pending submission and return it."""
    def _make(**overrides) -> UsedProduct:
        used = build_submission(**overrides)
        db_session.add(used)
        db_session.commit()
        return used
    return _make


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: persist a plain (non-refurbished) catalog product."""
    def _make(**overrides) -> Product:
        values = {
            "title": "Smart Plug",
            "description": "Wi-Fi plug with energy monitoring.",
            "category": "electronics",
            "price_cents": 1999,
            "stock": 10,
            "image_urls": [f"{SERVER_URL}/uploads/products/plug.png"],
        }
        values.update(overrides)
        product = Product(**values)
        db_session.add(product)
        db_session.commit()
        return product
    return _make


def write_upload(upload_dir, name: str = "used-product-1-1.png") -> str:
    """Create a local media file and return its stored reference."""
    target = upload_dir / "used-products"
    target.mkdir(parents=True, exist_ok=True)
    (target / name).write_bytes(b"\x89PNG fake image bytes")
    return f"uploads/used-products/{name}"


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
