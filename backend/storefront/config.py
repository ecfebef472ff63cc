# backend/storefront/config.py
from __future__ import annotations
import os


def _default_server_url() -> str:
    if os.environ.get("APP_ENV") == "production" and os.environ.get("PRODUCTION_URL"):
        return os.environ["PRODUCTION_URL"]
    port = os.environ.get("PORT", "5000")
    return f"http://localhost:{port}"


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/storefront.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///storefront.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Base location used to qualify relative image references
    SERVER_URL = os.environ.get("SERVER_URL") or _default_server_url()

    # Local media: files under UPLOAD_FOLDER are owned (and deleted) by this server.
    # Stored references look like "uploads/used-products/<file>".
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "uploads")
    LOCAL_MEDIA_PREFIX = "uploads/"
    ALLOWED_IMAGE_EXTENSIONS = {"jpeg", "jpg", "png", "webp"}
    MAX_UPLOAD_IMAGES = 5
    MAX_IMAGE_BYTES = 10_000_000
    MAX_CONTENT_LENGTH = MAX_UPLOAD_IMAGES * MAX_IMAGE_BYTES + 1_000_000

    # When unset, admin routes are open (local development only)
    ADMIN_API_TOKEN = os.environ.get("ADMIN_API_TOKEN")

    CORS_ORIGINS = set(
        filter(None, os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174",
        ).split(","))
    )

    # Review workflows retry lock/deadlock failures this many times
    REVIEW_COMMIT_ATTEMPTS = 3

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
