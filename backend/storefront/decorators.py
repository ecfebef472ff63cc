# Overview: Request decorators for API routes.

import secrets
from functools import wraps
from flask import current_app, jsonify, request


def require_admin(f):
    """
    Require the back-office bearer token.

    SECURITY: Returns 401 if ADMIN_API_TOKEN is configured and the request
    does not carry "Authorization: Bearer <token>" with a matching value.
    With no token configured (local development) the route is open.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = current_app.config.get("ADMIN_API_TOKEN")
        if not expected:
            return f(*args, **kwargs)

        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1]
        if not secrets.compare_digest(token.encode(), expected.encode()):
            current_app.logger.warning(
                "Rejected admin token for %s %s from %s", request.method, request.path, request.remote_addr
            )
            return jsonify({"error": "Invalid or expired token"}), 401

        return f(*args, **kwargs)

    return decorated_function
