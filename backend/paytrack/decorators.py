# Overview: Request decorators for API routes.

from functools import wraps

from flask import current_app, g, jsonify
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException, NoAuthorizationError
from jwt.exceptions import PyJWTError

from .components import get_components
from .models import User
from .validation import StorageError


def require_auth(f):
    """
    Require a valid JWT when API_AUTH_REQUIRED is on.

    Sets g.current_user to the authenticated User. With the flag off the
    route is public and g.current_user is None.

    Returns 401 if:
    - No Authorization header
    - Malformed, badly signed or expired token
    - Token subject no longer exists
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.current_user = None
        if not current_app.config.get("API_AUTH_REQUIRED"):
            return f(*args, **kwargs)

        try:
            verify_jwt_in_request()
        except NoAuthorizationError:
            return jsonify({"message": "Authentication required"}), 401
        except (JWTExtendedException, PyJWTError):
            return jsonify({"message": "Invalid or expired token"}), 401

        try:
            user_id = int(get_jwt_identity())
        except (TypeError, ValueError):
            return jsonify({"message": "Invalid or expired token"}), 401

        try:
            user = get_components().storage.get(User, user_id)
        except StorageError as e:
            current_app.logger.exception("Failed to load token subject")
            return jsonify({"message": "Authentication failed", "error": str(e)}), 500

        if user is None:
            return jsonify({"message": "Invalid or expired token"}), 401

        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function
