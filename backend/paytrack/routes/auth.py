# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..components import get_components
from ..services import auth_service
from ..validation import AuthError, StorageError, ValidationError, json_object


auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register_route():
    """
    Create a user account.

    Request body: {"name": ..., "email": ..., "password": ...}

    Returns:
        200: {"message": "User registered successfully"}
        400: Missing field
        500: Database error (duplicate email included)
    """
    try:
        data = json_object(request.get_json(silent=True))
        auth_service.register_user(
            get_components().storage,
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
        )
        return jsonify({"message": "User registered successfully"})
    except ValidationError as e:
        return jsonify({"message": str(e)}), 400
    except StorageError as e:
        current_app.logger.exception("Registration failed")
        return jsonify({"message": "Registration failed", "error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to register user")
        return jsonify({"message": "Internal server error"}), 500


@auth_bp.post("/login")
def login_route():
    """
    Exchange email and password for a bearer token.

    Returns:
        200: {"token": "<jwt>"}
        401: Invalid credentials
        500: Database error
    """
    try:
        data = json_object(request.get_json(silent=True))
        token = auth_service.login(get_components().storage, data.get("email"), data.get("password"))
        return jsonify({"token": token})
    except AuthError as e:
        return jsonify({"message": str(e)}), 401
    except ValidationError as e:
        return jsonify({"message": str(e)}), 400
    except StorageError as e:
        current_app.logger.exception("Login failed")
        return jsonify({"message": "Login failed", "error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"message": "Internal server error"}), 500
