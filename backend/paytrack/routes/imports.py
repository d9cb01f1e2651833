# Overview: Flask API routes for bulk customer import; parses uploads and returns JSON responses.

"""
Import Routes

Supports Excel (.xlsx) and CSV uploads as multipart field "file".
"""

from flask import Blueprint, request, jsonify, current_app

from ..components import get_components
from ..decorators import require_auth
from ..services import import_service
from ..services.import_service import ImportRowError
from ..validation import ImportFileError, StorageError


imports_bp = Blueprint("imports", __name__)


@imports_bp.post("/upload-customers")
@require_auth
def upload_customers_route():
    if "file" not in request.files or not request.files["file"].filename:
        return jsonify({"message": "No file uploaded"}), 400

    file = request.files["file"]
    try:
        rows = import_service.parse_upload(file.filename, file.stream)
    except ImportFileError as e:
        return jsonify({"message": str(e)}), 400

    try:
        created = import_service.import_customers(get_components().storage, rows)
        return jsonify({
            "message": "Customers imported successfully",
            "imported": len(created),
        })
    except (ImportRowError, StorageError) as e:
        current_app.logger.exception("Customer import failed")
        return jsonify({"message": "Failed to import customers", "error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Customer import failed")
        return jsonify({"message": "Failed to import customers"}), 500
