from __future__ import annotations

from flask import Blueprint, jsonify, request, current_app

from ..components import get_components
from ..decorators import require_auth
from ..services import notification_service
from ..validation import StorageError

notifications_bp = Blueprint("notifications", __name__, url_prefix="/notifications")


@notifications_bp.get("")
@require_auth
def list_notifications_route():
    limit = request.args.get("limit", type=int)
    try:
        notifications = notification_service.list_notifications(get_components().storage, limit=limit)
        return jsonify([n.to_dict() for n in notifications])
    except StorageError as e:
        current_app.logger.exception("Notification fetch failed")
        return jsonify({"message": "Failed to fetch notifications", "error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Notification fetch failed")
        return jsonify({"message": "Failed to fetch notifications"}), 500
