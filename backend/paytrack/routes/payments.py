# Overview: Flask API routes for payments operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..components import get_components
from ..decorators import require_auth
from ..services import payment_service
from ..validation import NotFoundError, StorageError, ValidationError, json_object


payments_bp = Blueprint("payments", __name__, url_prefix="/payments")


@payments_bp.post("")
@require_auth
def record_payment_route():
    """
    Record money received and mark the customer Completed.

    Request body:
    {
        "customerId": 1,
        "amount": 500
    }

    Returns:
        200: {"message": "Payment processed successfully", "payment": {...}}
        400: Invalid input
        404: Unknown customer
        500: Database error
    """
    components = get_components()
    try:
        data = json_object(request.get_json(silent=True))
        payment = payment_service.record_payment(
            components.storage,
            components.emitter,
            data.get("customerId"),
            data.get("amount"),
        )
        return jsonify({"message": "Payment processed successfully", "payment": payment.to_dict()})
    except ValidationError as e:
        return jsonify({"message": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"message": str(e)}), 404
    except StorageError as e:
        current_app.logger.exception("Payment processing failed")
        return jsonify({"message": "Payment processing failed", "error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Payment processing failed")
        return jsonify({"message": "Payment processing failed"}), 500
