# Overview: Flask API routes for customer operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..components import get_components
from ..decorators import require_auth
from ..services import customer_service
from ..validation import NotFoundError, StorageError, ValidationError, customer_input_from_payload, json_object


customers_bp = Blueprint("customers", __name__, url_prefix="/customers")


@customers_bp.post("")
@require_auth
def create_customer_route():
    """
    Request body:
    {
        "name": "Acme",
        "contact": "555-0100",
        "outstandingAmount": 500,
        "dueDate": "2020-01-01",
        "paymentStatus": "Pending"   (optional, defaults to Pending)
    }
    """
    components = get_components()
    try:
        data = json_object(request.get_json(silent=True))
        customer = customer_service.create_customer(
            components.storage,
            components.emitter,
            customer_input_from_payload(data),
        )
        return jsonify({"message": "Customer added successfully", "id": customer.id})
    except ValidationError as e:
        return jsonify({"message": str(e)}), 400
    except StorageError as e:
        current_app.logger.exception("Customer add failed")
        return jsonify({"message": "Failed to add customer", "error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Customer add failed")
        return jsonify({"message": "Failed to add customer"}), 500


@customers_bp.get("")
@require_auth
def list_customers_route():
    try:
        customers = customer_service.list_customers(get_components().storage)
        return jsonify([c.to_dict() for c in customers])
    except StorageError as e:
        current_app.logger.exception("Customer list failed")
        return jsonify({"message": "Error fetching customers", "error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Customer list failed")
        return jsonify({"message": "Error fetching customers"}), 500


@customers_bp.get("/<int:customer_id>")
@require_auth
def get_customer_route(customer_id: int):
    try:
        customer = customer_service.get_customer(get_components().storage, customer_id)
        return jsonify(customer.to_dict())
    except NotFoundError as e:
        return jsonify({"message": str(e)}), 404
    except StorageError as e:
        current_app.logger.exception("Customer fetch failed")
        return jsonify({"message": "Error fetching customer", "error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Customer fetch failed")
        return jsonify({"message": "Error fetching customer"}), 500


@customers_bp.put("/<int:customer_id>")
@require_auth
def update_customer_route(customer_id: int):
    """Only the name can be changed."""
    try:
        data = json_object(request.get_json(silent=True))
        customer_service.update_customer_name(get_components().storage, customer_id, data.get("name"))
        return jsonify({"message": "Customer name updated successfully"})
    except ValidationError as e:
        return jsonify({"message": str(e)}), 400
    except StorageError as e:
        current_app.logger.exception("Error updating customer")
        return jsonify({"message": "Internal server error", "error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Error updating customer")
        return jsonify({"message": "Internal server error"}), 500


@customers_bp.delete("/<int:customer_id>")
@require_auth
def delete_customer_route(customer_id: int):
    try:
        customer_service.delete_customer(get_components().storage, customer_id)
        return jsonify({"message": "Customer deleted successfully"})
    except StorageError as e:
        current_app.logger.exception("Error deleting customer")
        return jsonify({"message": "Error deleting customer", "error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Error deleting customer")
        return jsonify({"message": "Error deleting customer"}), 500
