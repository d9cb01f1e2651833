# Overview: Service-layer operations for payments; records money received.

"""
Payment Service

Recording a payment inserts one payments row and marks the customer
"Completed" in a single transaction, then emits "payment_received".
"""

from __future__ import annotations

from ..models import Customer, Payment, NOTIFICATION_PAYMENT_RECEIVED, STATUS_COMPLETED
from ..validation import NotFoundError, coerce_amount, coerce_id, is_storable_id
from paytrack.time_utils import utcnow
from .notification_service import NotificationEmitter
from .storage import Storage


def format_amount(amount: float) -> str:
    """Render the amount as submitted: 500 -> "500", 1250.5 -> "1250.5"."""
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def payment_received_message(customer_id: int, amount: float) -> str:
    return f"Payment of ${format_amount(amount)} received for Customer ID {customer_id}"


def record_payment(storage: Storage, emitter: NotificationEmitter, customer_id, amount) -> Payment:
    customer_id = coerce_id(customer_id, "customerId")
    amount = coerce_amount(amount, "amount", positive=True)

    if not is_storable_id(customer_id):
        raise NotFoundError("Customer not found")

    with storage.transaction() as session:
        customer = session.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")

        payment = Payment(customer_id=customer_id, amount=amount, payment_date=utcnow())
        session.add(payment)
        customer.payment_status = STATUS_COMPLETED

    emitter.emit(NOTIFICATION_PAYMENT_RECEIVED, payment_received_message(customer_id, amount))
    return payment
