# Overview: Service-layer operations for customers; encapsulates business logic and database work.

from __future__ import annotations

import logging

from sqlalchemy import delete, select, update

from ..models import Customer, NOTIFICATION_CUSTOMER_ADDED
from ..validation import CustomerInput, NotFoundError, ValidationError, is_storable_id
from .notification_service import NotificationEmitter
from .storage import Storage


logger = logging.getLogger(__name__)


def build_customer(data: CustomerInput) -> Customer:
    return Customer(
        name=data.name,
        contact=data.contact,
        outstanding_amount=data.outstanding_amount,
        due_date=data.due_date,
        payment_status=data.payment_status,
    )


def create_customer(storage: Storage, emitter: NotificationEmitter, data: CustomerInput) -> Customer:
    customer = build_customer(data)
    with storage.transaction() as session:
        session.add(customer)

    emitter.emit(NOTIFICATION_CUSTOMER_ADDED, f"New customer {customer.name} added successfully")
    return customer


def list_customers(storage: Storage) -> list[Customer]:
    return storage.scalars(select(Customer).order_by(Customer.id))


def get_customer(storage: Storage, customer_id: int) -> Customer:
    customer = storage.get(Customer, customer_id)
    if customer is None:
        raise NotFoundError("Customer not found")
    return customer


def update_customer_name(storage: Storage, customer_id: int, name: str | None) -> int:
    """
    Rename a customer. Only the name is editable.

    Returns the affected-row count; an unknown id is not an error.
    """
    if not name or not str(name).strip():
        raise ValidationError("Name is required")
    if not is_storable_id(customer_id):
        return 0
    stmt = update(Customer).where(Customer.id == customer_id).values(name=str(name).strip())
    return storage.execute(stmt)


def delete_customer(storage: Storage, customer_id: int) -> int:
    """
    Delete a customer. Deleting an unknown id succeeds with a count of 0.

    Customers with recorded payments are protected by the foreign key and
    the attempt surfaces as StorageError.
    """
    if not is_storable_id(customer_id):
        return 0
    count = storage.execute(delete(Customer).where(Customer.id == customer_id))
    if count:
        logger.info("Deleted customer %s", customer_id)
    return count
