# backend/paytrack/models.py
from __future__ import annotations
from .extensions import db
from paytrack.time_utils import to_utc_z, utcnow


STATUS_PENDING = "Pending"
STATUS_COMPLETED = "Completed"

NOTIFICATION_CUSTOMER_ADDED = "customer_added"
NOTIFICATION_PAYMENT_RECEIVED = "payment_received"
NOTIFICATION_PAYMENT_OVERDUE = "payment_overdue"
NOTIFICATION_TYPES = {
    NOTIFICATION_CUSTOMER_ADDED,
    NOTIFICATION_PAYMENT_RECEIVED,
    NOTIFICATION_PAYMENT_OVERDUE,
}


def _amount(value) -> float | None:
    return float(value) if value is not None else None


class User(db.Model):
    """
    Login identity. Created at registration, read at login.

    The password column only ever holds a bcrypt hash.
    """
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password = db.Column(db.String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
        }


class Customer(db.Model):
    """
    A customer with one outstanding balance to collect.

    paymentStatus is free text; "Pending" and "Completed" are the two values
    the application itself writes and queries for.
    """
    __tablename__ = "customers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    contact = db.Column(db.String(255), nullable=True)
    outstanding_amount = db.Column("outstandingAmount", db.Numeric(12, 2, asdecimal=False), nullable=False)
    due_date = db.Column("dueDate", db.Date, nullable=False, index=True)
    payment_status = db.Column("paymentStatus", db.String(64), nullable=False, default=STATUS_PENDING)

    payments = db.relationship("Payment", back_populates="customer", lazy=True)

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.name!r} status={self.payment_status!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "contact": self.contact,
            "outstandingAmount": _amount(self.outstanding_amount),
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "paymentStatus": self.payment_status,
        }


class Payment(db.Model):
    """Immutable record of money received from a customer."""
    __tablename__ = "payments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column("customerId", db.Integer, db.ForeignKey("customers.id"), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=False)
    payment_date = db.Column("paymentDate", db.DateTime, nullable=False, default=utcnow)

    customer = db.relationship("Customer", back_populates="payments")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "amount": _amount(self.amount),
            "paymentDate": to_utc_z(self.payment_date),
        }


class Notification(db.Model):
    """Append-only log of every event pushed over the realtime channel."""
    __tablename__ = "notifications"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(64), nullable=False)
    message = db.Column(db.Text, nullable=False)
    created_at = db.Column("createdAt", db.DateTime, nullable=False, default=utcnow, index=True)

    def __repr__(self) -> str:
        return f"<Notification id={self.id} type={self.type!r}>"

    def payload(self) -> dict:
        """Shape pushed to realtime subscribers."""
        return {"type": self.type, "message": self.message}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "message": self.message,
            "createdAt": to_utc_z(self.created_at),
        }
