import sqlite3
import uuid
from datetime import datetime

from flask_login import UserMixin
from sqlalchemy import CheckConstraint, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import relationship

from dashboard import db

INVOICE_STATUSES = ("pending", "paid")


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores foreign keys unless asked on every connection."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _new_uuid() -> str:
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, default="")
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    active = db.Column(db.Boolean, default=False, nullable=False)


class Customer(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_new_uuid)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    image_url = db.Column(db.String(255))

    invoices = db.relationship("Invoice", backref="customer", lazy=True)


class Invoice(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_new_uuid)
    customer_id = db.Column(
        db.String(36), db.ForeignKey("customer.id"), nullable=False, index=True
    )
    # Stored in cents
    amount = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(10), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_invoice_amount_positive"),
        CheckConstraint(
            "status IN ('pending', 'paid')", name="ck_invoice_status"
        ),
    )


class ActivityLog(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)
    activity = db.Column(db.String(255), nullable=False)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", backref="activity_logs")
