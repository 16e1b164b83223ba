"""Persistence of invoice rows.

Each store call runs one parameterised statement inside a write scope that
commits on success and rolls back on failure.  Database failures are
reported as :class:`PersistenceError` with a generic message so storage
details never reach the user.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import date
from typing import Iterator, Protocol

from sqlalchemy import delete, insert, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dashboard.models import Invoice

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when the storage layer fails to apply a write."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Database Error: Failed to {action} Invoice.")


class InvoiceStore(Protocol):
    def insert(
        self, customer_id: str, amount_cents: int, status: str, issued_on: date
    ) -> str: ...

    def update(
        self, invoice_id: str, customer_id: str, amount_cents: int, status: str
    ) -> int: ...

    def delete(self, invoice_id: str) -> int: ...


class SqlInvoiceStore:
    """:class:`InvoiceStore` backed by a SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    @contextmanager
    def _write(self, action: str) -> Iterator[Session]:
        try:
            yield self.session
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Invoice %s failed: %s", action.lower(), exc)
            raise PersistenceError(action) from exc

    def insert(
        self, customer_id: str, amount_cents: int, status: str, issued_on: date
    ) -> str:
        invoice_id = str(uuid.uuid4())
        with self._write("Create") as session:
            session.execute(
                insert(Invoice).values(
                    id=invoice_id,
                    customer_id=customer_id,
                    amount=amount_cents,
                    status=status,
                    date=issued_on,
                )
            )
        return invoice_id

    def update(
        self, invoice_id: str, customer_id: str, amount_cents: int, status: str
    ) -> int:
        with self._write("Update") as session:
            result = session.execute(
                update(Invoice)
                .where(Invoice.id == invoice_id)
                .values(customer_id=customer_id, amount=amount_cents, status=status)
            )
            affected = result.rowcount
        return affected

    def delete(self, invoice_id: str) -> int:
        with self._write("Delete") as session:
            result = session.execute(delete(Invoice).where(Invoice.id == invoice_id))
            affected = result.rowcount
        return affected
