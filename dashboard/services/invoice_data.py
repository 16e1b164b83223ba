"""Read helpers for the invoice pages.

List and overview reads go through the :class:`ReadCoordinator` under the
``"invoices"`` collection and return plain dictionaries so cached values never
hold on to session-bound ORM instances.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import String, cast, func, or_

from dashboard import db
from dashboard.models import Customer, Invoice
from dashboard.services.invoice_actions import INVOICES
from dashboard.services.read_coordinator import get_read_coordinator
from dashboard.utils.pagination import page_count


def _search_filter(query: str):
    pattern = f"%{query}%"
    return or_(
        Customer.name.ilike(pattern),
        Customer.email.ilike(pattern),
        cast(Invoice.amount, String).ilike(pattern),
        cast(Invoice.date, String).ilike(pattern),
        Invoice.status.ilike(pattern),
    )


def _invoice_row(invoice: Invoice, customer: Customer) -> Dict[str, Any]:
    return {
        "id": invoice.id,
        "customer_id": customer.id,
        "name": customer.name,
        "email": customer.email,
        "image_url": customer.image_url,
        "amount": invoice.amount,
        "status": invoice.status,
        "date": invoice.date,
    }


def fetch_filtered_invoices(query: str, page: int, per_page: int) -> List[Dict[str, Any]]:
    """Return one page of invoices matching ``query``, newest first."""

    def load():
        rows = (
            db.session.query(Invoice, Customer)
            .join(Customer, Invoice.customer_id == Customer.id)
            .filter(_search_filter(query))
            .order_by(Invoice.date.desc(), Invoice.id)
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return [_invoice_row(invoice, customer) for invoice, customer in rows]

    return get_read_coordinator().read(INVOICES, ("list", query, page, per_page), load)


def fetch_invoice_pages(query: str, per_page: int) -> int:
    """Return how many pages the search for ``query`` spans."""

    def load():
        count = (
            db.session.query(func.count(Invoice.id))
            .join(Customer, Invoice.customer_id == Customer.id)
            .filter(_search_filter(query))
            .scalar()
        )
        return page_count(count or 0, per_page)

    return get_read_coordinator().read(INVOICES, ("pages", query, per_page), load)


def fetch_card_data() -> Dict[str, int]:
    """Return totals shown on the dashboard overview."""

    def load():
        paid = db.session.query(func.sum(Invoice.amount)).filter(
            Invoice.status == "paid"
        )
        pending = db.session.query(func.sum(Invoice.amount)).filter(
            Invoice.status == "pending"
        )
        return {
            "invoice_count": db.session.query(func.count(Invoice.id)).scalar() or 0,
            "customer_count": db.session.query(func.count(Customer.id)).scalar() or 0,
            "total_paid": paid.scalar() or 0,
            "total_pending": pending.scalar() or 0,
        }

    return get_read_coordinator().read(INVOICES, ("cards",), load)


def fetch_latest_invoices(limit: int = 5) -> List[Dict[str, Any]]:
    def load():
        rows = (
            db.session.query(Invoice, Customer)
            .join(Customer, Invoice.customer_id == Customer.id)
            .order_by(Invoice.date.desc(), Invoice.id)
            .limit(limit)
            .all()
        )
        return [_invoice_row(invoice, customer) for invoice, customer in rows]

    return get_read_coordinator().read(INVOICES, ("latest", limit), load)


def fetch_invoice_by_id(invoice_id: str) -> Optional[Invoice]:
    return db.session.get(Invoice, invoice_id)


def fetch_customers() -> List[Customer]:
    return Customer.query.order_by(Customer.name).all()
