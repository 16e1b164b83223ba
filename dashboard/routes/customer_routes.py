from flask import Blueprint, render_template, request
from sqlalchemy import func

from dashboard import db
from dashboard.models import Customer, Invoice

customer = Blueprint("customer", __name__)


@customer.route("/dashboard/customers")
def view_customers():
    """Display customers with their invoice totals."""
    name_query = request.args.get("query", "")
    query = (
        db.session.query(
            Customer,
            func.count(Invoice.id),
            func.coalesce(
                func.sum(Invoice.amount).filter(Invoice.status == "pending"), 0
            ),
            func.coalesce(
                func.sum(Invoice.amount).filter(Invoice.status == "paid"), 0
            ),
        )
        .outerjoin(Invoice, Invoice.customer_id == Customer.id)
        .group_by(Customer.id)
        .order_by(Customer.name)
    )
    if name_query:
        query = query.filter(
            Customer.name.ilike(f"%{name_query}%")
            | Customer.email.ilike(f"%{name_query}%")
        )
    customers = [
        {
            "customer": row[0],
            "total_invoices": row[1],
            "total_pending": row[2],
            "total_paid": row[3],
        }
        for row in query.all()
    ]
    return render_template(
        "customers/view_customers.html",
        customers=customers,
        query=name_query,
    )
