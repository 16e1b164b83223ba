from flask import (
    Blueprint,
    abort,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)

from dashboard import db
from dashboard.forms import DeleteForm
from dashboard.services.invoice_actions import (
    FormState,
    InvoiceActions,
    Redirect,
)
from dashboard.services.invoice_data import (
    fetch_customers,
    fetch_filtered_invoices,
    fetch_invoice_by_id,
    fetch_invoice_pages,
)
from dashboard.services.invoice_store import SqlInvoiceStore
from dashboard.services.read_coordinator import get_read_coordinator
from dashboard.utils.activity import log_activity
from dashboard.utils.numeric import from_minor_units
from dashboard.utils.pagination import link_args, page_request

invoice = Blueprint("invoice", __name__)


def _actions() -> InvoiceActions:
    return InvoiceActions(
        SqlInvoiceStore(db.session),
        get_read_coordinator(),
        listing_path=url_for("invoice.view_invoices"),
    )


def _render_form(title, action_url, values, state=None):
    return render_template(
        "invoices/invoice_form.html",
        title=title,
        action_url=action_url,
        customers=fetch_customers(),
        values=values,
        state=state or FormState(),
    )


@invoice.route("/dashboard/invoices")
def view_invoices():
    """List invoices matching the search query."""
    query = request.args.get("query", "")
    paging = page_request()
    total_pages = fetch_invoice_pages(query, paging.per_page)
    # Pages past the end show the last page.
    page = min(paging.page, total_pages)
    return render_template(
        "invoices/view_invoices.html",
        invoices=fetch_filtered_invoices(query, page, paging.per_page),
        query=query,
        page=page,
        total_pages=total_pages,
        link_args=link_args(paging.per_page),
        delete_form=DeleteForm(),
    )


@invoice.route("/dashboard/invoices/create", methods=["GET", "POST"])
def create_invoice():
    """Create an invoice."""
    action_url = url_for("invoice.create_invoice")
    if request.method == "GET":
        return _render_form("Create Invoice", action_url, {})

    outcome = _actions().create(request.form)
    if isinstance(outcome, Redirect):
        log_activity(f"Created invoice {outcome.record_id}")
        flash("Invoice created successfully!", "success")
        return redirect(outcome.to)
    return _render_form("Create Invoice", action_url, request.form, outcome.state)


@invoice.route("/dashboard/invoices/<invoice_id>/edit", methods=["GET", "POST"])
def edit_invoice(invoice_id):
    """Edit an invoice's customer, amount and status."""
    action_url = url_for("invoice.edit_invoice", invoice_id=invoice_id)
    if request.method == "GET":
        record = fetch_invoice_by_id(invoice_id)
        if record is None:
            abort(404)
        values = {
            "customerId": record.customer_id,
            "amount": str(from_minor_units(record.amount)),
            "status": record.status,
        }
        return _render_form("Edit Invoice", action_url, values)

    outcome = _actions().update(invoice_id, request.form)
    if isinstance(outcome, Redirect):
        log_activity(f"Edited invoice {invoice_id}")
        flash("Invoice updated successfully!", "success")
        return redirect(outcome.to)
    return _render_form("Edit Invoice", action_url, request.form, outcome.state)


@invoice.route("/dashboard/invoices/<invoice_id>/delete", methods=["POST"])
def delete_invoice(invoice_id):
    """Delete an invoice."""
    form = DeleteForm()
    if not form.validate_on_submit():
        abort(400)
    outcome = _actions().delete(invoice_id)
    if isinstance(outcome, Redirect):
        log_activity(f"Deleted invoice {invoice_id}")
        flash("Invoice deleted successfully!", "success")
        return redirect(outcome.to)
    current_app.logger.warning("Delete of invoice %s failed", invoice_id)
    flash(outcome.message, "danger")
    return redirect(url_for("invoice.view_invoices"))
