from flask import Blueprint, render_template

from dashboard.services.invoice_data import fetch_card_data, fetch_latest_invoices

main = Blueprint("main", __name__)


@main.route("/")
def home():
    """Public landing page."""
    return render_template("home.html")


@main.route("/dashboard")
def overview():
    """Render the dashboard cards and latest invoices."""
    return render_template(
        "dashboard/overview.html",
        cards=fetch_card_data(),
        latest_invoices=fetch_latest_invoices(),
    )
