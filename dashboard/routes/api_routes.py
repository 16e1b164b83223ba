from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from dashboard import db

api = Blueprint("api", __name__)


@api.route("/health")
def health():
    """Report whether the app can reach its database."""
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("Health check failed")
        return jsonify({"status": "error"}), 503
    return jsonify({"status": "ok"})
