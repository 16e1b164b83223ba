from urllib.parse import urlparse

from flask import (
    Blueprint,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)
from flask_login import current_user, login_user
from werkzeug.security import check_password_hash

from dashboard import limiter
from dashboard.forms import CSRFOnlyForm, LoginForm
from dashboard.models import User
from dashboard.services.session import end_session, start_session
from dashboard.utils.activity import log_activity

auth = Blueprint("auth", __name__)


def _safe_next(target):
    """Return ``target`` when it is a same-site path, otherwise ``None``."""
    if not target:
        return None
    target = target.replace("\\", "")
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc or not target.startswith("/"):
        return None
    return target


@auth.route("/login", methods=["GET", "POST"])
@limiter.limit("5 per minute")
def login():
    """Authenticate a user and start their session."""
    form = LoginForm()
    next_url = _safe_next(request.args.get("next"))
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data).first()

        if not user or not check_password_hash(user.password, form.password.data):
            flash("Invalid credentials.", "danger")
            return redirect(url_for("auth.login", next=next_url))
        if not user.active:
            flash("Please contact system admin to activate account.", "danger")
            return redirect(url_for("auth.login", next=next_url))

        login_user(user)
        start_session()
        log_activity("Logged in", user.id)
        return redirect(next_url or current_app.config["DASHBOARD_ROOT"])

    return render_template(
        "auth/login.html", form=form, demo=current_app.config["DEMO"]
    )


@auth.route("/dashboard/logout", methods=["POST"])
def logout():
    """Log the current user out."""
    form = CSRFOnlyForm()
    if not form.validate_on_submit():
        return redirect(url_for("main.overview"))
    user_id = current_user.id
    end_session()
    log_activity("Logged out", user_id)
    return redirect(url_for("auth.login"))
