import os
import secrets
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, Response, g, render_template, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect
from flask_wtf.csrf import CSRFError
from werkzeug.security import generate_password_hash

load_dotenv()
db = SQLAlchemy()
migrate = Migrate()
csrf = CSRFProtect()
login_manager = LoginManager()
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("RATELIMIT_STORAGE_URI", "memory://"),
)

CSP = (
    "default-src 'self'; img-src 'self' data:; "
    "style-src 'self' https://cdn.jsdelivr.net; "
    "script-src 'self' 'nonce-{nonce}'; "
    "form-action 'self'; frame-ancestors 'none'; object-src 'none'"
)
NAV_LINKS = {
    "main.overview": "Home",
    "invoice.view_invoices": "Invoices",
    "customer.view_customers": "Customers",
}


def _get_bool_env(var_name: str, default: bool = False) -> bool:
    value = os.getenv(var_name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list_env(var_name: str, default: tuple) -> tuple:
    """Split a comma separated environment variable into a tuple."""
    value = os.getenv(var_name)
    if value is None:
        return default
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _database_uri() -> str:
    # DATABASE_PATH may name the SQLite file or the directory holding it.
    path = os.getenv("DATABASE_PATH", os.path.join(os.getcwd(), "dashboard.db"))
    if os.path.isdir(path):
        path = os.path.join(path, "dashboard.db")
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return f"sqlite:///{path}"


@login_manager.user_loader
def load_user(user_id):
    from dashboard.models import User

    return db.session.get(User, int(user_id))


def create_admin_user():
    """Create the admin account from ``ADMIN_EMAIL``/``ADMIN_PASS`` if missing."""
    from dashboard.models import User

    if User.query.filter_by(is_admin=True).first() is not None:
        return
    password = os.getenv("ADMIN_PASS")
    if password is None:
        raise RuntimeError("ADMIN_PASS environment variable not set")
    db.session.add(
        User(
            name="Admin",
            email=os.getenv("ADMIN_EMAIL"),
            password=generate_password_hash(password),
            is_admin=True,
            active=True,
        )
    )
    db.session.commit()
    print("Admin user created.")


def _configure(app, args):
    demo = "--demo" in args
    secure_cookies = _get_bool_env("SESSION_COOKIE_SECURE", default=not demo)
    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY"),
        SQLALCHEMY_DATABASE_URI=_database_uri(),
        ENFORCE_HTTPS=_get_bool_env("ENFORCE_HTTPS"),
        SESSION_COOKIE_SECURE=secure_cookies,
        REMEMBER_COOKIE_SECURE=secure_cookies,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        PERMANENT_SESSION_LIFETIME=timedelta(
            minutes=int(os.getenv("SESSION_LIFETIME_MINUTES", "30"))
        ),
        RATELIMIT_ENABLED=_get_bool_env("RATELIMIT_ENABLED", default=True),
        DEMO=demo,
        READ_CACHE_MAX_ENTRIES=int(os.getenv("READ_CACHE_MAX_ENTRIES", "256")),
        # Route access rules, handed to the request gate as config objects.
        PROTECTED_PREFIX=os.getenv("PROTECTED_PREFIX", "/dashboard"),
        LOGIN_PATH=os.getenv("LOGIN_PATH", "/login"),
        DASHBOARD_ROOT=os.getenv("DASHBOARD_ROOT", "/dashboard"),
        GATE_EXCLUDED_PREFIXES=_get_list_env(
            "GATE_EXCLUDED_PREFIXES", ("/api", "/static", "/_image")
        ),
        GATE_EXCLUDED_SUFFIXES=_get_list_env("GATE_EXCLUDED_SUFFIXES", (".png",)),
    )


def _install_gate(app):
    from dashboard.services.authorization import AuthConfig
    from dashboard.services.read_coordinator import ReadCoordinator
    from dashboard.services.request_gate import GateConfig, RequestGate

    app.extensions["read_coordinator"] = ReadCoordinator(
        max_entries=app.config["READ_CACHE_MAX_ENTRIES"]
    )
    RequestGate(
        AuthConfig(
            protected_prefix=app.config["PROTECTED_PREFIX"],
            login_path=app.config["LOGIN_PATH"],
            dashboard_root=app.config["DASHBOARD_ROOT"],
        ),
        GateConfig(
            excluded_prefixes=app.config["GATE_EXCLUDED_PREFIXES"],
            excluded_suffixes=app.config["GATE_EXCLUDED_SUFFIXES"],
        ),
    ).init_app(app)


def _install_security_hooks(app):
    @app.before_request
    def reject_options():
        if request.method == "OPTIONS":
            return Response(status=405)

    @app.before_request
    def set_csp_nonce():
        g.csp_nonce = secrets.token_urlsafe(16)

    @app.after_request
    def security_headers(response):
        nonce = getattr(g, "csp_nonce", None) or secrets.token_urlsafe(16)
        headers = response.headers
        headers.setdefault("X-Content-Type-Options", "nosniff")
        headers.setdefault("Referrer-Policy", "same-origin")
        headers.setdefault(
            "Content-Security-Policy",
            app.config.get("CONTENT_SECURITY_POLICY", CSP).replace("{nonce}", nonce),
        )
        if app.config["ENFORCE_HTTPS"] or request.is_secure:
            headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response

    @app.errorhandler(CSRFError)
    def csrf_failed(error):
        return render_template("errors/csrf_error.html", reason=error.description), 400

    @app.errorhandler(404)
    def not_found(error):
        return render_template("errors/404.html"), 404

    @app.errorhandler(500)
    def server_error(error):
        db.session.rollback()
        return render_template("errors/500.html"), 500


def _register_blueprints(app):
    from dashboard.routes.api_routes import api
    from dashboard.routes.auth_routes import auth
    from dashboard.routes.customer_routes import customer
    from dashboard.routes.invoice_routes import invoice
    from dashboard.routes.main_routes import main

    for blueprint in (main, auth, invoice, customer):
        app.register_blueprint(blueprint)
    app.register_blueprint(api, url_prefix="/api")


def create_app(args: list):
    """Application factory used by Flask."""
    app = Flask(__name__)
    _configure(app, args)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    # The gate runs ahead of every other before_request hook.
    _install_gate(app)
    csrf.init_app(app)
    limiter.init_app(app)
    _install_security_hooks(app)

    @app.context_processor
    def template_globals():
        return {"NAV_LINKS": NAV_LINKS, "csp_nonce": getattr(g, "csp_nonce", "")}

    @app.template_filter("currency")
    def currency(cents):
        """Format an amount in cents as dollars."""
        if cents is None:
            return ""
        return f"${cents / 100:,.2f}"

    with app.app_context():
        from dashboard import models  # noqa: F401

        # Tables exist even before migrations have been applied.
        db.create_all()
        _register_blueprints(app)

    return app
