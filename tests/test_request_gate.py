from urllib.parse import parse_qs, urlparse

import pytest
from flask import Flask

from dashboard.services.authorization import AuthConfig
from dashboard.services.request_gate import GateConfig, RequestGate
from dashboard.services.session import SessionInfo
from tests.utils import login


@pytest.mark.parametrize(
    "path, excluded",
    [
        ("/api/health", True),
        ("/static/app.css", True),
        ("/_image/logo", True),
        ("/dashboard/hero.png", True),
        ("/hero-desktop.png", True),
        ("/dashboard", False),
        ("/dashboard/invoices", False),
        ("/login", False),
        ("/dashboard/hero.png.txt", False),
    ],
)
def test_default_exclusions(path, excluded):
    assert GateConfig().is_excluded(path) is excluded


def _gate_app(present, calls):
    app = Flask(__name__)

    def provider():
        calls.append(1)
        return SessionInfo(present=present)

    RequestGate(AuthConfig(), GateConfig(), session_provider=provider).init_app(app)

    @app.route("/dashboard/invoices")
    def invoices():
        return "invoices"

    @app.route("/api/data")
    def data():
        return "data"

    @app.route("/logo.png")
    def logo():
        return "png"

    @app.route("/login")
    def login_page():
        return "login"

    return app


@pytest.mark.parametrize("present", [True, False])
@pytest.mark.parametrize("path, body", [("/api/data", b"data"), ("/logo.png", b"png")])
def test_excluded_paths_skip_the_session_check(present, path, body):
    calls = []
    client = _gate_app(present, calls).test_client()

    response = client.get(path)

    assert response.status_code == 200
    assert response.data == body
    assert calls == []


def test_denied_request_never_reaches_view():
    calls = []
    app = _gate_app(False, calls)
    reached = []
    app.view_functions["invoices"] = lambda: reached.append(1) or "invoices"

    response = app.test_client().get("/dashboard/invoices?query=paid")

    assert response.status_code == 302
    location = urlparse(response.headers["Location"])
    assert location.path == "/login"
    assert parse_qs(location.query) == {"next": ["/dashboard/invoices?query=paid"]}
    assert reached == []
    assert calls == [1]


def test_signed_in_user_is_sent_from_login_to_dashboard():
    response = _gate_app(True, []).test_client().get("/login")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/dashboard")


def test_anonymous_request_is_redirected_to_login(client):
    response = client.get("/dashboard/invoices")
    assert response.status_code == 302
    assert urlparse(response.headers["Location"]).path == "/login"


def test_unknown_protected_path_still_redirects(client):
    response = client.get("/dashboard/does-not-exist")
    assert response.status_code == 302


def test_excluded_path_is_not_redirected_for_anonymous_user(client):
    assert client.get("/api/health").status_code == 200
    assert client.get("/dashboard/logo.png").status_code == 404


def test_public_pages_for_anonymous_user(client):
    assert client.get("/").status_code == 200
    assert client.get("/login").status_code == 200


def test_signed_in_user_is_redirected_away_from_public_pages(client, user):
    login(client, user["email"], user["password"])

    for path in ("/", "/login"):
        response = client.get(path)
        assert response.status_code == 302
        assert urlparse(response.headers["Location"]).path == "/dashboard"
    assert client.get("/dashboard").status_code == 200


def test_gate_reads_configuration_from_app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "testsecret")
    monkeypatch.setenv("ADMIN_PASS", "adminpass")
    monkeypatch.setenv("RATELIMIT_ENABLED", "0")
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "gate.db"))
    monkeypatch.setenv("GATE_EXCLUDED_SUFFIXES", ".png, .svg")

    from dashboard import create_app

    app = create_app(["--demo"])
    gate = app.extensions["request_gate"]

    assert gate.gate_config.excluded_suffixes == (".png", ".svg")
    assert gate.auth_config.protected_prefix == "/dashboard"