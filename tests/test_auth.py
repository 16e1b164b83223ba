from datetime import datetime, timedelta
from urllib.parse import urlparse

from werkzeug.security import generate_password_hash

from dashboard import db
from dashboard.models import ActivityLog, User
from dashboard.services.session import EXPIRES_AT_KEY
from dashboard.utils.activity import flush_activity_logs
from tests.utils import login, logout


def _location(response):
    return urlparse(response.headers["Location"])


def test_login_lands_on_dashboard(client, user):
    response = login(client, user["email"], user["password"])

    assert response.status_code == 302
    assert _location(response).path == "/dashboard"
    with client.session_transaction() as sess:
        assert EXPIRES_AT_KEY in sess


def test_invalid_credentials(client, user):
    response = login(client, user["email"], "wrong", follow_redirects=True)

    assert b"Invalid credentials." in response.data
    assert client.get("/dashboard").status_code == 302


def test_inactive_user_cannot_log_in(client, app):
    with app.app_context():
        db.session.add(
            User(
                name="Dormant",
                email="dormant@example.com",
                password=generate_password_hash("pass"),
                active=False,
            )
        )
        db.session.commit()

    response = login(client, "dormant@example.com", "pass", follow_redirects=True)

    assert b"Please contact system admin to activate account." in response.data
    assert client.get("/dashboard").status_code == 302


def test_login_returns_to_requested_page(client, user):
    denied = client.get("/dashboard/invoices?query=paid")
    next_url = _location(denied)

    response = client.post(
        f"{next_url.path}?{next_url.query}",
        data={"email": user["email"], "password": user["password"]},
    )

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/dashboard/invoices?query=paid")


def test_login_ignores_offsite_next(client, user):
    for target in ("https://evil.example/", "//evil.example/", "dashboard"):
        logout(client)
        response = client.post(
            "/login",
            query_string={"next": target},
            data={"email": user["email"], "password": user["password"]},
        )
        assert response.status_code == 302
        assert _location(response).path == "/dashboard"
        assert _location(response).netloc in ("", "localhost")


def test_logout_ends_session(client, app, user):
    login(client, user["email"], user["password"])

    response = logout(client)

    assert response.status_code == 302
    assert _location(response).path == "/login"
    assert client.get("/dashboard").status_code == 302
    with app.app_context():
        flush_activity_logs()
        activities = [log.activity for log in ActivityLog.query.all()]
    assert activities == ["Logged in", "Logged out"]


def test_logout_requires_post(client, user):
    login(client, user["email"], user["password"])
    assert client.get("/dashboard/logout").status_code == 405


def test_expired_session_is_sent_to_login(client, user):
    login(client, user["email"], user["password"])
    with client.session_transaction() as sess:
        past = datetime.utcnow() - timedelta(minutes=1)
        sess[EXPIRES_AT_KEY] = past.isoformat()

    response = client.get("/dashboard")

    assert response.status_code == 302
    assert _location(response).path == "/login"
    assert client.get("/dashboard").status_code == 302


def test_session_without_expiry_stamp_is_not_trusted(client, user):
    login(client, user["email"], user["password"])
    with client.session_transaction() as sess:
        sess.pop(EXPIRES_AT_KEY)

    assert client.get("/dashboard").status_code == 302


def test_health_endpoint_is_public(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
