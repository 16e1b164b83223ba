from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from dashboard import create_admin_user, create_app, db
from dashboard.models import Customer, User
from dashboard.utils.activity import flush_activity_logs


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "testsecret")
    monkeypatch.setenv("ADMIN_EMAIL", "admin@example.com")
    monkeypatch.setenv("ADMIN_PASS", "adminpass")
    monkeypatch.setenv("RATELIMIT_ENABLED", "0")
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path))

    app = create_app(["--demo"])
    app.config.update(TESTING=True, WTF_CSRF_ENABLED=False)

    with app.app_context():
        create_admin_user()
        yield app
        flush_activity_logs()
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _add(app, record):
    with app.app_context():
        db.session.add(record)
        db.session.commit()
        return record.id


@pytest.fixture
def user(app):
    """An active account that can sign in with password ``pass``."""
    account = User(
        name="User",
        email="user@example.com",
        password=generate_password_hash("pass"),
        active=True,
    )
    return {"email": "user@example.com", "password": "pass", "id": _add(app, account)}


@pytest.fixture
def customer_id(app):
    return _add(app, Customer(name="Lee Robinson", email="lee@robinson.com"))
