"""Read-only view of the signed-in session."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from flask import current_app, session
from flask_login import current_user, logout_user

EXPIRES_AT_KEY = "_expires_at"


@dataclass(frozen=True)
class SessionInfo:
    present: bool
    user_id: Optional[int] = None
    expires_at: Optional[datetime] = None


ANONYMOUS = SessionInfo(present=False)


def start_session() -> None:
    """Stamp the session with its expiry; call right after ``login_user``."""
    session.permanent = True
    expires_at = datetime.utcnow() + current_app.permanent_session_lifetime
    session[EXPIRES_AT_KEY] = expires_at.isoformat()


def end_session() -> None:
    """Log the user out and drop the expiry stamp."""
    logout_user()
    session.pop(EXPIRES_AT_KEY, None)


def current_session() -> SessionInfo:
    """Return the session for the current request.

    A session whose stored expiry has passed is logged out and reported as
    absent.
    """
    if not current_user.is_authenticated:
        return ANONYMOUS

    stamp = session.get(EXPIRES_AT_KEY)
    expires_at = datetime.fromisoformat(stamp) if stamp else None
    if expires_at is None or expires_at <= datetime.utcnow():
        end_session()
        return ANONYMOUS
    return SessionInfo(present=True, user_id=current_user.id, expires_at=expires_at)
