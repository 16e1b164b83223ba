"""Audit trail of user actions.

Entries are queued in memory and written to :class:`ActivityLog` with a
single insert, either once ``ACTIVITY_BATCH_SIZE`` entries are waiting or
``ACTIVITY_FLUSH_SECONDS`` after the most recent one arrived.
"""

from __future__ import annotations

import atexit
import logging
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from flask import current_app
from flask_login import current_user
from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError

from dashboard.models import ActivityLog, db

logger = logging.getLogger(__name__)


class ActivityRecorder:
    def __init__(self, app) -> None:
        self.app = app
        self.batch_size = app.config.get("ACTIVITY_BATCH_SIZE", 20)
        self.delay = app.config.get("ACTIVITY_FLUSH_SECONDS", 0.1)
        self._pending: List[Dict[str, Any]] = []
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        atexit.register(self.flush)

    def record(self, activity: str, user_id: Optional[int]) -> None:
        row = {
            "user_id": user_id,
            "activity": activity[:255],
            "timestamp": datetime.utcnow(),
        }
        with self._lock:
            self._pending.append(row)
            full = len(self._pending) >= self.batch_size
            if not full:
                self._schedule()
        if full:
            self.flush()

    def _schedule(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = threading.Timer(self.delay, self.flush)
        self._timer.daemon = True
        self._timer.start()

    def flush(self) -> None:
        with self._lock:
            rows, self._pending = self._pending, []
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if not rows:
            return
        with self.app.app_context():
            try:
                db.session.execute(insert(ActivityLog), rows)
                db.session.commit()
            except SQLAlchemyError:
                db.session.rollback()
                logger.warning("Dropped %d activity entries", len(rows), exc_info=True)


def _recorder() -> ActivityRecorder:
    app = current_app._get_current_object()
    recorder = app.extensions.get("activity_recorder")
    if recorder is None:
        recorder = app.extensions["activity_recorder"] = ActivityRecorder(app)
    return recorder


def flush_activity_logs() -> None:
    """Write any queued entries now."""
    recorder = current_app.extensions.get("activity_recorder")
    if recorder is not None:
        recorder.flush()


def log_activity(activity: str, user_id: Optional[int] = None) -> None:
    """Queue an audit entry for ``user_id`` or the signed-in user.

    Tests that read :class:`ActivityLog` should call
    :func:`flush_activity_logs` first.
    """
    if user_id is None and current_user and current_user.is_authenticated:
        user_id = current_user.id
    _recorder().record(activity, user_id)
