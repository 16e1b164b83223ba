"""Apply route access decisions before any view runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
from urllib.parse import urlencode

from flask import redirect, request

from dashboard.services.authorization import Access, AuthConfig, authorize
from dashboard.services.session import SessionInfo, current_session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateConfig:
    """Paths the gate never checks.

    A path is excluded when it starts with one of ``excluded_prefixes`` or
    ends with one of ``excluded_suffixes``.
    """

    excluded_prefixes: Tuple[str, ...] = ("/api", "/static", "/_image")
    excluded_suffixes: Tuple[str, ...] = (".png",)

    def is_excluded(self, path: str) -> bool:
        return path.startswith(self.excluded_prefixes) or path.endswith(
            self.excluded_suffixes
        )


class RequestGate:
    def __init__(
        self,
        auth_config: AuthConfig,
        gate_config: GateConfig,
        session_provider: Callable[[], SessionInfo] = current_session,
    ) -> None:
        self.auth_config = auth_config
        self.gate_config = gate_config
        self.session_provider = session_provider

    def init_app(self, app) -> None:
        app.extensions["request_gate"] = self
        app.before_request(self.check)

    def check(self):
        """``before_request`` hook; returns a redirect to short-circuit."""
        path = request.path
        if self.gate_config.is_excluded(path):
            return None

        decision = authorize(self.session_provider().present, path, self.auth_config)
        if decision.allowed:
            return None
        if decision.access is Access.DENY:
            logger.info("Denied anonymous request for %s", path)
            return redirect(_with_next(decision.location, request.full_path))
        return redirect(decision.location)


def _with_next(location: str, target: Optional[str]) -> str:
    if not target:
        return location
    # full_path always ends with "?" even without a query string.
    return f"{location}?{urlencode({'next': target.rstrip('?')})}"
