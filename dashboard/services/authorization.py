"""Route access decisions.

:func:`authorize` decides what happens to a request from two facts only:
whether a session is present and which path was requested.

==================  ==============  ===========================
Session present     Protected path  Decision
==================  ==============  ===========================
yes                 yes             allow
no                  yes             deny, redirect to login
yes                 no              redirect to dashboard root
no                  no              allow
==================  ==============  ===========================
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthConfig:
    protected_prefix: str = "/dashboard"
    login_path: str = "/login"
    dashboard_root: str = "/dashboard"

    def is_protected(self, path: str) -> bool:
        return path.startswith(self.protected_prefix)


class Access(enum.Enum):
    ALLOW = "allow"
    DENY = "deny"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class AccessDecision:
    access: Access
    location: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.access is Access.ALLOW


ALLOW = AccessDecision(Access.ALLOW)


def authorize(session_present: bool, path: str, config: AuthConfig) -> AccessDecision:
    """Return the access decision for ``path``."""
    if config.is_protected(path):
        if session_present:
            return ALLOW
        return AccessDecision(Access.DENY, config.login_path)
    if session_present:
        return AccessDecision(Access.REDIRECT, config.dashboard_root)
    return ALLOW
