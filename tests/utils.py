"""Helpers shared by the HTTP tests."""

from __future__ import annotations

import re
from typing import Optional

_TOKEN_RE = re.compile(rb'name="csrf_token"[^>]*value="([^"]+)"')


def form_token(client, path: str) -> Optional[str]:
    """Return the CSRF token rendered on ``path``, if the page has one."""
    match = _TOKEN_RE.search(client.get(path).data)
    return match.group(1).decode() if match else None


def login(client, email: str, password: str, **kwargs):
    data = {"email": email, "password": password}
    token = form_token(client, "/login")
    if token:
        data["csrf_token"] = token
    return client.post("/login", data=data, **kwargs)


def logout(client, **kwargs):
    return client.post("/dashboard/logout", **kwargs)
