import pytest

from dashboard.services.authorization import (
    Access,
    AccessDecision,
    AuthConfig,
    authorize,
)

CONFIG = AuthConfig()


@pytest.mark.parametrize(
    "present, path, expected",
    [
        (False, "/dashboard/invoices", AccessDecision(Access.DENY, "/login")),
        (True, "/login", AccessDecision(Access.REDIRECT, "/dashboard")),
        (False, "/login", AccessDecision(Access.ALLOW)),
        (True, "/dashboard", AccessDecision(Access.ALLOW)),
        (True, "/dashboard/invoices/abc/edit", AccessDecision(Access.ALLOW)),
        (False, "/dashboard", AccessDecision(Access.DENY, "/login")),
        (False, "/", AccessDecision(Access.ALLOW)),
        (True, "/", AccessDecision(Access.REDIRECT, "/dashboard")),
    ],
)
def test_decision_table(present, path, expected):
    assert authorize(present, path, CONFIG) == expected


def test_only_allow_is_allowed():
    assert authorize(True, "/dashboard", CONFIG).allowed
    assert not authorize(False, "/dashboard", CONFIG).allowed
    assert not authorize(True, "/login", CONFIG).allowed


def test_protected_area_comes_from_config():
    config = AuthConfig(
        protected_prefix="/app", login_path="/signin", dashboard_root="/app/home"
    )

    assert authorize(False, "/app/invoices", config) == AccessDecision(
        Access.DENY, "/signin"
    )
    assert authorize(True, "/signin", config) == AccessDecision(
        Access.REDIRECT, "/app/home"
    )
    # The default protected prefix means nothing under this config.
    assert authorize(False, "/dashboard", config).allowed is True
