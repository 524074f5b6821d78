"""Tests for the ownership guard."""

import pytest

from taskboard.errors import Forbidden
from taskboard.schemas.auth import IdentityClaim
from taskboard.services.authorization import Decision, authorize, require_owner

ALICE = IdentityClaim(user_id="alice", email="alice@example.com", display_name="Alice", role="user")


def test_owner_is_allowed():
    assert authorize(ALICE, "alice") is Decision.ALLOW


def test_non_owner_is_forbidden():
    assert authorize(ALICE, "bob") is Decision.FORBIDDEN


def test_role_does_not_grant_ownership():
    manager = IdentityClaim(
        user_id="bob", email="bob@example.com", display_name="Bob", role="manager"
    )
    assert authorize(manager, "alice") is Decision.FORBIDDEN


def test_require_owner_raises_forbidden():
    with pytest.raises(Forbidden) as exc_info:
        require_owner(ALICE, "bob", "Not yours")
    assert exc_info.value.message == "Not yours"
    assert exc_info.value.status_code == 403


def test_require_owner_passes_for_owner():
    require_owner(ALICE, "alice")
