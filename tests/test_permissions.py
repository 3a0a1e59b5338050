"""Tests for the permission evaluator."""

from __future__ import annotations

import itertools

import pytest

from app.core.errors import Unauthorized
from app.features.authentication.schemas import Caller
from app.security.permissions import Perms, Role, has_perms, require_perms


@pytest.mark.parametrize(
    "role,caller_id,owner_id,required,expected",
    [
        (Role.USER, "a", "a", Perms.IS_OWNER, True),
        (Role.USER, "a", "b", Perms.IS_OWNER, False),
        (Role.MOD, "a", "b", Perms.IS_OWNER, True),
        (Role.ADMIN, "a", "b", Perms.IS_OWNER, True),
        (Role.USER, "a", "a", Perms.ROLE_MOD, False),
        (Role.MOD, "a", "b", Perms.ROLE_MOD, True),
        (Role.ADMIN, "a", "b", Perms.ROLE_MOD, True),
        (Role.USER, "a", "a", Perms.ROLE_ADMIN, False),
        (Role.MOD, "a", "a", Perms.ROLE_ADMIN, False),
        (Role.ADMIN, "a", "b", Perms.ROLE_ADMIN, True),
        (Role.USER, "a", None, Perms.IS_OWNER, False),
    ],
)
def test_has_perms_levels(role, caller_id, owner_id, required, expected) -> None:
    assert (
        has_perms(
            user_id=caller_id,
            user_role=role,
            item_owner_id=owner_id,
            required=required,
            blacklisted=False,
        )
        is expected
    )


def test_blacklisted_is_always_denied() -> None:
    for role, owner, required in itertools.product(Role, ("me", "someone-else", None), Perms):
        assert not has_perms(
            user_id="me",
            user_role=role,
            item_owner_id=owner,
            required=required,
            blacklisted=True,
        )


def test_role_ordering() -> None:
    assert Role.ADMIN.at_least(Role.MOD)
    assert Role.MOD.at_least(Role.MOD)
    assert not Role.USER.at_least(Role.MOD)


def test_require_perms_raises_unauthorized() -> None:
    caller = Caller(user_id="a", role=Role.USER)
    require_perms(caller, item_owner_id="a", required=Perms.IS_OWNER)
    with pytest.raises(Unauthorized):
        require_perms(caller, item_owner_id="a", required=Perms.ROLE_MOD)
