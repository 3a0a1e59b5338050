"""Tests for the development seed."""

from __future__ import annotations

from pathlib import Path

import pytest

from app.core.config import jwt_settings
from app.db.repositories.users import UserRepository
from app.db.seed import load_seed_yaml, seed_all
from app.security.permissions import Role
from app.security.tokens import decode_token

SEED_FILE = Path(__file__).resolve().parents[1] / "app" / "db" / "seed_data.yaml"


def test_seed_is_idempotent_and_issues_tokens(session) -> None:
    first = seed_all(session, seed_path=SEED_FILE, jwt_settings=jwt_settings)
    second = seed_all(session, seed_path=SEED_FILE, jwt_settings=jwt_settings)

    assert len(first) == len(second) == 4
    assert UserRepository(session).count() == 4

    roles = {user.name: (user.role, user.blacklisted) for user, _ in second}
    assert roles["admin"] == (Role.ADMIN, False)
    assert roles["moderator"] == (Role.MOD, False)
    assert roles["troll"] == (Role.USER, True)

    user, token = second[0]
    decoded = decode_token(token, jwt_settings)
    assert decoded["sub"] == user.id
    assert decoded["typ"] == "access"


def test_seed_rejects_bad_files(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_seed_yaml(tmp_path / "absent.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_seed_yaml(bad)
