"""Tests for the error handlers registered on the application."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.errors import DuplicateVote, register_error_handlers


def _app(debug: bool) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app, debug=debug)

    @app.get("/boom")
    def boom():
        raise RuntimeError("secret connection string")

    @app.get("/vote")
    def vote():
        raise DuplicateVote()

    return app


def test_domain_error_uses_its_status_and_code() -> None:
    client = TestClient(_app(debug=False))
    resp = client.get("/vote")
    assert resp.status_code == 409
    assert resp.json() == {"detail": "You already voted on this gameplay.", "code": "CONFLICT"}


@pytest.mark.parametrize(
    "debug,detail",
    [
        (False, "An error occurred in the server"),
        (True, "secret connection string"),
    ],
)
def test_unexpected_error_detail_only_in_debug(debug, detail) -> None:
    client = TestClient(_app(debug=debug), raise_server_exceptions=False)

    resp = client.get("/boom")

    assert resp.status_code == 500
    body = resp.json()
    assert body["code"] == "INTERNAL_SERVER_ERROR"
    assert body["detail"] == detail
    assert body["request_id"] == "unknown"
