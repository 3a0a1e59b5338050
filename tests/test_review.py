"""Tests for the review sampler and voting."""

from __future__ import annotations

import random

import pytest

from app.core.errors import DuplicateVote, NotFound
from app.db.models.base import GameType
from app.db.repositories.footage import FootageRepository
from app.db.repositories.users import UserRepository
from app.db.repositories.votes import VoteRepository
from app.features.authentication.schemas import Caller
from app.features.review.schemas import ReviewIn
from app.features.review.services import ReviewService

REVIEWER = Caller(user_id="u-other")


def _service(session, seed: int = 0) -> ReviewService:
    return ReviewService(
        repo=FootageRepository(session),
        vote_repo=VoteRepository(session),
        user_repo=UserRepository(session),
        rng=random.Random(seed),
    )


def _footage(session, count: int):
    repo = FootageRepository(session)
    return [
        repo.create(owner_id="u-owner", url=f"https://youtu.be/r{i}", category=GameType.TF2)
        for i in range(count)
    ]


def test_empty_store_has_nothing_to_review(session, users) -> None:
    with pytest.raises(NotFound):
        _service(session).pick_review_item(REVIEWER)


def test_pick_returns_unvoted_item_with_owner_and_votes(session, users) -> None:
    (footage,) = _footage(session, 1)
    VoteRepository(session).create(footage_id=footage.id, user_id="u-mod", is_game=True, actual_game=GameType.TF2)

    item = _service(session).pick_review_item(REVIEWER)

    assert item.id == footage.id
    assert item.owner_name == "owner"
    assert [v.user_id for v in item.votes] == ["u-mod"]


def test_pick_never_returns_already_voted(session, users) -> None:
    items = _footage(session, 6)
    svc = _service(session, seed=42)
    for footage in items[:5]:
        svc.submit_vote(REVIEWER, ReviewIn(gameplay_id=footage.id, is_game=True, actual_game=GameType.TF2))

    for seed in range(20):
        assert _service(session, seed=seed).pick_review_item(REVIEWER).id == items[5].id


def test_everything_voted_is_not_found(session, users) -> None:
    (footage,) = _footage(session, 1)
    svc = _service(session)
    svc.submit_vote(REVIEWER, ReviewIn(gameplay_id=footage.id, is_game=False, actual_game=GameType.COD))

    with pytest.raises(NotFound):
        svc.pick_review_item(REVIEWER)


def test_pick_covers_several_items(session, users) -> None:
    items = _footage(session, 4)
    picked = {_service(session, seed=seed).pick_review_item(REVIEWER).id for seed in range(50)}
    assert len(picked) > 1
    assert picked <= {f.id for f in items}


def test_vote_on_unknown_footage_is_not_found(session, users) -> None:
    with pytest.raises(NotFound):
        _service(session).submit_vote(
            REVIEWER, ReviewIn(gameplay_id="missing", is_game=True, actual_game=GameType.VAL)
        )


def test_second_vote_is_rejected(session, users) -> None:
    (footage,) = _footage(session, 1)
    svc = _service(session)
    vote = ReviewIn(gameplay_id=footage.id, is_game=True, actual_game=GameType.TF2)
    assert svc.submit_vote(REVIEWER, vote) == {"message": "Updated the gameplay document successfully."}

    with pytest.raises(DuplicateVote):
        svc.submit_vote(REVIEWER, vote)
