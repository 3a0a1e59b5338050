import random
from typing import Optional

from app.core.errors import NotFound
from app.core.logging import get_logger
from app.db.repositories.footage import FootageRepository, REVIEW_ORDER_KEYS
from app.db.repositories.users import UserRepository
from app.db.repositories.votes import VoteRepository
from app.features.authentication.schemas import Caller
from app.features.review.schemas import ReviewIn, ReviewItemOut, VoteOut

log = get_logger("review")


class ReviewService:
    """
    Relecture par les pairs.

    La vidéo proposée est tirée parmi celles que l'appelant n'a pas encore notées :
    clé de tri et sens tirés au hasard, puis un décalage uniforme dans [0, nb_éligibles).
    Le tirage est approximativement aléatoire, pas uniforme (il dépend de l'ordre choisi).
    """

    def __init__(
        self,
        *,
        repo: FootageRepository,
        vote_repo: VoteRepository,
        user_repo: UserRepository,
        rng: Optional[random.Random] = None,
    ):
        self.repo = repo
        self.vote_repo = vote_repo
        self.user_repo = user_repo
        self.rng = rng or random.Random()

    def pick_review_item(self, caller: Caller) -> ReviewItemOut:
        eligible = self.repo.count_not_voted_by(caller.user_id)
        if eligible == 0:
            raise NotFound("No gameplay left to review")

        order_key = self.rng.choice(REVIEW_ORDER_KEYS)
        descending = self.rng.choice((False, True))
        offset = self.rng.randrange(eligible)
        footage = self.repo.pick_not_voted_by(
            caller.user_id, order_key=order_key, descending=descending, offset=offset
        )
        # un vote ou une suppression concurrente peut vider la fenêtre
        if footage is None:
            raise NotFound("No gameplay left to review")

        owner = self.user_repo.get(footage.owner_id)
        votes = [VoteOut.model_validate(v) for v in self.vote_repo.list_by_footage(footage.id)]
        return ReviewItemOut.model_validate(footage).model_copy(
            update={"owner_name": owner.name if owner else None, "votes": votes}
        )

    def submit_vote(self, caller: Caller, payload: ReviewIn) -> dict:
        if self.repo.get(payload.gameplay_id) is None:
            raise NotFound(f"Could not find a gameplay document with id:{payload.gameplay_id}.")

        # l'unicité (footage, user) est garantie par la base -> DuplicateVote
        self.vote_repo.create(
            footage_id=payload.gameplay_id,
            user_id=caller.user_id,
            is_game=payload.is_game,
            actual_game=payload.actual_game,
        )
        log.info("Vote by %s on %s (is_game=%s)", caller.user_id, payload.gameplay_id, payload.is_game)
        return {"message": "Updated the gameplay document successfully."}
