"""Like state machine and the optimistic client-side view of it."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class LikeState(str, Enum):
    NOT_LIKED = "not_liked"
    LIKED = "liked"

    @classmethod
    def from_flag(cls, is_liked: bool) -> "LikeState":
        return cls.LIKED if is_liked else cls.NOT_LIKED

    @property
    def is_liked(self) -> bool:
        return self is LikeState.LIKED


# toggle event: current state -> next state
TOGGLE = {
    LikeState.NOT_LIKED: LikeState.LIKED,
    LikeState.LIKED: LikeState.NOT_LIKED,
}

# count delta applied when entering a state through a toggle
COUNT_DELTA = {
    LikeState.LIKED: 1,
    LikeState.NOT_LIKED: -1,
}

LOGIN_REQUIRED = "You must be logged in to like products"


@dataclass
class LikeResult:
    success: bool
    is_liked: bool
    like_count: int
    error: Optional[str] = None

    def as_dict(self) -> dict:
        data = {"success": self.success, "isLiked": self.is_liked, "likeCount": self.like_count}
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class LikeStatus:
    is_liked: bool
    like_count: int

    def as_dict(self) -> dict:
        return {"isLiked": self.is_liked, "likeCount": self.like_count}


@dataclass
class OptimisticLike:
    """Predicted like state for a UI, reconciled against the server reply.

    `predict()` applies the toggle transition locally. `reconcile()` adopts the
    server state on success, or reverts to the last confirmed state on failure.
    """

    confirmed_state: LikeState = LikeState.NOT_LIKED
    confirmed_count: int = 0
    state: LikeState = field(init=False)
    count: int = field(init=False)
    pending: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.confirmed_count = max(0, self.confirmed_count)
        self.state = self.confirmed_state
        self.count = self.confirmed_count

    def predict(self) -> LikeState:
        nxt = TOGGLE[self.state]
        self.state = nxt
        self.count = max(0, self.count + COUNT_DELTA[nxt])
        self.pending = True
        return nxt

    def reconcile(self, result: LikeResult) -> LikeState:
        self.pending = False
        if result.success:
            self.confirmed_state = LikeState.from_flag(result.is_liked)
            self.confirmed_count = max(0, result.like_count)
        self.state = self.confirmed_state
        self.count = self.confirmed_count
        return self.state

    def needs_login(self, result: LikeResult) -> bool:
        return not result.success and result.error == LOGIN_REQUIRED
