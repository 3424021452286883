"""
Public review intake.

Ratings below REVIEW_THRESHOLD (including an unset 0) never produce a
review; the form stays open and submit is a no-op. An accepted review is
prepended to the reviews, committed, and the visitor's "already reviewed"
flag is set.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
from urllib.parse import quote

from schemas import ContentDocument, Review
from storage import SessionFlags

REVIEW_THRESHOLD = 3
REJECTION_MESSAGE = "Bad reviews not accepted"
AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


class IntakeState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class RatingFeedback:
    rating: int
    accepted: bool
    message: str


def rating_accepted(rating: int) -> bool:
    return rating >= REVIEW_THRESHOLD


def build_review(name: str, comment: str, rating: int, clock: Callable[[], float] = time.time) -> Review:
    now_ms = int(clock() * 1000)
    name = name.strip()
    return Review(
        id=now_ms,
        name=name or "Anonymous User",
        role="Client",
        comment=comment.strip() or "Excellent experience!",
        rating=rating,
        avatar=AVATAR_URL.format(seed=quote(name or str(now_ms))),
    )


def accept_review(doc: ContentDocument, review: Review) -> ContentDocument:
    """New document with `review` first; `doc` is left untouched."""
    return doc.model_copy(update={"reviews": [review, *doc.reviews]})


class ReviewIntake:
    def __init__(self, flags: SessionFlags, clock: Callable[[], float] = time.time):
        self.flags = flags
        self.clock = clock
        self.state = IntakeState.CLOSED
        self.rating = 0
        self.name = ""
        self.comment = ""

    def open(self) -> None:
        """Explicit "leave a review" action; allowed even after a submission."""
        self.state = IntakeState.OPEN

    def close(self) -> None:
        self.state = IntakeState.CLOSED
        self.rating = 0
        self.name = ""
        self.comment = ""

    def on_back_navigation(self) -> bool:
        """Re-open the form once per session while the visitor has not reviewed yet."""
        if self.flags.has_submitted_review or self.flags.review_prompted:
            return False
        self.flags.review_prompted = True
        self.open()
        return True

    def select_rating(self, rating: int) -> RatingFeedback:
        self.rating = rating
        if rating_accepted(rating):
            return RatingFeedback(rating, True, "Submit Feedback")
        return RatingFeedback(rating, False, REJECTION_MESSAGE)

    def submit(self, name: str = "", comment: str = "") -> Optional[Review]:
        """The new review, or None when the rating is below the threshold (form stays open)."""
        if self.state is not IntakeState.OPEN:
            return None
        self.name, self.comment = name, comment
        if not rating_accepted(self.rating):
            return None
        review = build_review(name, comment, self.rating, self.clock)
        self.flags.has_submitted_review = True
        self.close()
        return review
