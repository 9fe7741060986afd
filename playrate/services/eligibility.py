"""Review eligibility rules.

Everything here is pure: callers load the playtime, game flags and any
existing review, and get back either ``ALLOWED`` or a ``Denial`` describing
why the submission is refused. The review endpoint and the seeder both go
through :func:`check_review_eligibility`.
"""

from dataclasses import dataclass

from playrate.errors import EligibilityDenied, ServiceError, ValidationError
from playrate.models.review import OMITTED

DEFAULT_REQUIRED_MINUTES = 60

NOTHING_TO_SUBMIT = "nothing_to_submit"
INVALID_RATING = "invalid_rating"
INSUFFICIENT_PLAYTIME = "insufficient_playtime"
RATING_DISABLED = "rating_disabled"
COMMENTING_DISABLED = "commenting_disabled"

_VALIDATION_REASONS = {NOTHING_TO_SUBMIT, INVALID_RATING}


@dataclass(frozen=True)
class Allowed:
    def __bool__(self) -> bool:
        return True


ALLOWED = Allowed()


@dataclass(frozen=True)
class Denial:
    reason: str
    message: str
    required_minutes: int | None = None

    def __bool__(self) -> bool:
        return False

    def to_error(self) -> ServiceError:
        if self.reason in _VALIDATION_REASONS:
            return ValidationError(self.message)
        return EligibilityDenied(self.message, self.reason, self.required_minutes)


def normalize_comment(comment):
    """Blank comments count as no comment."""
    if isinstance(comment, str) and not comment.strip():
        return None
    return comment


def is_valid_rating(rating) -> bool:
    return isinstance(rating, int) and not isinstance(rating, bool) and 1 <= rating <= 5


def check_review_eligibility(
    play_time: int,
    game: dict,
    rating=OMITTED,
    comment=OMITTED,
    existing: dict | None = None,
    required_minutes: int = DEFAULT_REQUIRED_MINUTES,
) -> Allowed | Denial:
    """Decide whether a review submission may be applied.

    ``rating`` and ``comment`` are OMITTED when not submitted; ``None`` means
    the client asked to clear the field. ``existing`` is the user's current
    review for the game, if any.
    """
    comment = normalize_comment(comment)

    if rating is OMITTED and comment is OMITTED:
        return Denial(NOTHING_TO_SUBMIT, "Rating or comment is required")

    merged_rating = rating if rating is not OMITTED else (existing or {}).get("rating")
    merged_comment = comment if comment is not OMITTED else (existing or {}).get("comment")
    if merged_rating is None and normalize_comment(merged_comment) is None:
        return Denial(NOTHING_TO_SUBMIT, "Cannot save an empty review. Rating or comment is required")

    if rating is not OMITTED and rating is not None and not is_valid_rating(rating):
        return Denial(INVALID_RATING, "Rating must be between 1 and 5")

    if play_time < required_minutes:
        return Denial(
            INSUFFICIENT_PLAYTIME,
            f"You must play the game for at least {required_minutes} minutes to rate or comment.",
            required_minutes=required_minutes,
        )

    if rating is not OMITTED and game.get("disable_rating"):
        return Denial(RATING_DISABLED, "Rating is disabled for this product by the administrator.")

    if comment is not OMITTED and game.get("disable_commenting"):
        return Denial(
            COMMENTING_DISABLED,
            "Commenting is disabled for this product by the administrator.",
        )

    return ALLOWED
