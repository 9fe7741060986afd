"""Pydantic models for play events and reviews."""

import enum

from pydantic import BaseModel, StrictInt


class Omitted(enum.Enum):
    """Marker for a request field the client did not send at all."""

    OMITTED = "omitted"

    def __repr__(self) -> str:
        return "OMITTED"


OMITTED = Omitted.OMITTED


class PlayRequest(BaseModel):
    time: StrictInt


class PlayResponse(BaseModel):
    message: str
    play_time: int


class ReviewRequest(BaseModel):
    """Body of a review submission.

    A key that is absent is left untouched; an explicit ``null`` clears it.
    """

    rating: StrictInt | None = None
    comment: str | None = None

    def submitted(self, field: str):
        """Return the field's value, or OMITTED if the client left it out."""
        if field not in self.model_fields_set:
            return OMITTED
        return getattr(self, field)


class ReviewResponse(BaseModel):
    id: int
    game_id: int
    user_id: int
    name: str
    rating: int | None = None
    comment: str | None = None
    created_at: str
    updated_at: str


class ReviewSubmitResponse(BaseModel):
    message: str
    review: ReviewResponse
