"""Pydantic models for games (exposed as products)."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DATA_IMAGE_PREFIXES = (
    "data:image/png;base64,",
    "data:image/jpeg;base64,",
    "data:image/jpg;base64,",
)


def _check_image(value: str) -> str:
    if value.startswith("data:image") and not value.startswith(_DATA_IMAGE_PREFIXES):
        raise ValueError("Image must be PNG or JPG/JPEG format")
    return value


def _check_category(value: list[str]) -> list[str]:
    genres = [g.strip() for g in value]
    if not 1 <= len(genres) <= 5 or not all(genres):
        raise ValueError("Category must be an array with 1-5 genres")
    return genres


class GameCreate(BaseModel):
    # Unknown keys are kept and stored as extra game fields
    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1, max_length=255)
    image: str = Field(..., min_length=1)
    brand: str = Field(..., min_length=1)
    category: list[str]
    description: str = Field(..., min_length=1)
    disable_rating: bool = False
    disable_commenting: bool = False

    @field_validator("image")
    @classmethod
    def validate_image(cls, value: str) -> str:
        return _check_image(value)

    @field_validator("category")
    @classmethod
    def validate_category(cls, value: list[str]) -> list[str]:
        return _check_category(value)

    def extra_fields(self) -> dict:
        return dict(self.model_extra or {})


class GameUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    image: str | None = Field(default=None, min_length=1)
    brand: str | None = Field(default=None, min_length=1)
    category: list[str] | None = None
    description: str | None = Field(default=None, min_length=1)
    disable_rating: bool | None = None
    disable_commenting: bool | None = None

    @field_validator("image")
    @classmethod
    def validate_image(cls, value: str | None) -> str | None:
        return None if value is None else _check_image(value)

    @field_validator("category")
    @classmethod
    def validate_category(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else _check_category(value)

    def extra_fields(self) -> dict:
        return dict(self.model_extra or {})


class GameListResponse(BaseModel):
    products: list[dict]
    page: int
    pages: int
